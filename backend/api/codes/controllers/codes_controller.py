"""Upload codes controller — issue and probe public upload codes."""

from fastapi import APIRouter, Depends, HTTPException

from auth import require_admin
from deps import get_store
from errors import NotFound
from store import Store
from api.codes.dto.upload_code import UploadCodeCheck, UploadCodeCreate, UploadCodeIssued
from api.codes.services import codes_service

router = APIRouter(prefix="/api/codes", tags=["Upload Codes"])


@router.post(
    "/upload",
    response_model=UploadCodeIssued,
    dependencies=[Depends(require_admin)],
)
async def create_upload_code(data: UploadCodeCreate, store: Store = Depends(get_store)):
    return codes_service.issue_code(store, data)


@router.get("/upload/{code}", response_model=UploadCodeCheck)
async def check_upload_code(code: str, store: Store = Depends(get_store)):
    try:
        return codes_service.check_code(store, code)
    except NotFound:
        raise HTTPException(status_code=404, detail="Invalid or expired code")
