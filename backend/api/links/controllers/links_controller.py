"""Download links controller — admin issuance and listing."""

from fastapi import APIRouter, Depends, HTTPException

from auth import require_admin
from deps import get_store
from errors import NotFound
from store import Store
from api.links.dto.download_link import DownloadLinkCreate, DownloadLinkIssued, DownloadLinkItem
from api.links.services import links_service

router = APIRouter(prefix="/api/links", tags=["Download Links"], dependencies=[Depends(require_admin)])


@router.post("/download", response_model=DownloadLinkIssued)
async def create_download_link(data: DownloadLinkCreate, store: Store = Depends(get_store)):
    try:
        return links_service.issue_link(store, data)
    except NotFound:
        raise HTTPException(status_code=404, detail="File not found")


@router.get("/{file_id}", response_model=list[DownloadLinkItem])
async def list_download_links(file_id: str, store: Store = Depends(get_store)):
    return links_service.list_links(store, file_id)
