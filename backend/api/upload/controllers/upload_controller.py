"""Upload controller — admin and public multipart uploads."""

import logging
import os

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from auth import require_admin
from blob_store import LocalBlobStore
from deps import get_blobs, get_events, get_store
from errors import FileTooLarge, StorageIOError, ValidationError
from events import EventPublisher
from store import Store
from api.files.dto.file import FileResponse
from api.links.dto.download_link import DownloadLinkResponse
from api.links.services.links_service import download_url
from api.upload.dto.upload import IncomingFile, UploadedFile, UploadResponse
from api.upload.services import upload_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["Upload"])


def _incoming(file: UploadFile | None) -> IncomingFile | None:
    if file is None or not file.filename:
        return None
    size = file.size
    if size is None:
        file.file.seek(0, os.SEEK_END)
        size = file.file.tell()
    file.file.seek(0)
    return IncomingFile(
        filename=file.filename,
        size=size,
        stream=file.file,
        content_type=file.content_type,
    )


def _response(file: FileResponse, link: DownloadLinkResponse) -> UploadResponse:
    return UploadResponse(
        file=UploadedFile(
            id=file.id,
            name=file.name,
            original_name=file.original_name,
            size=file.byte_size,
            created_at=file.created_at,
            expires_at=file.expires_at,
        ),
        download_url=download_url(link.code),
        download_code=link.code,
    )


@router.post("/admin", response_model=UploadResponse, dependencies=[Depends(require_admin)])
async def upload_admin(
    file: UploadFile | None = File(None),
    displayName: str | None = Form(None),
    store: Store = Depends(get_store),
    blobs: LocalBlobStore = Depends(get_blobs),
    events: EventPublisher = Depends(get_events),
):
    try:
        saved, link = upload_service.save_admin_upload(
            store, blobs, events, _incoming(file), display_name=displayName
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageIOError as e:
        logger.error(f"Upload aborted: {e}")
        raise HTTPException(status_code=500, detail="Failed to store file")
    return _response(saved, link)


@router.post("/public", response_model=UploadResponse)
async def upload_public(
    file: UploadFile | None = File(None),
    displayName: str | None = Form(None),
    code: str | None = Form(None),
    store: Store = Depends(get_store),
    blobs: LocalBlobStore = Depends(get_blobs),
    events: EventPublisher = Depends(get_events),
):
    try:
        saved, link = upload_service.save_public_upload(
            store, blobs, events, _incoming(file), code, display_name=displayName
        )
    except FileTooLarge as e:
        raise HTTPException(status_code=413, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageIOError as e:
        logger.error(f"Upload aborted: {e}")
        raise HTTPException(status_code=500, detail="Failed to store file")
    return _response(saved, link)
