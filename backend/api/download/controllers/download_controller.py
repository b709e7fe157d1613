"""Download controller — public download pages and streams."""

import mimetypes
import os
from pathlib import Path
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse
from fastapi.templating import Jinja2Templates

from blob_store import CHUNK_SIZE, LocalBlobStore
from deps import get_blobs, get_store
from store import Store
from api.download.services import download_service
from api.download.services.download_service import Outcome, Resolution

router = APIRouter(prefix="/d", tags=["Download"])

TEMPLATES_DIR = Path(__file__).parent.parent.parent.parent.parent / "templates"
templates = Jinja2Templates(directory=TEMPLATES_DIR)


def _filesize(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024**2:
        return f"{size / 1024:.1f} KB"
    if size < 1024**3:
        return f"{size / 1024**2:.1f} MB"
    return f"{size / 1024**3:.1f} GB"


templates.env.filters["filesize"] = _filesize


def _not_found(request: Request, removed: bool = False):
    return templates.TemplateResponse(
        request, "not_found.html", {"removed": removed}, status_code=404
    )


def _stream(request: Request, resolution: Resolution):
    file = resolution.file
    media_type = file.mime_type or mimetypes.guess_type(file.original_name)[0]
    if not media_type:
        media_type = "application/octet-stream"

    try:
        f = open(resolution.path, "rb")
    except FileNotFoundError:
        # Reaped between resolution and streaming
        return _not_found(request, removed=True)
    size = os.fstat(f.fileno()).st_size

    def iterfile():
        with f:
            while chunk := f.read(CHUNK_SIZE):
                yield chunk

    return StreamingResponse(
        iterfile(),
        media_type=media_type,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(file.name)}",
            "Content-Length": str(size),
        },
    )


@router.get("/{code}/info")
async def download_info(code: str, store: Store = Depends(get_store)):
    """File metadata for previews; never counts as a download."""
    found = store.links.get_file_by_code(code)
    if not found:
        raise HTTPException(status_code=404, detail="File not found")
    file, _ = found
    return {
        "name": file.name,
        "original_name": file.original_name,
        "size": file.byte_size,
        "mime_type": file.mime_type,
        "expires_at": file.expires_at,
    }


@router.get("/{code}/file")
async def download_file(
    request: Request,
    code: str,
    store: Store = Depends(get_store),
    blobs: LocalBlobStore = Depends(get_blobs),
):
    """Count the download and stream the file."""
    resolution = download_service.fetch(store, blobs, code)
    if resolution.outcome is Outcome.FILE_REMOVED:
        return _not_found(request, removed=True)
    if resolution.outcome is Outcome.NOT_FOUND:
        return _not_found(request)
    return _stream(request, resolution)


@router.get("/{code}")
async def download(
    request: Request,
    code: str,
    store: Store = Depends(get_store),
    blobs: LocalBlobStore = Depends(get_blobs),
):
    """Unlimited links stream directly; limited links show a landing page first."""
    resolution = download_service.visit(store, blobs, code)
    if resolution.outcome is Outcome.FILE_REMOVED:
        return _not_found(request, removed=True)
    if resolution.outcome is Outcome.NOT_FOUND:
        return _not_found(request)
    if resolution.outcome is Outcome.LANDING:
        return templates.TemplateResponse(
            request,
            "landing.html",
            {"file": resolution.file, "link": resolution.link, "file_url": f"{code}/file"},
        )
    return _stream(request, resolution)
