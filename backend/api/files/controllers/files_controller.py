"""Files controller — API routes for file management."""

from fastapi import APIRouter, Depends, HTTPException

from auth import require_admin
from blob_store import LocalBlobStore
from cleanup import run_cleanup
from deps import get_blobs, get_events, get_store
from events import EventPublisher
from store import Store
from api.files.dto.file import FileListItem, StatsResponse
from api.files.services import files_service

router = APIRouter(prefix="/api", tags=["Files"], dependencies=[Depends(require_admin)])


@router.get("/files", response_model=list[FileListItem])
async def list_files(store: Store = Depends(get_store)):
    return files_service.list_files(store)


@router.delete("/files/{file_id}")
async def delete_file(
    file_id: str,
    store: Store = Depends(get_store),
    blobs: LocalBlobStore = Depends(get_blobs),
    events: EventPublisher = Depends(get_events),
):
    if not files_service.delete_file(store, blobs, events, file_id):
        raise HTTPException(status_code=404, detail="File not found")
    return {"success": True}


@router.get("/stats", response_model=StatsResponse)
async def stats(store: Store = Depends(get_store)):
    return files_service.get_stats(store)


@router.post("/cleanup")
async def cleanup(
    store: Store = Depends(get_store),
    blobs: LocalBlobStore = Depends(get_blobs),
    events: EventPublisher = Depends(get_events),
):
    """Run the reaper now instead of waiting for the next tick."""
    count = run_cleanup(store, blobs, events)
    return {"removed": count}
