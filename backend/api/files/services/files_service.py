"""Files service — business logic for file management."""

import logging
from datetime import datetime

from blob_store import LocalBlobStore
from errors import StorageIOError
from events import EventPublisher, PanelsChanged
from store import Store
from api.files.dto.file import FileListItem, StatsResponse
from api.links.services.links_service import download_url

logger = logging.getLogger(__name__)


def list_files(store: Store) -> list[FileListItem]:
    items = []
    for file in store.files.list_active():
        admin_link = store.links.get_admin_link(file.id)
        items.append(
            FileListItem(
                id=file.id,
                name=file.name,
                original_name=file.original_name,
                size=file.byte_size,
                mime_type=file.mime_type,
                uploaded_by=file.uploaded_by,
                created_at=file.created_at,
                expires_at=file.expires_at,
                download_url=download_url(admin_link.code) if admin_link else None,
                download_code=admin_link.code if admin_link else None,
            )
        )
    return items


def delete_file(store: Store, blobs: LocalBlobStore, events: EventPublisher, file_id: str) -> bool:
    """Delete file from disk and DB."""
    file = store.files.get(file_id)
    if not file:
        return False

    try:
        blobs.delete(file.storage_key)
    except StorageIOError as e:
        logger.error(f"Failed to delete physical file {file.storage_key}: {e}")

    deleted = store.files.delete(file_id)
    if deleted:
        events.publish(PanelsChanged(reason="delete", file_id=file_id))
    return deleted


def get_stats(store: Store) -> StatsResponse:
    last_cleanup = None
    last_cleanup_raw = store.settings.get("last_cleanup")
    if last_cleanup_raw:
        try:
            last_cleanup = datetime.fromisoformat(last_cleanup_raw)
        except ValueError:
            last_cleanup = None

    return StatsResponse(
        total_files=len(store.files.list_active()),
        total_storage=store.files.total_storage(),
        total_downloads=store.links.total_downloads(),
        last_cleanup=last_cleanup,
    )
