"""Upload service — admin and code-gated public uploads."""

import logging

from blob_store import LocalBlobStore
from errors import FileTooLarge, InvalidOrExpiredCode, MissingCode, MissingFile
from events import EventPublisher, PanelsChanged
from store import Store
from api.files.dto.file import FileMeta, FileResponse
from api.links.dto.download_link import DownloadLinkResponse
from api.upload.dto.upload import IncomingFile

logger = logging.getLogger(__name__)

BYTES_PER_MB = 1024 * 1024


def _store_upload(
    store: Store,
    blobs: LocalBlobStore,
    incoming: IncomingFile,
    display_name: str | None,
    uploaded_by: str,
    upload_code_id: str | None = None,
) -> tuple[FileResponse, DownloadLinkResponse]:
    """Write the blob, then record it. Nothing survives a failed record."""
    key = blobs.write(blobs.new_key(incoming.filename), incoming.stream)
    meta = FileMeta(
        original_name=incoming.filename,
        display_name=display_name or None,
        storage_key=key,
        byte_size=incoming.size,
        mime_type=incoming.content_type or None,
        uploaded_by=uploaded_by,
    )
    try:
        return store.uploads.record(meta, upload_code_id=upload_code_id)
    except Exception:
        blobs.delete(key)
        raise


def save_admin_upload(
    store: Store,
    blobs: LocalBlobStore,
    events: EventPublisher,
    incoming: IncomingFile | None,
    display_name: str | None = None,
) -> tuple[FileResponse, DownloadLinkResponse]:
    """Admin uploads have no size limit and need no code."""
    if incoming is None or not incoming.filename:
        raise MissingFile()

    file, link = _store_upload(store, blobs, incoming, display_name, "admin")
    logger.info(f"Admin upload {file.id} ({file.byte_size} bytes)")
    events.publish(PanelsChanged(reason="upload", file_id=file.id))
    return file, link


def save_public_upload(
    store: Store,
    blobs: LocalBlobStore,
    events: EventPublisher,
    incoming: IncomingFile | None,
    code: str | None,
    display_name: str | None = None,
) -> tuple[FileResponse, DownloadLinkResponse]:
    """Code-gated upload.

    The size check runs before the blob is written and before the code's
    use is taken: a rejected upload costs nothing.
    """
    if incoming is None or not incoming.filename:
        raise MissingFile()
    if not code:
        raise MissingCode()

    upload_code = store.codes.validate(code)
    if upload_code is None:
        raise InvalidOrExpiredCode()

    if incoming.size / BYTES_PER_MB > upload_code.max_file_size_mb:
        raise FileTooLarge(upload_code.max_file_size_mb)

    file, link = _store_upload(
        store, blobs, incoming, display_name, "public", upload_code_id=upload_code.id
    )
    logger.info(f"Public upload {file.id} with code {upload_code.id}")
    events.publish(PanelsChanged(reason="upload", file_id=file.id))
    return file, link
