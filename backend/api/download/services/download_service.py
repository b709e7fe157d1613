"""Download service — resolves a presented link code to a servable file."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from blob_store import BlobNotFound, LocalBlobStore
from store import Store
from api.files.dto.file import FileResponse
from api.links.dto.download_link import DownloadLinkResponse


class Outcome(str, Enum):
    NOT_FOUND = "not_found"
    FILE_REMOVED = "file_removed"
    DIRECT = "direct"
    LANDING = "landing"


@dataclass
class Resolution:
    outcome: Outcome
    file: FileResponse | None = None
    link: DownloadLinkResponse | None = None
    path: Path | None = None


def resolve(store: Store, blobs: LocalBlobStore, code: str) -> Resolution:
    """Decide what a visit to ``code`` gets, without counting it."""
    found = store.links.get_file_by_code(code)
    if found is None:
        return Resolution(Outcome.NOT_FOUND)

    file, link = found
    try:
        path = blobs.open(file.storage_key)
    except BlobNotFound:
        # Rows stay; the reaper removes them when the file expires
        return Resolution(Outcome.FILE_REMOVED, file, link)

    outcome = Outcome.DIRECT if link.is_unlimited else Outcome.LANDING
    return Resolution(outcome, file, link, path)


def claim(store: Store, resolution: Resolution) -> Resolution:
    """Count the download; lose the race and the visit becomes not-found."""
    if not store.links.consume(resolution.link.id):
        return Resolution(Outcome.NOT_FOUND)
    return resolution


def visit(store: Store, blobs: LocalBlobStore, code: str) -> Resolution:
    """``/<code>``: unlimited links stream at once, limited ones get a landing page."""
    resolution = resolve(store, blobs, code)
    if resolution.outcome is Outcome.DIRECT:
        return claim(store, resolution)
    return resolution


def fetch(store: Store, blobs: LocalBlobStore, code: str) -> Resolution:
    """``/<code>/file``: count and stream, for either link class."""
    resolution = resolve(store, blobs, code)
    if resolution.outcome in (Outcome.DIRECT, Outcome.LANDING):
        return claim(store, resolution)
    return resolution
