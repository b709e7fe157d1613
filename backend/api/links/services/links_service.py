"""Download links service — issuing extra links for existing files."""

import logging

from config import base_url
from errors import NotFound
from store import Store
from api.links.dto.download_link import DownloadLinkCreate, DownloadLinkIssued, DownloadLinkItem

logger = logging.getLogger(__name__)


def download_url(code: str) -> str:
    return f"{base_url()}/d/{code}"


def issue_link(store: Store, data: DownloadLinkCreate) -> DownloadLinkIssued:
    if store.files.get(data.file_id) is None:
        raise NotFound("File not found")

    link = store.links.create(
        data.file_id,
        max_downloads=data.max_downloads,
        expires_in_hours=data.expires_in_hours,
    )
    logger.info(f"Issued download link {link.id} for file {data.file_id}")
    return DownloadLinkIssued(
        code=link.code,
        download_url=download_url(link.code),
        max_downloads=link.max_downloads,
        expires_at=link.expires_at,
    )


def list_links(store: Store, file_id: str) -> list[DownloadLinkItem]:
    return [
        DownloadLinkItem(
            id=link.id,
            code=link.code,
            download_url=download_url(link.code),
            max_downloads=link.max_downloads,
            current_downloads=link.current_downloads,
            created_at=link.created_at,
            expires_at=link.expires_at,
        )
        for link in store.links.list_for_file(file_id)
    ]
