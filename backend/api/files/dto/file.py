"""File Data Transfer Objects."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class FileMeta(BaseModel):
    """What the store needs to record a freshly written blob."""

    original_name: str
    display_name: str | None = None
    storage_key: str
    byte_size: int
    mime_type: str | None = None
    uploaded_by: Literal["admin", "public"] = "admin"


class FileResponse(BaseModel):
    id: str
    original_name: str
    display_name: str | None = None
    storage_key: str
    byte_size: int
    mime_type: str | None = None
    uploaded_by: Literal["admin", "public"]
    upload_code_id: str | None = None
    created_at: datetime
    expires_at: datetime

    @property
    def name(self) -> str:
        return self.display_name or self.original_name


class FileListItem(BaseModel):
    id: str
    name: str
    original_name: str
    size: int
    mime_type: str | None = None
    uploaded_by: str
    created_at: datetime
    expires_at: datetime
    download_url: str | None = None
    download_code: str | None = None


class StatsResponse(BaseModel):
    total_files: int
    total_storage: int
    total_downloads: int
    last_cleanup: datetime | None = None
