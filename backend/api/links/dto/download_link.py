"""Download link Data Transfer Objects."""

from datetime import datetime

from pydantic import BaseModel, Field


class DownloadLinkResponse(BaseModel):
    id: str
    file_id: str
    code: str
    max_downloads: int | None = None
    current_downloads: int
    created_at: datetime
    expires_at: datetime | None = None
    is_active: bool

    @property
    def is_unlimited(self) -> bool:
        return self.max_downloads is None


class DownloadLinkCreate(BaseModel):
    file_id: str
    max_downloads: int | None = Field(default=2, ge=1)
    expires_in_hours: int | None = Field(default=None, ge=1)


class DownloadLinkIssued(BaseModel):
    code: str
    download_url: str
    max_downloads: int | None = None
    expires_at: datetime | None = None


class DownloadLinkItem(BaseModel):
    id: str
    code: str
    download_url: str
    max_downloads: int | None = None
    current_downloads: int
    created_at: datetime
    expires_at: datetime | None = None
