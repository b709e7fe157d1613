"""Upload code Data Transfer Objects."""

from datetime import datetime

from pydantic import BaseModel, Field


class UploadCodeResponse(BaseModel):
    id: str
    code: str
    max_uses: int
    current_uses: int
    max_file_size_mb: int
    created_at: datetime
    expires_at: datetime
    is_active: bool

    @property
    def remaining_uses(self) -> int:
        return self.max_uses - self.current_uses


class UploadCodeCreate(BaseModel):
    max_uses: int = Field(default=1, ge=1)
    max_file_size_mb: int | None = Field(default=None, ge=1)
    expires_in_hours: int = Field(default=24, ge=1)


class UploadCodeIssued(BaseModel):
    code: str
    upload_url: str
    max_uses: int
    max_file_size_mb: int
    expires_at: datetime


class UploadCodeCheck(BaseModel):
    valid: bool
    max_file_size_mb: int
    remaining_uses: int
