"""Upload Data Transfer Objects."""

from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO

from pydantic import BaseModel


@dataclass
class IncomingFile:
    """A received file body, already spooled by the HTTP layer."""

    filename: str
    size: int
    stream: BinaryIO
    content_type: str | None = None


class UploadedFile(BaseModel):
    id: str
    name: str
    original_name: str
    size: int
    created_at: datetime
    expires_at: datetime


class UploadResponse(BaseModel):
    success: bool = True
    file: UploadedFile
    download_url: str
    download_code: str
