"""Upload codes service — issuing and probing public upload codes."""

import logging

from config import base_url
from errors import NotFound
from store import Store
from api.codes.dto.upload_code import UploadCodeCheck, UploadCodeCreate, UploadCodeIssued

logger = logging.getLogger(__name__)


def issue_code(store: Store, data: UploadCodeCreate) -> UploadCodeIssued:
    """Create a code. ``upload_url`` points at the public upload page of the
    front end, which submits to ``POST /upload/public``."""
    code = store.codes.create(
        max_uses=data.max_uses,
        max_file_size_mb=data.max_file_size_mb,
        expires_in_hours=data.expires_in_hours,
    )
    logger.info(f"Issued upload code {code.id} ({code.max_uses} uses, {code.max_file_size_mb}MB)")
    return UploadCodeIssued(
        code=code.code,
        upload_url=f"{base_url()}/public?code={code.code}",
        max_uses=code.max_uses,
        max_file_size_mb=code.max_file_size_mb,
        expires_at=code.expires_at,
    )


def check_code(store: Store, code: str) -> UploadCodeCheck:
    upload_code = store.codes.validate(code)
    if upload_code is None:
        raise NotFound("Invalid or expired code")
    return UploadCodeCheck(
        valid=True,
        max_file_size_mb=upload_code.max_file_size_mb,
        remaining_uses=upload_code.remaining_uses,
    )
