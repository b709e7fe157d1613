"""Application configuration."""

import os
from pathlib import Path

DATA_DIR = Path(os.environ.get("DATA_DIR", str(Path(__file__).parent.parent / "data")))
DATA_DIR.mkdir(parents=True, exist_ok=True)

UPLOAD_DIR = Path(os.environ.get("UPLOAD_DIR", str(DATA_DIR / "uploads")))
UPLOAD_DIR.mkdir(parents=True, exist_ok=True)

DATABASE_URL = os.environ.get("DATABASE_URL", f"sqlite:///{DATA_DIR}/linkdrop.db")

# Admin authentication
ADMIN_SECRET = os.environ.get("ADMIN_SECRET", "").strip()

# Public URLs
PORT = int(os.environ.get("PORT", "3000"))
BASE_URL = os.environ.get("BASE_URL", f"http://localhost:{PORT}").strip()
BASE_PATH = os.environ.get("BASE_PATH", "").strip()

# Lifecycle defaults
DEFAULT_RETENTION_DAYS = int(os.environ.get("DEFAULT_RETENTION_DAYS", "7"))
DEFAULT_CODE_MAX_FILE_SIZE_MB = int(os.environ.get("DEFAULT_CODE_MAX_FILE_SIZE_MB", "500"))
CLEANUP_INTERVAL_SECONDS = int(os.environ.get("CLEANUP_INTERVAL_SECONDS", "3600"))

# Codes and inactive links are kept forever unless these are enabled
PURGE_STALE_CODES = os.environ.get("PURGE_STALE_CODES", "").lower() in ("1", "true", "yes")
PURGE_INACTIVE_LINKS = os.environ.get("PURGE_INACTIVE_LINKS", "").lower() in ("1", "true", "yes")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


def base_url() -> str:
    """Public base URL including BASE_PATH, without a trailing slash."""
    return f"{BASE_URL}{BASE_PATH}".rstrip("/")
