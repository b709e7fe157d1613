"""Admin authentication — shared secret via header or session cookie."""

import hashlib
import hmac
import secrets

from fastapi import Request

import config
from errors import ConfigError, Unauthorized

COOKIE_NAME = "linkdrop_session"
COOKIE_MAX_AGE = 60 * 60 * 24 * 30  # 30 days


def _secret() -> str:
    if not config.ADMIN_SECRET:
        raise ConfigError("ADMIN_SECRET is not set")
    return config.ADMIN_SECRET


def _make_token() -> str:
    """Create HMAC token from the admin secret."""
    return hmac.new(_secret().encode(), b"linkdrop_session", hashlib.sha256).hexdigest()


def create_session_cookie() -> str:
    return _make_token()


def check_secret(candidate: str) -> bool:
    return bool(candidate) and secrets.compare_digest(candidate, _secret())


def is_admin(request: Request) -> bool:
    """Check admin via header or session cookie. Raises ConfigError when unset."""
    # Check header auth (API / curl)
    header = request.headers.get("X-Admin-Secret", "")
    if header:
        return check_secret(header)

    # Check session cookie (browser)
    session = request.cookies.get(COOKIE_NAME)
    return bool(session) and secrets.compare_digest(session, _make_token())


def require_admin(request: Request) -> None:
    """FastAPI dependency guarding admin routes."""
    if not is_admin(request):
        raise Unauthorized("Admin access required")
