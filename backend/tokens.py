"""Identifier and shareable token generation."""

import secrets


def new_id() -> str:
    return secrets.token_urlsafe(16)[:21]


def new_token(length: int) -> str:
    """Random URL-safe token of exactly ``length`` characters."""
    return secrets.token_urlsafe(length)[:length]
