"""Shared pytest fixtures for backend tests."""

from __future__ import annotations

import os
import sys
import tempfile
from datetime import datetime, timedelta
from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

# config creates its directories at import time
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="linkdrop-test-"))
os.environ["ADMIN_SECRET"] = "test-secret"

import config  # noqa: E402
from blob_store import LocalBlobStore  # noqa: E402
from events import EventPublisher, PanelsChanged  # noqa: E402
from main import create_app  # noqa: E402
from store import Store  # noqa: E402

ADMIN_SECRET = "test-secret"


class FakeClock:
    """Controllable time source; returns naive UTC like clock.utcnow."""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2026, 1, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture(autouse=True)
def admin_secret(monkeypatch):
    monkeypatch.setattr(config, "ADMIN_SECRET", ADMIN_SECRET)
    return ADMIN_SECRET


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(clock) -> Iterator[Store]:
    """An open store on an isolated in-memory SQLite database."""

    store = Store("sqlite+pysqlite:///:memory:", clock=clock).open()
    try:
        yield store
    finally:
        store.close()


@pytest.fixture()
def blobs(tmp_path) -> LocalBlobStore:
    return LocalBlobStore(tmp_path / "blobs")


@pytest.fixture()
def published() -> list:
    return []


@pytest.fixture()
def events(published) -> EventPublisher:
    publisher = EventPublisher()
    publisher.subscribe(PanelsChanged, published.append)
    return publisher


@pytest.fixture()
def client(store, blobs, events) -> Iterator[TestClient]:
    """Yield a TestClient wired to the test store, without the background reaper."""

    app = create_app(store=store, blobs=blobs, events=events, cleanup_interval=None)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def admin_headers() -> dict[str, str]:
    return {"X-Admin-Secret": ADMIN_SECRET}
