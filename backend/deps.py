"""FastAPI dependencies resolving the handles opened in the lifespan."""

from fastapi import Request

from blob_store import LocalBlobStore
from events import EventPublisher
from store import Store


def get_store(request: Request) -> Store:
    return request.app.state.store


def get_blobs(request: Request) -> LocalBlobStore:
    return request.app.state.blobs


def get_events(request: Request) -> EventPublisher:
    return request.app.state.events
