"""Cleanup — reaps expired files and reclaims their blobs.

Runs once when the server starts, then every CLEANUP_INTERVAL_SECONDS.
Run standalone: python cleanup.py
"""

import asyncio
import logging

from blob_store import LocalBlobStore
from config import (
    CLEANUP_INTERVAL_SECONDS,
    DATABASE_URL,
    PURGE_INACTIVE_LINKS,
    PURGE_STALE_CODES,
    UPLOAD_DIR,
)
from errors import StorageIOError
from events import EventPublisher, PanelsChanged
from store import Store

logger = logging.getLogger(__name__)


def run_cleanup(
    store: Store,
    blobs: LocalBlobStore,
    events: EventPublisher | None = None,
    purge_codes: bool = PURGE_STALE_CODES,
    purge_links: bool = PURGE_INACTIVE_LINKS,
) -> int:
    """Delete expired files (rows first, then blobs).
    Returns the number of files cleaned up."""
    storage_keys = store.files.delete_expired()

    for key in storage_keys:
        try:
            if blobs.delete(key):
                logger.info(f"[Cleanup] Deleted: {key}")
        except StorageIOError as e:
            # The row is already gone; a dangling blob is left behind
            logger.warning(f"[Cleanup] Failed to delete blob {key}: {e}")

    if purge_links:
        purged = store.links.purge_inactive()
        if purged:
            logger.info(f"[Cleanup] Purged {purged} inactive links")
    if purge_codes:
        purged = store.codes.purge_stale()
        if purged:
            logger.info(f"[Cleanup] Purged {purged} stale upload codes")

    store.settings.set("last_cleanup", store.now().isoformat())
    logger.info(f"[Cleanup] Removed {len(storage_keys)} expired files")

    if storage_keys and events is not None:
        events.publish(PanelsChanged(reason="cleanup"))
    return len(storage_keys)


async def cleanup_loop(
    store: Store,
    blobs: LocalBlobStore,
    events: EventPublisher | None = None,
    interval: float = CLEANUP_INTERVAL_SECONDS,
) -> None:
    """Reap immediately, then every ``interval`` seconds until cancelled."""
    logger.info(f"Starting cleanup scheduler (every {interval}s)")
    while True:
        try:
            count = await asyncio.to_thread(run_cleanup, store, blobs)
        except Exception as e:
            logger.error(f"[Cleanup] Error: {e}", exc_info=True)
        else:
            # Published from the loop thread so async handlers can be scheduled
            if count and events is not None:
                events.publish(PanelsChanged(reason="cleanup"))
        await asyncio.sleep(interval)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    store = Store(DATABASE_URL).open()
    try:
        run_cleanup(store, LocalBlobStore(UPLOAD_DIR))
    finally:
        store.close()
