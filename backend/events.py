"""Outbound events for the bot presentation layer.

The core publishes ``PanelsChanged`` after every successful mutation of the
file list. Handlers are fire-and-forget: coroutine handlers are scheduled on
the running event loop, plain handlers run inline, and any failure is
logged and dropped. Nothing here is ever awaited by a request.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from datetime import datetime
from threading import Lock
from typing import Any, Callable

from clock import utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PanelsChanged:
    reason: str
    file_id: str | None = None
    occurred_at: datetime = field(default_factory=utcnow)


class EventPublisher:
    def __init__(self):
        self._handlers: dict[type, list[Callable[[Any], Any]]] = {}
        self._lock = Lock()
        self._tasks: set[asyncio.Task] = set()

    def subscribe(self, event_type: type, handler: Callable[[Any], Any]) -> None:
        with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(f"Registered handler {_name(handler)} for {event_type.__name__}")

    def publish(self, event) -> None:
        with self._lock:
            handlers = list(self._handlers.get(type(event), []))

        for handler in handlers:
            try:
                if inspect.iscoroutinefunction(handler):
                    self._schedule(handler, event)
                else:
                    handler(event)
            except Exception as e:
                logger.error(
                    f"Error in handler {_name(handler)} for {type(event).__name__}: {e}",
                    exc_info=True,
                )

    def _schedule(self, handler, event) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(
                f"No running event loop; dropping {type(event).__name__} for {_name(handler)}"
            )
            return
        task = loop.create_task(handler(event))
        self._tasks.add(task)
        task.add_done_callback(self._finished)

    def _finished(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Async event handler failed: {exc}", exc_info=exc)

    async def drain(self) -> None:
        """Wait for in-flight async handlers (used at shutdown)."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


def _name(handler) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)


def log_panels_changed(event: PanelsChanged) -> None:
    logger.info(f"Panels changed ({event.reason}, file={event.file_id})")
