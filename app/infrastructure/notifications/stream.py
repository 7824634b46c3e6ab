"""Server-sent event stream bridging one client connection to the broadcaster."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, AsyncIterator

from .broadcaster import (
    CapacityExceededError,
    NotificationBroadcaster,
    NotificationPayload,
    Unsubscribe,
)

logger = logging.getLogger(__name__)

HEARTBEAT_FRAME = ": heartbeat\n\n"
SSE_MEDIA_TYPE = "text/event-stream"
SSE_HEADERS = {
    "Cache-Control": "no-cache, no-transform",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


class StreamClosedError(RuntimeError):
    """Raised when a frame is pushed into a stream that already closed."""


def format_sse(event: str, data: Any) -> str:
    """Encode ``data`` as a named server-sent event frame."""

    return f"event: {event}\ndata: {json.dumps(data, default=str)}\n\n"


class NotificationStream:
    """One client's live notification feed.

    Frames are buffered in an :class:`asyncio.Queue`. Every delivery, from the
    loop thread or a worker thread, is handed to the owning loop with
    ``call_soon_threadsafe``; the loop runs those callbacks in submission
    order, so frames leave in publish order. A stream evicted by a newer
    connection of the same user closes itself.
    """

    def __init__(
        self,
        user_id: str,
        broadcaster: NotificationBroadcaster,
        *,
        heartbeat_interval: float = 30.0,
    ) -> None:
        self.user_id = user_id
        self._broadcaster = broadcaster
        self._heartbeat_interval = heartbeat_interval
        self._queue: asyncio.Queue[str | None] = asyncio.Queue()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._unsubscribe: Unsubscribe | None = None
        self._heartbeat_task: asyncio.Task[None] | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def events(self) -> AsyncIterator[str]:
        """Yield encoded frames until the stream is closed or cancelled."""

        self._loop = asyncio.get_running_loop()
        try:
            yield format_sse("connected", {"userId": self.user_id})

            try:
                self._unsubscribe = self._broadcaster.subscribe(
                    self.user_id, self._deliver, on_evict=self._evicted
                )
            except CapacityExceededError as exc:
                yield format_sse("error", {"error": str(exc)})
                return

            logger.debug("Notification stream opened for user %s", self.user_id)
            self._heartbeat_task = asyncio.create_task(self._heartbeat())

            while True:
                frame = await self._queue.get()
                if frame is None:
                    return
                yield frame
        finally:
            self.close()

    def close(self) -> None:
        """Release the subscription and heartbeat; safe to call repeatedly."""

        if self._closed:
            return
        self._closed = True

        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()

        task, self._heartbeat_task = self._heartbeat_task, None
        if task is not None and not task.done():
            task.cancel()

        self._wake_reader()
        logger.debug("Notification stream closed for user %s", self.user_id)

    def _deliver(self, payload: NotificationPayload) -> None:
        self._push(format_sse("notification", payload))

    def _evicted(self) -> None:
        if self._loop is None or self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self.close)

    def _push(self, frame: str) -> None:
        if self._closed or self._loop is None:
            raise StreamClosedError("Notification stream is closed")
        # Every frame takes the same FIFO path, whichever thread published it.
        # Raises RuntimeError once the loop is closed; the broadcaster drops it.
        self._loop.call_soon_threadsafe(self._queue.put_nowait, frame)

    def _wake_reader(self) -> None:
        if self._loop is None or self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._queue.put_nowait, None)

    async def _heartbeat(self) -> None:
        while True:
            await asyncio.sleep(self._heartbeat_interval)
            try:
                self._push(HEARTBEAT_FRAME)
            except (StreamClosedError, RuntimeError):
                return


__all__ = [
    "HEARTBEAT_FRAME",
    "NotificationStream",
    "SSE_HEADERS",
    "SSE_MEDIA_TYPE",
    "StreamClosedError",
    "format_sse",
]
