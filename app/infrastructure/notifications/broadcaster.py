"""Process-wide registry of live notification subscribers grouped by user."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from functools import partial
from typing import Any, Callable, Iterable

from app.config import get_settings

logger = logging.getLogger(__name__)

NotificationPayload = dict[str, Any]
Subscriber = Callable[[NotificationPayload], None]
Unsubscribe = Callable[[], None]


class CapacityExceededError(RuntimeError):
    """Raised when the global live-connection cap has been reached."""

    def __init__(self, message: str = "Too many active connections") -> None:
        super().__init__(message)


class SubscriptionToken:
    """Opaque identity of a single subscription."""

    __slots__ = ("user_id", "on_evict")

    def __init__(self, user_id: str, on_evict: Callable[[], None] | None = None) -> None:
        self.user_id = user_id
        self.on_evict = on_evict

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"<SubscriptionToken user={self.user_id!r} at {id(self):#x}>"


class NotificationBroadcaster:
    """Fan notifications out to every live subscriber of a user.

    The registry lives in memory and belongs to the current process only;
    subscribers attached to another worker never see these publishes.
    Subscribers are invoked synchronously, outside the registry lock, so a
    publish reaches a given subscriber in the order it was called.
    """

    def __init__(
        self,
        *,
        max_connections_per_user: int = 3,
        max_total_connections: int = 500,
    ) -> None:
        if max_connections_per_user < 1 or max_total_connections < 1:
            raise ValueError("Connection caps must be positive")
        self.max_connections_per_user = max_connections_per_user
        self.max_total_connections = max_total_connections
        self._subscribers: dict[str, OrderedDict[SubscriptionToken, Subscriber]] = {}
        self._total = 0
        self._lock = threading.Lock()

    def subscribe(
        self,
        user_id: str,
        subscriber: Subscriber,
        *,
        on_evict: Callable[[], None] | None = None,
    ) -> Unsubscribe:
        """Register ``subscriber`` for ``user_id`` and return its disposer.

        When the user already holds the per-user maximum, their oldest
        subscription is evicted first and its ``on_evict`` hook is called
        once the registry lock is released. Raises :class:`CapacityExceededError`
        without registering anything when the global cap is reached.
        """

        token = SubscriptionToken(user_id, on_evict)
        evicted: list[SubscriptionToken] = []
        with self._lock:
            user_subscribers = self._subscribers.get(user_id)
            if user_subscribers is not None:
                while len(user_subscribers) >= self.max_connections_per_user:
                    evicted_token, _ = user_subscribers.popitem(last=False)
                    evicted.append(evicted_token)
                    self._total -= 1
                    logger.debug("Evicted oldest notification stream for user %s", user_id)
                if not user_subscribers:
                    del self._subscribers[user_id]

            refused = self._total >= self.max_total_connections
            if refused:
                logger.warning(
                    "Refused notification stream for user %s: %s live connections",
                    user_id,
                    self._total,
                )
            else:
                self._subscribers.setdefault(user_id, OrderedDict())[token] = subscriber
                self._total += 1

        self._notify_evicted(evicted)
        if refused:
            raise CapacityExceededError()
        return partial(self._unsubscribe, token)

    def publish(self, user_id: str, payload: NotificationPayload) -> int:
        """Deliver ``payload`` to every live subscriber of ``user_id``.

        Subscriber failures are swallowed so one closed connection never
        prevents delivery to the others. Returns the number of subscribers
        that accepted the payload.
        """

        with self._lock:
            user_subscribers = self._subscribers.get(user_id)
            subscribers = list(user_subscribers.values()) if user_subscribers else []

        delivered = 0
        for subscriber in subscribers:
            try:
                subscriber(payload)
            except Exception as exc:
                logger.debug("Dropped notification for user %s: %s", user_id, exc)
                continue
            delivered += 1
        return delivered

    def publish_to_many(self, user_ids: Iterable[str], payload: NotificationPayload) -> int:
        """Publish ``payload`` to each of ``user_ids`` independently."""

        return sum(self.publish(user_id, payload) for user_id in user_ids)

    def active_connection_count(self) -> int:
        """Return the number of registered subscribers across all users."""

        with self._lock:
            return self._total

    def connection_count(self, user_id: str) -> int:
        with self._lock:
            return len(self._subscribers.get(user_id, ()))

    def clear(self) -> None:
        """Drop every subscription."""

        with self._lock:
            self._subscribers.clear()
            self._total = 0

    @staticmethod
    def _notify_evicted(tokens: Iterable[SubscriptionToken]) -> None:
        for token in tokens:
            if token.on_evict is None:
                continue
            try:
                token.on_evict()
            except Exception as exc:
                logger.debug("Eviction hook failed for user %s: %s", token.user_id, exc)

    def _unsubscribe(self, token: SubscriptionToken) -> None:
        with self._lock:
            user_subscribers = self._subscribers.get(token.user_id)
            if user_subscribers is None or token not in user_subscribers:
                return
            del user_subscribers[token]
            self._total -= 1
            if not user_subscribers:
                del self._subscribers[token.user_id]


def _build_default_broadcaster() -> NotificationBroadcaster:
    settings = get_settings()
    return NotificationBroadcaster(
        max_connections_per_user=settings.notification_max_connections_per_user,
        max_total_connections=settings.notification_max_total_connections,
    )


notification_broadcaster = _build_default_broadcaster()


def get_notification_broadcaster() -> NotificationBroadcaster:
    """Return the process-wide broadcaster (FastAPI dependency)."""

    return notification_broadcaster


__all__ = [
    "CapacityExceededError",
    "NotificationBroadcaster",
    "NotificationPayload",
    "Subscriber",
    "SubscriptionToken",
    "Unsubscribe",
    "get_notification_broadcaster",
    "notification_broadcaster",
]
