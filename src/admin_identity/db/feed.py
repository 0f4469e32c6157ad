"""
admin_identity.db.feed

In-process change feed for observable point reads.

Responsibilities:
- Register per-key subscribers (`subscribe(key, on_value) -> Subscription`).
- Fan out record snapshots to every active subscriber of a key.
- Guarantee no delivery after `Subscription.cancel()`.
- Provide `RecordStream`, an async iterator (initial value, then updates) on top of the feed.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Hashable
from typing import Any, Generic, TypeVar

from admin_identity.observability.logging import get_logger

T = TypeVar("T")

log = get_logger(__name__)

_CLOSED = object()


class Subscription:
    def __init__(self, feed: ChangeFeed, key: Hashable, on_value: Callable[[Any], None]) -> None:
        self._feed = feed
        self.key = key
        self.on_value = on_value
        self.active = True

    def cancel(self) -> None:
        # Idempotent; the feed drops the key entirely once its last subscriber leaves.
        if not self.active:
            return
        self.active = False
        self._feed._remove(self)


class ChangeFeed:
    """
    Fan-out of record snapshots keyed by record id.

    Callbacks run synchronously inside `publish`, so they must not block; `RecordStream`
    only enqueues.
    """

    def __init__(self) -> None:
        self._subscribers: dict[Hashable, set[Subscription]] = {}

    def subscribe(self, key: Hashable, on_value: Callable[[Any], None]) -> Subscription:
        sub = Subscription(self, key, on_value)
        self._subscribers.setdefault(key, set()).add(sub)
        return sub

    def publish(self, key: Hashable, value: Any) -> int:
        # Snapshot the set: a callback may cancel its own (or another) subscription.
        delivered = 0
        for sub in list(self._subscribers.get(key, ())):
            if sub.active:
                sub.on_value(value)
                delivered += 1
        return delivered

    def subscriber_count(self, key: Hashable) -> int:
        return len(self._subscribers.get(key, ()))

    def _remove(self, sub: Subscription) -> None:
        subs = self._subscribers.get(sub.key)
        if subs is None:
            return
        subs.discard(sub)
        if not subs:
            del self._subscribers[sub.key]


class RecordStream(Generic[T]):
    """
    Live view of one record: yields the current state first, then every published update.

    Usable as `async for` target or as an async context manager (cancels on exit).
    Each stream owns its queue, so subscribers never wait on each other.
    """

    def __init__(
        self,
        *,
        feed: ChangeFeed,
        key: Hashable,
        load: Callable[[], Awaitable[T | None]],
    ) -> None:
        self._feed = feed
        self._key = key
        self._load = load
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._subscription: Subscription | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> RecordStream[T]:
        return self

    async def __anext__(self) -> T | None:
        if self._closed:
            raise StopAsyncIteration

        if self._subscription is None:
            # Subscribe before reading so no update between the read and the subscribe is lost.
            self._subscription = self._feed.subscribe(self._key, self._queue.put_nowait)
            log.debug("record_subscription_opened", key=str(self._key))
            try:
                return await self._load()
            except BaseException:
                self.cancel()
                raise

        value = await self._queue.get()
        if value is _CLOSED or self._closed:
            raise StopAsyncIteration
        return value

    def cancel(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._subscription is not None:
            self._subscription.cancel()
            log.debug("record_subscription_closed", key=str(self._key))
        # Wake a reader parked on the queue so it observes the close.
        self._queue.put_nowait(_CLOSED)

    async def aclose(self) -> None:
        self.cancel()

    async def __aenter__(self) -> RecordStream[T]:
        return self

    async def __aexit__(self, *exc: object) -> None:
        self.cancel()


# --- Module Notes -----------------------------------------------------------
# The feed is process-local: writes made through another process (or directly in the DB)
# are not pushed. Subscribers that never cancel keep their queue alive for the life of
# the process, so transports must cancel on client disconnect.
