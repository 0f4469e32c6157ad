"""
tests.test_feed

ChangeFeed and RecordStream behavior (no database).
"""

from __future__ import annotations

import asyncio

import pytest

from admin_identity.db.feed import ChangeFeed, RecordStream


def test_publish_reaches_every_subscriber_of_the_key() -> None:
    feed = ChangeFeed()
    a: list[int] = []
    b: list[int] = []
    other: list[int] = []
    feed.subscribe("k", a.append)
    feed.subscribe("k", b.append)
    feed.subscribe("other", other.append)

    assert feed.publish("k", 1) == 2
    assert a == [1]
    assert b == [1]
    assert other == []


def test_cancel_stops_delivery_and_drops_empty_keys() -> None:
    feed = ChangeFeed()
    seen: list[int] = []
    sub = feed.subscribe("k", seen.append)

    sub.cancel()
    sub.cancel()
    feed.publish("k", 1)

    assert seen == []
    assert feed.subscriber_count("k") == 0
    assert "k" not in feed._subscribers


def test_cancel_during_publish_skips_cancelled_subscriber() -> None:
    feed = ChangeFeed()
    seen: list[str] = []
    subs = []

    def first(value: str) -> None:
        seen.append(f"first:{value}")
        for s in subs:
            s.cancel()

    def second(value: str) -> None:
        seen.append(f"second:{value}")
        for s in subs:
            s.cancel()

    subs.append(feed.subscribe("k", first))
    subs.append(feed.subscribe("k", second))

    feed.publish("k", "x")

    # Exactly one of them ran; whichever ran first cancelled the other.
    assert len(seen) == 1
    assert feed.subscriber_count("k") == 0


@pytest.mark.asyncio
async def test_record_stream_yields_initial_value_then_updates() -> None:
    feed = ChangeFeed()

    async def load() -> str:
        return "v0"

    stream: RecordStream[str] = RecordStream(feed=feed, key="k", load=load)
    assert await anext(stream) == "v0"
    assert feed.subscriber_count("k") == 1

    feed.publish("k", "v1")
    feed.publish("k", "v2")
    assert await anext(stream) == "v1"
    assert await anext(stream) == "v2"

    stream.cancel()
    assert feed.subscriber_count("k") == 0


@pytest.mark.asyncio
async def test_record_stream_drops_queued_values_after_cancel() -> None:
    feed = ChangeFeed()

    async def load() -> str:
        return "v0"

    stream: RecordStream[str] = RecordStream(feed=feed, key="k", load=load)
    await anext(stream)
    feed.publish("k", "queued")

    stream.cancel()
    feed.publish("k", "late")

    with pytest.raises(StopAsyncIteration):
        await anext(stream)
    assert stream.closed


@pytest.mark.asyncio
async def test_cancel_wakes_a_parked_reader() -> None:
    feed = ChangeFeed()

    async def load() -> None:
        return None

    stream: RecordStream[None] = RecordStream(feed=feed, key="k", load=load)
    assert await anext(stream) is None

    reader = asyncio.create_task(anext(stream))
    await asyncio.sleep(0)
    stream.cancel()

    with pytest.raises(StopAsyncIteration):
        await asyncio.wait_for(reader, timeout=1)


@pytest.mark.asyncio
async def test_failed_initial_load_releases_subscription() -> None:
    feed = ChangeFeed()

    async def load() -> str:
        raise RuntimeError("db down")

    stream: RecordStream[str] = RecordStream(feed=feed, key="k", load=load)
    with pytest.raises(RuntimeError):
        await anext(stream)

    assert feed.subscriber_count("k") == 0
    assert stream.closed


@pytest.mark.asyncio
async def test_async_with_cancels_on_exit() -> None:
    feed = ChangeFeed()

    async def load() -> str:
        return "v0"

    async with RecordStream(feed=feed, key="k", load=load) as stream:
        async for value in stream:
            assert value == "v0"
            break
        assert feed.subscriber_count("k") == 1

    assert feed.subscriber_count("k") == 0
