"""
Tests for the polling sync client
"""
import asyncio

import httpx

from quizhost.core.sync_client import SyncClient
from quizhost.models import AskAiState


def test_refresh_replaces_snapshot(service):
    client = SyncClient(service.get_session)
    assert client.loading is True
    assert client.snapshot is None

    session = asyncio.run(client.refresh())

    assert client.loading is False
    assert client.snapshot == session
    assert session.ask_ai_state == AskAiState.IDLE


def test_mutate_then_refresh_shows_own_write(service):
    client = SyncClient(service.get_session)

    async def scenario():
        await client.refresh()
        return await client.mutate(lambda: service.set_active_team("t3"))

    session = asyncio.run(scenario())

    assert session.active_team_id == "t3"
    assert client.snapshot.active_team_id == "t3"


def test_async_fetch_and_action(service):
    async def fetch():
        return service.get_session()

    async def enable_mic():
        service.set_active_team("t1")
        service.set_ask_ai_state(AskAiState.LISTENING)

    client = SyncClient(fetch)
    session = asyncio.run(client.mutate(enable_mic))

    assert session.ask_ai_state == AskAiState.LISTENING


def test_failed_fetch_keeps_previous_snapshot(service):
    calls = {"count": 0}

    def flaky_fetch():
        calls["count"] += 1
        if calls["count"] > 1:
            raise httpx.ConnectError("host unreachable")
        return service.get_session()

    client = SyncClient(flaky_fetch)

    async def scenario():
        first = await client.refresh()
        second = await client.refresh()
        return first, second

    first, second = asyncio.run(scenario())

    assert second == first
    assert client.snapshot == first


def test_polling_sees_other_clients_writes(service):
    """A write by one actor shows up in another client's snapshot on the next poll"""
    seen = []
    client = SyncClient(service.get_session, poll_interval_ms=10)
    client.subscribe(seen.append)

    async def scenario():
        async with client:
            await asyncio.sleep(0.03)
            service.set_active_team("t6")
            await asyncio.sleep(0.05)

    asyncio.run(scenario())

    assert len(seen) >= 2
    assert seen[0].active_team_id is None
    assert client.snapshot.active_team_id == "t6"


def test_stop_without_start_is_harmless(service):
    client = SyncClient(service.get_session)
    asyncio.run(client.stop())
    assert client.snapshot is None


def test_failing_subscriber_does_not_stop_polling(service):
    """A subscriber that raises once is logged; later polls still reach every subscriber"""
    calls = {"count": 0}
    seen = []

    def render(session):
        calls["count"] += 1
        if calls["count"] == 1:
            raise RuntimeError("render failed")

    client = SyncClient(service.get_session, poll_interval_ms=10)
    client.subscribe(render)
    client.subscribe(seen.append)

    async def scenario():
        async with client:
            await asyncio.sleep(0.03)
            service.set_active_team("t4")
            await asyncio.sleep(0.07)
            assert not client._task.done()

    asyncio.run(scenario())

    assert calls["count"] >= 3
    assert len(seen) == calls["count"]
    assert client.snapshot.active_team_id == "t4"


def test_unexpected_fetch_error_does_not_stop_polling(service):
    calls = {"count": 0}

    def fetch():
        calls["count"] += 1
        if calls["count"] == 1:
            raise KeyError("in-process store hiccup")
        return service.get_session()

    client = SyncClient(fetch, poll_interval_ms=10)

    async def scenario():
        async with client:
            await asyncio.sleep(0.08)

    asyncio.run(scenario())

    assert calls["count"] >= 2
    assert client.snapshot is not None
    assert client.loading is False
