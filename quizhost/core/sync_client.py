"""
Sync client - polling view of the shared session

Every front end keeps one SyncClient. It re-reads the whole session record
on a fixed interval and after each of its own writes (mutate), replacing
its snapshot wholesale. Fetch failures keep the previous snapshot, and a
failing subscriber is logged without stopping the poll loop.
"""
import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, List, Optional, Union

import httpx

from quizhost.models import Session


logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_MS = 1500

Fetch = Callable[[], Union[Session, Awaitable[Session]]]


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def http_session_fetcher(base_url: str, timeout: float = 5.0) -> Callable[[], Awaitable[Session]]:
    """Build a fetch callable that reads GET /api/session from a running host"""
    url = f"{base_url.rstrip('/')}/api/session"

    async def fetch() -> Session:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(url)
            response.raise_for_status()
            return Session.model_validate(response.json())

    return fetch


class SyncClient:

    def __init__(self, fetch: Fetch, poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS):
        self.fetch = fetch
        self.poll_interval = poll_interval_ms / 1000
        self.snapshot: Optional[Session] = None
        self.loading = True
        self._subscribers: List[Callable[[Session], None]] = []
        self._task: Optional[asyncio.Task] = None

    def subscribe(self, callback: Callable[[Session], None]) -> None:
        self._subscribers.append(callback)

    async def refresh(self) -> Optional[Session]:
        """Fetch the record now and replace the snapshot"""
        try:
            session = await _resolve(self.fetch())
        except (httpx.HTTPError, OSError, ValueError) as e:
            logger.warning(f"📡 Session fetch failed, keeping last snapshot: {e}")
            return self.snapshot
        finally:
            self.loading = False

        self.snapshot = session
        self._notify(session)
        return session

    def _notify(self, session: Session) -> None:
        for callback in list(self._subscribers):
            try:
                callback(session)
            except Exception as e:
                logger.error(f"❌ Session subscriber failed: {type(e).__name__}: {e}", exc_info=True)

    async def mutate(self, action: Callable[[], Any]) -> Optional[Session]:
        """Run a write, then refresh so this client sees its own effect at once"""
        await _resolve(action())
        return await self.refresh()

    async def _poll_loop(self) -> None:
        # runs until stop(); a failed tick keeps the last snapshot
        while True:
            try:
                await self.refresh()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"❌ Session poll failed: {type(e).__name__}: {e}", exc_info=True)
            await asyncio.sleep(self.poll_interval)

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(self._poll_loop())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def __aenter__(self) -> "SyncClient":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()
