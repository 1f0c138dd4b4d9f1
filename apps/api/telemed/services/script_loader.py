"""Process-wide loader for the vendor conferencing script."""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Dict

import httpx

from ..core.config import settings

logger = logging.getLogger(__name__)

FetchCallable = Callable[[str], Awaitable[None]]


def script_url(app_id: str, domain: str | None = None) -> str:
    return f"https://{domain or settings.jaas_domain}/{app_id}/external_api.js"


async def _http_fetch(url: str) -> None:
    async with httpx.AsyncClient(timeout=15.0, follow_redirects=True) as client:
        response = await client.get(url)
        response.raise_for_status()


class ScriptLoader:
    """Load the external API script at most once per application id.

    Concurrent callers for the same id share one in-flight load. A failed load is
    forgotten so a later retry can attempt it again.
    """

    def __init__(
        self,
        fetch: FetchCallable | None = None,
        *,
        settle_delay: float | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._fetch = fetch or _http_fetch
        self._settle_delay = settings.jaas_script_settle_delay if settle_delay is None else settle_delay
        self._sleep = sleep
        self._loaded: set[str] = set()
        self._pending: Dict[str, asyncio.Task[None]] = {}

    def is_loaded(self, app_id: str) -> bool:
        return app_id in self._loaded

    async def ensure_loaded(self, app_id: str) -> None:
        if not app_id:
            raise ValueError("JaaS App ID not configured")
        if app_id in self._loaded:
            return

        task = self._pending.get(app_id)
        if task is None:
            task = asyncio.ensure_future(self._load(app_id))
            self._pending[app_id] = task
        try:
            await asyncio.shield(task)
        finally:
            if task.done():
                self._pending.pop(app_id, None)

    async def _load(self, app_id: str) -> None:
        url = script_url(app_id)
        logger.info("Loading conferencing script from %s", url)
        await self._fetch(url)
        # Give the vendor API a moment to register before anyone calls it.
        if self._settle_delay:
            await self._sleep(self._settle_delay)
        self._loaded.add(app_id)


loader = ScriptLoader()
