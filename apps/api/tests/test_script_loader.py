"""Tests for the shared conferencing script loader."""
from __future__ import annotations

import asyncio

import pytest

from telemed.services.script_loader import ScriptLoader, script_url


class FakeFetch:
    def __init__(self, failures: int = 0) -> None:
        self.urls: list[str] = []
        self.failures = failures

    async def __call__(self, url: str) -> None:
        self.urls.append(url)
        await asyncio.sleep(0)
        if self.failures:
            self.failures -= 1
            raise ConnectionError("script host unreachable")


async def _no_sleep(delay: float) -> None:
    return None


def test_script_url():
    assert script_url("vpaas-test", "8x8.vc") == "https://8x8.vc/vpaas-test/external_api.js"


@pytest.mark.asyncio
async def test_concurrent_loads_share_one_fetch():
    fetch = FakeFetch()
    loader = ScriptLoader(fetch, settle_delay=0.2, sleep=_no_sleep)

    await asyncio.gather(*(loader.ensure_loaded("vpaas-test") for _ in range(5)))
    await loader.ensure_loaded("vpaas-test")

    assert len(fetch.urls) == 1
    assert fetch.urls[0].endswith("/vpaas-test/external_api.js")
    assert loader.is_loaded("vpaas-test")


@pytest.mark.asyncio
async def test_failed_load_can_be_retried():
    fetch = FakeFetch(failures=1)
    loader = ScriptLoader(fetch, settle_delay=0, sleep=_no_sleep)

    with pytest.raises(ConnectionError):
        await loader.ensure_loaded("vpaas-test")
    assert not loader.is_loaded("vpaas-test")

    await loader.ensure_loaded("vpaas-test")
    assert loader.is_loaded("vpaas-test")
    assert len(fetch.urls) == 2


@pytest.mark.asyncio
async def test_missing_app_id_is_rejected():
    loader = ScriptLoader(FakeFetch(), sleep=_no_sleep)

    with pytest.raises(ValueError, match="App ID"):
        await loader.ensure_loaded("")
