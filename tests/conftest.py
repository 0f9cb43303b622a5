"""
Shared pytest fixtures for the EPG Sync test suite.

Provides:
  - ``provider_config``: Daxiang config pointing at a fake host.
  - ``make_provider``: builds a DaxiangProvider whose transport answers from
    an httpx.MockTransport handler instead of the network, and closes
    it at teardown.
  - helpers to build Daxiang JSON envelopes and UTC+8 epoch values.
"""
from __future__ import annotations

import asyncio
import json
from datetime import date, datetime
from typing import Callable, Iterator
from zoneinfo import ZoneInfo

import httpx
import pytest

from epgsync.models import ProviderConfig
from epgsync.providers.daxiang import DaxiangProvider
from epgsync.providers.transport import HttpTransport


SHANGHAI = ZoneInfo("Asia/Shanghai")
TARGET_DAY = date(2024, 3, 1)
TARGET_LABEL = "2024-03-01"
BASE_URL = "https://epg.example.test"


def epoch(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> int:
    """Unix seconds of a wall-clock time in UTC+8."""
    return int(datetime(year, month, day, hour, minute, tzinfo=SHANGHAI).timestamp())


def entry(title: str, begin, end) -> dict:
    return {"title": title, "beginTime": str(begin), "endTime": str(end)}


def envelope(programs: list | None = None, code: int = 0, msg: str = "ok", success: bool = True) -> bytes:
    return json.dumps(
        {"code": code, "msg": msg, "success": success, "programs": programs if programs is not None else []},
        ensure_ascii=False,
    ).encode("utf-8")


@pytest.fixture
def provider_config() -> ProviderConfig:
    return ProviderConfig(
        id="daxiang",
        name="Daxiang (Henan TV)",
        base_url=BASE_URL,
        timezone="Asia/Shanghai",
        user_agent="epgsync-tests/1.0",
        max_retries=1,
    )


@pytest.fixture
def make_provider(provider_config) -> Iterator[Callable[..., DaxiangProvider]]:
    """
    Factory: make_provider(handler) -> DaxiangProvider backed by MockTransport.

    Every provider built here has its HTTP client closed at teardown, on a
    private event loop so the loop used by async tests is left untouched.
    """
    created: list[DaxiangProvider] = []

    def _make(handler: Callable[[httpx.Request], httpx.Response], **kwargs) -> DaxiangProvider:
        transport = HttpTransport(
            BASE_URL,
            max_retries=1,
            transport=httpx.MockTransport(handler),
        )
        provider = DaxiangProvider(provider_config, transport=transport, **kwargs)
        created.append(provider)
        return provider

    yield _make

    loop = asyncio.new_event_loop()
    try:
        for provider in created:
            loop.run_until_complete(provider.aclose())
    finally:
        loop.close()


@pytest.fixture
def provider(make_provider) -> DaxiangProvider:
    """Provider whose transport must never be used (parser tests)."""

    def _unexpected(request: httpx.Request) -> httpx.Response:
        raise AssertionError(f"unexpected request: {request.url}")

    return make_provider(_unexpected)
