"""
Provider adapter contract

Every provider implements the same four capabilities: fetch a single channel,
fetch a batch of channels, parse a raw response and check its own health.
BaseProvider also carries the plumbing adapters share: identity, the static
channel catalog and the transport.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from datetime import date

from epgsync.models import (
    CanonicalProgram,
    ChannelMappingInfo,
    ProviderChannel,
    ProviderConfig,
    ProviderHealth,
)
from epgsync.providers.batch import DEFAULT_MAX_CONCURRENCY, fetch_batch
from epgsync.providers.transport import HttpTransport


logger = logging.getLogger(__name__)

HEADER_USER_AGENT = "User-Agent"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


class BaseProvider(ABC):
    """Base class for provider adapters."""

    def __init__(
        self,
        config: ProviderConfig,
        channels: Iterable[ProviderChannel],
        *,
        transport: HttpTransport | None = None,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        self.config = config
        self._channels = tuple(channels)
        self._max_concurrency = max_concurrency
        self._transport = transport or HttpTransport(
            config.base_url,
            timeout=config.timeout,
            max_retries=config.max_retries,
            backoff_factor=config.backoff_factor,
        )

    @property
    def id(self) -> str:
        return self.config.id

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def channels(self) -> tuple[ProviderChannel, ...]:
        return self._channels

    def get_channel(self, provider_channel_id: str) -> ProviderChannel | None:
        for channel in self._channels:
            if channel.id == provider_channel_id:
                return channel
        return None

    async def get_with_headers(
        self,
        path: str,
        query: Mapping[str, str] | None,
        headers: Mapping[str, str],
    ) -> bytes:
        return await self._transport.get_with_headers(path, query, headers)

    async def aclose(self) -> None:
        await self._transport.aclose()

    @abstractmethod
    async def fetch_epg(
        self,
        provider_channel_id: str,
        channel_id: str,
        day: date,
    ) -> list[CanonicalProgram]:
        """Fetch one day of programs for a single channel."""

    @abstractmethod
    async def fetch_epg_batch(
        self,
        mappings: Sequence[ChannelMappingInfo],
        day: date,
    ) -> list[CanonicalProgram]:
        """Fetch one day of programs for several channels."""

    @abstractmethod
    def parse_epg_response(
        self,
        data: bytes,
        provider_channel_id: str,
        channel_id: str,
        date_label: str,
    ) -> list[CanonicalProgram]:
        """Decode a raw provider response into canonical programs."""

    @abstractmethod
    async def health_check(self) -> ProviderHealth:
        """Check the provider with a live fetch."""

    async def _fetch_batch(
        self,
        mappings: Sequence[ChannelMappingInfo],
        day: date,
    ) -> list[CanonicalProgram]:
        return await fetch_batch(self, mappings, day, max_concurrency=self._max_concurrency)
