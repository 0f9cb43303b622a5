"""
Provider Service

Owns the adapter instances built from settings and records the outcome of the
most recent health check for each of them.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, timezone

from epgsync.config import CustomSettings
from epgsync.errors import UnknownProviderError
from epgsync.models import CanonicalProgram, ChannelMappingInfo, ProviderHealth
from epgsync.providers.base import BaseProvider
from epgsync.providers.registry import ProviderRegistry
from epgsync.utils.logging_helpers import log_health_check_start, log_health_result


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HealthRecord:
    provider_id: str
    health: ProviderHealth
    checked_at: datetime

    def to_dict(self) -> dict:
        return {
            "provider_id": self.provider_id,
            "healthy": self.health.healthy,
            "message": self.health.message,
            "checked_at": self.checked_at.isoformat(),
        }


class ProviderService:
    """Entry point for fetching EPG data through configured providers."""

    def __init__(self, providers: Sequence[BaseProvider]):
        self._providers = {provider.id: provider for provider in providers}
        self._last_health: dict[str, HealthRecord] = {}

    @classmethod
    def from_settings(
        cls,
        settings: CustomSettings,
        registry: ProviderRegistry,
    ) -> ProviderService:
        """Construct every enabled provider through the registry."""
        providers = []
        for name in settings.enabled_providers or []:
            config = settings.provider_config(name)
            providers.append(
                registry.create(config, max_concurrency=settings.batch_max_concurrency)
            )
            logger.info("Provider enabled: %s (%s)", config.id, config.base_url)
        return cls(providers)

    @property
    def provider_ids(self) -> list[str]:
        return sorted(self._providers)

    def get_provider(self, provider_id: str) -> BaseProvider:
        provider = self._providers.get(provider_id)
        if provider is None:
            raise UnknownProviderError(provider_id)
        return provider

    async def fetch_channel(
        self,
        provider_id: str,
        provider_channel_id: str,
        channel_id: str,
        day: date,
    ) -> list[CanonicalProgram]:
        provider = self.get_provider(provider_id)
        programs = await provider.fetch_epg(provider_channel_id, channel_id, day)
        logger.info(
            "[%s] Fetched %s programs for channel %s (%s) on %s",
            provider_id,
            len(programs),
            provider_channel_id,
            channel_id,
            day.isoformat(),
        )
        return programs

    async def fetch_batch(
        self,
        provider_id: str,
        mappings: Sequence[ChannelMappingInfo],
        day: date,
    ) -> list[CanonicalProgram]:
        provider = self.get_provider(provider_id)
        return await provider.fetch_epg_batch(mappings, day)

    async def check_provider(self, provider_id: str) -> HealthRecord:
        provider = self.get_provider(provider_id)
        health = await provider.health_check()
        record = HealthRecord(
            provider_id=provider_id,
            health=health,
            checked_at=datetime.now(timezone.utc),
        )
        self._last_health[provider_id] = record
        log_health_result(logger, provider_id, health.healthy, health.message)
        return record

    async def check_all(self) -> list[HealthRecord]:
        """Health-check every provider concurrently."""
        log_health_check_start(logger, len(self._providers))
        return list(await asyncio.gather(
            *(self.check_provider(provider_id) for provider_id in self.provider_ids)
        ))

    def last_health(self) -> list[HealthRecord]:
        return [self._last_health[pid] for pid in self.provider_ids if pid in self._last_health]

    async def aclose(self) -> None:
        for provider in self._providers.values():
            await provider.aclose()
