"""
Domain models shared by all provider adapters.

Programs are created fresh on every fetch and never mutated afterwards.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class CanonicalProgram:
    """Normalized program entry, independent of the provider's schema."""
    channel_id: str
    title: str
    start_time: datetime
    end_time: datetime
    source_timezone: str
    provider_id: str

    def to_dict(self) -> dict:
        return {
            "channel_id": self.channel_id,
            "title": self.title,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "source_timezone": self.source_timezone,
            "provider_id": self.provider_id,
        }


@dataclass(frozen=True, slots=True)
class ProviderChannel:
    """Entry of a provider's static channel catalog."""
    id: str
    name: str


@dataclass(frozen=True, slots=True)
class ChannelMappingInfo:
    """Pairs a provider-local channel id with the caller's channel id."""
    provider_channel_id: str
    channel_id: str


@dataclass(frozen=True, slots=True)
class ProviderHealth:
    healthy: bool
    message: str


@dataclass(frozen=True, slots=True)
class ProviderConfig:
    """Read-only construction settings for a provider adapter."""
    id: str
    name: str
    base_url: str
    timezone: str
    user_agent: str
    secret: str | None = None
    timeout: float = 30.0
    max_retries: int = 3
    backoff_factor: float = 2.0


__all__ = [
    "CanonicalProgram",
    "ChannelMappingInfo",
    "ProviderChannel",
    "ProviderConfig",
    "ProviderHealth",
]
