"""
Batch orchestration shared by all provider adapters.

Runs single-channel fetches concurrently and keeps going when one channel fails.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from datetime import date
from typing import TYPE_CHECKING

from epgsync.models import CanonicalProgram, ChannelMappingInfo
from epgsync.utils.logging_helpers import log_batch_summary

if TYPE_CHECKING:
    from epgsync.providers.base import BaseProvider


logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 4


async def fetch_batch(
    provider: BaseProvider,
    mappings: Sequence[ChannelMappingInfo],
    day: date,
    *,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
) -> list[CanonicalProgram]:
    """
    Fetch one day of programs for several channels of a single provider

    A channel whose fetch raises is logged and contributes no programs; the
    remaining channels are unaffected. Results are concatenated in mapping order.

    Args:
        provider: Adapter used as the single-channel fetch primitive
        mappings: Channels to fetch
        day: Calendar day to fetch
        max_concurrency: Upper bound on in-flight fetches

    Returns:
        Programs of every channel that was fetched successfully
    """
    if not mappings:
        return []

    semaphore = asyncio.Semaphore(max(1, max_concurrency))

    async def _fetch_one(index: int, mapping: ChannelMappingInfo) -> list[CanonicalProgram] | None:
        async with semaphore:
            try:
                return await provider.fetch_epg(
                    mapping.provider_channel_id,
                    mapping.channel_id,
                    day,
                )
            except Exception as exc:
                logger.error(
                    "[%s] Channel %s/%s (%s/%s) failed for %s: %s",
                    provider.id,
                    index,
                    len(mappings),
                    mapping.provider_channel_id,
                    mapping.channel_id,
                    day.isoformat(),
                    exc,
                )
                return None

    results = await asyncio.gather(
        *(_fetch_one(index, mapping) for index, mapping in enumerate(mappings, start=1))
    )

    programs: list[CanonicalProgram] = []
    failed = 0
    for result in results:
        if result is None:
            failed += 1
            continue
        programs.extend(result)

    log_batch_summary(logger, provider.id, len(mappings), failed, len(programs))
    return programs
