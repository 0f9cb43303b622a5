"""
Daxiang (Henan Radio & Television) provider

Requests are signed with a time-salted sha256 digest. Listings are returned as
JSON with decimal-string Unix seconds, anchored to the day in UTC+8.
"""
from __future__ import annotations

import json
import logging
import re
from collections.abc import Sequence
from datetime import date

from epgsync.errors import DateRangeError, ProviderAPIError, ProviderParseError
from epgsync.models import (
    CanonicalProgram,
    ChannelMappingInfo,
    ProviderChannel,
    ProviderConfig,
    ProviderHealth,
)
from epgsync.providers.base import HEADER_USER_AGENT, BaseProvider
from epgsync.utils.signing import sign_request
from epgsync.utils.timezone import (
    format_date_label,
    load_zone,
    parse_date_label,
    resolve_time_range_from_timestamp,
    start_of_day,
    today_in_zone,
)


logger = logging.getLogger(__name__)

PROVIDER_NAME = "daxiang"

SALT = "6ca114a836ac7d73"
PROGRAM_PATH = "/program/getAuth/vod/originStream/program/{channel}/{day_start}"

# Returned when the provider has no data for, or refuses, the requested channel/day
CODE_REJECTED = -2

DECIMAL_PATTERN = re.compile(r"[+-]?[0-9]+")

CHANNELS = (
    ProviderChannel(id="145", name="河南卫视"),
    ProviderChannel(id="149", name="河南新闻频道"),
    ProviderChannel(id="141", name="河南都市频道"),
    ProviderChannel(id="146", name="河南民生频道"),
    ProviderChannel(id="147", name="河南法治频道"),
    ProviderChannel(id="151", name="河南公共频道"),
    ProviderChannel(id="152", name="河南乡村频道"),
    ProviderChannel(id="148", name="河南电视剧频道"),
    ProviderChannel(id="154", name="河南梨园频道"),
    ProviderChannel(id="155", name="河南文物宝库"),
    ProviderChannel(id="156", name="河南武术频道"),
    ProviderChannel(id="157", name="睛彩中原"),
    ProviderChannel(id="163", name="河南移动戏曲频道"),
    ProviderChannel(id="183", name="象视界"),
    ProviderChannel(id="194", name="国学频道"),
)

HEALTH_CHECK_CHANNEL = CHANNELS[0]


def _parse_epoch(value: object) -> int:
    """Parse a decimal-string Unix timestamp"""
    if isinstance(value, bool):
        raise ValueError(f"invalid timestamp: {value!r}")
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        raise ValueError(f"invalid timestamp: {value!r}")
    text = value.strip()
    if not DECIMAL_PATTERN.fullmatch(text):
        raise ValueError(f"invalid timestamp: {value!r}")
    return int(text, 10)


class DaxiangProvider(BaseProvider):
    """Adapter for the Daxiang originStream program API."""

    def __init__(self, config: ProviderConfig, **kwargs) -> None:
        super().__init__(config, CHANNELS, **kwargs)
        self._secret = config.secret or SALT

    async def health_check(self) -> ProviderHealth:
        try:
            zone = load_zone(self.config.timezone)
            await self.fetch_epg(
                HEALTH_CHECK_CHANNEL.id,
                HEALTH_CHECK_CHANNEL.name,
                today_in_zone(zone),
            )
        except Exception as e:
            logger.warning("[%s] Health check failed: %s", self.id, e)
            return ProviderHealth(healthy=False, message=f"FetchEPG failed: {e}")

        return ProviderHealth(healthy=True, message="OK")

    async def fetch_epg(
        self,
        provider_channel_id: str,
        channel_id: str,
        day: date,
    ) -> list[CanonicalProgram]:
        zone = load_zone(self.config.timezone)
        day_start = int(start_of_day(day, zone).timestamp())

        timestamp, signature = sign_request(self._secret)
        headers = {
            HEADER_USER_AGENT: self.config.user_agent,
            "TimeStamp": timestamp,
            "Sign": signature,
        }
        path = PROGRAM_PATH.format(channel=provider_channel_id, day_start=day_start)

        logger.debug(
            "[%s] Fetching channel %s (%s) for %s",
            self.id,
            provider_channel_id,
            channel_id,
            format_date_label(day),
        )
        data = await self.get_with_headers(path, None, headers)

        return self.parse_epg_response(
            data,
            provider_channel_id,
            channel_id,
            format_date_label(day),
        )

    async def fetch_epg_batch(
        self,
        mappings: Sequence[ChannelMappingInfo],
        day: date,
    ) -> list[CanonicalProgram]:
        return await self._fetch_batch(mappings, day)

    def parse_epg_response(
        self,
        data: bytes,
        provider_channel_id: str,
        channel_id: str,
        date_label: str,
    ) -> list[CanonicalProgram]:
        """
        Decode a program listing response

        Entries with unparseable timestamps, or timestamps that do not belong
        to ``date_label``, are logged and skipped.

        Raises:
            ProviderParseError: If the envelope is malformed
            ProviderAPIError: If the provider rejected the request
            TimezoneLoadError: If the configured zone is unknown
        """
        try:
            resp = json.loads(data)
        except ValueError as e:
            raise ProviderParseError(self.id, str(e)) from e

        if not isinstance(resp, dict):
            raise ProviderParseError(self.id, f"expected JSON object, got {type(resp).__name__}")

        code = resp.get("code", 0)
        if isinstance(code, bool) or not isinstance(code, int):
            raise ProviderParseError(self.id, f"invalid code field: {code!r}")
        message = str(resp.get("msg") or "")

        if code == CODE_REJECTED:
            raise ProviderAPIError(self.id, str(code), message)

        if code != 0:
            if resp.get("success") is False:
                raise ProviderAPIError(self.id, str(code), message)
            logger.warning(
                "[%s] Channel %s (%s) returned code %s with success flag set: %s",
                self.id,
                provider_channel_id,
                channel_id,
                code,
                message,
            )

        entries = resp.get("programs")
        if entries is None:
            entries = []
        if not isinstance(entries, list):
            raise ProviderParseError(self.id, f"invalid programs field: {type(entries).__name__}")

        result: list[CanonicalProgram] = []
        if not entries:
            return result

        zone = load_zone(self.config.timezone)
        day = parse_date_label(date_label)

        for entry in entries:
            if not isinstance(entry, dict):
                logger.warning(
                    "[%s] Skipping malformed entry for channel %s on %s: %r",
                    self.id,
                    channel_id,
                    date_label,
                    entry,
                )
                continue

            try:
                start_ts = _parse_epoch(entry.get("beginTime"))
                end_ts = _parse_epoch(entry.get("endTime"))
            except ValueError as e:
                logger.warning(
                    "%s",
                    DateRangeError(channel_id, date_label, f"invalid timestamp: {e}"),
                )
                continue

            try:
                start_time, end_time = resolve_time_range_from_timestamp(
                    start_ts,
                    end_ts,
                    day,
                    zone,
                    channel_id,
                )
            except DateRangeError as e:
                logger.warning("%s", e)
                continue

            result.append(CanonicalProgram(
                channel_id=channel_id,
                title=str(entry.get("title") or ""),
                start_time=start_time,
                end_time=end_time,
                source_timezone=self.config.timezone,
                provider_id=self.id,
            ))

        return result


def create_daxiang_provider(config: ProviderConfig, **kwargs) -> DaxiangProvider:
    return DaxiangProvider(config, **kwargs)
