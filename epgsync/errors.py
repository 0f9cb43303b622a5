"""
Error types for EPG Sync

Every call-level failure an adapter can raise carries structured fields so
callers can branch on the kind of failure instead of parsing messages.
Transport failures are not wrapped: they surface as ``httpx.HTTPError``.
"""


class EPGSyncError(Exception):
    """Base class for all epgsync errors"""
    pass


class ProviderError(EPGSyncError):
    """Failure attributed to a specific provider"""

    def __init__(self, provider_id: str, message: str):
        self.provider_id = provider_id
        super().__init__(f"[{provider_id}] {message}")


class ProviderParseError(ProviderError):
    """Raised when a provider response envelope cannot be decoded"""

    def __init__(self, provider_id: str, reason: str):
        self.reason = reason
        super().__init__(provider_id, f"failed to parse response: {reason}")


class ProviderAPIError(ProviderError):
    """Raised when a provider rejects a request at the business level"""

    def __init__(self, provider_id: str, code: str, message: str):
        self.code = code
        self.api_message = message
        super().__init__(provider_id, f"API error (code={code}): {message}")


class DateRangeError(EPGSyncError):
    """Raised when a program's timestamps do not belong to the requested day"""

    def __init__(self, channel_id: str, date: str, reason: str):
        self.channel_id = channel_id
        self.date = date
        self.reason = reason
        super().__init__(
            f"Invalid program time range for channel {channel_id} on {date}: {reason}"
        )


class TimezoneLoadError(EPGSyncError):
    """Raised when a timezone name cannot be resolved"""

    def __init__(self, zone_name: str):
        self.zone_name = zone_name
        super().__init__(f"Unknown timezone: '{zone_name}'")


class ProviderRegistrationError(EPGSyncError):
    """Raised when a provider name is registered twice"""
    pass


class UnknownProviderError(EPGSyncError):
    """Raised when no factory is registered for a provider name"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No provider registered under '{name}'")
