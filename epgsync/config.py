import logging
from typing import Annotated
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from croniter import croniter
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from epgsync.errors import UnknownProviderError
from epgsync.models import ProviderConfig
from epgsync.providers.base import DEFAULT_USER_AGENT


logger = logging.getLogger(__name__)


class CustomSettings(BaseSettings):
    """Application settings loaded from environment variables.

    Validates configuration at startup to catch misconfiguration early.
    """

    log_level: str = "INFO"
    enabled_providers: Annotated[list[str], NoDecode] = ["daxiang"]

    daxiang_base_url: str = "https://pubmod.hntv.tv"
    daxiang_secret: str | None = None  # Falls back to the provider's published salt
    daxiang_timezone: str = "Asia/Shanghai"

    http_timeout_sec: float = 30.0
    http_max_retries: int = 3
    http_backoff_factor: float = 2.0
    user_agent: str = DEFAULT_USER_AGENT

    batch_max_concurrency: int = 4

    health_check_cron: str = "*/30 * * * *"  # Every 30 minutes
    health_check_misfire_grace_sec: int = 300

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("enabled_providers", mode="before")
    @classmethod
    def parse_enabled_providers(cls, value):
        """Parse comma-separated provider names or list."""
        if value is None:
            return []
        if isinstance(value, str):
            if not value.strip():
                return []
            return [name.strip().lower() for name in value.split(",") if name.strip()]
        if isinstance(value, list):
            return value
        return []

    @field_validator("daxiang_base_url")
    @classmethod
    def validate_base_url(cls, value: str) -> str:
        """Validate provider base URLs are HTTP/HTTPS."""
        if not value.lower().startswith(("http://", "https://")):
            raise ValueError(f"Provider base URL must be HTTP/HTTPS: {value}")
        return value.rstrip("/")

    @field_validator("daxiang_timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Validate timezone is a known IANA zone."""
        try:
            ZoneInfo(value)
            return value
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Invalid timezone: {value}") from exc

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate log level name."""
        normalized = value.upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if normalized not in allowed:
            raise ValueError(f"log_level must be one of {sorted(allowed)}")
        return normalized

    @field_validator("http_timeout_sec", "http_backoff_factor")
    @classmethod
    def validate_positive_floats(cls, value: float, info) -> float:
        """Ensure floating-point HTTP settings are positive."""
        if value <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return value

    @field_validator("http_max_retries", "batch_max_concurrency")
    @classmethod
    def validate_positive_ints(cls, value: int, info) -> int:
        """Ensure integer settings are positive."""
        if value <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return value

    @field_validator("health_check_misfire_grace_sec")
    @classmethod
    def validate_misfire_grace(cls, value: int) -> int:
        """Validate scheduler misfire grace period (seconds)."""
        if value < 0:
            raise ValueError("health_check_misfire_grace_sec must be >= 0")
        return value

    @field_validator("health_check_cron")
    @classmethod
    def validate_cron_expression(cls, value: str) -> str:
        """Validate cron expression is valid."""
        try:
            croniter(value)
            return value
        except (ValueError, KeyError) as exc:
            raise ValueError(f"Invalid cron expression '{value}': {exc}") from exc

    @model_validator(mode="after")
    def validate_provider_configuration(self):
        """Validate cross-field configuration."""
        if not self.enabled_providers:
            logger.warning(
                "No providers enabled - EPG fetches will not retrieve any data"
            )
        return self

    def __init__(self, **data):
        """Initialize settings and log configuration."""
        super().__init__(**data)

        logger.info("Configuration loaded:")
        logger.info("  Providers: %s", ", ".join(self.enabled_providers or []) or "none")
        logger.info("  Daxiang Base URL: %s", self.daxiang_base_url)
        logger.info("  Daxiang Timezone: %s", self.daxiang_timezone)
        logger.info(
            "  HTTP: timeout=%.1fs retries=%s backoff=%.1f",
            self.http_timeout_sec,
            self.http_max_retries,
            self.http_backoff_factor,
        )
        logger.info("  Batch Concurrency: %s", self.batch_max_concurrency)
        logger.info("  Health Check Schedule: %s", self.health_check_cron)

    def provider_config(self, name: str) -> ProviderConfig:
        """Build the construction config for a provider."""
        if name == "daxiang":
            return ProviderConfig(
                id="daxiang",
                name="Daxiang (Henan TV)",
                base_url=self.daxiang_base_url,
                timezone=self.daxiang_timezone,
                user_agent=self.user_agent,
                secret=self.daxiang_secret,
                timeout=self.http_timeout_sec,
                max_retries=self.http_max_retries,
                backoff_factor=self.http_backoff_factor,
            )
        raise UnknownProviderError(name)


settings = CustomSettings()


def setup_logging() -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
