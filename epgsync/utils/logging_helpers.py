"""
Structured logging helpers for consistent log formatting.
"""
import logging
from datetime import datetime, timezone


def log_batch_summary(
    logger: logging.Logger,
    provider_id: str,
    channels_total: int,
    channels_failed: int,
    programs_count: int
) -> None:
    """
    Log batch fetch summary.

    Args:
        logger: Logger instance
        provider_id: Provider the batch ran against
        channels_total: Number of channels requested
        channels_failed: Number of channels whose fetch raised
        programs_count: Number of programs collected
    """
    level = logging.WARNING if channels_failed else logging.INFO
    logger.log(
        level,
        f"[{provider_id}] Batch summary - Channels: {channels_total - channels_failed}/{channels_total} "
        f"succeeded, Programs: {programs_count}"
    )


def log_health_check_start(logger: logging.Logger, providers_count: int) -> None:
    """Log health check run start."""
    logger.info(
        f"Provider health check started at {datetime.now(timezone.utc).isoformat()} "
        f"({providers_count} provider(s))"
    )


def log_health_result(logger: logging.Logger, provider_id: str, healthy: bool, message: str) -> None:
    """Log the outcome of one provider health check."""
    if healthy:
        logger.info(f"[{provider_id}] healthy: {message}")
    else:
        logger.error(f"[{provider_id}] unhealthy: {message}")
