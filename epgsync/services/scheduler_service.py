import logging
from datetime import datetime
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from epgsync.config import settings
from epgsync.services.provider_service import ProviderService


logger = logging.getLogger(__name__)

class HealthScheduler:
    """Scheduler for periodic provider health checks"""

    def __init__(self, provider_service: ProviderService, cron: str | None = None):
        self.provider_service = provider_service
        self.cron = cron or settings.health_check_cron
        self.scheduler: AsyncIOScheduler | None = None

    async def _health_job(self) -> None:
        """Background job that health-checks every provider"""
        logger.info("Scheduled provider health check triggered")
        try:
            records = await self.provider_service.check_all()
            unhealthy = [record.provider_id for record in records if not record.health.healthy]
            if unhealthy:
                logger.error(f"Unhealthy providers: {', '.join(unhealthy)}")
        except Exception as e:
            logger.error(f"Exception in scheduled health check: {e}", exc_info=True)

    def start(self) -> None:
        """Start the scheduler with the health check job"""
        if self.scheduler and self.scheduler.running:
            logger.warning("Scheduler already running")
            return

        try:
            trigger = CronTrigger.from_crontab(self.cron)
        except (ValueError, KeyError) as exc:
            logger.error("Invalid cron expression '%s': %s", self.cron, exc)
            raise

        self.scheduler = AsyncIOScheduler(timezone='UTC')
        self.scheduler.add_job(
            self._health_job,
            trigger=trigger,
            id='provider_health',
            max_instances=1,
            coalesce=True,
            misfire_grace_time=settings.health_check_misfire_grace_sec
        )

        self.scheduler.start()
        next_time = self.get_next_run_time()
        logger.info(
            "Scheduler started. Next health check: %s",
            next_time.isoformat() if next_time else "unknown"
        )

    def shutdown(self) -> None:
        """Shutdown the scheduler"""
        if self.scheduler and self.scheduler.running:
            self.scheduler.shutdown()
            logger.info("Scheduler stopped")
            self.scheduler = None

    @property
    def running(self) -> bool:
        return bool(self.scheduler and self.scheduler.running)

    def get_next_run_time(self) -> datetime | None:
        """Get next scheduled health check time"""
        if not self.scheduler:
            return None
        job = self.scheduler.get_job('provider_health')
        return job.next_run_time if job else None
