"""
Dependency Injection Configuration

Services are built once in the application lifespan and stored on app.state;
these helpers hand them to route handlers, so tests can swap in their own
instances before the app starts.
"""
import logging

from fastapi import Request

from epgsync.services.provider_service import ProviderService
from epgsync.services.scheduler_service import HealthScheduler


logger = logging.getLogger(__name__)


def get_provider_service(request: Request) -> ProviderService:
    """
    Get the provider service for the running application.

    Raises:
        RuntimeError: If the application has not finished starting
    """
    service = getattr(request.app.state, "provider_service", None)
    if service is None:
        raise RuntimeError("Provider service not initialized. Start the application lifespan first.")
    return service


def get_health_scheduler(request: Request) -> HealthScheduler | None:
    """Get the health scheduler, or None when scheduling is disabled."""
    return getattr(request.app.state, "health_scheduler", None)
