from datetime import datetime, timezone
from typing import Annotated
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
import logging

from epgsync.dependencies import get_health_scheduler, get_provider_service
from epgsync.models import ChannelMappingInfo
from epgsync.schemas import (
    ChannelResponse,
    EPGFetchRequest,
    EPGResponse,
    ProgramResponse,
    ProviderHealthResponse,
)
from epgsync.services.provider_service import ProviderService
from epgsync.services.scheduler_service import HealthScheduler
from epgsync.services.xmltv_service import render_xmltv
from epgsync.utils.timezone import DateFormatError, parse_date_label


logger = logging.getLogger(__name__)

main_router = APIRouter()

ServiceDep = Annotated[ProviderService, Depends(get_provider_service)]
SchedulerDep = Annotated[HealthScheduler | None, Depends(get_health_scheduler)]


def _parse_day(label: str):
    try:
        return parse_date_label(label)
    except DateFormatError as e:
        raise HTTPException(status_code=422, detail=str(e))


def _mappings(request: EPGFetchRequest) -> list[ChannelMappingInfo]:
    return [
        ChannelMappingInfo(
            provider_channel_id=channel.provider_channel_id,
            channel_id=channel.channel_id,
        )
        for channel in request.channels
    ]


@main_router.get("/")
async def root(scheduler: SchedulerDep) -> dict:
    """Root endpoint with service information"""
    next_run = scheduler.get_next_run_time() if scheduler else None

    return {
        "service": "EPG Sync",
        "version": "0.1.0",
        "next_scheduled_health_check": next_run.isoformat() if next_run else None,
        "endpoints": {
            "providers": "/providers - List enabled providers",
            "channels": "/providers/{provider_id}/channels - Provider channel catalog",
            "epg": "/providers/{provider_id}/epg - Fetch EPG for multiple channels (POST)",
            "xmltv": "/providers/{provider_id}/epg.xml - Fetch EPG as XMLTV (POST)",
            "health": "/health - Health check"
        }
    }


@main_router.get("/health")
async def health_check(service: ServiceDep, scheduler: SchedulerDep) -> dict:
    """Health check endpoint with the last recorded provider health checks"""
    next_run = scheduler.get_next_run_time() if scheduler else None
    return {
        "status": "ok",
        "scheduler_running": scheduler.running if scheduler else False,
        "next_health_check": next_run.isoformat() if next_run else None,
        "providers": [record.to_dict() for record in service.last_health()],
    }


@main_router.get("/providers")
async def list_providers(service: ServiceDep) -> dict:
    """List enabled providers"""
    return {"providers": service.provider_ids}


@main_router.get("/providers/{provider_id}/channels", response_model=list[ChannelResponse])
async def list_channels(provider_id: str, service: ServiceDep) -> list[ChannelResponse]:
    """Static channel catalog of a provider"""
    provider = service.get_provider(provider_id)
    return [ChannelResponse(id=channel.id, name=channel.name) for channel in provider.channels]


@main_router.get("/providers/{provider_id}/health", response_model=ProviderHealthResponse)
async def provider_health(provider_id: str, service: ServiceDep) -> ProviderHealthResponse:
    """Run a live health check against a provider"""
    record = await service.check_provider(provider_id)
    return ProviderHealthResponse(**record.to_dict())


@main_router.get(
    "/providers/{provider_id}/channels/{provider_channel_id}/epg",
    response_model=EPGResponse,
)
async def get_channel_epg(
    provider_id: str,
    provider_channel_id: str,
    service: ServiceDep,
    date: Annotated[str, Query(description="Calendar day (YYYY-MM-DD)")],
    channel_id: Annotated[str | None, Query(description="Caller channel ID, defaults to the provider's")] = None,
) -> EPGResponse:
    """Fetch one day of EPG for a single channel"""
    day = _parse_day(date)
    programs = await service.fetch_channel(
        provider_id,
        provider_channel_id,
        channel_id or provider_channel_id,
        day,
    )
    return EPGResponse(
        timestamp=datetime.now(timezone.utc).isoformat(),
        provider_id=provider_id,
        date=date,
        channels_requested=1,
        total_programs=len(programs),
        programs=[ProgramResponse.from_program(program) for program in programs],
    )


@main_router.post("/providers/{provider_id}/epg", response_model=EPGResponse)
async def get_epg(provider_id: str, request: EPGFetchRequest, service: ServiceDep) -> EPGResponse:
    """
    Fetch one day of EPG for multiple channels

    Channels that fail are skipped; the response carries whatever succeeded.
    """
    logger.info(f"EPG batch fetch requested: {provider_id}, {len(request.channels)} channel(s), {request.date}")
    programs = await service.fetch_batch(provider_id, _mappings(request), _parse_day(request.date))
    return EPGResponse(
        timestamp=datetime.now(timezone.utc).isoformat(),
        provider_id=provider_id,
        date=request.date,
        channels_requested=len(request.channels),
        total_programs=len(programs),
        programs=[ProgramResponse.from_program(program) for program in programs],
    )


@main_router.post("/providers/{provider_id}/epg.xml")
async def get_epg_xmltv(provider_id: str, request: EPGFetchRequest, service: ServiceDep) -> Response:
    """Fetch one day of EPG for multiple channels as an XMLTV document"""
    provider = service.get_provider(provider_id)
    programs = await service.fetch_batch(provider_id, _mappings(request), _parse_day(request.date))

    channel_names = {}
    for channel in request.channels:
        catalog_entry = provider.get_channel(channel.provider_channel_id)
        channel_names[channel.channel_id] = catalog_entry.name if catalog_entry else channel.channel_id

    return Response(
        content=render_xmltv(programs, channel_names),
        media_type="application/xml",
    )
