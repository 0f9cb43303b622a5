"""
Services package for EPG Sync

This package contains the business logic and service layer components.
"""
from epgsync.services.provider_service import HealthRecord, ProviderService
from epgsync.services.scheduler_service import HealthScheduler
from epgsync.services.xmltv_service import render_xmltv

__all__ = [
    'HealthRecord',
    'HealthScheduler',
    'ProviderService',
    'render_xmltv',
]
