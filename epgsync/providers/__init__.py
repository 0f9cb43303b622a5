"""
Provider adapters for EPG Sync

Each adapter hides one listing provider's authentication, request shape and
response schema behind the BaseProvider contract.
"""
from epgsync.providers.base import BaseProvider
from epgsync.providers.batch import fetch_batch
from epgsync.providers.daxiang import DaxiangProvider
from epgsync.providers.registry import ProviderRegistry, build_default_registry
from epgsync.providers.transport import HttpTransport

__all__ = [
    'BaseProvider',
    'DaxiangProvider',
    'HttpTransport',
    'ProviderRegistry',
    'build_default_registry',
    'fetch_batch',
]
