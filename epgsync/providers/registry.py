"""
Provider Registry

Maps provider names to factory functions. The registry is built once at startup
and injected wherever providers are constructed, so nothing depends on import
order or module-level side effects.
"""
import logging
from typing import Any, Callable

from epgsync.errors import ProviderRegistrationError, UnknownProviderError
from epgsync.models import ProviderConfig
from epgsync.providers.base import BaseProvider
from epgsync.providers.daxiang import PROVIDER_NAME as DAXIANG, create_daxiang_provider


logger = logging.getLogger(__name__)

ProviderFactory = Callable[..., BaseProvider]


class ProviderRegistry:
    """Explicit mapping of provider name to factory."""

    def __init__(self):
        self._factories: dict[str, ProviderFactory] = {}

    def register(self, name: str, factory: ProviderFactory) -> None:
        """
        Register a factory under a provider name.

        Args:
            name: Provider key (e.g. 'daxiang')
            factory: Callable taking a ProviderConfig and returning an adapter

        Raises:
            ProviderRegistrationError: If the name is already registered
        """
        if name in self._factories:
            raise ProviderRegistrationError(f"Provider '{name}' is already registered")
        self._factories[name] = factory
        logger.debug(f"Registered provider factory: {name}")

    def create(self, config: ProviderConfig, **kwargs: Any) -> BaseProvider:
        """
        Construct the adapter registered under ``config.id``.

        Raises:
            UnknownProviderError: If no factory is registered for the id
        """
        factory = self._factories.get(config.id)
        if factory is None:
            raise UnknownProviderError(config.id)
        return factory(config, **kwargs)

    def names(self) -> list[str]:
        return sorted(self._factories)

    def __contains__(self, name: object) -> bool:
        return name in self._factories


def build_default_registry() -> ProviderRegistry:
    """Registry with every built-in provider."""
    registry = ProviderRegistry()
    registry.register(DAXIANG, create_daxiang_provider)
    return registry
