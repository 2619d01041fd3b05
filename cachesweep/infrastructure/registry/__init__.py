"""Agent registry adapters."""

from cachesweep.infrastructure.registry.json_registry import (
    ConfiguredCachingAgent,
    ConfiguredProvider,
    JsonProviderRegistry,
    RegistryConfig,
    ScheduledAgent,
    build_providers,
)

__all__ = [
    "ConfiguredCachingAgent",
    "ConfiguredProvider",
    "JsonProviderRegistry",
    "RegistryConfig",
    "ScheduledAgent",
    "build_providers",
]
