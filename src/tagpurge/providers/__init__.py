"""CDN purge providers."""

from contextlib import suppress

from tagpurge.providers.base import ClosableProvider, PurgeProvider
from tagpurge.providers.cloudflare import CloudflareProvider
from tagpurge.providers.fastly import FastlyProvider
from tagpurge.providers.memory import AsyncMemoryProvider
from tagpurge.providers.registry import (
    available_providers,
    create_provider,
    register_provider,
)

register_provider("memory", AsyncMemoryProvider)
register_provider("cloudflare", CloudflareProvider)
register_provider("fastly", FastlyProvider)

# Optional providers - only available when dependencies are installed
with suppress(ImportError):
    from tagpurge.providers.redis import AsyncRedisProvider

    register_provider("redis", AsyncRedisProvider)

__all__ = [
    "AsyncMemoryProvider",
    "AsyncRedisProvider",
    "ClosableProvider",
    "CloudflareProvider",
    "FastlyProvider",
    "PurgeProvider",
    "available_providers",
    "create_provider",
    "register_provider",
]
