"""tagpurge - CDN-agnostic cache tag purging and cache headers for Python."""

from contextlib import suppress

# Client
from tagpurge.client import (
    DEFAULT_DIRECTIVES,
    PurgeClient,
    PurgeClientConfig,
    create_purge,
)

# Request-scoped tag collection
from tagpurge.context import (
    cache_tagged,
    cache_tags,
    create_purge_context,
    get_current_purge_context,
    has_purge_context,
    purge_context,
)

# Duration parsing
from tagpurge.duration import parse_duration

# Errors
from tagpurge.errors import (
    PurgeArgumentError,
    PurgeDecodeError,
    PurgeError,
    PurgeFetchError,
    PurgeProviderError,
)

# Header synthesis
from tagpurge.headers import build_common_headers, resolve_directives
from tagpurge.middleware import PurgeMiddleware

# Providers
from tagpurge.providers import (
    AsyncMemoryProvider,
    CloudflareProvider,
    FastlyProvider,
    PurgeProvider,
    available_providers,
    create_provider,
    register_provider,
)
from tagpurge.result import PurgeResult

# Core types
from tagpurge.types import (
    UNSET,
    CacheDirectives,
    CacheOverrides,
    Duration,
    Tag,
)

# Optional provider imports - only available when dependencies are installed
with suppress(ImportError):
    from tagpurge.providers import AsyncRedisProvider

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_DIRECTIVES",
    "UNSET",
    "AsyncMemoryProvider",
    "AsyncRedisProvider",
    "CacheDirectives",
    "CacheOverrides",
    "CloudflareProvider",
    "Duration",
    "FastlyProvider",
    "PurgeArgumentError",
    "PurgeClient",
    "PurgeClientConfig",
    "PurgeDecodeError",
    "PurgeError",
    "PurgeFetchError",
    "PurgeMiddleware",
    "PurgeProvider",
    "PurgeProviderError",
    "PurgeResult",
    "Tag",
    "available_providers",
    "build_common_headers",
    "cache_tagged",
    "cache_tags",
    "create_provider",
    "create_purge",
    "create_purge_context",
    "get_current_purge_context",
    "has_purge_context",
    "parse_duration",
    "purge_context",
    "register_provider",
    "resolve_directives",
]
