"""Registry of named provider factories."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from tagpurge.providers.base import PurgeProvider

ProviderFactory = Callable[..., PurgeProvider]

_registry: dict[str, ProviderFactory] = {}


def register_provider(name: str, factory: ProviderFactory) -> None:
    """Register a provider factory under a name.

    Re-registering a name replaces the previous factory.
    """
    if not name:
        raise ValueError("Provider name must not be empty")
    _registry[name] = factory


def create_provider(name: str, **options: Any) -> PurgeProvider:
    """Build a provider by name, passing options to its factory.

    Example:
        provider = create_provider("cloudflare", zone_id="...", api_token="...")
    """
    try:
        factory = _registry[name]
    except KeyError:
        known = ", ".join(sorted(_registry)) or "none"
        raise ValueError(f"Unknown provider: {name!r} (available: {known})") from None
    return factory(**options)


def available_providers() -> list[str]:
    """Names of all registered providers."""
    return sorted(_registry)
