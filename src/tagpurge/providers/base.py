"""Base protocol for CDN purge providers."""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from tagpurge.result import PurgeResult
from tagpurge.types import Tag


@runtime_checkable
class PurgeProvider(Protocol):
    """CDN integration interface.

    ``purge_cache`` may either return a failed ``PurgeResult`` or raise;
    ``PurgeClient`` turns both into a ``PurgeProviderError`` outcome.
    """

    async def purge_cache(self, tags: Sequence[Tag]) -> PurgeResult:
        """Invalidate all content tagged with any of the given tags."""
        ...

    def get_cache_headers(self, tags: Sequence[Tag]) -> dict[str, str]:
        """Build provider-specific response headers for the given tags."""
        ...


@runtime_checkable
class ClosableProvider(Protocol):
    """Optional mixin for providers holding network resources."""

    async def aclose(self) -> None:
        """Release network clients."""
        ...
