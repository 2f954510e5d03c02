"""In-memory purge provider (async only)."""

import asyncio
import time
from collections.abc import Sequence

from tagpurge.result import PurgeResult
from tagpurge.types import Tag


class AsyncMemoryProvider:
    """Records purges in memory instead of calling a CDN.

    Useful for tests and local development. Pass ``fail_with`` to make every
    purge fail with that exception.
    """

    def __init__(
        self,
        *,
        header_name: str = "Cache-Tag",
        fail_with: BaseException | None = None,
    ) -> None:
        if not header_name:
            raise ValueError("header_name must not be empty")
        self._header_name = header_name
        self._fail_with = fail_with
        self._purges: list[tuple[Tag, ...]] = []
        self._purged_at: dict[Tag, int] = {}
        self._lock = asyncio.Lock()

    @property
    def purges(self) -> list[tuple[Tag, ...]]:
        """Tag lists of every successful purge, oldest first."""
        return list(self._purges)

    def get_purge_time(self, tag: Tag) -> int | None:
        """Get the last purge timestamp (ms) for a tag."""
        return self._purged_at.get(tag)

    async def purge_cache(self, tags: Sequence[Tag]) -> PurgeResult:
        """Record a purge of the given tags."""
        if self._fail_with is not None:
            raise self._fail_with
        now = int(time.time() * 1000)
        async with self._lock:
            self._purges.append(tuple(tags))
            for tag in tags:
                self._purged_at[tag] = now
        return PurgeResult.success(tags)

    def get_cache_headers(self, tags: Sequence[Tag]) -> dict[str, str]:
        """Emit the tag list under the configured header."""
        if not tags:
            return {}
        return {self._header_name: ", ".join(tags)}

    async def clear(self) -> None:
        """Forget all recorded purges."""
        async with self._lock:
            self._purges.clear()
            self._purged_at.clear()
