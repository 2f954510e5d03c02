"""Redis purge provider for self-hosted edge caches.

Instead of calling a CDN API, purges are broadcast over Redis pub/sub so that
reverse proxies or application caches subscribed to the channel can evict
matching content. The last purge time of every tag is also stored, so late
subscribers can compare it with the age of what they hold.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Sequence
from typing import Any

from redis.exceptions import RedisError

from tagpurge.errors import PurgeProviderError
from tagpurge.result import PurgeResult
from tagpurge.types import Tag

logger = logging.getLogger(__name__)


def _escape_tag(tag: Tag) -> str:
    """Escape a tag for use inside a Redis key."""
    return tag.replace("\\", "\\\\").replace(":", "\\:")


class AsyncRedisProvider:
    """Async Redis pub/sub purge provider."""

    name = "Redis"

    def __init__(
        self,
        client: Any,  # redis.asyncio.Redis
        *,
        prefix: str = "tagpurge",
        header_name: str = "Cache-Tag",
    ) -> None:
        if not prefix:
            raise ValueError("prefix must not be empty")
        if not header_name:
            raise ValueError("header_name must not be empty")
        self._client = client
        self._prefix = prefix
        self._header_name = header_name

    @property
    def channel(self) -> str:
        """Pub/sub channel purge messages are published on."""
        return f"{self._prefix}:purge"

    def _tag_key(self, tag: Tag) -> str:
        """Generate full Redis key for a tag's last purge time."""
        return f"{self._prefix}:purge:{_escape_tag(tag)}"

    async def get_purge_time(self, tag: Tag) -> int | None:
        """Get the last purge timestamp (ms) for a tag."""
        data = await self._client.get(self._tag_key(tag))
        if data is None:
            return None
        return int(data)

    async def purge_cache(self, tags: Sequence[Tag]) -> PurgeResult:
        """Record purge times and publish a purge message."""
        tags = list(tags)
        now = int(time.time() * 1000)
        message = json.dumps({"tags": tags, "purgedAt": now})
        try:
            async with self._client.pipeline(transaction=True) as pipe:
                for tag in tags:
                    pipe.set(self._tag_key(tag), str(now))
                pipe.publish(self.channel, message)
                results = await pipe.execute()
        except RedisError as e:
            error = PurgeProviderError(
                f"Redis provider failed to purge cache for tags: {', '.join(tags)}",
                cause=e,
            )
            return PurgeResult.failure(error, tags)

        logger.debug(
            "Published purge of %d tag(s) on %s to %s subscriber(s)",
            len(tags),
            self.channel,
            results[-1],
        )
        return PurgeResult.success(tags)

    def get_cache_headers(self, tags: Sequence[Tag]) -> dict[str, str]:
        """Emit the tag list under the configured header."""
        if not tags:
            return {}
        return {self._header_name: ", ".join(tags)}

    async def aclose(self) -> None:
        """Close the Redis connection."""
        await self._client.aclose()
