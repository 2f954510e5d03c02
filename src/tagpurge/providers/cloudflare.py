"""Cloudflare purge provider.

Purges by tag through the Cloudflare v4 API and tags responses with the
``Cache-Tag`` header Cloudflare reads at the edge.

Example:
    client = create_purge(
        CloudflareProvider(zone_id="your-zone-id", api_token="your-api-token")
    )
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import httpx

from tagpurge.errors import (
    PurgeArgumentError,
    PurgeDecodeError,
    PurgeError,
    PurgeProviderError,
)
from tagpurge.providers.http import HttpProvider
from tagpurge.result import PurgeResult
from tagpurge.types import Tag

logger = logging.getLogger(__name__)

CLOUDFLARE_API_URL = "https://api.cloudflare.com/client/v4"


class CloudflareProvider(HttpProvider):
    """Cloudflare cache-tag purge provider.

    Cloudflare splits the ``Cache-Tag`` header on commas, so tags containing
    a comma are rejected by ``purge_cache``. Such a tag still reaches the
    response header, where the edge sees it as two separate tags.
    """

    name = "Cloudflare"

    def __init__(
        self,
        zone_id: str,
        api_token: str,
        *,
        base_url: str = CLOUDFLARE_API_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not zone_id:
            raise ValueError("zone_id must not be empty")
        if not api_token:
            raise ValueError("api_token must not be empty")
        super().__init__(
            base_url=base_url,
            headers={"Authorization": f"Bearer {api_token}"},
            timeout=timeout,
            transport=transport,
        )
        self._zone_id = zone_id

    @property
    def zone_id(self) -> str:
        return self._zone_id

    async def purge_cache(self, tags: Sequence[Tag]) -> PurgeResult:
        """Purge cached content for the given tags in this zone."""
        tags = list(tags)
        bad = [tag for tag in tags if "," in tag]
        if bad:
            return PurgeResult.failure(
                PurgeArgumentError(
                    f"Cloudflare cache tags cannot contain commas: {bad!r}"
                ),
                tags,
            )
        context = (
            f"Cloudflare provider failed to purge cache for tags: "
            f"{', '.join(tags)} in zone {self._zone_id}"
        )
        try:
            data = await self._request(
                f"/zones/{self._zone_id}/purge_cache",
                context=context,
                body={"tags": tags},
            )
        except PurgeError as e:
            return PurgeResult.failure(e, tags)

        if not isinstance(data, dict):
            return PurgeResult.failure(
                PurgeDecodeError(f"{context}: unexpected response {data!r}"), tags
            )
        if not data.get("success", False):
            messages = ", ".join(
                str(err.get("message", err)) if isinstance(err, dict) else str(err)
                for err in data.get("errors") or []
            )
            return PurgeResult.failure(
                PurgeProviderError(f"{context}: {messages or 'unknown error'}"), tags
            )

        logger.debug("Cloudflare purged %d tag(s) in zone %s", len(tags), self._zone_id)
        return PurgeResult.success(tags)

    def get_cache_headers(self, tags: Sequence[Tag]) -> dict[str, str]:
        """Emit the ``Cache-Tag`` header for the given tags."""
        if not tags:
            return {}
        return {"Cache-Tag": ", ".join(tags)}
