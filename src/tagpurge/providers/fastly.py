"""Fastly purge provider (surrogate keys)."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import httpx

from tagpurge.errors import PurgeDecodeError, PurgeError
from tagpurge.providers.http import HttpProvider
from tagpurge.result import PurgeResult
from tagpurge.types import Tag

logger = logging.getLogger(__name__)

FASTLY_API_URL = "https://api.fastly.com"


class FastlyProvider(HttpProvider):
    """Fastly surrogate-key purge provider.

    Tags map one-to-one onto Fastly surrogate keys. Fastly separates keys
    with spaces, so tags containing whitespace cannot be purged individually.
    """

    name = "Fastly"

    def __init__(
        self,
        service_id: str,
        api_token: str,
        *,
        soft_purge: bool = False,
        base_url: str = FASTLY_API_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not service_id:
            raise ValueError("service_id must not be empty")
        if not api_token:
            raise ValueError("api_token must not be empty")
        super().__init__(
            base_url=base_url,
            headers={"Fastly-Key": api_token, "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )
        self._service_id = service_id
        self._soft_purge = soft_purge

    @property
    def service_id(self) -> str:
        return self._service_id

    async def purge_cache(self, tags: Sequence[Tag]) -> PurgeResult:
        """Batch purge the surrogate keys for the given tags."""
        tags = list(tags)
        context = (
            f"Fastly provider failed to purge cache for tags: "
            f"{', '.join(tags)} in service {self._service_id}"
        )
        headers = {"Surrogate-Key": " ".join(tags)}
        if self._soft_purge:
            headers["Fastly-Soft-Purge"] = "1"

        try:
            data = await self._request(
                f"/service/{self._service_id}/purge",
                context=context,
                headers=headers,
            )
        except PurgeError as e:
            return PurgeResult.failure(e, tags)

        # Fastly answers with {surrogate_key: purge_id}
        if not isinstance(data, dict):
            return PurgeResult.failure(
                PurgeDecodeError(f"{context}: unexpected response {data!r}"), tags
            )

        logger.debug(
            "Fastly purged %d key(s) in service %s", len(tags), self._service_id
        )
        return PurgeResult.success(tags)

    def get_cache_headers(self, tags: Sequence[Tag]) -> dict[str, str]:
        """Emit the ``Surrogate-Key`` header for the given tags."""
        if not tags:
            return {}
        return {"Surrogate-Key": " ".join(tags)}
