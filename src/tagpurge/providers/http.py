"""Shared HTTP plumbing for CDN API providers."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from tagpurge.errors import PurgeDecodeError, PurgeFetchError

logger = logging.getLogger(__name__)


class HttpProvider:
    """Base for providers that talk to a CDN purge API over HTTP."""

    name = "http"

    def __init__(
        self,
        *,
        base_url: str,
        headers: dict[str, str],
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Content-Type": "application/json", **headers},
            timeout=timeout,
            transport=transport,
        )

    async def _request(
        self,
        endpoint: str,
        *,
        context: str,
        body: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """POST to the CDN API and decode the JSON response.

        ``context`` prefixes every error message, so callers can say which
        operation and tags were involved.
        """
        logger.debug("%s POST %s", self.name, endpoint)
        try:
            response = await self._client.post(endpoint, json=body, headers=headers)
        except httpx.HTTPError as e:
            url = str(e.request.url) if _has_request(e) else endpoint
            raise PurgeFetchError(f"{context}: {e}", url=url, cause=e) from e

        url = str(response.request.url)
        if not response.is_success:
            try:
                detail = response.json()
            except ValueError:
                detail = response.text or "no response body"
            raise PurgeFetchError(
                f"{context}: HTTP {response.status_code} from {url}: {detail}",
                url=url,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise PurgeDecodeError(
                f"{context}: undecodable response from {url}", cause=e
            ) from e

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()


def _has_request(error: httpx.HTTPError) -> bool:
    try:
        error.request
    except RuntimeError:
        return False
    return True
