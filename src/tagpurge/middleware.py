"""ASGI middleware attaching cache headers to every response.

    app = PurgeMiddleware(app, client=create_purge(provider))

Each HTTP request runs inside its own tag scope. When the response starts,
the tags collected so far are turned into headers through
``PurgeClient.get_cache_headers`` and written onto the response, replacing
any header of the same name the application set.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, MutableMapping
from typing import Any
from urllib.parse import quote

from tagpurge.client import PurgeClient
from tagpurge.context import purge_context
from tagpurge.types import CacheOverrides

logger = logging.getLogger(__name__)

Scope = MutableMapping[str, Any]
Message = MutableMapping[str, Any]
Receive = Callable[[], Awaitable[Message]]
Send = Callable[[Message], Awaitable[None]]
ASGIApp = Callable[[Scope, Receive, Send], Awaitable[None]]


class PurgeMiddleware:
    """Pure ASGI middleware, usable with any ASGI framework."""

    def __init__(
        self,
        app: ASGIApp,
        client: PurgeClient,
        *,
        methods: Iterable[str] | None = None,
        overrides: CacheOverrides | None = None,
    ) -> None:
        self.app = app
        self.client = client
        self.methods = (
            frozenset(method.upper() for method in methods)
            if methods is not None
            else None
        )
        self.overrides = overrides

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return
        if self.methods is not None and scope.get("method", "GET") not in self.methods:
            await self.app(scope, receive, send)
            return

        with purge_context() as tags:

            async def send_with_headers(message: Message) -> None:
                if message["type"] == "http.response.start":
                    headers = self.client.get_cache_headers(
                        sorted(tags), self.overrides
                    )
                    logger.debug(
                        "Attaching cache headers for %d tag(s) to %s",
                        len(tags),
                        scope.get("path", ""),
                    )
                    message["headers"] = _merge_headers(
                        message.get("headers", []), headers
                    )
                await send(message)

            await self.app(scope, receive, send_with_headers)


def _merge_headers(
    raw: Iterable[tuple[bytes, bytes]], headers: dict[str, str]
) -> list[tuple[bytes, bytes]]:
    """Replace same-named raw ASGI headers with ``headers``."""
    replaced = {name.lower().encode("latin-1") for name in headers}
    merged = [(name, value) for name, value in raw if name.lower() not in replaced]
    merged.extend(
        (name.encode("latin-1"), _encode_value(name, value))
        for name, value in headers.items()
    )
    return merged


def _encode_value(name: str, value: str) -> bytes:
    """Encode a header value, percent-encoding characters outside latin-1."""
    try:
        return value.encode("latin-1")
    except UnicodeEncodeError:
        logger.warning("Percent-encoding non-latin-1 characters in %s header", name)
        return "".join(c if ord(c) < 256 else quote(c) for c in value).encode(
            "latin-1"
        )
