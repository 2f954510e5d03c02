"""CDN-agnostic purge client.

Composes a bound provider with cache-control configuration:

    client = create_purge(CloudflareProvider(zone_id=..., api_token=...))

    # Purge cache tags
    result = await client.purge_cache(["post:1", "post-list"])

    # Get cache headers for tags
    headers = client.get_cache_headers(["post:1"], max_age_browser="5m")
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from tagpurge.duration import parse_duration
from tagpurge.errors import (
    PurgeArgumentError,
    PurgeDecodeError,
    PurgeError,
    PurgeProviderError,
)
from tagpurge.headers import build_common_headers, resolve_directives
from tagpurge.providers.base import ClosableProvider, PurgeProvider
from tagpurge.result import PurgeResult
from tagpurge.types import (
    UNSET,
    CacheDirectives,
    CacheOverrides,
    Duration,
    Tag,
    Unset,
    VaryInput,
)

logger = logging.getLogger(__name__)

DEFAULT_DIRECTIVES = CacheDirectives()


@dataclass(frozen=True, slots=True)
class PurgeClientConfig:
    """Process-wide client configuration.

    Every cache-control field left at UNSET falls back to the library
    defaults.
    """

    provider: PurgeProvider
    max_age_cdn: Duration | Unset = UNSET
    max_age_browser: Duration | Unset = UNSET
    vary: VaryInput | Unset = UNSET
    private: bool | Unset = UNSET

    def __post_init__(self) -> None:
        if not isinstance(self.provider, PurgeProvider):
            raise ValueError(
                f"provider must implement PurgeProvider, got {type(self.provider)!r}"
            )
        # Fail fast on bad durations rather than on the first response
        for name in ("max_age_cdn", "max_age_browser"):
            value = getattr(self, name)
            if value is not UNSET:
                parse_duration(value)

    @property
    def overrides(self) -> CacheOverrides:
        return CacheOverrides(
            max_age_cdn=self.max_age_cdn,
            max_age_browser=self.max_age_browser,
            vary=self.vary,
            private=self.private,
        )


class PurgeClient:
    """Purges tags through a provider and builds response cache headers."""

    def __init__(self, config: PurgeClientConfig) -> None:
        self._config = config
        self._provider = config.provider
        self._directives = resolve_directives(DEFAULT_DIRECTIVES, config.overrides)

    @property
    def config(self) -> PurgeClientConfig:
        return self._config

    @property
    def provider(self) -> PurgeProvider:
        return self._provider

    @property
    def directives(self) -> CacheDirectives:
        """Client-level directives, before per-call overrides."""
        return self._directives

    async def purge_cache(self, tags: Iterable[Tag] | None) -> PurgeResult:
        """Purge the given tags at the CDN.

        Never raises for purge failures: the outcome is returned as a
        ``PurgeResult``. An empty or missing tag list is rejected without
        calling the provider, since some CDNs treat "no tags" as "everything".
        """
        if tags is None:
            tags = []
        elif isinstance(tags, str):
            tags = [tags]
        unique = list(dict.fromkeys(tags))

        if not unique:
            error = PurgeArgumentError("Cannot purge cache: no tags given")
            logger.warning("Rejected purge: %s", error.message)
            return PurgeResult.failure(error)
        if any(not tag for tag in unique):
            error = PurgeArgumentError(
                f"Cannot purge cache: empty tag in {unique!r}"
            )
            logger.warning("Rejected purge: %s", error.message)
            return PurgeResult.failure(error, unique)

        logger.debug("Purging %d tag(s): %s", len(unique), ", ".join(unique))
        try:
            result = await self._provider.purge_cache(unique)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            result = PurgeResult.failure(self._as_provider_error(unique, e), unique)

        error = result.error
        if error is None:
            logger.info("Purged %d tag(s): %s", len(unique), ", ".join(unique))
            return PurgeResult.success(unique)

        error = self._as_provider_error(unique, error)
        logger.warning(
            "Purge failed (%s) for tags %s: %s",
            error.tag,
            ", ".join(unique),
            error.message,
        )
        return PurgeResult.failure(error, unique)

    def get_cache_headers(
        self,
        tags: Iterable[Tag],
        overrides: CacheOverrides | None = None,
        **fields: Any,
    ) -> dict[str, str]:
        """Build the response headers for content carrying ``tags``.

        Per-call overrides may be passed as a ``CacheOverrides`` or as
        keyword arguments (``max_age_cdn``, ``max_age_browser``, ``vary``,
        ``private``); keywords win over the ``overrides`` object. Provider
        headers take precedence over the common headers.
        """
        if isinstance(tags, str):
            tags = [tags]
        tag_list = list(dict.fromkeys(tags))

        if fields:
            overrides = _apply_fields(overrides or CacheOverrides(), fields)

        directives = resolve_directives(self._directives, overrides)
        headers = build_common_headers(directives)
        provider_headers = self._provider.get_cache_headers(tag_list)
        headers.update(provider_headers)
        return headers

    async def aclose(self) -> None:
        """Close the provider, if it holds network resources."""
        if isinstance(self._provider, ClosableProvider):
            await self._provider.aclose()

    async def __aenter__(self) -> PurgeClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    @staticmethod
    def _as_provider_error(tags: list[Tag], error: BaseException) -> PurgeError:
        if isinstance(error, (PurgeProviderError, PurgeDecodeError)):
            return error
        return PurgeProviderError(
            f"Provider failed to purge cache for tags: {', '.join(tags)}: {error}",
            cause=error,
        )


_OVERRIDE_FIELDS = frozenset({"max_age_cdn", "max_age_browser", "vary", "private"})


def _apply_fields(base: CacheOverrides, fields: dict[str, Any]) -> CacheOverrides:
    unknown = set(fields) - _OVERRIDE_FIELDS
    if unknown:
        raise TypeError(f"Unknown cache header options: {', '.join(sorted(unknown))}")
    values = {
        "max_age_cdn": base.max_age_cdn,
        "max_age_browser": base.max_age_browser,
        "vary": base.vary,
        "private": base.private,
    }
    values.update(fields)
    return CacheOverrides(**values)


def create_purge(
    provider: PurgeProvider,
    *,
    max_age_cdn: Duration | Unset = UNSET,
    max_age_browser: Duration | Unset = UNSET,
    vary: VaryInput | Unset = UNSET,
    private: bool | Unset = UNSET,
) -> PurgeClient:
    """Create a purge client bound to ``provider``."""
    return PurgeClient(
        PurgeClientConfig(
            provider=provider,
            max_age_cdn=max_age_cdn,
            max_age_browser=max_age_browser,
            vary=vary,
            private=private,
        )
    )
