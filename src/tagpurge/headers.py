"""Cache-Control and Vary header synthesis.

- build_common_headers(): Turn resolved directives into response headers
- resolve_directives(): Merge defaults, client config and per-call overrides
"""

from __future__ import annotations

from tagpurge.duration import parse_duration
from tagpurge.types import UNSET, CacheDirectives, CacheOverrides, normalize_vary

CACHE_CONTROL = "Cache-Control"
VARY = "Vary"


def build_common_headers(directives: CacheDirectives) -> dict[str, str]:
    """Build the ``Cache-Control`` and ``Vary`` headers for a response.

    Negative max-ages are treated as zero. ``s-maxage`` is never emitted for
    private responses, and the directive list always ends with exactly one
    of ``private`` or ``public``.
    """
    max_age_cdn = max(directives.max_age_cdn, 0)
    max_age_browser = max(directives.max_age_browser, 0)

    parts: list[str] = []
    if max_age_cdn and not directives.private:
        parts.append(f"s-maxage={max_age_cdn}")
    if max_age_browser:
        parts.append(f"max-age={max_age_browser}")
    parts.append("must-revalidate")
    parts.append("private" if directives.private else "public")

    headers = {CACHE_CONTROL: ", ".join(parts)}

    vary = normalize_vary(directives.vary)
    if vary:
        headers[VARY] = ", ".join(vary)

    return headers


def resolve_directives(
    defaults: CacheDirectives,
    *layers: CacheOverrides | None,
) -> CacheDirectives:
    """Resolve directives field by field, later layers winning.

    Typically called as ``resolve_directives(defaults, client, per_call)``.
    A field left at UNSET falls through to the previous layer. The merge is
    shallow: a vary override replaces the inherited list.
    """
    max_age_cdn = defaults.max_age_cdn
    max_age_browser = defaults.max_age_browser
    vary = defaults.vary
    private = defaults.private

    for layer in layers:
        if layer is None:
            continue
        if layer.max_age_cdn is not UNSET:
            max_age_cdn = parse_duration(layer.max_age_cdn)
        if layer.max_age_browser is not UNSET:
            max_age_browser = parse_duration(layer.max_age_browser)
        if layer.vary is not UNSET:
            vary = normalize_vary(layer.vary)
        if layer.private is not UNSET:
            private = bool(layer.private)

    return CacheDirectives(
        max_age_cdn=max_age_cdn,
        max_age_browser=max_age_browser,
        vary=vary,
        private=private,
    )
