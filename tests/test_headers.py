"""Tests for Cache-Control / Vary synthesis and directive resolution."""

import itertools

import pytest

from tagpurge import (
    UNSET,
    CacheDirectives,
    CacheOverrides,
    build_common_headers,
    resolve_directives,
)
from tagpurge.types import DEFAULT_MAX_AGE_CDN


class TestBuildCommonHeaders:
    """Tests for build_common_headers."""

    def test_defaults(self) -> None:
        """Test headers for library defaults."""
        headers = build_common_headers(CacheDirectives())
        assert headers == {
            "Cache-Control": f"s-maxage={DEFAULT_MAX_AGE_CDN}, must-revalidate, public",
            "Vary": "Accept-Encoding",
        }

    @pytest.mark.parametrize(
        ("directives", "expected"),
        [
            (
                CacheDirectives(max_age_cdn=86400, max_age_browser=3600, private=True),
                "max-age=3600, must-revalidate, private",
            ),
            (
                CacheDirectives(max_age_cdn=0, max_age_browser=0),
                "must-revalidate, public",
            ),
            (
                CacheDirectives(max_age_cdn=0, max_age_browser=3600),
                "max-age=3600, must-revalidate, public",
            ),
            (
                CacheDirectives(max_age_cdn=86400, max_age_browser=0),
                "s-maxage=86400, must-revalidate, public",
            ),
            (
                CacheDirectives(max_age_cdn=86400, max_age_browser=3600),
                "s-maxage=86400, max-age=3600, must-revalidate, public",
            ),
        ],
        ids=["private", "zero", "browser-only", "cdn-only", "both"],
    )
    def test_cache_control(self, directives: CacheDirectives, expected: str) -> None:
        """Test Cache-Control directive ordering and filtering."""
        assert build_common_headers(directives)["Cache-Control"] == expected

    def test_negative_ages_are_clamped(self) -> None:
        """Test that negative ages behave like zero."""
        headers = build_common_headers(
            CacheDirectives(max_age_cdn=-10, max_age_browser=-1)
        )
        assert headers["Cache-Control"] == "must-revalidate, public"

    def test_cache_control_invariants(self) -> None:
        """Test invariants over a grid of directive combinations."""
        for cdn, browser, private in itertools.product(
            (-1, 0, 1, 86400), (-1, 0, 60), (True, False)
        ):
            value = build_common_headers(
                CacheDirectives(
                    max_age_cdn=cdn, max_age_browser=browser, private=private
                )
            )["Cache-Control"]
            parts = value.split(", ")
            assert parts[-1] == ("private" if private else "public")
            assert parts.count("private") + parts.count("public") == 1
            assert "must-revalidate" in parts
            if private:
                assert "s-maxage" not in value

    def test_vary_order_preserved(self) -> None:
        """Test that vary header names keep caller order."""
        headers = build_common_headers(CacheDirectives(vary=("B", "A", "C")))
        assert headers["Vary"] == "B, A, C"

    def test_no_vary_key_when_empty(self) -> None:
        """Test that an empty vary list omits the header entirely."""
        headers = build_common_headers(CacheDirectives(vary=()))
        assert "Vary" not in headers

    def test_pure(self) -> None:
        """Test that repeated calls give equal, independent results."""
        directives = CacheDirectives(max_age_browser=60)
        first = build_common_headers(directives)
        first["Cache-Control"] = "mutated"
        assert build_common_headers(directives)["Cache-Control"] != "mutated"


class TestResolveDirectives:
    """Tests for three-tier directive resolution."""

    def test_no_layers_returns_defaults(self) -> None:
        """Test that defaults pass through untouched."""
        defaults = CacheDirectives(max_age_browser=5)
        assert resolve_directives(defaults) == defaults
        assert resolve_directives(defaults, None, CacheOverrides()) == defaults

    def test_later_layer_wins_per_field(self) -> None:
        """Test field-wise precedence: per-call > client > defaults."""
        client = CacheOverrides(max_age_cdn=86400, max_age_browser=3600)
        per_call = CacheOverrides(max_age_browser=60)
        resolved = resolve_directives(CacheDirectives(), client, per_call)
        assert resolved.max_age_cdn == 86400
        assert resolved.max_age_browser == 60
        assert resolved.vary == ("Accept-Encoding",)
        assert resolved.private is False

    def test_durations_are_parsed(self) -> None:
        """Test that duration strings are accepted in overrides."""
        resolved = resolve_directives(
            CacheDirectives(), CacheOverrides(max_age_cdn="1d", max_age_browser="5m")
        )
        assert resolved.max_age_cdn == 86_400
        assert resolved.max_age_browser == 300

    def test_vary_replaces_not_concatenates(self) -> None:
        """Test that vary overrides replace the inherited list."""
        client = CacheOverrides(vary=["Accept-Language", "User-Agent"])
        per_call = CacheOverrides(vary="Cookie")
        resolved = resolve_directives(CacheDirectives(), client, per_call)
        assert resolved.vary == ("Cookie",)

    def test_explicit_none_vary_suppresses(self) -> None:
        """Test that vary=None is distinct from UNSET."""
        suppressed = resolve_directives(CacheDirectives(), CacheOverrides(vary=None))
        inherited = resolve_directives(CacheDirectives(), CacheOverrides(vary=UNSET))
        assert suppressed.vary == ()
        assert inherited.vary == ("Accept-Encoding",)

    def test_explicit_empty_vary_suppresses(self) -> None:
        """Test that an empty vary list suppresses the header."""
        resolved = resolve_directives(
            CacheDirectives(), CacheOverrides(vary=["A"]), CacheOverrides(vary=[])
        )
        assert "Vary" not in build_common_headers(resolved)

    def test_explicit_false_overrides_true(self) -> None:
        """Test that falsy explicit values still override."""
        resolved = resolve_directives(
            CacheDirectives(),
            CacheOverrides(private=True, max_age_browser=60),
            CacheOverrides(private=False, max_age_browser=0),
        )
        assert resolved.private is False
        assert resolved.max_age_browser == 0

    def test_invalid_duration_raises(self) -> None:
        """Test that malformed duration strings are rejected."""
        with pytest.raises(ValueError, match="Invalid duration"):
            resolve_directives(CacheDirectives(), CacheOverrides(max_age_cdn="soon"))


class TestCacheOverrides:
    """Tests for the CacheOverrides helper."""

    def test_is_empty(self) -> None:
        """Test is_empty distinguishes UNSET from falsy values."""
        assert CacheOverrides().is_empty()
        assert not CacheOverrides(vary=None).is_empty()
        assert not CacheOverrides(private=False).is_empty()

    def test_unset_repr_and_truthiness(self) -> None:
        """Test the UNSET sentinel is falsy and readable."""
        assert not UNSET
        assert repr(UNSET) == "UNSET"
