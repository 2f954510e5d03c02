"""Core types for tagpurge."""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Final, Literal, TypeAlias

# Opaque, case-sensitive cache tag
Tag: TypeAlias = str

# Duration type alias
Duration = str | int  # "30s", "5m", "2h", "1d" or seconds

DEFAULT_MAX_AGE_CDN: Final = 3_153_536_000  # ~100 years, effectively forever
DEFAULT_MAX_AGE_BROWSER: Final = 0
DEFAULT_VARY: Final = ("Accept-Encoding",)


class _Unset(Enum):
    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


# Marks an override field as "not provided, inherit from the next tier"
UNSET: Final = _Unset.UNSET
Unset: TypeAlias = Literal[_Unset.UNSET]

VaryInput = str | Sequence[str] | None


def normalize_vary(vary: VaryInput) -> tuple[str, ...]:
    """Normalize a vary value to a tuple of header names.

    ``None`` and empty sequences mean "no Vary header". A single string is a
    one-element list.
    """
    if vary is None:
        return ()
    if isinstance(vary, str):
        vary = (vary,)
    return tuple(name for name in vary if name)


@dataclass(frozen=True, slots=True)
class CacheDirectives:
    """Fully resolved cache-control options for one response."""

    max_age_cdn: int = DEFAULT_MAX_AGE_CDN
    max_age_browser: int = DEFAULT_MAX_AGE_BROWSER
    vary: tuple[str, ...] = DEFAULT_VARY
    private: bool = False


@dataclass(frozen=True, slots=True)
class CacheOverrides:
    """Partial directives; every field left at UNSET is inherited.

    ``vary=None`` (or an empty sequence) is an explicit request for no Vary
    header and is distinct from UNSET.
    """

    max_age_cdn: Duration | Unset = UNSET
    max_age_browser: Duration | Unset = UNSET
    vary: VaryInput | Unset = UNSET
    private: bool | Unset = UNSET

    def is_empty(self) -> bool:
        """Return True when no field is set."""
        return (
            self.max_age_cdn is UNSET
            and self.max_age_browser is UNSET
            and self.vary is UNSET
            and self.private is UNSET
        )
