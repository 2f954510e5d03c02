"""Outcome value returned by purge operations."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from tagpurge.errors import PurgeError
from tagpurge.types import Tag


@dataclass(frozen=True, slots=True)
class PurgeResult:
    """Success or failure of a purge, with the tags it concerned."""

    tags: tuple[Tag, ...] = ()
    error: PurgeError | None = None

    @classmethod
    def success(cls, tags: Iterable[Tag] = ()) -> PurgeResult:
        return cls(tags=tuple(tags))

    @classmethod
    def failure(cls, error: PurgeError, tags: Iterable[Tag] = ()) -> PurgeResult:
        return cls(tags=tuple(tags), error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> None:
        """Raise the carried error, if any."""
        if self.error is not None:
            raise self.error

    def __bool__(self) -> bool:
        return self.ok
