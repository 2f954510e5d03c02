"""Error types for purge operations.

Every error carries a ``tag`` naming its kind, a human readable ``message``
and an optional underlying ``cause``. ``PurgeClient.purge_cache`` returns
these inside a ``PurgeResult`` rather than raising them.
"""

from __future__ import annotations

from typing import ClassVar


class PurgeError(Exception):
    """Base class for purge-related errors."""

    tag: ClassVar[str] = "PurgeError"

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class PurgeArgumentError(PurgeError):
    """Invalid arguments, or tag context used outside an active scope."""

    tag: ClassVar[str] = "PurgeArgumentError"


class PurgeProviderError(PurgeError):
    """The bound CDN provider failed to purge."""

    tag: ClassVar[str] = "PurgeProviderError"


class PurgeFetchError(PurgeProviderError):
    """An HTTP request to a CDN API failed."""

    tag: ClassVar[str] = "PurgeFetchError"

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.url = url
        self.status_code = status_code


class PurgeDecodeError(PurgeError):
    """A provider could not decode a CDN API response."""

    tag: ClassVar[str] = "PurgeDecodeError"
