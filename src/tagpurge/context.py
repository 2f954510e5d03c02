"""Request-scoped cache tag collection.

Rendering code registers the tags of whatever it renders with
``cache_tags()``; the request middleware establishes a scope around the
whole request and reads the collected set at the end. Scopes live in a
``ContextVar``, so concurrent requests (asyncio tasks or threads) never see
each other's tags, and a scope survives every ``await`` inside it.

Usage:
    async def handler(request):
        post = await load_post(request.id)
        cache_tags(f"post:{post.id}", f"author:{post.author_id}")
        return render(post)

    with purge_context() as tags:
        response = await handler(request)
    headers = client.get_cache_headers(tags)
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Iterable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from functools import wraps
from typing import Any, ParamSpec, TypeVar

from tagpurge.errors import PurgeArgumentError
from tagpurge.types import Tag

P = ParamSpec("P")
R = TypeVar("R")

_current_tags: ContextVar[set[Tag] | None] = ContextVar(
    "tagpurge_current_tags", default=None
)


@contextmanager
def _bind(tags: set[Tag]) -> Iterator[set[Tag]]:
    token = _current_tags.set(tags)
    try:
        yield tags
    finally:
        _current_tags.reset(token)


def cache_tags(*tags: Tag) -> None:
    """Register tags with the current scope.

    Does nothing outside a scope, so instrumented code keeps working when it
    runs outside a request. Empty strings are ignored.
    """
    current = _current_tags.get()
    if current is None:
        return
    current.update(tag for tag in tags if tag)


@contextmanager
def purge_context() -> Iterator[set[Tag]]:
    """Establish a fresh tag scope for the body of the ``with`` block.

    Yields the scope's tag set. Nested scopes get their own set; tags added
    inside a nested scope are not copied to the outer one. The binding is
    released on exit, including on errors and cancellation.
    """
    with _bind(set()) as tags:
        yield tags


def create_purge_context(
    callback: Callable[P, R], /, *args: P.args, **kwargs: P.kwargs
) -> R:
    """Run ``callback`` inside a fresh tag scope and return its result.

    If the callback returns an awaitable (e.g. it is a coroutine function),
    an awaitable is returned that re-binds the same scope for the whole time
    it is being awaited.
    """
    with _bind(set()) as tags:
        result = callback(*args, **kwargs)
    if inspect.isawaitable(result):
        return _await_in_scope(result, tags)  # type: ignore[return-value]
    return result


async def _await_in_scope(awaitable: Awaitable[Any], tags: set[Tag]) -> Any:
    with _bind(tags):
        return await awaitable


def get_current_purge_context() -> set[Tag]:
    """Return the live tag set of the current scope.

    Raises:
        PurgeArgumentError: If called outside a scope.
    """
    current = _current_tags.get()
    if current is None:
        raise PurgeArgumentError(
            "No purge context found. Ensure you are running within a purge context."
        )
    return current


def has_purge_context() -> bool:
    """Whether a tag scope is active in the current context."""
    return _current_tags.get() is not None


TagSpec = Tag | Callable[..., Tag | Iterable[Tag]]


def cache_tagged(*specs: TagSpec) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Decorator registering tags every time the decorated function is called.

    Each spec is either a tag or a callable receiving the function's
    arguments and returning a tag or an iterable of tags.

    Example:
        @cache_tagged("posts", lambda post_id: f"post:{post_id}")
        async def load_post(post_id: str) -> Post: ...
    """

    def resolve(args: tuple[Any, ...], kwargs: dict[str, Any]) -> list[Tag]:
        tags: list[Tag] = []
        for spec in specs:
            if isinstance(spec, str):
                tags.append(spec)
                continue
            value = spec(*args, **kwargs)
            if isinstance(value, str):
                tags.append(value)
            else:
                tags.extend(value)
        return tags

    def decorator(fn: Callable[P, R]) -> Callable[P, R]:
        if inspect.iscoroutinefunction(fn):

            @wraps(fn)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> Any:
                if has_purge_context():
                    cache_tags(*resolve(args, kwargs))
                return await fn(*args, **kwargs)

            return async_wrapper  # type: ignore[return-value]

        @wraps(fn)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            if has_purge_context():
                cache_tags(*resolve(args, kwargs))
            return fn(*args, **kwargs)

        return wrapper

    return decorator
