"""Function decorators built on the cache contract.

``@cached`` stores a function's result through ``get`` with a producer,
so the function only runs on a miss. ``@invalidates`` clears tags after
the decorated function returns. Both work with any ``ICache``: an
engine or a namespace.
"""

import functools
import hashlib
import inspect
import json
import re
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from tagcache.core.interfaces.cache import TTL, ICache
from tagcache.utils.paths import join_key

F = TypeVar("F", bound=Callable[..., Any])

_PLACEHOLDER = re.compile(r"\{(\w+)\}")

# Module-level cache reference
_cache: ICache | None = None


def configure(cache: ICache | None) -> None:
    """Set the cache used by decorators that were not given one.

    Args:
        cache: The cache to use, or None to disable decorator caching.

    Example:
        configure(CacheEngine.sqlite("var/cache.db").namespace("functions"))
    """
    global _cache
    _cache = cache


def get_cache() -> ICache | None:
    """Get the configured cache.

    Returns:
        The configured cache, or None if not configured.
    """
    return _cache


def cached(
    key: str | Callable[..., str] | None = None,
    ttl: TTL | None = None,
    tags: Iterable[str] | None = None,
    cache: ICache | None = None,
) -> Callable[[F], F]:
    """Decorator for caching function results.

    On a miss the function runs once and its result is stored; on a hit
    it does not run at all. Without a cache (neither passed nor
    configured) the function is simply called.

    Args:
        key: Cache key. A string may contain ``{arg_name}`` placeholders;
            a callable receives the call's arguments. Defaults to
            ``module.qualname/<hash of arguments>``, so all results of one
            function sit under one key and can be dropped with a
            recursive delete.
        ttl: Time-to-live for stored results. None uses the cache default.
        tags: Tags for stored results. Supports ``{arg_name}`` placeholders.
        cache: Cache to use instead of the configured one.

    Returns:
        Decorated function.

    Example:
        @cached(key="user/{user_id}", tags=["users", "user/{user_id}"])
        def load_user(user_id: int) -> dict:
            return db.fetch_user(user_id)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            target = cache if cache is not None else _cache
            if target is None:
                return func(*args, **kwargs)

            arguments = _bind_arguments(func, args, kwargs)
            return target.get(
                _build_cache_key(func, args, kwargs, arguments, key),
                lambda: func(*args, **kwargs),
                ttl=ttl,
                tags=_resolve_tags(tags, arguments),
            )

        return wrapper  # type: ignore

    return decorator


def invalidates(
    tags: Iterable[str],
    recursive: bool = False,
    cache: ICache | None = None,
) -> Callable[[F], F]:
    """Decorator for clearing tags after a function succeeds.

    The tags are cleared only if the function returns normally.

    Args:
        tags: Tags to clear. Supports ``{arg_name}`` placeholders.
        recursive: Also clear tags nested under these ones.
        cache: Cache to use instead of the configured one.

    Returns:
        Decorated function.

    Example:
        @invalidates(tags=["user/{user_id}"], recursive=True)
        def update_user(user_id: int, data: dict) -> None:
            db.update_user(user_id, data)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            # Execute function first
            result = func(*args, **kwargs)

            target = cache if cache is not None else _cache
            if target is not None:
                arguments = _bind_arguments(func, args, kwargs)
                target.clear(_resolve_tags(tags, arguments), recursive=recursive)

            return result

        return wrapper  # type: ignore

    return decorator


def _bind_arguments(
    func: Callable[..., Any],
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> dict[str, Any]:
    """Map every argument of a call, positional ones included, to its name."""
    try:
        bound = inspect.signature(func).bind(*args, **kwargs)
    except (TypeError, ValueError):
        return dict(kwargs)
    bound.apply_defaults()
    return dict(bound.arguments)


def _build_cache_key(
    func: Callable[..., Any],
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
    arguments: dict[str, Any],
    custom_key: str | Callable[..., str] | None,
) -> str:
    """Build cache key for a function call.

    Args:
        func: The function being cached.
        args: Positional arguments.
        kwargs: Keyword arguments.
        arguments: All arguments by name.
        custom_key: Custom key or key builder function.

    Returns:
        The cache key string.
    """
    if custom_key is not None:
        if callable(custom_key):
            return custom_key(*args, **kwargs)
        return _interpolate_string(custom_key, arguments)

    return join_key(f"{func.__module__}.{func.__qualname__}", _hash_value(arguments))


def _resolve_tags(
    tags: Iterable[str] | None,
    arguments: dict[str, Any],
) -> list[str]:
    """Resolve tags with argument interpolation."""
    if not tags:
        return []
    return [_interpolate_string(tag, arguments) for tag in tags]


def _interpolate_string(template: str, arguments: dict[str, Any]) -> str:
    """Interpolate {arg_name} placeholders in string.

    Unknown placeholders are kept as they are.
    """

    def replacer(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in arguments:
            return str(arguments[name])
        return match.group(0)

    return _PLACEHOLDER.sub(replacer, template)


def _hash_value(value: Any) -> str:
    """Create a short deterministic hash (first 16 chars of SHA-256)."""
    normalized = json.dumps(value, sort_keys=True, default=str)
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]
