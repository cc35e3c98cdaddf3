"""Helpers for hierarchical keys and tags."""

from collections.abc import Iterable
from datetime import timedelta

SEPARATOR = "/"


def join_key(prefix: str, key: str) -> str:
    """Join a namespace prefix and a key.

    An empty prefix leaves the key untouched. Nothing is trimmed or
    validated, so ``join_key("a/", "b")`` is ``"a//b"``.

    Args:
        prefix: The namespace prefix.
        key: The local key.

    Returns:
        The effective key.
    """
    if not prefix:
        return key
    return f"{prefix}{SEPARATOR}{key}"


def descendant_prefix(path: str) -> str:
    """Return the prefix shared by every key or tag nested under ``path``.

    ``"user"`` gives ``"user/"``, so ``"user1"`` is not a descendant.
    """
    return f"{path}{SEPARATOR}"


def normalize_tags(tags: str | Iterable[str] | None) -> tuple[str, ...]:
    """Turn a single tag or an iterable of tags into a de-duplicated tuple.

    First-seen order is preserved. The empty string is a valid tag.

    Args:
        tags: A tag, an iterable of tags, or None.

    Returns:
        The unique tags in order.
    """
    if tags is None:
        return ()
    if isinstance(tags, str):
        return (tags,)
    return tuple(dict.fromkeys(tags))


def merge_tags(
    inherited: Iterable[str],
    tags: str | Iterable[str] | None,
) -> tuple[str, ...]:
    """Union of inherited tags and call tags, inherited first, no duplicates."""
    return tuple(dict.fromkeys((*inherited, *normalize_tags(tags))))


def to_seconds(ttl: int | float | timedelta) -> float:
    """Coerce a TTL given as seconds or a timedelta to seconds."""
    if isinstance(ttl, timedelta):
        return ttl.total_seconds()
    return float(ttl)
