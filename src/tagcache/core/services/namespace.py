"""Namespaced view over any cache."""

from collections.abc import Callable
from typing import Any

from tagcache.core.interfaces.cache import TTL, ICache, Tags
from tagcache.utils.paths import join_key, merge_tags, normalize_tags


class CacheNamespace:
    """A cache view that prefixes every key with ``prefix/``.

    The view wraps an engine or another namespace and holds no state of
    its own besides its prefix, tags and TTL. Tags given to the view are
    added to every item set through it; its TTL applies whenever a call
    supplies none. Nested namespaces compose their prefixes
    (``outer/inner/key``) and each level merges its own tags and TTL as
    the call passes through it.

    WARNING: ``clear()`` is not scoped to the namespace. Clearing a tag
    through a namespace deletes every item carrying that tag anywhere in
    the underlying cache, including items outside this prefix.

    Example:
        users = cache.namespace("user/123", tags="users", ttl=60)
        users.set("profile", {"name": "Alice"})
        cache.has("user/123/profile")  # True
    """

    def __init__(
        self,
        target: ICache,
        prefix: str,
        tags: Tags = (),
        ttl: TTL | None = None,
    ) -> None:
        """Wrap a cache.

        Args:
            target: The cache (engine or namespace) calls are forwarded to.
            prefix: Namespace prefix. Empty means keys pass through
                unchanged. Not validated: leading or trailing slashes are
                kept as-is.
            tags: Tags added to every item set through this view.
            ttl: TTL used when a call supplies none. None defers to the
                target.
        """
        self._target = target
        self._prefix = prefix
        self._tags = normalize_tags(tags)
        self._ttl = ttl

    @property
    def target(self) -> ICache:
        """Get the wrapped cache."""
        return self._target

    @property
    def prefix(self) -> str:
        """Get the namespace prefix."""
        return self._prefix

    @property
    def tags(self) -> tuple[str, ...]:
        """Get the tags this view adds to every item."""
        return self._tags

    @property
    def ttl(self) -> TTL | None:
        """Get the view's TTL."""
        return self._ttl

    def get(
        self,
        key: str,
        default: Any | Callable[[], Any] = None,
        ttl: TTL | None = None,
        tags: Tags = (),
    ) -> Any:
        """Get ``prefix/key``, storing ``default`` with the view's tags on a miss."""
        return self._target.get(
            self._key(key),
            default,
            ttl=self._effective_ttl(ttl),
            tags=merge_tags(self._tags, tags),
        )

    def set(
        self,
        key: str,
        value: Any | Callable[[], Any],
        ttl: TTL | None = None,
        tags: Tags = (),
    ) -> Any:
        """Set ``prefix/key`` with the view's tags added to ``tags``."""
        return self._target.set(
            self._key(key),
            value,
            ttl=self._effective_ttl(ttl),
            tags=merge_tags(self._tags, tags),
        )

    def has(self, key: str) -> bool:
        """Check ``prefix/key``."""
        return self._target.has(self._key(key))

    def delete(self, key: str, recursive: bool = False) -> "CacheNamespace":
        """Delete ``prefix/key`` (and with ``recursive`` everything under it)."""
        self._target.delete(self._key(key), recursive=recursive)
        return self

    def clear(self, tags: Tags, recursive: bool = False) -> "CacheNamespace":
        """Clear tags in the entire underlying cache.

        WARNING: This is not limited to this namespace. Every item
        associated with the given tags is deleted, wherever its key lives.

        Args:
            tags: A tag or tags.
            recursive: Also clear tags nested under these ones.

        Returns:
            This namespace.
        """
        self._target.clear(tags, recursive=recursive)
        return self

    def namespace(
        self,
        prefix: str,
        tags: Tags = (),
        ttl: TTL | None = None,
    ) -> "CacheNamespace":
        """Return a namespace nested inside this one.

        Keys become ``self.prefix/prefix/key``. The nested view's tags and
        TTL are its own; this view still adds its tags, and supplies its
        TTL when neither the call nor the nested view set one.
        """
        return CacheNamespace(self, prefix, tags=tags, ttl=ttl)

    def _key(self, key: str) -> str:
        return join_key(self._prefix, key)

    def _effective_ttl(self, ttl: TTL | None) -> TTL | None:
        return ttl if ttl is not None else self._ttl

    def __repr__(self) -> str:
        return f"CacheNamespace(prefix={self._prefix!r}, tags={self._tags!r}, ttl={self._ttl!r})"
