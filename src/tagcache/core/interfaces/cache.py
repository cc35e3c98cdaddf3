"""Public cache contract."""

from collections.abc import Callable, Iterable
from datetime import timedelta
from typing import Any, Protocol

Tags = str | Iterable[str]
TTL = int | float | timedelta


class ICache(Protocol):
    """Contract shared by cache engines and namespaces.

    Both ``CacheEngine`` and ``CacheNamespace`` implement this protocol,
    so a namespace can wrap an engine or another namespace and callers
    never need to know which one they hold.
    """

    def get(
        self,
        key: str,
        default: Any | Callable[[], Any] = None,
        ttl: TTL | None = None,
        tags: Tags = (),
    ) -> Any:
        """Get an item, or cache and return ``default`` on a miss.

        Args:
            key: The cache key.
            default: Value to store on a miss. A zero-argument callable is
                invoked once per miss and never on a hit.
            ttl: TTL for the stored default. None uses the cache default.
            tags: Tags to associate with the stored default.

        Returns:
            The cached value, the stored default, or None.
        """
        ...

    def set(
        self,
        key: str,
        value: Any | Callable[[], Any],
        ttl: TTL | None = None,
        tags: Tags = (),
    ) -> Any:
        """Store an item, replacing its value, expiry and tags.

        Args:
            key: The cache key.
            value: The value, or a zero-argument callable producing it.
            ttl: Time-to-live. None uses the cache default.
            tags: Tags to associate with the item for later clearing.

        Returns:
            The concrete value that was stored.
        """
        ...

    def has(self, key: str) -> bool:
        """Check if an unexpired item exists for ``key``."""
        ...

    def delete(self, key: str, recursive: bool = False) -> "ICache":
        """Delete an item, and with ``recursive`` every item under ``key/``."""
        ...

    def clear(self, tags: Tags, recursive: bool = False) -> "ICache":
        """Delete every item associated with the given tag or tags.

        With ``recursive``, items tagged with a tag nested under one of
        the given tags (``tag/...``) are deleted as well.
        """
        ...

    def namespace(
        self,
        prefix: str,
        tags: Tags = (),
        ttl: TTL | None = None,
    ) -> "ICache":
        """Return a view of this cache whose keys live under ``prefix/``.

        Args:
            prefix: Namespace prefix. Empty means no key rewriting.
            tags: Tags added to every item set through the view.
            ttl: TTL used by the view when a call supplies none.

        Returns:
            A cache implementing this same contract.
        """
        ...
