"""Cache backend interface."""

from collections.abc import Iterable
from contextlib import AbstractContextManager
from typing import Protocol

from tagcache.core.entities.cache_entry import CacheEntry


class ICacheBackend(Protocol):
    """Contract for cache storage backends.

    A backend stores ``(key -> value, expiration)`` pairs plus a
    ``(tag -> keys)`` index. Removing an entry always removes its tag
    rows. Calls made inside ``transaction()`` apply atomically.
    """

    def now(self) -> float:
        """Return the backend's current time in POSIX seconds."""
        ...

    def transaction(self) -> AbstractContextManager[None]:
        """Group the calls made inside the block into one atomic unit.

        Transactions are re-entrant: a nested block joins the outer one.
        """
        ...

    def load(self, key: str) -> bytes | None:
        """Retrieve a stored value by key.

        Args:
            key: The cache key to retrieve.

        Returns:
            The serialized value, or None if not found or expired.
        """
        ...

    def contains(self, key: str) -> bool:
        """Check if an unexpired entry exists for ``key``."""
        ...

    def store(self, entry: CacheEntry) -> None:
        """Insert or replace an entry and replace its tag rows.

        Args:
            entry: The entry to store. Its tags are already de-duplicated.
        """
        ...

    def keys_with_prefix(self, prefix: str) -> list[str]:
        """List stored keys starting with ``prefix`` (case-sensitive)."""
        ...

    def keys_with_tag(self, tag: str) -> list[str]:
        """List keys associated with exactly ``tag``."""
        ...

    def keys_with_tag_prefix(self, prefix: str) -> list[str]:
        """List keys associated with any tag starting with ``prefix``.

        Matching is case-sensitive and has no wildcards. A key carrying
        several matching tags is listed once.
        """
        ...

    def remove(self, keys: Iterable[str]) -> int:
        """Delete entries and all of their tag rows.

        Args:
            keys: Keys to delete. Missing keys are ignored.

        Returns:
            Number of entries deleted.
        """
        ...

    def purge_expired(self) -> int:
        """Delete every expired entry. Returns the number deleted."""
        ...

    def flush(self) -> None:
        """Delete all entries and tag rows."""
        ...

    def compact(self) -> None:
        """Reclaim unused storage space, if the backend has any."""
        ...

    def close(self) -> None:
        """Release resources held by the backend."""
        ...
