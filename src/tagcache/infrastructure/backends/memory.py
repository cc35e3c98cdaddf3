"""In-memory cache backend implementation."""

import logging
import math
import threading
import time
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from typing import Any

from cachetools import TLRUCache  # type: ignore[import-untyped]

from tagcache.core.entities.cache_entry import CacheEntry

logger = logging.getLogger(__name__)


def _entry_expiry(key: str, entry: CacheEntry, now: float) -> float:
    return entry.expires_at


class _EntryCache(TLRUCache):
    """TLRUCache that reports the keys it expires on its own.

    cachetools drops expired items whenever a new item is inserted. The
    callback lets the backend drop their tag rows at the same time.
    """

    def __init__(
        self,
        timer: Callable[[], float],
        on_expire: Callable[[str], None],
    ) -> None:
        super().__init__(maxsize=math.inf, ttu=_entry_expiry, timer=timer)
        self._on_expire = on_expire

    def expire(self, time: Any = None) -> list[tuple[str, CacheEntry]]:
        expired = super().expire(time)
        for key, _entry in expired:
            self._on_expire(key)
        return expired


class InMemoryCacheBackend:
    """Non-persistent cache backend.

    Entries live in a cachetools ``TLRUCache`` whose per-item expiry is
    the entry's ``expires_at``. The size is unbounded, so nothing is ever
    evicted to make room. Tags are kept in a bidirectional index
    (tag -> keys, key -> tags) so overwrites and deletes can drop a key's
    old associations without scanning every tag.

    A single re-entrant lock makes every call, and every transaction,
    exclusive. Suitable for sharing between threads of one process.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        """Initialize the in-memory backend.

        Args:
            clock: Source of the current time in POSIX seconds.
        """
        self._clock = clock
        self._lock = threading.RLock()
        self._entries = _EntryCache(timer=clock, on_expire=self._drop_tags)
        # Every stored key, live or expired-but-not-purged, maps to its tags
        self._key_tags: dict[str, set[str]] = {}
        self._tags: dict[str, set[str]] = {}

    def now(self) -> float:
        """Return the current time."""
        return self._clock()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Hold the backend lock for the duration of the block."""
        with self._lock:
            yield

    def load(self, key: str) -> bytes | None:
        """Return the stored value, or None if missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
            return entry.value if entry is not None else None

    def contains(self, key: str) -> bool:
        """Check for a live entry without touching any state."""
        with self._lock:
            return key in self._entries

    def store(self, entry: CacheEntry) -> None:
        """Replace the entry for ``entry.key`` together with its tags."""
        with self._lock:
            self._discard(entry.key)
            self._entries[entry.key] = entry
            # TLRUCache silently skips items that are already expired
            if entry.key not in self._entries:
                return
            self._key_tags[entry.key] = set(entry.tags)
            for tag in entry.tags:
                self._tags.setdefault(tag, set()).add(entry.key)

    def keys_with_prefix(self, prefix: str) -> list[str]:
        """List stored keys starting with ``prefix``."""
        with self._lock:
            return [key for key in self._key_tags if key.startswith(prefix)]

    def keys_with_tag(self, tag: str) -> list[str]:
        """List keys associated with exactly ``tag``."""
        with self._lock:
            return list(self._tags.get(tag, ()))

    def keys_with_tag_prefix(self, prefix: str) -> list[str]:
        """List keys associated with any tag starting with ``prefix``."""
        with self._lock:
            keys: set[str] = set()
            for tag, tagged in self._tags.items():
                if tag.startswith(prefix):
                    keys.update(tagged)
            return list(keys)

    def remove(self, keys: Iterable[str]) -> int:
        """Delete entries and their tags. Returns how many were stored."""
        with self._lock:
            return sum(self._discard(key) for key in set(keys))

    def purge_expired(self) -> int:
        """Delete every expired entry and its tags."""
        with self._lock:
            return len(self._entries.expire())

    def flush(self) -> None:
        """Delete all entries and tags."""
        with self._lock:
            self._entries = _EntryCache(timer=self._clock, on_expire=self._drop_tags)
            self._key_tags = {}
            self._tags = {}

    def compact(self) -> None:
        """Nothing to reclaim for an in-memory store."""
        logger.debug("compact() is a no-op for the in-memory backend")

    def close(self) -> None:
        """Nothing to release for an in-memory store."""
        pass

    def _discard(self, key: str) -> bool:
        """Remove one key and its tags. Returns True if it was stored."""
        if key not in self._key_tags:
            return False
        self._drop_tags(key)
        try:
            del self._entries[key]
        except KeyError:
            # TLRUCache removes expired items but still raises
            pass
        return True

    def _drop_tags(self, key: str) -> None:
        for tag in self._key_tags.pop(key, ()):
            tagged = self._tags.get(tag)
            if tagged is None:
                continue
            tagged.discard(key)
            if not tagged:
                del self._tags[tag]

    def __len__(self) -> int:
        """Return the number of live entries."""
        with self._lock:
            return sum(1 for key in self._key_tags if key in self._entries)

    def __repr__(self) -> str:
        return f"InMemoryCacheBackend(entries={len(self)}, tags={len(self._tags)})"
