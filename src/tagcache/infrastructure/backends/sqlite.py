"""SQLite cache backend implementation."""

import logging
import sqlite3
import threading
import time
from collections.abc import Callable, Iterable, Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from tagcache.core.entities.cache_entry import CacheEntry
from tagcache.core.exceptions import StorageError

logger = logging.getLogger(__name__)

MEMORY_DATABASE = ":memory:"

_SCHEMA = (
    # Main data table
    """
    CREATE TABLE cache_data (
        key TEXT PRIMARY KEY,
        value BLOB NOT NULL,
        expires REAL NOT NULL
    )
    """,
    # Tags table, rows go away with their entry
    """
    CREATE TABLE cache_tags (
        tag TEXT NOT NULL,
        key TEXT NOT NULL,
        PRIMARY KEY (tag, key),
        FOREIGN KEY (key) REFERENCES cache_data(key) ON DELETE CASCADE
    )
    """,
    "CREATE INDEX idx_expires ON cache_data (expires)",
    "CREATE INDEX idx_tag ON cache_tags (tag, key)",
    # Lets the cascade find a key's tag rows without a full scan
    "CREATE INDEX idx_tag_key ON cache_tags (key)",
)


class SqliteCacheBackend:
    """Persistent cache backend keeping everything in one SQLite file.

    Entries live in ``cache_data`` and tag associations in ``cache_tags``.
    A foreign key with ``ON DELETE CASCADE`` guarantees that deleting an
    entry deletes its tag rows, so the tag index can never point at a
    missing entry. Every logical operation runs in one transaction.

    Key and tag prefixes are matched with ``substr()`` rather than
    ``LIKE``, which would fold ASCII case and treat ``_`` and ``%`` as
    wildcards.
    """

    def __init__(
        self,
        path: str | Path,
        clean_on_open: bool = False,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Open (and if needed initialize) the database.

        Args:
            path: Database file, or ``":memory:"`` for a private
                in-process database.
            clean_on_open: Sweep expired entries right after opening.
                The caller decides; see ``CacheConfig.should_clean``.
            clock: Source of the current time in POSIX seconds.

        Raises:
            StorageError: If the database cannot be opened.
        """
        self._path = str(path)
        self._clock = clock
        self._lock = threading.RLock()
        self._conn = self._connect(self._path)
        if clean_on_open:
            removed = self.purge_expired()
            logger.debug("Swept %d expired entries from %s on open", removed, self._path)

    @property
    def path(self) -> str:
        """Return the database location."""
        return self._path

    def now(self) -> float:
        """Return the current time."""
        return self._clock()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Run the block in one immediate transaction.

        A block nested in an open transaction joins it. Any exception
        rolls the whole transaction back and propagates.
        """
        with self._lock:
            if self._conn.in_transaction:
                yield
                return
            self._execute("BEGIN IMMEDIATE")
            try:
                yield
            except BaseException:
                self._finish(self._conn.rollback)
                raise
            self._finish(self._conn.commit)

    def load(self, key: str) -> bytes | None:
        """Return the stored value, or None if missing or expired."""
        with self._lock:
            row = self._execute(
                "SELECT value FROM cache_data WHERE key = ? AND expires > ?",
                (key, self.now()),
            ).fetchone()
        return bytes(row[0]) if row is not None else None

    def contains(self, key: str) -> bool:
        """Check for a live entry."""
        with self._lock:
            row = self._execute(
                "SELECT 1 FROM cache_data WHERE key = ? AND expires > ? LIMIT 1",
                (key, self.now()),
            ).fetchone()
        return row is not None

    def store(self, entry: CacheEntry) -> None:
        """Upsert the entry row and replace its tag rows."""
        with self.transaction():
            # REPLACE would not reliably fire the cascade, so drop tags first
            self._execute("DELETE FROM cache_tags WHERE key = ?", (entry.key,))
            self._execute(
                """
                INSERT INTO cache_data (key, value, expires) VALUES (?, ?, ?)
                ON CONFLICT (key) DO UPDATE
                SET value = excluded.value, expires = excluded.expires
                """,
                (entry.key, entry.value, entry.expires_at),
            )
            self._executemany(
                "INSERT OR IGNORE INTO cache_tags (tag, key) VALUES (?, ?)",
                [(tag, entry.key) for tag in entry.tags],
            )

    def keys_with_prefix(self, prefix: str) -> list[str]:
        """List stored keys starting with ``prefix``."""
        return self._column(
            "SELECT key FROM cache_data WHERE substr(key, 1, ?) = ?",
            (len(prefix), prefix),
        )

    def keys_with_tag(self, tag: str) -> list[str]:
        """List keys associated with exactly ``tag``."""
        return self._column("SELECT key FROM cache_tags WHERE tag = ?", (tag,))

    def keys_with_tag_prefix(self, prefix: str) -> list[str]:
        """List keys associated with any tag starting with ``prefix``."""
        return self._column(
            "SELECT DISTINCT key FROM cache_tags WHERE substr(tag, 1, ?) = ?",
            (len(prefix), prefix),
        )

    def remove(self, keys: Iterable[str]) -> int:
        """Delete entries; the cascade deletes their tag rows."""
        with self.transaction():
            cursor = self._executemany(
                "DELETE FROM cache_data WHERE key = ?",
                [(key,) for key in set(keys)],
            )
        return max(cursor.rowcount, 0)

    def purge_expired(self) -> int:
        """Delete every expired entry and its tag rows."""
        with self.transaction():
            cursor = self._execute(
                "DELETE FROM cache_data WHERE expires <= ?", (self.now(),)
            )
        return cursor.rowcount

    def flush(self) -> None:
        """Delete all entries and tag rows."""
        with self.transaction():
            self._execute("DELETE FROM cache_tags")
            self._execute("DELETE FROM cache_data")

    def compact(self) -> None:
        """Rebuild the database file, reclaiming unused space.

        WARNING: This can be slow and locks the database while it runs.
        It cannot run inside a transaction.
        """
        with self._lock:
            logger.debug("Vacuuming %s", self._path)
            self._execute("VACUUM")

    def close(self) -> None:
        """Close the connection."""
        with self._lock:
            logger.debug("Closing SQLite cache %s", self._path)
            self._conn.close()

    def _connect(self, path: str) -> sqlite3.Connection:
        """Create and configure the connection, creating the schema if needed."""
        if path != MEMORY_DATABASE:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
        try:
            # Autocommit mode: transactions are opened explicitly
            conn = sqlite3.connect(path, isolation_level=None, check_same_thread=False)
            # Enable foreign keys (required for cascading deletes)
            conn.execute("PRAGMA foreign_keys = ON")
            # WAL mode for better concurrency
            conn.execute("PRAGMA journal_mode = WAL")
            conn.execute("PRAGMA synchronous = NORMAL")
            conn.execute("PRAGMA temp_store = MEMORY")
            existing = conn.execute(
                "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = 'cache_data'"
            ).fetchone()
            if existing is None:
                logger.debug("Initializing cache schema in %s", path)
                conn.execute("BEGIN IMMEDIATE")
                for statement in _SCHEMA:
                    conn.execute(statement)
                conn.execute("COMMIT")
        except sqlite3.Error as e:
            raise StorageError(f"Failed to open SQLite cache {path}: {e}") from e
        logger.debug("Opened SQLite cache %s", path)
        return conn

    def _execute(self, sql: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        try:
            return self._conn.execute(sql, params)
        except sqlite3.Error as e:
            raise StorageError(f"SQLite operation failed: {e}") from e

    def _executemany(
        self, sql: str, params: Iterable[Sequence[Any]]
    ) -> sqlite3.Cursor:
        try:
            return self._conn.executemany(sql, params)
        except sqlite3.Error as e:
            raise StorageError(f"SQLite operation failed: {e}") from e

    def _column(self, sql: str, params: Sequence[Any]) -> list[str]:
        with self._lock:
            return [row[0] for row in self._execute(sql, params).fetchall()]

    def _finish(self, action: Callable[[], None]) -> None:
        try:
            action()
        except sqlite3.Error as e:
            raise StorageError(f"SQLite transaction failed: {e}") from e

    def __repr__(self) -> str:
        return f"SqliteCacheBackend(path={self._path!r})"
