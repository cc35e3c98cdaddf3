"""Cache entry entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CacheEntry:
    """Immutable cache entry value object.

    Represents one stored item: the serialized value, its absolute
    expiration time and the tags it was last set with.
    """

    key: str
    value: bytes
    expires_at: float
    tags: tuple[str, ...] = ()

    @classmethod
    def create(
        cls,
        key: str,
        value: bytes,
        now: float,
        ttl: float,
        tags: tuple[str, ...] = (),
    ) -> "CacheEntry":
        """Factory method to create a new cache entry.

        Args:
            key: The cache key.
            value: The serialized value.
            now: Current time in POSIX seconds.
            ttl: Time-to-live in seconds.
            tags: De-duplicated tags to associate with the key.

        Returns:
            A new CacheEntry instance.
        """
        return cls(key=key, value=value, expires_at=now + ttl, tags=tags)
