"""Exceptions raised by tagcache."""


class CacheError(Exception):
    """Base class for all tagcache errors."""

    pass


class SerializationError(CacheError):
    """Raised when serialization or deserialization fails."""

    pass


class StorageError(CacheError):
    """Raised when a storage backend fails to read or write.

    The original driver exception is always available as ``__cause__``.
    """

    pass
