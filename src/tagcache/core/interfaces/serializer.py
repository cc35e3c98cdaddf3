"""Value codec interface."""

from typing import Any, Protocol


class ISerializer(Protocol):
    """Contract for the codec that turns cached values into bytes.

    The engine serializes every value before handing it to a backend,
    so in-memory and persistent caches return equal copies rather than
    shared objects. ``deserialize(serialize(v))`` must equal ``v`` for
    every value shape the codec accepts.
    """

    def serialize(self, value: Any) -> bytes:
        """Encode a value for storage.

        Raises:
            SerializationError: If the value cannot be encoded.
        """
        ...

    def deserialize(self, data: bytes) -> Any:
        """Decode a stored value.

        Raises:
            SerializationError: If the data cannot be decoded.
        """
        ...
