"""JSON serializer implementation."""

import json
from datetime import date, datetime
from typing import Any

from tagcache.core.exceptions import SerializationError

__all__ = ["JsonSerializer", "SerializationError"]

_DATETIME = "__datetime__"
_DATE = "__date__"
# Wraps user mappings that would otherwise read back as a marker
_MAPPING = "__mapping__"
_MARKERS = frozenset({_DATETIME, _DATE, _MAPPING})


class JsonSerializer:
    """JSON serializer for cache values.

    Handles scalars, None, booleans, nested dicts and lists. Floats keep
    their full precision. ``datetime`` and ``date`` objects are tagged on
    the way in and restored on the way out. A user mapping whose single
    key is one of the marker names is escaped, so it reads back as the
    same mapping.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        """Initialize the JSON serializer.

        Args:
            encoding: Character encoding to use.
        """
        self._encoding = encoding

    def serialize(self, value: Any) -> bytes:
        """Serialize value to bytes.

        Args:
            value: The Python object to serialize.

        Returns:
            The serialized value as bytes.

        Raises:
            SerializationError: If the value cannot be serialized.
        """
        try:
            json_str = json.dumps(self._escape(value), default=self._default_encoder)
            return json_str.encode(self._encoding)
        except (TypeError, ValueError, RecursionError) as e:
            raise SerializationError(f"Failed to serialize value: {e}") from e

    def deserialize(self, data: bytes) -> Any:
        """Deserialize bytes to value.

        Args:
            data: The bytes to deserialize.

        Returns:
            The deserialized Python object.

        Raises:
            SerializationError: If the data cannot be deserialized.
        """
        try:
            json_str = data.decode(self._encoding)
            return json.loads(json_str, object_hook=self._object_hook)
        # JSONDecodeError, UnicodeDecodeError and bad ISO dates are all ValueErrors
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Failed to deserialize data: {e}") from e

    def _default_encoder(self, obj: Any) -> Any:
        """Custom encoder for non-JSON-serializable types.

        Args:
            obj: The object to encode.

        Returns:
            A JSON-serializable representation of the object.

        Raises:
            TypeError: If the object cannot be encoded.
        """
        if isinstance(obj, datetime):
            return {_DATETIME: obj.isoformat()}
        if isinstance(obj, date):
            return {_DATE: obj.isoformat()}
        raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")

    def _escape(self, value: Any) -> Any:
        """Wrap mappings that are shaped like a marker, at any depth."""
        if isinstance(value, dict):
            escaped = {key: self._escape(item) for key, item in value.items()}
            if len(escaped) == 1 and next(iter(escaped)) in _MARKERS:
                # A list of pairs is not a dict, so the hook leaves it alone
                return {_MAPPING: [[key, item] for key, item in escaped.items()]}
            return escaped
        if isinstance(value, (list, tuple)):
            return [self._escape(item) for item in value]
        return value

    def _object_hook(self, obj: dict[str, Any]) -> Any:
        """Restore values tagged by ``_default_encoder`` and ``_escape``."""
        if len(obj) == 1:
            if _MAPPING in obj:
                return dict(obj[_MAPPING])
            if _DATETIME in obj:
                return datetime.fromisoformat(obj[_DATETIME])
            if _DATE in obj:
                return date.fromisoformat(obj[_DATE])
        return obj
