"""Value serializers."""

from tagcache.infrastructure.serializers.json import JsonSerializer

__all__ = ["JsonSerializer"]
