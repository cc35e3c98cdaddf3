"""Tests for core entities."""

import random
from datetime import timedelta

import pytest

from tagcache.core.entities import CacheConfig, CacheEntry


class TestCacheEntry:
    """Tests for CacheEntry entity."""

    def test_create_cache_entry(self) -> None:
        """Test creating a cache entry with factory method."""
        entry = CacheEntry.create(
            key="user/1",
            value=b'{"id": 1}',
            now=1000.0,
            ttl=60.0,
            tags=("users", "users/1"),
        )

        assert entry.key == "user/1"
        assert entry.value == b'{"id": 1}'
        assert entry.expires_at == 1060.0
        assert entry.tags == ("users", "users/1")

    def test_cache_entry_immutable(self) -> None:
        """Test that CacheEntry is immutable."""
        entry = CacheEntry(key="k", value=b"1", expires_at=100.0)

        with pytest.raises(AttributeError):
            entry.key = "new_key"  # type: ignore


class TestCacheConfig:
    """Tests for CacheConfig entity."""

    def test_defaults(self) -> None:
        """Test default configuration values."""
        config = CacheConfig()

        assert config.default_ttl == 300
        assert config.cleanup_odds == 0

    def test_timedelta_ttl(self) -> None:
        """Test that a timedelta default TTL is kept as given."""
        config = CacheConfig(default_ttl=timedelta(minutes=10))

        assert config.default_ttl == timedelta(minutes=10)

    def test_negative_odds_rejected(self) -> None:
        """Test that negative cleanup odds are rejected."""
        with pytest.raises(ValueError):
            CacheConfig(cleanup_odds=-1)

    def test_should_clean_disabled(self) -> None:
        """Test that odds of 0 never trigger a sweep."""
        config = CacheConfig(cleanup_odds=0)

        assert not any(config.should_clean() for _ in range(50))

    def test_should_clean_always(self) -> None:
        """Test that odds of 1 always trigger a sweep."""
        config = CacheConfig(cleanup_odds=1)

        assert all(config.should_clean() for _ in range(50))

    def test_should_clean_with_rng(self) -> None:
        """Test that the decision follows the given generator."""
        config = CacheConfig(cleanup_odds=4)

        first = [config.should_clean(random.Random(7)) for _ in range(5)]
        second = [config.should_clean(random.Random(7)) for _ in range(5)]

        assert first == second

    def test_from_mapping(self) -> None:
        """Test reading settings from a mapping."""
        config = CacheConfig.from_mapping(
            {"TAGCACHE_DEFAULT_TTL": "60", "TAGCACHE_CLEANUP_ODDS": "100", "OTHER": "x"}
        )

        assert config.default_ttl == 60
        assert config.cleanup_odds == 100

    def test_from_mapping_custom_prefix(self) -> None:
        """Test reading settings with another prefix."""
        config = CacheConfig.from_mapping({"APP_CACHE_DEFAULT_TTL": 5}, prefix="APP_CACHE_")

        assert config.default_ttl == 5
        assert config.cleanup_odds == 0

    def test_from_mapping_empty(self) -> None:
        """Test that missing settings keep their defaults."""
        assert CacheConfig.from_mapping({}) == CacheConfig()

    def test_from_mapping_validates(self) -> None:
        """Test that values read from a mapping are validated."""
        with pytest.raises(ValueError):
            CacheConfig.from_mapping({"TAGCACHE_CLEANUP_ODDS": "-3"})
