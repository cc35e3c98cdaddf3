"""Pytest configuration for tagcache tests."""

from collections.abc import Iterator
from pathlib import Path

import pytest

from tagcache import CacheConfig, CacheEngine, InMemoryCacheBackend, SqliteCacheBackend
from tagcache.core.interfaces import ICacheBackend


class FakeClock:
    """Manually advanced clock returning POSIX seconds."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Create a fake clock for expiration tests."""
    return FakeClock()


@pytest.fixture(params=["memory", "sqlite"])
def backend(
    request: pytest.FixtureRequest,
    clock: FakeClock,
    tmp_path: Path,
) -> Iterator[ICacheBackend]:
    """Create each backend in turn, sharing the fake clock."""
    if request.param == "memory":
        instance: ICacheBackend = InMemoryCacheBackend(clock=clock)
    else:
        instance = SqliteCacheBackend(tmp_path / "cache.db", clock=clock)
    yield instance
    instance.close()


@pytest.fixture
def cache(backend: ICacheBackend) -> CacheEngine:
    """Create a cache engine over each backend with a 60 second default TTL."""
    return CacheEngine(backend=backend, config=CacheConfig(default_ttl=60))


@pytest.fixture(autouse=True)
def reset_decorator_config() -> Iterator[None]:
    """Reset decorator configuration after each test."""
    import tagcache.decorators

    original_cache = tagcache.decorators._cache

    yield

    tagcache.decorators._cache = original_cache
