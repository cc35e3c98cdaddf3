"""Cache configuration entity."""

import random
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any


@dataclass
class CacheConfig:
    """Cache configuration.

    Holds the settings the cache engine consumes. Values are supplied by
    the application, either directly or via ``from_mapping``.

    Attributes:
        default_ttl: TTL applied when a call supplies none, in seconds
            or as a timedelta.
        cleanup_odds: Odds (1 in N) of sweeping expired entries when a
            persistent cache is opened. 0 disables the sweep.
    """

    default_ttl: int | timedelta = 300
    cleanup_odds: int = 0

    def __post_init__(self) -> None:
        """Validate the maintenance odds."""
        if self.cleanup_odds < 0:
            raise ValueError(
                f"cleanup_odds must be zero or positive, got {self.cleanup_odds}"
            )

    def should_clean(self, rng: random.Random | None = None) -> bool:
        """Decide once whether the expired-entry sweep runs now.

        Args:
            rng: Optional random generator, for deterministic tests.

        Returns:
            True with probability 1/cleanup_odds, never when odds are 0.
        """
        if self.cleanup_odds == 0:
            return False
        return (rng or random).randint(1, self.cleanup_odds) == 1

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, Any],
        prefix: str = "TAGCACHE_",
    ) -> "CacheConfig":
        """Build a config from a mapping such as ``os.environ``.

        Reads ``{prefix}DEFAULT_TTL`` and ``{prefix}CLEANUP_ODDS``; missing
        settings keep their defaults.

        Args:
            mapping: Source of settings.
            prefix: Prefix of the setting names.

        Returns:
            A new CacheConfig instance.
        """
        kwargs: dict[str, Any] = {}
        if f"{prefix}DEFAULT_TTL" in mapping:
            kwargs["default_ttl"] = int(mapping[f"{prefix}DEFAULT_TTL"])
        if f"{prefix}CLEANUP_ODDS" in mapping:
            kwargs["cleanup_odds"] = int(mapping[f"{prefix}CLEANUP_ODDS"])
        return cls(**kwargs)
