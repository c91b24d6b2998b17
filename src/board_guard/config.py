"""Configuration objects for the board anti-spam filter."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields

from dotenv import load_dotenv

LOGGER = logging.getLogger(__name__)

FEED_SORTS: tuple[str, ...] = ("hot", "new")


def _parse_int_env(name: str) -> int | None:
    raw = os.environ.get(name)
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        LOGGER.warning("Environment variable %s must be an integer (got %r)", name, raw)
        return None


def _parse_float_env(name: str) -> float | None:
    raw = os.environ.get(name)
    if not raw:
        return None
    try:
        normalized = raw.replace(",", ".")
        return float(normalized)
    except ValueError:
        LOGGER.warning("Environment variable %s must be a number (got %r)", name, raw)
        return None


@dataclass(frozen=True, slots=True)
class AntiSpamConfig:
    """Tunable knobs of the duplicate/spam filter.

    ``similarity_threshold`` is compared with a strict ``>``: two texts exactly
    at the threshold are not duplicates.
    """

    similarity_threshold: float = 0.8
    recent_posts_window: int = 50
    min_content_length: int = 10
    min_community_name_length: int = 3
    repeated_word_threshold: int = 2

    def __post_init__(self) -> None:
        if not 0 < self.similarity_threshold <= 1:
            raise ValueError("Similarity threshold must be within (0, 1]")
        if self.recent_posts_window < 0:
            raise ValueError("Recent posts window cannot be negative")
        if self.min_content_length < 0:
            raise ValueError("Minimum content length cannot be negative")
        if self.min_community_name_length < 0:
            raise ValueError("Minimum community name length cannot be negative")
        if self.repeated_word_threshold < 2:
            raise ValueError("Repeated word threshold must be at least 2")

    @classmethod
    def from_env(cls, prefix: str = "ANTISPAM_") -> "AntiSpamConfig":
        """Build a config from ``<prefix><FIELD_NAME>`` environment variables.

        Variables that are missing or unparseable keep the default value.
        """
        load_dotenv()
        overrides: dict[str, float | int] = {}
        for item in fields(cls):
            name = f"{prefix}{item.name.upper()}"
            if item.name == "similarity_threshold":
                value = _parse_float_env(name)
            else:
                value = _parse_int_env(name)
            if value is not None:
                overrides[item.name] = value
        try:
            return cls(**overrides)
        except ValueError as exc:
            LOGGER.warning("Ignoring invalid anti-spam settings %r: %s", overrides, exc)
            return cls()


@dataclass(slots=True)
class FeedConfig:
    """Controls feed ordering."""

    default_sort: str = "hot"
    hot_epoch_seconds: int = 1577836800
    hot_time_divisor: float = 45000.0
    storage_path: str | None = None

    def __post_init__(self) -> None:
        if self.default_sort not in FEED_SORTS:
            raise ValueError(f"Unknown feed sort {self.default_sort!r}")
        if self.hot_time_divisor <= 0:
            raise ValueError("Hot time divisor must be positive")

    @classmethod
    def from_env(cls) -> "FeedConfig":
        load_dotenv()
        config = cls(storage_path=os.environ.get("BOARD_GUARD_STORAGE_PATH") or None)
        sort = (os.environ.get("BOARD_GUARD_DEFAULT_SORT") or "").strip().lower()
        if sort:
            if sort in FEED_SORTS:
                config.default_sort = sort
            else:
                LOGGER.warning("Unknown BOARD_GUARD_DEFAULT_SORT %r; using %s", sort, config.default_sort)
        divisor = _parse_float_env("BOARD_GUARD_HOT_TIME_DIVISOR")
        if divisor is not None:
            if divisor > 0:
                config.hot_time_divisor = divisor
            else:
                LOGGER.warning("BOARD_GUARD_HOT_TIME_DIVISOR must be positive, got %s", divisor)
        return config
