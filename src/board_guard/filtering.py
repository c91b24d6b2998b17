"""Duplicate and spam filtering for posts and communities."""

from __future__ import annotations

import logging
from collections import Counter, deque
from dataclasses import replace
from typing import Iterable, Sequence

from .config import AntiSpamConfig
from .models import Community, Post
from .similarity import (
    normalize_community_name,
    normalize_post_text,
    similarity,
    tokenize_community_name,
)

LOGGER = logging.getLogger(__name__)


def _post_key(post: Post) -> object:
    return post.post_id if post.post_id is not None else id(post)


def _community_key(community: Community) -> object:
    return community.community_id if community.community_id is not None else id(community)


class AntiSpamFilter:
    """Hides near-duplicate posts and communities.

    The filter never mutates or persists anything: each pass takes a list of
    records and returns the subset that should stay visible. Rejected
    communities are only hidden from lists built with this filter; callers
    that need them (search, direct links) simply do not filter.
    """

    def __init__(self, config: AntiSpamConfig | None = None, **overrides: float | int) -> None:
        base = config if config is not None else AntiSpamConfig()
        self._config = replace(base, **overrides) if overrides else base

    @property
    def config(self) -> AntiSpamConfig:
        return self._config

    def get_config(self) -> AntiSpamConfig:
        return replace(self._config)

    def update_config(
        self, config: AntiSpamConfig | None = None, **overrides: float | int
    ) -> AntiSpamConfig:
        """Swap in a new config, either a full object or the current one with overrides."""
        base = config if config is not None else self._config
        self._config = replace(base, **overrides) if overrides else base
        return self.get_config()

    # Posts ---------------------------------------------------------------

    def find_duplicate_post(
        self, post: Post, candidates: Iterable[Post]
    ) -> tuple[Post, float] | None:
        """Return the first candidate ``post`` is too similar to, with the score."""
        text = normalize_post_text(post)
        return self._match_post(post, text, ((c, normalize_post_text(c)) for c in candidates))

    def _match_post(
        self, post: Post, text: str, candidates: Iterable[tuple[Post, str]]
    ) -> tuple[Post, float] | None:
        min_length = self._config.min_content_length
        if len(text) < min_length:
            return None
        key = _post_key(post)
        for candidate, candidate_text in candidates:
            if _post_key(candidate) == key:
                continue
            if len(candidate_text) < min_length:
                continue
            score = similarity(text, candidate_text)
            if score > self._config.similarity_threshold:
                return candidate, score
        return None

    def filter_duplicate_posts(self, posts: Sequence[Post]) -> list[Post]:
        """Drop posts that repeat a recent post, keeping the newest of each pair.

        Posts are scanned newest first. Each one is compared with the most
        recently kept posts and with the posts scanned right before it, up to
        ``recent_posts_window`` of each. The result is in newest-first order.
        """
        if not posts:
            return list(posts)
        window = self._config.recent_posts_window
        ordered = sorted(posts, key=lambda post: post.created_at, reverse=True)
        kept: list[Post] = []
        recent_kept: deque[tuple[Post, str]] = deque(maxlen=window)
        recent_seen: deque[tuple[Post, str]] = deque(maxlen=window)

        for post in ordered:
            text = normalize_post_text(post)
            candidates: list[tuple[Post, str]] = []
            seen_keys: set[object] = set()
            for entry in (*recent_kept, *recent_seen):
                entry_key = _post_key(entry[0])
                if entry_key in seen_keys:
                    continue
                seen_keys.add(entry_key)
                candidates.append(entry)

            match = self._match_post(post, text, candidates)
            if match is None:
                kept.append(post)
                recent_kept.append((post, text))
            else:
                other, score = match
                LOGGER.info(
                    "Anti-spam: post %r (ID: %s) filtered - %d%% similar to post %r (ID: %s)",
                    post.title,
                    post.post_id,
                    round(score * 100),
                    other.title,
                    other.post_id,
                )
            recent_seen.append((post, text))

        LOGGER.info(
            "Anti-spam: %d duplicate/spam posts filtered out of %d total posts",
            len(posts) - len(kept),
            len(posts),
        )
        return kept

    # Communities ---------------------------------------------------------

    def repeated_word(self, name: str | None) -> str | None:
        """Return the first word repeated at least ``repeated_word_threshold`` times."""
        words = tokenize_community_name(name)
        if len(words) < 2:
            return None
        for word, count in Counter(words).items():
            if count >= self._config.repeated_word_threshold:
                return word
        return None

    def is_repetitive_name(self, name: str | None) -> bool:
        return self.repeated_word(name) is not None

    def filter_duplicate_communities(self, communities: Sequence[Community]) -> list[Community]:
        """Hide communities that copy an older community's name or repeat a word.

        Communities are scanned oldest first so the oldest member of a cluster
        of similar names always survives. The result is in oldest-first order.
        """
        if not communities:
            return list(communities)
        min_length = self._config.min_community_name_length
        ordered = sorted(communities, key=lambda community: community.created_at)
        kept: list[Community] = []
        kept_names: list[str] = []
        rejected: set[object] = set()

        for community in ordered:
            key = _community_key(community)
            if key in rejected:
                continue
            name = community.name or ""

            if len(name) >= min_length:
                word = self.repeated_word(name)
                if word is not None:
                    LOGGER.info(
                        "Anti-spam: community %r (ID: %s) filtered - word %r repeated",
                        community.name,
                        community.community_id,
                        word,
                    )
                    rejected.add(key)
                    continue

            normalized = normalize_community_name(name)
            duplicate_of: tuple[Community, float] | None = None
            if len(normalized) >= min_length:
                for other, other_name in zip(kept, kept_names):
                    if len(other_name) < min_length:
                        continue
                    score = similarity(normalized, other_name)
                    if score > self._config.similarity_threshold:
                        duplicate_of = (other, score)
                        break
            if duplicate_of is not None:
                other, score = duplicate_of
                LOGGER.info(
                    "Anti-spam: community %r (ID: %s) filtered - %d%% similar to community %r (ID: %s)",
                    community.name,
                    community.community_id,
                    round(score * 100),
                    other.name,
                    other.community_id,
                )
                rejected.add(key)
                continue

            kept.append(community)
            kept_names.append(normalized)

        LOGGER.info(
            "Anti-spam: %d duplicate/spam communities filtered out of %d total communities",
            len(communities) - len(kept),
            len(communities),
        )
        return kept


def filter_duplicate_posts(
    posts: Sequence[Post], config: AntiSpamConfig | None = None
) -> list[Post]:
    return AntiSpamFilter(config).filter_duplicate_posts(posts)


def filter_duplicate_communities(
    communities: Sequence[Community], config: AntiSpamConfig | None = None
) -> list[Community]:
    return AntiSpamFilter(config).filter_duplicate_communities(communities)
