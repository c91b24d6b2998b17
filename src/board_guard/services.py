"""Board services that feed stored records through the anti-spam filter."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .config import FEED_SORTS, FeedConfig
from .filtering import AntiSpamFilter
from .models import Community, Post
from .storage import AbstractStorage


def calculate_hot_score(votes: int, created_at: datetime, config: FeedConfig | None = None) -> float:
    """Reddit-style ranking: vote magnitude on a log scale plus a recency bonus."""
    config = config or FeedConfig()
    order = math.log10(max(abs(votes), 1))
    sign = 1 if votes > 0 else -1 if votes < 0 else 0
    seconds = math.floor(created_at.timestamp()) - config.hot_epoch_seconds
    return round(sign * order + seconds / config.hot_time_divisor, 7)


@dataclass(slots=True)
class SearchResults:
    posts: list[Post] = field(default_factory=list)
    communities: list[Community] = field(default_factory=list)


@dataclass(slots=True)
class BoardService:
    storage: AbstractStorage
    anti_spam: AntiSpamFilter = field(default_factory=AntiSpamFilter)
    feed_config: FeedConfig = field(default_factory=FeedConfig)

    def create_community(self, name: str, description: str | None = None) -> Community:
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValueError("Community name must not be empty")
        if self.storage.get_community_by_name(cleaned) is not None:
            raise ValueError("Community already exists")
        community = Community(name=cleaned, description=description)
        self.storage.add_community(community)
        return community

    def create_post(self, community_id: int, title: str, content: str) -> Post:
        if not (title or "").strip():
            raise ValueError("Post title must not be empty")
        if not (content or "").strip():
            raise ValueError("Post content must not be empty")
        community = self.storage.get_community(community_id)
        if community is None:
            raise KeyError(community_id)
        post = Post(title=title, content=content, community_id=community_id)
        self.storage.add_post(post)
        post.community = community
        return post

    def get_post(self, post_id: int) -> Optional[Post]:
        return self.storage.get_post(post_id)

    def list_communities(self) -> list[Community]:
        visible = self.anti_spam.filter_duplicate_communities(list(self.storage.list_communities()))
        return sorted(visible, key=lambda community: community.name)

    def list_posts(self, community_id: int | None = None, sort: str | None = None) -> list[Post]:
        sort = sort or self.feed_config.default_sort
        if sort not in FEED_SORTS:
            raise ValueError(f"Unknown feed sort {sort!r}")
        posts = self.anti_spam.filter_duplicate_posts(list(self.storage.list_posts(community_id)))
        return self._order(posts, sort)

    def search(self, query: str) -> SearchResults:
        """Case-insensitive substring search; never hides duplicates."""
        needle = (query or "").strip().lower()
        if not needle:
            return SearchResults()
        posts = [
            post
            for post in self.storage.list_posts()
            if needle in post.title.lower() or needle in post.content.lower()
        ]
        communities = [
            community
            for community in self.storage.list_communities()
            if needle in community.name.lower()
            or needle in (community.description or "").lower()
        ]
        return SearchResults(posts=self._order(posts, "hot"), communities=communities)

    def _order(self, posts: list[Post], sort: str) -> list[Post]:
        if sort == "new":
            return sorted(posts, key=lambda post: post.created_at, reverse=True)
        return sorted(
            posts,
            key=lambda post: calculate_hot_score(post.votes, post.created_at, self.feed_config),
            reverse=True,
        )
