"""Domain models for the discussion board."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class Community:
    name: str
    created_at: datetime = field(default_factory=utcnow)
    community_id: int | None = None
    description: str | None = None


@dataclass(slots=True)
class Post:
    title: str
    content: str
    community_id: int
    created_at: datetime = field(default_factory=utcnow)
    post_id: int | None = None
    votes: int = 1
    comment_count: int = 0
    community: Optional[Community] = None
