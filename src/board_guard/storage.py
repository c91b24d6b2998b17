"""Storage layer abstractions."""

from __future__ import annotations

import contextlib
import json
import logging
from copy import deepcopy
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, Optional

from .models import Community, Post

LOGGER = logging.getLogger(__name__)


def _datetime_to_iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat()


def _iso_to_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        LOGGER.warning("Failed to parse datetime value %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _safe_int(value: object, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        LOGGER.warning("Failed to parse integer value %r; using %s", value, default)
        return default


def _safe_optional_int(value: object | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        LOGGER.warning("Failed to parse optional integer value %r", value)
        return None


def _epoch() -> datetime:
    return datetime.fromtimestamp(0, tz=timezone.utc)


def _serialize_community(community: Community) -> dict:
    return {
        "community_id": community.community_id,
        "name": community.name,
        "description": community.description,
        "created_at": _datetime_to_iso(community.created_at),
    }


def _deserialize_community(payload: dict) -> Community:
    return Community(
        community_id=_safe_optional_int(payload.get("community_id")),
        name=str(payload.get("name") or ""),
        description=payload.get("description"),
        created_at=_iso_to_datetime(payload.get("created_at")) or _epoch(),
    )


def _serialize_post(post: Post) -> dict:
    return {
        "post_id": post.post_id,
        "community_id": post.community_id,
        "title": post.title,
        "content": post.content,
        "votes": post.votes,
        "comment_count": post.comment_count,
        "created_at": _datetime_to_iso(post.created_at),
    }


def _deserialize_post(payload: dict) -> Post:
    return Post(
        post_id=_safe_optional_int(payload.get("post_id")),
        community_id=_safe_int(payload.get("community_id", 0)),
        title=str(payload.get("title") or ""),
        content=str(payload.get("content") or ""),
        votes=_safe_int(payload.get("votes", 1), 1),
        comment_count=_safe_int(payload.get("comment_count", 0)),
        created_at=_iso_to_datetime(payload.get("created_at")) or _epoch(),
    )


class AbstractStorage:
    """Interface for persisting communities and posts."""

    def add_community(self, community: Community) -> None:
        raise NotImplementedError

    def get_community(self, community_id: int) -> Optional[Community]:
        raise NotImplementedError

    def get_community_by_name(self, name: str) -> Optional[Community]:
        raise NotImplementedError

    def list_communities(self) -> Iterable[Community]:
        raise NotImplementedError

    def add_post(self, post: Post) -> None:
        raise NotImplementedError

    def get_post(self, post_id: int) -> Optional[Post]:
        raise NotImplementedError

    def save_post(self, post: Post) -> None:
        raise NotImplementedError

    def list_posts(self, community_id: Optional[int] = None) -> Iterable[Post]:
        raise NotImplementedError


class InMemoryStorage(AbstractStorage):
    """Simple dictionary-based storage for demos and tests."""

    def __init__(self) -> None:
        self._communities: Dict[int, Community] = {}
        self._community_sequence: int = 1
        self._posts: Dict[int, Post] = {}
        self._post_sequence: int = 1

    def add_community(self, community: Community) -> None:
        if community.community_id is None:
            community.community_id = self._community_sequence
            self._community_sequence += 1
        else:
            self._community_sequence = max(self._community_sequence, community.community_id + 1)
        self._communities[community.community_id] = deepcopy(community)

    def get_community(self, community_id: int) -> Optional[Community]:
        community = self._communities.get(community_id)
        if community is None:
            return None
        return deepcopy(community)

    def get_community_by_name(self, name: str) -> Optional[Community]:
        for community in self._communities.values():
            if community.name == name:
                return deepcopy(community)
        return None

    def list_communities(self) -> Iterable[Community]:
        return [
            deepcopy(community)
            for community in sorted(self._communities.values(), key=lambda c: c.name)
        ]

    def add_post(self, post: Post) -> None:
        if post.post_id is None:
            post.post_id = self._post_sequence
            self._post_sequence += 1
        else:
            self._post_sequence = max(self._post_sequence, post.post_id + 1)
        self._posts[post.post_id] = self._detach(post)

    def get_post(self, post_id: int) -> Optional[Post]:
        post = self._posts.get(post_id)
        if post is None:
            return None
        return self._joined(post)

    def save_post(self, post: Post) -> None:
        if post.post_id is None:
            raise ValueError("Post must have an id before saving")
        self._posts[post.post_id] = self._detach(post)

    def list_posts(self, community_id: Optional[int] = None) -> Iterable[Post]:
        return [
            self._joined(post)
            for post in sorted(self._posts.values(), key=lambda p: p.created_at)
            if community_id is None or post.community_id == community_id
        ]

    def _detach(self, post: Post) -> Post:
        stored = deepcopy(post)
        stored.community = None
        return stored

    def _joined(self, post: Post) -> Post:
        joined = deepcopy(post)
        joined.community = self.get_community(post.community_id)
        return joined


class JsonStorage(InMemoryStorage):
    """JSON-backed storage persisted on disk."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        super().__init__()
        self._load()

    # Persistence helpers -------------------------------------------------

    def _persist(self) -> None:
        payload = {
            "communities": {
                str(community_id): _serialize_community(community)
                for community_id, community in self._communities.items()
            },
            "community_sequence": self._community_sequence,
            "posts": {str(post_id): _serialize_post(post) for post_id, post in self._posts.items()},
            "post_sequence": self._post_sequence,
        }
        temp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            with temp_path.open("w", encoding="utf-8") as handle:
                json.dump(payload, handle, ensure_ascii=False, indent=2)
            temp_path.replace(self._path)
        except OSError as exc:
            LOGGER.error("Failed to write storage file %s: %s", self._path, exc)
            with contextlib.suppress(OSError):
                temp_path.unlink(missing_ok=True)

    def _load(self) -> None:
        if not self._path.exists():
            return
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except json.JSONDecodeError as exc:
            LOGGER.error("Failed to parse storage file %s: %s", self._path, exc)
            return
        except OSError as exc:
            LOGGER.error("Failed to read storage file %s: %s", self._path, exc)
            return

        try:
            raw_communities = payload.get("communities", {}) or {}
            self._communities = {
                int(community_id): _deserialize_community(
                    {**community_payload, "community_id": int(community_id)}
                )
                for community_id, community_payload in raw_communities.items()
            }

            raw_posts = payload.get("posts", {}) or {}
            self._posts = {
                int(post_id): _deserialize_post({**post_payload, "post_id": int(post_id)})
                for post_id, post_payload in raw_posts.items()
            }

            community_sequence = payload.get("community_sequence")
            if isinstance(community_sequence, int) and community_sequence > 0:
                self._community_sequence = community_sequence
            else:
                self._community_sequence = max(self._communities.keys(), default=0) + 1

            post_sequence = payload.get("post_sequence")
            if isinstance(post_sequence, int) and post_sequence > 0:
                self._post_sequence = post_sequence
            else:
                self._post_sequence = max(self._posts.keys(), default=0) + 1
        except (AttributeError, TypeError, ValueError) as exc:
            LOGGER.error("Failed to load storage data from %s: %s", self._path, exc)
            # Revert to clean in-memory state on error
            super().__init__()

    # AbstractStorage implementation -------------------------------------

    def add_community(self, community: Community) -> None:
        super().add_community(community)
        self._persist()

    def add_post(self, post: Post) -> None:
        super().add_post(post)
        self._persist()

    def save_post(self, post: Post) -> None:
        super().save_post(post)
        self._persist()
