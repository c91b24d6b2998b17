"""Tests for the JSON backed storage implementation."""

from __future__ import annotations

from datetime import datetime, timezone

from board_guard.models import Community, Post
from board_guard.storage import JsonStorage


def test_json_storage_persists_between_sessions(tmp_path) -> None:
    db_path = tmp_path / "board.json"

    storage = JsonStorage(db_path)

    community = Community(name="Gardening", description="Plants")
    storage.add_community(community)

    post = Post(title="Tomatoes", content="Water daily", community_id=community.community_id)
    storage.add_post(post)
    post.votes = 7
    storage.save_post(post)

    assert db_path.exists()

    fresh_storage = JsonStorage(db_path)

    loaded_community = fresh_storage.get_community_by_name("Gardening")
    assert loaded_community is not None
    assert loaded_community.description == "Plants"
    assert loaded_community.created_at == community.created_at

    loaded_post = fresh_storage.get_post(post.post_id)
    assert loaded_post is not None
    assert loaded_post.votes == 7
    assert loaded_post.community is not None
    assert loaded_post.community.name == "Gardening"

    new_post = Post(title="Basil", content="Likes sun", community_id=community.community_id)
    fresh_storage.add_post(new_post)
    assert new_post.post_id == (post.post_id or 0) + 1


def test_json_storage_tolerates_bad_values(tmp_path) -> None:
    db_path = tmp_path / "board.json"
    db_path.write_text(
        """
        {
          "communities": {"4": {"name": "News", "created_at": "not a date"}},
          "posts": {"9": {"title": "Hi", "content": "there", "community_id": "4",
                          "votes": "many", "created_at": "2024-01-01T00:00:00"}}
        }
        """,
        encoding="utf-8",
    )

    storage = JsonStorage(db_path)

    community = storage.get_community(4)
    assert community is not None
    assert community.created_at == datetime.fromtimestamp(0, tz=timezone.utc)

    post = storage.get_post(9)
    assert post is not None
    assert post.votes == 1
    assert post.created_at == datetime(2024, 1, 1, tzinfo=timezone.utc)

    storage.add_community(Community(name="Science"))
    assert storage.get_community_by_name("Science").community_id == 5


def test_json_storage_starts_empty_on_corrupt_file(tmp_path, caplog) -> None:
    db_path = tmp_path / "board.json"
    db_path.write_text("{not json", encoding="utf-8")

    storage = JsonStorage(db_path)

    assert list(storage.list_posts()) == []
    assert "Failed to parse storage file" in caplog.text
