"""Tests for the text similarity helpers."""

from __future__ import annotations

import pytest

from board_guard.models import Post
from board_guard.similarity import (
    normalize_community_name,
    normalize_post_text,
    similarity,
    tokenize_community_name,
)


@pytest.mark.parametrize("other", ["", "anything", "   "])
def test_empty_text_has_no_similarity(other: str) -> None:
    assert similarity("", other) == 0.0
    assert similarity(other, "") == 0.0
    assert similarity(None, other) == 0.0


def test_identical_after_case_and_trim() -> None:
    assert similarity("Hello World", "  hello world\n") == 1.0


def test_edit_distance_ratio() -> None:
    assert similarity("kitten", "sitting") == pytest.approx(1 - 3 / 7)
    assert similarity("abcd", "abcz") == pytest.approx(0.75)


def test_unrelated_texts_floor_at_zero() -> None:
    assert similarity("abc", "xyz") == 0.0


@pytest.mark.parametrize(
    ("first", "second"),
    [
        ("a", "b"),
        ("short", "a much longer piece of text"),
        ("Hello World first post", "Hello World! first post."),
        ("tab\tseparated", "tab separated"),
    ],
)
def test_similarity_is_bounded_and_symmetric(first: str, second: str) -> None:
    score = similarity(first, second)
    assert 0.0 <= score <= 1.0
    assert similarity(second, first) == pytest.approx(score)


def test_normalize_post_text_collapses_whitespace() -> None:
    post = Post(title="  Hello\n", content="big   \t world ", community_id=1)
    assert normalize_post_text(post) == "Hello big world"


def test_normalize_post_text_handles_missing_fields() -> None:
    post = Post(title=None, content="hi", community_id=1)  # type: ignore[arg-type]
    assert normalize_post_text(post) == "hi"


def test_normalize_community_name() -> None:
    assert normalize_community_name("  Cats ") == "cats"
    assert normalize_community_name(None) == ""


def test_tokenize_community_name_drops_punctuation_and_single_letters() -> None:
    assert tokenize_community_name("Cats, Dogs & a Bird!") == ["cats", "dogs", "bird"]
