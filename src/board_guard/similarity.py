"""Edit-distance based text similarity."""

from __future__ import annotations

import re

from rapidfuzz.distance import Levenshtein

from .models import Post

_WHITESPACE_RE = re.compile(r"\s+")
_NON_WORD_RE = re.compile(r"\W+")


def similarity(text1: str | None, text2: str | None) -> float:
    """Return how alike two texts are, from 0.0 (unrelated) to 1.0 (identical).

    Both texts are lowercased and trimmed; the score is one minus the
    Levenshtein distance divided by the longer length.
    """
    if not text1 or not text2:
        return 0.0
    normalized1 = text1.lower().strip()
    normalized2 = text2.lower().strip()
    if normalized1 == normalized2:
        return 1.0
    max_length = max(len(normalized1), len(normalized2))
    if max_length == 0:
        return 1.0
    distance = Levenshtein.distance(normalized1, normalized2)
    return max(0.0, 1 - distance / max_length)


def normalize_post_text(post: Post) -> str:
    """Title and content joined by a space, with whitespace runs collapsed."""
    combined = f"{post.title or ''} {post.content or ''}"
    return _WHITESPACE_RE.sub(" ", combined).strip()


def normalize_community_name(name: str | None) -> str:
    return (name or "").lower().strip()


def tokenize_community_name(name: str | None) -> list[str]:
    cleaned = _NON_WORD_RE.sub(" ", (name or "").lower())
    cleaned = _WHITESPACE_RE.sub(" ", cleaned).strip()
    return [word for word in cleaned.split(" ") if len(word) > 1]
