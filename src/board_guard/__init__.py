"""Near-duplicate and spam filtering for a discussion board."""

from .config import AntiSpamConfig, FeedConfig
from .filtering import AntiSpamFilter, filter_duplicate_communities, filter_duplicate_posts
from .models import Community, Post
from .services import BoardService, SearchResults, calculate_hot_score
from .similarity import similarity
from .storage import InMemoryStorage, JsonStorage

__all__ = [
    "AntiSpamConfig",
    "AntiSpamFilter",
    "BoardService",
    "Community",
    "FeedConfig",
    "InMemoryStorage",
    "JsonStorage",
    "Post",
    "SearchResults",
    "calculate_hot_score",
    "filter_duplicate_communities",
    "filter_duplicate_posts",
    "similarity",
]
