"""Command-line entry point printing the filtered board from a JSON snapshot."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Sequence

from dotenv import load_dotenv

from .config import FEED_SORTS, AntiSpamConfig, FeedConfig
from .filtering import AntiSpamFilter
from .models import Community, Post
from .services import BoardService
from .storage import JsonStorage

LOGGER = logging.getLogger(__name__)


def _community_payload(community: Community) -> dict:
    return {
        "id": community.community_id,
        "name": community.name,
        "description": community.description,
        "created_at": community.created_at.isoformat(),
    }


def _post_payload(post: Post) -> dict:
    return {
        "id": post.post_id,
        "community_id": post.community_id,
        "community": post.community.name if post.community else None,
        "title": post.title,
        "content": post.content,
        "votes": post.votes,
        "created_at": post.created_at.isoformat(),
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="board-guard",
        description="Print the board with near-duplicate posts and communities hidden.",
    )
    parser.add_argument(
        "--storage",
        help="JSON storage file (defaults to BOARD_GUARD_STORAGE_PATH)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    posts = subparsers.add_parser("posts", help="filtered post feed")
    posts.add_argument("--sort", choices=FEED_SORTS)
    posts.add_argument("--community", type=int, help="only posts of this community id")

    subparsers.add_parser("communities", help="filtered community list")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    feed_config = FeedConfig.from_env()
    storage_path = args.storage or feed_config.storage_path
    if not storage_path:
        parser.error("a storage file is required (--storage or BOARD_GUARD_STORAGE_PATH)")

    service = BoardService(
        storage=JsonStorage(storage_path),
        anti_spam=AntiSpamFilter(AntiSpamConfig.from_env()),
        feed_config=feed_config,
    )
    LOGGER.info("Loaded board snapshot from %s", storage_path)

    if args.command == "posts":
        payload = [
            _post_payload(post)
            for post in service.list_posts(community_id=args.community, sort=args.sort)
        ]
    else:
        payload = [_community_payload(community) for community in service.list_communities()]
    json.dump(payload, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 0


def run() -> None:
    logging.basicConfig(level=logging.INFO)
    sys.exit(main())
