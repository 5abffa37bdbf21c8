"""
Blog feed reading with feedparser.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any

import feedparser

from .errors import FeedError
from .models import BlogPost

logger = logging.getLogger(__name__)


def _entry_published(entry: Any) -> datetime:
    """Entry publish time in UTC, falling back to updated time and then to now."""
    parsed: time.struct_time | None = (
        entry.get("published_parsed") or entry.get("updated_parsed")
    )
    if parsed:
        return datetime(*parsed[:6], tzinfo=timezone.utc)
    return datetime.now(timezone.utc)


class RSSReader:
    """Fetches the newest posts from an RSS or Atom feed."""

    def get_recent_posts(self, feed_url: str, limit: int) -> list[BlogPost]:
        """
        Return up to `limit` posts in feed order.

        Raises:
            FeedError: If the feed cannot be fetched or parsed.
        """
        if not feed_url:
            return []

        feed = feedparser.parse(feed_url)
        if feed.get("bozo") and not feed.get("entries"):
            reason = feed.get("bozo_exception", "no entries")
            raise FeedError(f"failed to parse feed: {reason}")

        posts = []
        for entry in feed.get("entries", [])[:limit]:
            posts.append(BlogPost(
                title=entry.get("title", ""),
                link=entry.get("link", ""),
                published=_entry_published(entry),
            ))

        logger.debug(f"Read {len(posts)} posts from {feed_url}")
        return posts
