"""Base collector interface."""

from abc import ABC, abstractmethod
from typing import List

from newsbias.core.article import FeedItem
from newsbias.utils.exceptions import CollectorError
from newsbias.utils.logging import get_logger

logger = get_logger(__name__)


class BaseCollector(ABC):
    """Abstract base class for feed collectors."""

    def __init__(self, max_items: int = 10):
        """Initialize collector.

        Args:
            max_items: Maximum number of entries kept per feed.
        """
        self.max_items = max_items

    @abstractmethod
    async def collect(self, feed_url: str, source_name: str) -> List[FeedItem]:
        """Collect candidate articles from one feed.

        Returns:
            List of feed items, at most max_items.

        Raises:
            CollectorError: If fetching or parsing the feed fails.
        """
        pass

    async def poll(self, feed_url: str, source_name: str) -> List[FeedItem]:
        """Collect from one feed, returning an empty list on any failure."""
        try:
            return await self.collect(feed_url, source_name)
        except CollectorError as e:
            logger.warning("feed_poll_failed", feed_url=feed_url, source=source_name, error=str(e))
            return []
