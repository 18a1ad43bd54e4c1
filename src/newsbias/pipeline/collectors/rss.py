"""RSS feed collector."""

import re
from typing import Iterable, List, Optional

import feedparser
import httpx

from newsbias.core.article import FeedItem
from newsbias.pipeline.collectors.base import BaseCollector
from newsbias.utils.date_utils import now_utc, parse_date
from newsbias.utils.exceptions import CollectorError
from newsbias.utils.logging import get_logger
from newsbias.utils.text_utils import strip_html, truncate_text

logger = get_logger(__name__)

SUMMARY_MAX_CHARS = 150

FEED_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; NewsBot/1.0)",
    "Accept": "application/rss+xml, application/xml, text/xml, */*",
}

_LEADING_TAG = re.compile(r"^\s*\[.*?\]\s*")


def clean_title(title: str, source_names: Iterable[str] = ()) -> str:
    """Remove feed artifacts from an entry title.

    Drops a trailing " - <Source>" or " | <Source>" publisher suffix and a
    leading "[Tag]" marker.

    Args:
        title: Raw entry title
        source_names: Publisher names that may appear as suffixes

    Returns:
        Cleaned title
    """
    names = [re.escape(name) for name in source_names if name]
    if names:
        suffix = re.compile(r"\s+[-|]\s+(?:" + "|".join(names) + r")\b[^-|]*$", re.IGNORECASE)
        title = suffix.sub("", title)
    title = _LEADING_TAG.sub("", title)
    return title.strip()


def clean_summary(summary: str) -> str:
    """Strip HTML from an entry summary and cut it to 150 characters."""
    if not summary:
        return ""
    return truncate_text(strip_html(summary), SUMMARY_MAX_CHARS)


class RSSCollector(BaseCollector):
    """Collector for RSS and Atom feeds."""

    def __init__(
        self,
        timeout: float = 12.0,
        max_items: int = 10,
        known_sources: Iterable[str] = (),
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize RSS collector.

        Args:
            timeout: HTTP request timeout in seconds.
            max_items: Maximum number of entries kept per feed.
            known_sources: Publisher names stripped from title suffixes.
            transport: Optional httpx transport (used by tests).
        """
        super().__init__(max_items=max_items)
        self.timeout = timeout
        self.known_sources = list(known_sources)
        self._transport = transport

    async def collect(self, feed_url: str, source_name: str) -> List[FeedItem]:
        """Collect entries from an RSS feed.

        Returns:
            List of feed items from the first max_items entries.

        Raises:
            CollectorError: If RSS feed fetch or parse fails.
        """
        logger.info("collecting_rss", source=source_name, feed_url=feed_url)

        feed_content = await self._fetch_feed(feed_url)
        feed = feedparser.parse(feed_content)

        if feed.bozo:
            logger.warning(
                "rss_parse_warning",
                source=source_name,
                exception=str(feed.bozo_exception) if hasattr(feed, "bozo_exception") else None,
            )
            if not feed.entries:
                raise CollectorError(f"Unparseable RSS feed for {source_name}: {feed_url}")

        items = self._extract_items(feed, source_name)

        logger.info("rss_collection_complete", source=source_name, items_collected=len(items))

        return items

    async def _fetch_feed(self, feed_url: str) -> bytes:
        """Fetch RSS feed content via HTTP.

        Raises:
            CollectorError: If HTTP request fails.
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers=FEED_HEADERS,
                transport=self._transport,
            ) as client:
                response = await client.get(feed_url)
                response.raise_for_status()
                return response.content

        except httpx.HTTPError as e:
            logger.error("rss_fetch_failed", feed_url=feed_url, error=str(e))
            raise CollectorError(f"HTTP request failed for {feed_url}: {e}") from e

    def _extract_items(self, feed, source_name: str) -> List[FeedItem]:
        """Build feed items from parsed entries."""
        items = []
        names = [source_name] + self.known_sources

        for entry in feed.entries[: self.max_items]:
            link = (entry.get("link") or "").strip()
            if not link:
                logger.debug("rss_entry_no_link", entry_title=entry.get("title", "Unknown"))
                continue

            title = clean_title(entry.get("title", ""), names)
            if not title:
                logger.debug("rss_entry_no_title", url=link)
                continue

            published_at = parse_date(entry.get("published") or entry.get("updated"))

            items.append(
                FeedItem(
                    title=title,
                    link=link,
                    summary=clean_summary(entry.get("summary", "")),
                    published_at=published_at or now_utc(),
                    source_name=source_name,
                )
            )

        return items
