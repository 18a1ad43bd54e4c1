# tests/conftest.py
"""Shared test fixtures and configuration."""

import random
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Dict, Generator, List, Optional, Tuple

import pytest

from newsbias.analysis.bias_analyzer import BiasAnalyzer
from newsbias.core.article import (
    AnalysisResult,
    Article,
    ExtractionResult,
    FeedItem,
    RepositoryStats,
)
from newsbias.core.config import DEFAULT_DATA_DIR, IngestionConfig, KeywordTables
from newsbias.core.enums import Category, ExtractionMethod
from newsbias.database.connection import DatabaseConnection
from newsbias.pipeline.classifier import ArticleClassifier
from newsbias.pipeline.collectors.base import BaseCollector
from newsbias.pipeline.extractors.base import BaseExtractor
from newsbias.services.config_loader import load_keyword_tables
from newsbias.services.source_registry import SourceRegistry
from newsbias.utils.exceptions import CollectorError, DatabaseError, DuplicateArticleError, FetchError
from newsbias.utils.text_utils import normalize_url

FIXED_NOW = datetime(2025, 1, 4, 12, 0, tzinfo=timezone.utc)

MODI_BODY = (
    "Prime Minister Narendra Modi on Saturday unveiled a major economic package "
    "aimed at the middle class, according to officials in the finance ministry.\n\n"
    "The BJP government said the measures would boost consumption and strengthen "
    "growth, with tax relief worth 1.2 lakh crore rupees over the next two years.\n\n"
    "Modi described the package as a historic step for development and said the "
    "initiative reflects the party's commitment to make in india manufacturing.\n\n"
    "Opposition leaders questioned the timing, however, and critics said the "
    "relief would not reach the poorest households quickly enough."
)


class InMemoryRepository:
    """Dict-backed ArticleStore used by pipeline tests."""

    def __init__(self) -> None:
        self.articles: Dict[str, Article] = {}
        self.views: Dict[int, int] = {}
        self.fail_inserts = False
        self.history: List[Tuple[int, bool]] = []
        self._next_id = 1

    def find_by_url(self, url: str) -> Optional[Article]:
        return self.articles.get(url)

    def insert(self, article: Article) -> Article:
        if self.fail_inserts:
            raise DatabaseError("disk I/O error")
        if article.url in self.articles:
            raise DuplicateArticleError(f"Article already stored: {article.url}")
        saved = article.model_copy(update={"id": self._next_id})
        self._next_id += 1
        self.articles[saved.url] = saved
        return saved

    def increment_views(self, article_id: int) -> None:
        self.views[article_id] = self.views.get(article_id, 0) + 1

    def get_stats(self) -> RepositoryStats:
        histogram: Dict[str, int] = {}
        for article in self.articles.values():
            histogram[article.category.value] = histogram.get(article.category.value, 0) + 1
        return RepositoryStats(
            total_count=len(self.articles),
            recent_count=len(self.articles),
            trending_count=sum(1 for a in self.articles.values() if a.is_trending),
            category_histogram=histogram,
            analysis_requests=len(self.history),
        )

    def list_recent(self, category: Optional[Category] = None, limit: int = 20) -> List[Article]:
        articles = [a for a in self.articles.values() if category is None or a.category == category]
        articles.sort(key=lambda a: (a.published_at, a.id or 0), reverse=True)
        return articles[:limit]

    def record_analysis(self, article: Article, cached: bool) -> None:
        if article.id is None:
            raise DatabaseError(f"Cannot record analysis for unsaved article: {article.url}")
        self.history.append((article.id, cached))


class FakeFetcher:
    """HtmlFetcher stand-in returning canned pages or raising FetchError."""

    def __init__(self, primary: Optional[str] = None, alternative: Optional[str] = None):
        self.primary = primary
        self.alternative = alternative
        self.calls: List[str] = []

    async def fetch_primary(self, url: str) -> str:
        self.calls.append("primary")
        if self.primary is None:
            raise FetchError(f"Timed out fetching {url}")
        return self.primary

    async def fetch_alternative(self, url: str) -> str:
        self.calls.append("alternative")
        if self.alternative is None:
            raise FetchError(f"HTTP 403 for {url}")
        return self.alternative


class FakeExtractor(BaseExtractor):
    """Extractor returning a fixed body for every URL."""

    def __init__(self, body: str = MODI_BODY, failing: Optional[set] = None):
        self.body = body
        self.failing = failing or set()
        self.calls: List[str] = []

    async def extract(self, url: str) -> ExtractionResult:
        self.calls.append(url)
        if url in self.failing:
            raise RuntimeError(f"parser crashed on {url}")
        return ExtractionResult(
            title=f"Headline for {url.rsplit('/', 1)[-1]}",
            body=self.body,
            author="Staff Reporter",
            published_at=FIXED_NOW,
            source_name="Times of India",
            canonical_url=normalize_url(url),
            extraction_method=ExtractionMethod.FULL,
        )


class FakeCollector(BaseCollector):
    """Collector serving canned items per feed URL; unknown feeds fail."""

    def __init__(self, feeds: Dict[str, List[FeedItem]]):
        super().__init__()
        self.feeds = feeds
        self.calls: List[str] = []

    async def collect(self, feed_url: str, source_name: str) -> List[FeedItem]:
        self.calls.append(feed_url)
        if feed_url not in self.feeds:
            raise CollectorError(f"HTTP request failed for {feed_url}")
        return list(self.feeds[feed_url])


@pytest.fixture
def data_dir() -> Path:
    """Bundled data directory."""
    return DEFAULT_DATA_DIR


@pytest.fixture
def registry() -> SourceRegistry:
    """Source registry loaded from bundled sources.yaml."""
    return SourceRegistry.from_data_dir()


@pytest.fixture
def keywords() -> KeywordTables:
    """Keyword tables loaded from bundled keywords.yaml."""
    return load_keyword_tables()


@pytest.fixture
def analyzer(keywords, registry) -> BiasAnalyzer:
    """Bias analyzer with bundled keywords and registry priors."""
    return BiasAnalyzer(keywords, registry=registry)


@pytest.fixture
def classifier(keywords) -> ArticleClassifier:
    """Classifier with a seeded random source and a fixed clock."""
    return ArticleClassifier(keywords, config=IngestionConfig(), rng=random.Random(7), clock=lambda: FIXED_NOW)


@pytest.fixture
def memory_repository() -> InMemoryRepository:
    """Empty in-memory article store."""
    return InMemoryRepository()


@pytest.fixture
def fake_fetcher() -> Callable[..., FakeFetcher]:
    """Factory for canned fetchers (None means the fetch fails)."""
    return FakeFetcher


@pytest.fixture
def fake_extractor() -> Callable[..., FakeExtractor]:
    """Factory for fixed-body extractors."""
    return FakeExtractor


@pytest.fixture
def fake_collector() -> Callable[..., FakeCollector]:
    """Factory for canned-feed collectors."""
    return FakeCollector


@pytest.fixture
def test_db(tmp_path: Path) -> Generator[DatabaseConnection, None, None]:
    """SQLite database in a temporary directory with schema initialized."""
    conn = DatabaseConnection(tmp_path / "test.db")
    conn.connect()

    yield conn

    conn.close()


@pytest.fixture
def make_extraction() -> Callable[..., ExtractionResult]:
    """Factory for extraction results."""

    def _make(
        url: str = "https://timesofindia.indiatimes.com/india/modi-package/articleshow/1.cms",
        title: str = "Modi Announces Economic Package for Middle Class",
        body: str = MODI_BODY,
        source_name: str = "Times of India",
        published_at: datetime = FIXED_NOW,
    ) -> ExtractionResult:
        return ExtractionResult(
            title=title,
            body=body,
            author="Staff Reporter",
            published_at=published_at,
            source_name=source_name,
            canonical_url=normalize_url(url),
        )

    return _make


@pytest.fixture
def sample_analysis(analyzer, make_extraction) -> AnalysisResult:
    """Analysis of the Modi economic package article."""
    extraction = make_extraction()
    return analyzer.analyze(extraction.title, extraction.body, extraction.source_name)


@pytest.fixture
def sample_article(classifier, make_extraction, sample_analysis) -> Article:
    """Fully built, unsaved article."""
    return classifier.build_article(make_extraction(), sample_analysis)


@pytest.fixture
def make_feed_items() -> Callable[..., List[FeedItem]]:
    """Factory for feed items with distinct links."""

    def _make(count: int, prefix: str = "https://timesofindia.indiatimes.com/india/story") -> List[FeedItem]:
        return [
            FeedItem(
                title=f"Story {i}",
                link=f"{prefix}-{i}",
                published_at=FIXED_NOW - timedelta(hours=1),
            )
            for i in range(count)
        ]

    return _make


@pytest.fixture
def sample_rss_feed() -> str:
    """Sample RSS feed XML."""
    return """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Times of India</title>
    <link>https://timesofindia.indiatimes.com</link>
    <description>Top stories</description>
    <item>
      <title>Modi unveils economic package - Times of India</title>
      <link>https://timesofindia.indiatimes.com/india/modi-package/articleshow/1.cms</link>
      <description>&lt;p&gt;The Prime Minister announced &amp;amp; detailed new relief.&lt;/p&gt;</description>
      <pubDate>Sat, 04 Jan 2025 10:00:00 +0000</pubDate>
    </item>
    <item>
      <title>[LIVE] Parliament session begins | TOI</title>
      <link>https://timesofindia.indiatimes.com/india/parliament/articleshow/2.cms</link>
      <description>Winter session opens.</description>
    </item>
    <item>
      <title>Entry without a link</title>
      <description>Should be skipped.</description>
    </item>
  </channel>
</rss>"""


@pytest.fixture
def sample_article_html() -> str:
    """Times of India style article page."""
    return """<!DOCTYPE html>
<html>
<head>
    <title>Modi Announces Economic Package - Times of India</title>
    <meta property="article:published_time" content="2025-01-04T10:30:00+05:30">
    <script type="application/ld+json">{"@type": "NewsArticle", "headline": "Modi Announces Economic Package"}</script>
</head>
<body>
    <nav><a href="/">Home</a> <a href="/india">India</a></nav>
    <div class="ad-slot">Advertisement space for a sponsored partner campaign today</div>
    <h1 class="HNMDR">Modi Announces Economic Package for Middle Class</h1>
    <div class="byline"><span class="auth">Rajesh Kumar</span></div>
    <div class="articlebodycontent">
        <p>Prime Minister Narendra Modi on Saturday unveiled a major economic package aimed at the middle class.</p>
        <p>The government said the measures would boost consumption and strengthen growth across the country.</p>
        <p>Officials in the finance ministry said tax relief would be worth 1.2 lakh crore rupees over two years.</p>
        <p>Subscribe to our newsletter for the latest updates on this story.</p>
        <p>Opposition leaders questioned the timing of the announcement ahead of state elections.</p>
    </div>
    <footer>Copyright 2025 Bennett, Coleman and Co. Ltd. All rights reserved.</footer>
</body>
</html>"""


# Pytest configuration
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
