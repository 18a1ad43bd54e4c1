"""Article repository for database operations."""

import json
import sqlite3
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Protocol

from newsbias.core.article import (
    Article,
    BiasIndicator,
    BiasScore,
    CredibilityMetrics,
    KeyPhrases,
    RepositoryStats,
    SentimentBreakdown,
)
from newsbias.core.enums import Category
from newsbias.database.connection import DatabaseConnection
from newsbias.utils.date_utils import now_utc
from newsbias.utils.exceptions import DatabaseError, DuplicateArticleError
from newsbias.utils.logging import get_logger

logger = get_logger(__name__)

RECENT_WINDOW = timedelta(hours=24)
DEFAULT_LIST_LIMIT = 20


class ArticleStore(Protocol):
    """Operations the pipeline needs from an article store.

    The store is the single authority on duplicates: ``insert`` raises
    DuplicateArticleError when the canonical URL is already present.
    """

    def find_by_url(self, url: str) -> Optional[Article]: ...

    def insert(self, article: Article) -> Article: ...

    def increment_views(self, article_id: int) -> None: ...

    def get_stats(self) -> RepositoryStats: ...

    def list_recent(self, category: Optional[Category] = None, limit: int = DEFAULT_LIST_LIMIT) -> List[Article]: ...

    def record_analysis(self, article: Article, cached: bool) -> None: ...


def _to_db_datetime(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse datetime string from SQLite.

    Args:
        value: ISO format datetime string or None

    Returns:
        datetime object or None
    """
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return None


class ArticleRepository:
    """SQLite-backed article store."""

    def __init__(self, db: DatabaseConnection):
        """Initialize repository.

        Args:
            db: Database connection instance.
        """
        self.db = db

    def find_by_url(self, url: str) -> Optional[Article]:
        """Find article by canonical URL.

        Raises:
            DatabaseError: If database operation fails.
        """
        try:
            cursor = self.db.execute("SELECT * FROM articles WHERE url = ?", (url,))
            row = cursor.fetchone()
        except sqlite3.Error as e:
            logger.error("find_by_url_failed", url=url, error=str(e))
            raise DatabaseError(f"Failed to find article: {e}") from e

        return self._row_to_article(row) if row else None

    def insert(self, article: Article) -> Article:
        """Insert a new article.

        Args:
            article: Article to persist (id is ignored).

        Returns:
            The stored article with its assigned id.

        Raises:
            DuplicateArticleError: If the canonical URL already exists.
            DatabaseError: If database operation fails.
        """
        query = """
            INSERT INTO articles (
                url, title, body, excerpt, author, published_at, source_name,
                extraction_method, bias_score, sentiment, key_phrases,
                bias_indicators, credibility, highlighted_body, category,
                party_affinity, political_lean, word_count, read_time_minutes,
                content_quality_score, is_trending, view_count, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """

        params = (
            article.url,
            article.title,
            article.body,
            article.excerpt,
            article.author,
            _to_db_datetime(article.published_at),
            article.source_name,
            article.extraction_method.value,
            article.bias_score.model_dump_json(),
            article.sentiment.model_dump_json(),
            article.key_phrases.model_dump_json(),
            json.dumps([indicator.model_dump(mode="json") for indicator in article.bias_indicators]),
            article.credibility.model_dump_json(),
            article.highlighted_body,
            article.category.value,
            article.party_affinity.value,
            article.political_lean.value,
            article.word_count,
            article.read_time_minutes,
            article.content_quality_score,
            int(article.is_trending),
            article.view_count,
            _to_db_datetime(article.created_at),
        )

        try:
            with self.db.transaction() as conn:
                cursor = conn.execute(query, params)
        except sqlite3.IntegrityError as e:
            logger.info("article_already_exists", url=article.url)
            raise DuplicateArticleError(f"Article already stored: {article.url}") from e
        except sqlite3.Error as e:
            logger.error("insert_article_failed", url=article.url, error=str(e))
            raise DatabaseError(f"Failed to insert article: {e}") from e

        logger.debug("article_inserted", id=cursor.lastrowid, url=article.url)
        return article.model_copy(update={"id": cursor.lastrowid})

    def increment_views(self, article_id: int) -> None:
        """Increment an article's view counter.

        Raises:
            DatabaseError: If database operation fails.
        """
        try:
            with self.db.transaction() as conn:
                conn.execute("UPDATE articles SET view_count = view_count + 1 WHERE id = ?", (article_id,))
        except sqlite3.Error as e:
            logger.error("increment_views_failed", article_id=article_id, error=str(e))
            raise DatabaseError(f"Failed to increment views: {e}") from e

    def get_stats(self) -> RepositoryStats:
        """Total, last-24h and trending counts plus a category histogram.

        Raises:
            DatabaseError: If database operation fails.
        """
        cutoff = _to_db_datetime(now_utc() - RECENT_WINDOW)
        try:
            total = self.db.execute("SELECT COUNT(*) FROM articles").fetchone()[0]
            recent = self.db.execute(
                "SELECT COUNT(*) FROM articles WHERE created_at >= ?", (cutoff,)
            ).fetchone()[0]
            trending = self.db.execute(
                "SELECT COUNT(*) FROM articles WHERE is_trending = 1"
            ).fetchone()[0]
            rows = self.db.execute(
                "SELECT category, COUNT(*) AS n FROM articles GROUP BY category ORDER BY category"
            ).fetchall()
            requests = self.db.execute("SELECT COUNT(*) FROM analysis_history").fetchone()[0]
        except sqlite3.Error as e:
            logger.error("get_stats_failed", error=str(e))
            raise DatabaseError(f"Failed to compute statistics: {e}") from e

        return RepositoryStats(
            total_count=total,
            recent_count=recent,
            trending_count=trending,
            category_histogram={row["category"]: row["n"] for row in rows},
            analysis_requests=requests,
        )

    def list_recent(self, category: Optional[Category] = None, limit: int = DEFAULT_LIST_LIMIT) -> List[Article]:
        """Most recently published articles, optionally within one category.

        Args:
            category: Only return articles classified under this category.
            limit: Maximum number of articles.

        Returns:
            Articles ordered newest first.

        Raises:
            DatabaseError: If database operation fails.
        """
        if limit < 1:
            return []

        query = "SELECT * FROM articles"
        params: tuple = ()
        if category is not None:
            query += " WHERE category = ?"
            params = (Category(category).value,)
        query += " ORDER BY published_at DESC, id DESC LIMIT ?"

        try:
            rows = self.db.execute(query, params + (limit,)).fetchall()
        except sqlite3.Error as e:
            logger.error("list_recent_failed", category=category, error=str(e))
            raise DatabaseError(f"Failed to list articles: {e}") from e

        return [self._row_to_article(row) for row in rows]

    def record_analysis(self, article: Article, cached: bool) -> None:
        """Append an on-demand analysis request to the history table.

        Args:
            article: Stored article the request resolved to.
            cached: Whether the stored result was served.

        Raises:
            DatabaseError: If the article has no id or the write fails.
        """
        if article.id is None:
            raise DatabaseError(f"Cannot record analysis for unsaved article: {article.url}")

        try:
            with self.db.transaction() as conn:
                conn.execute(
                    "INSERT INTO analysis_history (article_id, cached, bias_score, requested_at) VALUES (?, ?, ?, ?)",
                    (article.id, int(cached), article.bias_score.model_dump_json(), _to_db_datetime(now_utc())),
                )
        except sqlite3.Error as e:
            logger.error("record_analysis_failed", article_id=article.id, error=str(e))
            raise DatabaseError(f"Failed to record analysis: {e}") from e

    def _row_to_article(self, row) -> Article:
        """Convert database row to Article object.

        Args:
            row: SQLite row object.

        Returns:
            Article object.
        """
        return Article(
            id=row["id"],
            url=row["url"],
            title=row["title"],
            body=row["body"],
            excerpt=row["excerpt"],
            author=row["author"],
            published_at=_parse_datetime(row["published_at"]) or now_utc(),
            source_name=row["source_name"],
            extraction_method=row["extraction_method"],
            bias_score=BiasScore.model_validate_json(row["bias_score"]),
            sentiment=SentimentBreakdown.model_validate_json(row["sentiment"]),
            key_phrases=KeyPhrases.model_validate_json(row["key_phrases"]),
            bias_indicators=[BiasIndicator.model_validate(i) for i in json.loads(row["bias_indicators"])],
            credibility=CredibilityMetrics.model_validate_json(row["credibility"]),
            highlighted_body=row["highlighted_body"],
            category=row["category"],
            party_affinity=row["party_affinity"],
            political_lean=row["political_lean"],
            word_count=row["word_count"],
            read_time_minutes=row["read_time_minutes"],
            content_quality_score=row["content_quality_score"],
            is_trending=bool(row["is_trending"]),
            view_count=row["view_count"],
            created_at=_parse_datetime(row["created_at"]) or now_utc(),
        )
