# tests/integration/test_repository.py
"""Integration tests for ArticleRepository."""

from datetime import timedelta

import pytest

from newsbias.core.article import BiasScore
from newsbias.core.enums import Category
from newsbias.database.connection import DatabaseConnection, init_database
from newsbias.database.repository import ArticleRepository
from newsbias.utils.exceptions import DatabaseError, DuplicateArticleError


@pytest.mark.integration
class TestArticleRepository:
    """Integration tests for ArticleRepository."""

    def test_insert_assigns_id(self, test_db, sample_article):
        """Should persist an article and return it with its id."""
        repo = ArticleRepository(test_db)

        saved = repo.insert(sample_article)

        assert saved.id is not None
        cursor = test_db.conn.execute("SELECT COUNT(*) FROM articles")
        assert cursor.fetchone()[0] == 1

    def test_insert_duplicate_raises(self, test_db, sample_article):
        """Should reject a second article with the same canonical URL."""
        repo = ArticleRepository(test_db)
        repo.insert(sample_article)

        with pytest.raises(DuplicateArticleError):
            repo.insert(sample_article.model_copy(update={"title": "Different title"}))

        cursor = test_db.conn.execute("SELECT COUNT(*) FROM articles")
        assert cursor.fetchone()[0] == 1

    def test_find_by_url_round_trip(self, test_db, sample_article):
        """Should restore nested scores, phrases and indicators."""
        repo = ArticleRepository(test_db)
        saved = repo.insert(sample_article)

        found = repo.find_by_url(sample_article.url)

        assert found is not None
        assert found.id == saved.id
        assert found.bias_score == sample_article.bias_score
        assert found.sentiment == sample_article.sentiment
        assert found.key_phrases == sample_article.key_phrases
        assert found.bias_indicators == sample_article.bias_indicators
        assert found.credibility == sample_article.credibility
        assert found.category == Category.POLITICS
        assert found.published_at == sample_article.published_at
        assert found.highlighted_body == sample_article.highlighted_body

    def test_find_missing(self, test_db):
        """Should return None for unknown URLs."""
        assert ArticleRepository(test_db).find_by_url("https://example.org/none") is None

    def test_increment_views(self, test_db, sample_article):
        """Should increment the stored view counter."""
        repo = ArticleRepository(test_db)
        saved = repo.insert(sample_article)

        repo.increment_views(saved.id)
        repo.increment_views(saved.id)

        assert repo.find_by_url(saved.url).view_count == 2

    def test_get_stats(self, test_db, sample_article):
        """Should report totals, trending count and category histogram."""
        repo = ArticleRepository(test_db)
        repo.insert(sample_article)
        repo.insert(
            sample_article.model_copy(
                update={
                    "url": "https://www.livemint.com/markets/rally-1",
                    "category": Category.BUSINESS,
                    "is_trending": True,
                }
            )
        )
        repo.insert(
            sample_article.model_copy(
                update={
                    "url": "https://www.livemint.com/markets/rally-2",
                    "category": Category.BUSINESS,
                    "created_at": sample_article.created_at - timedelta(days=3),
                }
            )
        )

        stats = repo.get_stats()

        assert stats.total_count == 3
        assert stats.recent_count == 2
        assert stats.trending_count == 1
        assert stats.category_histogram == {"business": 2, "politics": 1}

    def test_empty_stats(self, test_db):
        """Should report zeros for an empty store."""
        stats = ArticleRepository(test_db).get_stats()

        assert stats.total_count == 0
        assert stats.category_histogram == {}
        assert stats.analysis_requests == 0

    def test_list_recent_newest_first(self, test_db, sample_article):
        """Should list articles by publication time, newest first."""
        repo = ArticleRepository(test_db)
        for offset, slug in enumerate(["oldest", "middle", "newest"]):
            repo.insert(
                sample_article.model_copy(
                    update={
                        "url": f"https://www.thehindu.com/news/{slug}",
                        "published_at": sample_article.published_at + timedelta(hours=offset),
                    }
                )
            )

        articles = repo.list_recent()

        assert [a.url.rsplit("/", 1)[-1] for a in articles] == ["newest", "middle", "oldest"]
        assert [a.url.rsplit("/", 1)[-1] for a in repo.list_recent(limit=2)] == ["newest", "middle"]
        assert repo.list_recent(limit=0) == []

    def test_list_recent_by_category(self, test_db, sample_article):
        """Should only return articles in the requested category."""
        repo = ArticleRepository(test_db)
        repo.insert(sample_article)
        repo.insert(
            sample_article.model_copy(
                update={"url": "https://www.livemint.com/markets/rally-1", "category": Category.BUSINESS}
            )
        )

        business = repo.list_recent(category=Category.BUSINESS)

        assert [a.url for a in business] == ["https://www.livemint.com/markets/rally-1"]
        assert repo.list_recent(category=Category.SPORTS) == []

    def test_record_analysis(self, test_db, sample_article):
        """Should append one history row per request and count it in stats."""
        repo = ArticleRepository(test_db)
        saved = repo.insert(sample_article)

        repo.record_analysis(saved, cached=False)
        repo.record_analysis(saved, cached=True)

        rows = test_db.conn.execute(
            "SELECT article_id, cached, bias_score FROM analysis_history ORDER BY id"
        ).fetchall()
        assert [(row["article_id"], row["cached"]) for row in rows] == [(saved.id, 0), (saved.id, 1)]
        assert BiasScore.model_validate_json(rows[0]["bias_score"]) == saved.bias_score
        assert repo.get_stats().analysis_requests == 2

    def test_record_analysis_requires_saved_article(self, test_db, sample_article):
        """Should refuse to record history for an article without an id."""
        with pytest.raises(DatabaseError, match="unsaved article"):
            ArticleRepository(test_db).record_analysis(sample_article, cached=False)


@pytest.mark.integration
class TestDatabaseConnection:
    """Integration tests for connection setup."""

    def test_schema_is_idempotent(self, tmp_path, sample_article):
        """Should keep data when reopening an existing database."""
        db_path = tmp_path / "nested" / "news.db"
        db = init_database(db_path)
        ArticleRepository(db).insert(sample_article)
        db.close()

        with DatabaseConnection(db_path) as reopened:
            assert ArticleRepository(reopened).get_stats().total_count == 1

    def test_transaction_rolls_back(self, test_db, sample_article):
        """Should discard writes from a failed transaction block."""
        ArticleRepository(test_db).insert(sample_article)

        with pytest.raises(RuntimeError):
            with test_db.transaction() as conn:
                conn.execute("UPDATE articles SET view_count = 99")
                raise RuntimeError("abort")

        assert ArticleRepository(test_db).find_by_url(sample_article.url).view_count == 0

    def test_close_is_idempotent(self, tmp_path):
        """Should allow closing an unopened or closed connection."""
        db = DatabaseConnection(tmp_path / "idle.db")
        db.close()
        db.connect()
        assert db.is_open
        db.close()
        db.close()
        assert not db.is_open
