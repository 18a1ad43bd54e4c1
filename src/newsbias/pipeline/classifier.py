"""Article classification: topic, party affinity, lean, trending and reading metrics."""

import math
import random
from datetime import datetime
from typing import Callable, Dict, Optional

from newsbias.analysis.bias_analyzer import Lexicon
from newsbias.core.article import AnalysisResult, Article, ExtractionResult
from newsbias.core.config import IngestionConfig, KeywordTables
from newsbias.core.enums import Category, PartyAffinity, PoliticalLean
from newsbias.utils.date_utils import hours_since, now_utc
from newsbias.utils.logging import get_logger
from newsbias.utils.text_utils import clean_whitespace, count_words, strip_html, truncate_text

logger = get_logger(__name__)

WORDS_PER_MINUTE = 200
EXCERPT_CHARS = 200
LEFT_BELOW = 40
RIGHT_ABOVE = 60


class ArticleClassifier:
    """Derive classification fields and assemble the persisted Article."""

    def __init__(
        self,
        keywords: KeywordTables,
        config: Optional[IngestionConfig] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        """Initialize classifier.

        Args:
            keywords: Keyword tables with category and party lists
            config: Voting thresholds and trending tunables
            rng: Random source for the trending sampling gate
            clock: Current-time provider
        """
        self.config = config or IngestionConfig()
        self.rng = rng or random.Random()
        self.clock = clock

        self.categories: Dict[Category, Lexicon] = {
            category: Lexicon(terms) for category, terms in keywords.categories.items()
        }
        self.parties: Dict[PartyAffinity, Lexicon] = {
            party: Lexicon(terms) for party, terms in keywords.party_affinity.items()
        }

    def category(self, text: str, hint: Category = Category.GENERAL) -> Category:
        """Topic by keyword voting, with a bonus for the feed's suggested category."""
        text = text.lower()
        scores = {category: lexicon.count(text) for category, lexicon in self.categories.items()}
        if hint in scores:
            scores[hint] += self.config.category_hint_bonus

        best, best_score = Category.GENERAL, 0
        for category, score in scores.items():
            if score > best_score:
                best, best_score = category, score

        return best if best_score >= self.config.min_category_score else Category.GENERAL

    def party_affinity(self, text: str) -> PartyAffinity:
        """Party with the most keyword hits, or neutral below the minimum score."""
        text = text.lower()
        best, best_score = PartyAffinity.NEUTRAL, 0
        for party, lexicon in self.parties.items():
            score = lexicon.count(text)
            if score > best_score:
                best, best_score = party, score

        return best if best_score >= self.config.min_party_score else PartyAffinity.NEUTRAL

    @staticmethod
    def political_lean(overall: int) -> PoliticalLean:
        if overall < LEFT_BELOW:
            return PoliticalLean.LEFT
        if overall > RIGHT_ABOVE:
            return PoliticalLean.RIGHT
        return PoliticalLean.CENTER

    def is_trending(self, published_at: datetime, analysis: AnalysisResult) -> bool:
        """Recent, emotionally charged or extreme, and past the random gate."""
        config = self.config
        score = analysis.bias_score

        is_recent = hours_since(published_at, self.clock()) < config.trending_window_hours
        high_signal = (
            score.emotional > config.trending_emotional_threshold
            or score.overall < config.trending_extreme_low
            or score.overall > config.trending_extreme_high
        )
        if not (is_recent and high_signal):
            return False
        return self.rng.random() > config.trending_gate

    @staticmethod
    def word_count(body: str) -> int:
        return count_words(body)

    @staticmethod
    def read_time_minutes(word_count: int) -> int:
        return math.ceil(word_count / WORDS_PER_MINUTE)

    @staticmethod
    def excerpt(body: str) -> str:
        """Plain-text lead of at most 200 characters."""
        return truncate_text(clean_whitespace(strip_html(body)), EXCERPT_CHARS - 3)

    def build_article(
        self,
        extraction: ExtractionResult,
        analysis: AnalysisResult,
        hint: Category = Category.GENERAL,
        published_at: Optional[datetime] = None,
    ) -> Article:
        """Combine extraction, analysis and derived fields into an Article.

        Args:
            extraction: Extracted article record
            analysis: Bias analysis of the record
            hint: Suggested category from the feed's source
            published_at: Feed publication time, used for trending (defaults
                to the extracted date)

        Returns:
            Article ready for persistence
        """
        text = f"{extraction.title} {extraction.body}"
        words = self.word_count(extraction.body)

        article = Article(
            url=extraction.canonical_url,
            title=extraction.title,
            body=extraction.body,
            excerpt=self.excerpt(extraction.body),
            author=extraction.author,
            published_at=extraction.published_at,
            source_name=extraction.source_name,
            extraction_method=extraction.extraction_method,
            bias_score=analysis.bias_score,
            sentiment=analysis.sentiment,
            key_phrases=analysis.key_phrases,
            bias_indicators=analysis.bias_indicators,
            credibility=analysis.credibility,
            highlighted_body=analysis.highlighted_body,
            category=self.category(text, hint),
            party_affinity=self.party_affinity(text),
            political_lean=self.political_lean(analysis.bias_score.overall),
            word_count=words,
            read_time_minutes=self.read_time_minutes(words),
            content_quality_score=min(len(extraction.body) / 100, 100.0),
            is_trending=self.is_trending(published_at or extraction.published_at, analysis),
        )

        logger.debug(
            "article_classified",
            url=article.url,
            category=article.category.value,
            party_affinity=article.party_affinity.value,
            is_trending=article.is_trending,
        )
        return article
