"""Article domain models."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from newsbias.core.enums import (
    Category,
    ExtractionMethod,
    Impact,
    PartyAffinity,
    PoliticalLean,
)
from newsbias.utils.date_utils import now_utc


class FeedItem(BaseModel):
    """Candidate article stub parsed from a syndication feed."""

    title: str = Field(..., min_length=1)
    link: str = Field(..., min_length=1)
    summary: str = ""
    published_at: datetime = Field(default_factory=now_utc)

    # Tagged by the poller/orchestrator from the source registry
    source_name: str = ""
    topic_hint: Category = Category.GENERAL


class ExtractionResult(BaseModel):
    """Best-effort article record produced by the content extractor."""

    title: str = Field(..., min_length=1)
    body: str = Field(..., min_length=1)
    author: str = "Staff Reporter"
    published_at: datetime = Field(default_factory=now_utc)
    source_name: str
    canonical_url: str
    extraction_method: ExtractionMethod = ExtractionMethod.FULL

    @property
    def paragraphs(self) -> List[str]:
        """Body split back into its paragraphs."""
        return [p for p in self.body.split("\n\n") if p.strip()]

    model_config = {
        "json_schema_extra": {
            "example": {
                "title": "Modi Announces Economic Package for Middle Class",
                "body": "First paragraph...\n\nSecond paragraph...",
                "author": "Staff Reporter",
                "published_at": "2025-01-04T10:30:00+00:00",
                "source_name": "Times of India",
                "canonical_url": "https://timesofindia.indiatimes.com/india/package/articleshow/1.cms",
                "extraction_method": "full",
            }
        }
    }


class BiasScore(BaseModel):
    """Bias sub-scores, each 0-100."""

    overall: int = Field(..., ge=0, le=100)
    emotional: int = Field(..., ge=0, le=100)
    factual: int = Field(..., ge=0, le=100)
    balanced: int = Field(..., ge=0, le=100)


class SentimentBreakdown(BaseModel):
    """Sentiment percentages; always sum to 100."""

    positive: int = Field(..., ge=0, le=100)
    neutral: int = Field(..., ge=0, le=100)
    negative: int = Field(..., ge=0, le=100)

    @model_validator(mode="after")
    def check_total(self) -> "SentimentBreakdown":
        """Ensure percentages sum to exactly 100."""
        total = self.positive + self.neutral + self.negative
        if total != 100:
            raise ValueError(f"Sentiment percentages must sum to 100, got {total}")
        return self


class KeyPhrases(BaseModel):
    """Short text windows around lexicon matches."""

    positive: List[str] = Field(default_factory=list, max_length=5)
    negative: List[str] = Field(default_factory=list, max_length=5)
    neutral: List[str] = Field(default_factory=list, max_length=5)


class BiasIndicator(BaseModel):
    """A single structured bias finding."""

    type: str
    description: str
    examples: List[str] = Field(default_factory=list, max_length=3)
    impact: Impact


class CredibilityMetrics(BaseModel):
    """Credibility metrics, each 0-100."""

    source_reliability: int = Field(..., ge=0, le=100)
    fact_checking: int = Field(..., ge=0, le=100)
    transparency: int = Field(..., ge=0, le=100)
    author_expertise: int = Field(..., ge=0, le=100)


class AnalysisResult(BaseModel):
    """Output of the bias scoring engine."""

    bias_score: BiasScore
    sentiment: SentimentBreakdown
    key_phrases: KeyPhrases
    bias_indicators: List[BiasIndicator] = Field(default_factory=list)
    credibility: CredibilityMetrics
    highlighted_body: str


class Article(BaseModel):
    """Persisted article: extraction + analysis + derived fields."""

    # Database ID
    id: Optional[int] = None

    # Extraction
    url: str
    title: str
    body: str
    excerpt: str = ""
    author: str = "Staff Reporter"
    published_at: datetime
    source_name: str
    extraction_method: ExtractionMethod = ExtractionMethod.FULL

    # Analysis
    bias_score: BiasScore
    sentiment: SentimentBreakdown
    key_phrases: KeyPhrases
    bias_indicators: List[BiasIndicator] = Field(default_factory=list)
    credibility: CredibilityMetrics
    highlighted_body: str = ""

    # Derived
    category: Category = Category.GENERAL
    party_affinity: PartyAffinity = PartyAffinity.NEUTRAL
    political_lean: PoliticalLean = PoliticalLean.CENTER
    word_count: int = Field(default=0, ge=0)
    read_time_minutes: int = Field(default=0, ge=0)
    content_quality_score: float = Field(default=0.0, ge=0.0, le=100.0)
    is_trending: bool = False

    # Maintained by external callers after creation
    view_count: int = Field(default=0, ge=0)

    created_at: datetime = Field(default_factory=now_utc)


class CycleStats(BaseModel):
    """Statistics returned by one ingestion cycle."""

    processed: int = 0
    saved: int = 0
    duplicates: int = 0
    skipped: int = 0
    errors: int = 0

    feeds_polled: int = 0
    feeds_failed: int = 0
    candidates: int = 0
    batches: int = 0

    started_at: datetime = Field(default_factory=now_utc)
    finished_at: Optional[datetime] = None
    duration_seconds: float = 0.0


class RepositoryStats(BaseModel):
    """Aggregate statistics reported by the article repository."""

    total_count: int = 0
    recent_count: int = 0
    trending_count: int = 0
    category_histogram: Dict[str, int] = Field(default_factory=dict)
    analysis_requests: int = 0


class AnalysisResponse(BaseModel):
    """Result of the on-demand single-article pipeline."""

    article: Article
    cached: bool = False
