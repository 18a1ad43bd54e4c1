"""Core domain models and configurations."""

from newsbias.core.article import (
    AnalysisResponse,
    AnalysisResult,
    Article,
    BiasIndicator,
    BiasScore,
    CredibilityMetrics,
    CycleStats,
    ExtractionResult,
    FeedItem,
    KeyPhrases,
    RepositoryStats,
    SentimentBreakdown,
)
from newsbias.core.config import (
    Config,
    IngestionConfig,
    KeywordTables,
    SelectorConfig,
    SentimentLexicon,
    SourceProfile,
)
from newsbias.core.enums import (
    BiasLean,
    Category,
    ExtractionMethod,
    Impact,
    ItemOutcome,
    PartyAffinity,
    PoliticalLean,
)

__all__ = [
    # Article models
    "FeedItem",
    "ExtractionResult",
    "AnalysisResult",
    "AnalysisResponse",
    "Article",
    "BiasScore",
    "SentimentBreakdown",
    "KeyPhrases",
    "BiasIndicator",
    "CredibilityMetrics",
    "CycleStats",
    "RepositoryStats",
    # Configuration models
    "Config",
    "IngestionConfig",
    "KeywordTables",
    "SelectorConfig",
    "SentimentLexicon",
    "SourceProfile",
    # Enums
    "BiasLean",
    "Category",
    "ExtractionMethod",
    "Impact",
    "ItemOutcome",
    "PartyAffinity",
    "PoliticalLean",
]
