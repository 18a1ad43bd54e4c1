"""Configuration models."""

from pathlib import Path
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from newsbias.core.enums import BiasLean, Category, PartyAffinity

# Bundled YAML data (sources, keyword tables)
DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


class SelectorConfig(BaseModel):
    """Ordered CSS selectors for one publisher's article pages."""

    title: List[str] = Field(default_factory=list)
    body: List[str] = Field(default_factory=list)
    author: List[str] = Field(default_factory=list)
    date: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class SourceProfile(BaseModel):
    """Publisher entry in the source registry."""

    name: str = Field(..., min_length=1)
    feed_urls: List[str] = Field(default_factory=list)
    topic_hint: Category = Category.GENERAL
    bias_prior: BiasLean = BiasLean.CENTER
    reliability_prior: int = Field(default=70, ge=0, le=100)

    domains: List[str] = Field(default_factory=list)
    description: str = "independent"
    selectors: SelectorConfig = Field(default_factory=SelectorConfig)

    model_config = {"frozen": True}

    @field_validator("domains")
    @classmethod
    def normalize_domains(cls, v: List[str]) -> List[str]:
        """Lowercase domains and drop a leading "www."."""
        cleaned = []
        for domain in v:
            domain = domain.strip().lower()
            if domain.startswith("www."):
                domain = domain[4:]
            if domain:
                cleaned.append(domain)
        return cleaned


class SentimentLexicon(BaseModel):
    """Positive / negative / neutral word lists."""

    positive: List[str]
    negative: List[str]
    neutral: List[str]


class KeywordTables(BaseModel):
    """Hand-curated keyword corpora used by scoring and classification."""

    version: str = "1"

    # Party keywords used for bias tilt, framing and highlighting
    political: Dict[str, List[str]]
    sentiment: SentimentLexicon
    factual_phrases: List[str]
    source_attributions: List[str]
    balance_markers: List[str]

    categories: Dict[Category, List[str]]
    party_affinity: Dict[PartyAffinity, List[str]]

    @field_validator("political")
    @classmethod
    def require_major_parties(cls, v: Dict[str, List[str]]) -> Dict[str, List[str]]:
        """Bias tilt compares BJP against Congress; both must be present."""
        missing = {"bjp", "congress"} - set(v)
        if missing:
            raise ValueError(f"political keywords missing parties: {sorted(missing)}")
        return v


class IngestionConfig(BaseModel):
    """Tunables for one ingestion cycle."""

    batch_size: int = Field(default=3, ge=1)
    feed_delay_sec: float = Field(default=1.0, ge=0.0)
    batch_delay_sec: float = Field(default=2.0, ge=0.0)
    max_items_per_feed: int = Field(default=10, gt=0)
    min_body_chars: int = Field(default=100, ge=0)

    # Trending heuristic
    trending_gate: float = Field(default=0.7, ge=0.0, le=1.0)
    trending_window_hours: float = Field(default=6.0, gt=0.0)
    trending_emotional_threshold: int = Field(default=40, ge=0, le=100)
    trending_extreme_low: int = Field(default=30, ge=0, le=100)
    trending_extreme_high: int = Field(default=70, ge=0, le=100)

    # Classification voting
    category_hint_bonus: int = Field(default=5, ge=0)
    min_category_score: int = Field(default=3, ge=0)
    min_party_score: int = Field(default=2, ge=0)


class Config(BaseSettings):
    """Main application configuration from environment variables."""

    # Database
    db_path: Path = Path("./newsbias.db")

    # Data files (sources.yaml, keywords.yaml)
    data_dir: Path = DEFAULT_DATA_DIR

    # HTTP
    request_timeout_sec: float = Field(default=20.0, gt=0)
    alternative_timeout_sec: float = Field(default=15.0, gt=0)
    feed_timeout_sec: float = Field(default=12.0, gt=0)

    # Ingestion
    batch_size: int = Field(default=3, ge=1)
    feed_delay_sec: float = Field(default=1.0, ge=0.0)
    batch_delay_sec: float = Field(default=2.0, ge=0.0)
    max_items_per_feed: int = Field(default=10, gt=0)
    min_body_chars: int = Field(default=100, ge=0)
    trending_gate: float = Field(default=0.7, ge=0.0, le=1.0)
    trending_window_hours: float = Field(default=6.0, gt=0.0)

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "console"
    log_dir: Optional[Path] = None

    model_config = SettingsConfigDict(
        env_prefix="NEWSBIAS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def ingestion_config(self) -> IngestionConfig:
        """Build the orchestrator configuration from settings."""
        return IngestionConfig(
            batch_size=self.batch_size,
            feed_delay_sec=self.feed_delay_sec,
            batch_delay_sec=self.batch_delay_sec,
            max_items_per_feed=self.max_items_per_feed,
            min_body_chars=self.min_body_chars,
            trending_gate=self.trending_gate,
            trending_window_hours=self.trending_window_hours,
        )

    def validate_paths(self) -> None:
        """Validate and create necessary paths."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        if self.log_dir:
            self.log_dir.mkdir(parents=True, exist_ok=True)
