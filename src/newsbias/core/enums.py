"""Enums for newsbias system."""

from enum import Enum


class ExtractionMethod(str, Enum):
    """Whether the body came from page content or a synthesized placeholder."""

    FULL = "full"
    FALLBACK = "fallback"


class BiasLean(str, Enum):
    """Source-level political lean prior."""

    LEFT = "left"
    CENTER = "center"
    CENTER_RIGHT = "center-right"
    RIGHT = "right"


class PoliticalLean(str, Enum):
    """Article-level lean derived from the overall bias score."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class Category(str, Enum):
    """Article topic category."""

    POLITICS = "politics"
    BUSINESS = "business"
    SPORTS = "sports"
    OPINION = "opinion"
    GENERAL = "general"


class PartyAffinity(str, Enum):
    """Detected association between article language and a party."""

    BJP = "bjp"
    CONGRESS = "congress"
    AAP = "aap"
    REGIONAL = "regional"
    NEUTRAL = "neutral"


class Impact(str, Enum):
    """Impact level of a bias indicator."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ItemOutcome(str, Enum):
    """Result of processing one candidate during an ingestion cycle."""

    SAVED = "saved"
    DUPLICATE = "duplicate"
    INSUFFICIENT = "insufficient"
    ERROR = "error"
