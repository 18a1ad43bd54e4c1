"""Custom exceptions for newsbias."""


class NewsBiasError(Exception):
    """Base exception for newsbias."""


class ConfigurationError(NewsBiasError):
    """Configuration error."""


class InvalidURLError(NewsBiasError):
    """Malformed or unsupported article URL."""


class PipelineError(NewsBiasError):
    """Pipeline execution error."""


class CollectionError(PipelineError):
    """Feed collection failed for the whole cycle."""


class CollectorError(PipelineError):
    """Collector error for a single feed."""


class ExtractionError(PipelineError):
    """Content extraction error."""


class FetchError(ExtractionError):
    """HTTP fetch failed, timed out, or returned a blocked/empty page."""


class AnalysisError(PipelineError):
    """Bias analysis error."""


class DatabaseError(NewsBiasError):
    """Database operation error."""


class DuplicateArticleError(DatabaseError):
    """Article with the same canonical URL already stored."""
