"""Utility modules for newsbias."""

from newsbias.utils.date_utils import (
    hours_since,
    now_utc,
    parse_date,
)
from newsbias.utils.exceptions import (
    AnalysisError,
    CollectionError,
    CollectorError,
    ConfigurationError,
    DatabaseError,
    DuplicateArticleError,
    ExtractionError,
    FetchError,
    InvalidURLError,
    NewsBiasError,
    PipelineError,
)
from newsbias.utils.logging import get_logger, run_context, setup_logging
from newsbias.utils.text_utils import (
    clean_whitespace,
    count_words,
    extract_domain,
    normalize_url,
    strip_html,
    truncate_text,
    url_path_topic,
    validate_url,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "run_context",
    # Exceptions
    "NewsBiasError",
    "ConfigurationError",
    "InvalidURLError",
    "PipelineError",
    "CollectionError",
    "CollectorError",
    "ExtractionError",
    "FetchError",
    "AnalysisError",
    "DatabaseError",
    "DuplicateArticleError",
    # Date utils
    "parse_date",
    "hours_since",
    "now_utc",
    # Text utils
    "validate_url",
    "normalize_url",
    "extract_domain",
    "truncate_text",
    "clean_whitespace",
    "strip_html",
    "count_words",
    "url_path_topic",
]
