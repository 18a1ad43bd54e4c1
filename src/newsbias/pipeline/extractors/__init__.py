"""Article content extraction."""

from newsbias.pipeline.extractors.base import BaseExtractor
from newsbias.pipeline.extractors.content_extractor import ContentExtractor
from newsbias.pipeline.extractors.fetcher import HtmlFetcher
from newsbias.pipeline.extractors.filters import (
    final_clean,
    is_navigation_text,
    is_unwanted_container,
    is_valid_paragraph,
    remove_unwanted_elements,
)
from newsbias.pipeline.extractors.strategies import GENERIC_STRATEGIES, Page

__all__ = [
    "BaseExtractor",
    "ContentExtractor",
    "HtmlFetcher",
    "Page",
    "GENERIC_STRATEGIES",
    "is_valid_paragraph",
    "is_navigation_text",
    "is_unwanted_container",
    "remove_unwanted_elements",
    "final_clean",
]
