"""Base content extractor for article extraction."""

from abc import ABC, abstractmethod

from newsbias.core.article import ExtractionResult


class BaseExtractor(ABC):
    """Abstract base class for content extractors."""

    @abstractmethod
    async def extract(self, url: str) -> ExtractionResult:
        """
        Extract an article record from a URL.

        Args:
            url: The article URL

        Returns:
            ExtractionResult with a non-empty body

        Raises:
            InvalidURLError: If the URL is malformed
        """
        pass
