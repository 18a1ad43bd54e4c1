"""Multi-strategy article content extractor."""

from typing import Optional

from newsbias.core.article import ExtractionResult
from newsbias.core.config import SelectorConfig
from newsbias.core.enums import ExtractionMethod
from newsbias.pipeline.extractors.base import BaseExtractor
from newsbias.pipeline.extractors.fetcher import HtmlFetcher
from newsbias.pipeline.extractors.filters import final_clean
from newsbias.pipeline.extractors.strategies import (
    GENERIC_STRATEGIES,
    Page,
    author_fallback,
    body_from_selectors,
    extract_date,
    first_text,
    metadata_body,
    title_fallback,
)
from newsbias.services.source_registry import SourceRegistry
from newsbias.utils.date_utils import now_utc
from newsbias.utils.exceptions import FetchError
from newsbias.utils.logging import get_logger
from newsbias.utils.text_utils import normalize_url, url_path_topic, validate_url

logger = get_logger(__name__)

DEFAULT_AUTHOR = "Staff Reporter"
GENERIC_MIN_CHARS = 200


class ContentExtractor(BaseExtractor):
    """Best-effort article extraction from heterogeneous publisher pages.

    Tries a browser-like fetch first, then a minimal bot fetch, and finally
    synthesizes a placeholder record naming the source, so :meth:`extract`
    never returns an empty body.
    """

    def __init__(
        self,
        registry: SourceRegistry,
        fetcher: Optional[HtmlFetcher] = None,
        min_body_chars: int = 100,
        min_alternative_chars: int = 50,
    ):
        """
        Initialize the extractor.

        Args:
            registry: Source registry for names, descriptions and selectors
            fetcher: Page fetcher (defaults to HtmlFetcher())
            min_body_chars: Body length accepted from the primary fetch
            min_alternative_chars: Body length accepted from the alternative fetch
        """
        self.registry = registry
        self.fetcher = fetcher or HtmlFetcher()
        self.min_body_chars = min_body_chars
        self.min_alternative_chars = min_alternative_chars

    async def extract(self, url: str) -> ExtractionResult:
        url = validate_url(url)
        source_name = self.registry.source_name_for_url(url)
        selectors = self.registry.selectors_for_url(url)

        logger.info("extracting_content", url=url, source=source_name)

        attempts = [
            ("primary", self.fetcher.fetch_primary, self.min_body_chars),
            ("alternative", self.fetcher.fetch_alternative, self.min_alternative_chars),
        ]
        for attempt, fetch, min_chars in attempts:
            try:
                html = await fetch(url)
            except FetchError as e:
                logger.warning("fetch_failed", url=url, attempt=attempt, error=str(e))
                continue

            try:
                result = self.parse_html(html, url, source_name, selectors)
            except Exception as e:
                logger.error("parse_failed", url=url, attempt=attempt, error=str(e), exc_info=True)
                continue

            if result is not None and len(result.body) >= min_chars:
                logger.info(
                    "extraction_complete",
                    url=url,
                    attempt=attempt,
                    body_length=len(result.body),
                    paragraphs=len(result.paragraphs),
                )
                return result

            logger.warning(
                "extraction_insufficient",
                url=url,
                attempt=attempt,
                body_length=len(result.body) if result else 0,
            )

        logger.warning("using_synthetic_fallback", url=url, source=source_name)
        return self.synthetic_fallback(url, source_name)

    def parse_html(
        self,
        html: str,
        url: str,
        source_name: str,
        selectors: Optional[SelectorConfig] = None,
    ) -> Optional[ExtractionResult]:
        """
        Run the extraction chain over one HTML document.

        Args:
            html: Raw page HTML
            url: Page URL
            source_name: Publisher display name
            selectors: Publisher-specific selectors, if any

        Returns:
            ExtractionResult, or None if no body text survived cleaning
        """
        page = Page.parse(html, url)
        selectors = selectors or SelectorConfig()

        title = first_text(page.soup, selectors.title) or title_fallback(page.soup)
        author = first_text(page.soup, selectors.author) or author_fallback(page.soup)
        published_at = extract_date(page.soup, selectors.date + [".date", ".time"])

        body = self.extract_body(page, selectors)
        if len(body) < self.min_body_chars:
            body = metadata_body(page) or body

        body = final_clean(body)
        if not body:
            return None

        return ExtractionResult(
            title=title or self.title_from_url(url, source_name),
            body=body,
            author=author or DEFAULT_AUTHOR,
            published_at=published_at or now_utc(),
            source_name=source_name,
            canonical_url=normalize_url(url),
            extraction_method=ExtractionMethod.FULL,
        )

    def extract_body(self, page: Page, selectors: SelectorConfig) -> str:
        """Domain selectors first, then the generic strategy chain.

        The first strategy yielding at least 200 characters wins; otherwise
        the longest partial result is kept.
        """
        best = ""
        if selectors.body:
            best = body_from_selectors(page, selectors.body)
            if len(best) >= GENERIC_MIN_CHARS:
                logger.debug("body_strategy_succeeded", strategy="domain_selectors", length=len(best))
                return best

        for name, strategy in GENERIC_STRATEGIES:
            content = strategy(page)
            if len(content) >= GENERIC_MIN_CHARS:
                logger.debug("body_strategy_succeeded", strategy=name, length=len(content))
                return content
            if len(content) > len(best):
                best = content

        return best

    def title_from_url(self, url: str, source_name: str) -> str:
        """Synthesized "<Topic> - <Source>" title from the URL path."""
        topic = url_path_topic(url)
        if not topic:
            return f"News Article from {source_name}"
        return f"{topic[0].upper()}{topic[1:]} - {source_name}"

    def synthetic_fallback(self, url: str, source_name: str) -> ExtractionResult:
        """Placeholder record used when no fetch produced usable text."""
        topic = url_path_topic(url)
        description = self.registry.description_for(source_name)

        body = "\n\n".join(
            [
                f"This article from {source_name} covers current events and developments. "
                "The full content could not be extracted, so this analysis relies on "
                "the publication's known editorial stance and the article's URL.",
                f"{source_name} is known for {description} coverage.",
                f"Topics likely covered: {topic or 'current affairs, politics, social issues'}.",
                f"For the complete article, visit: {url}",
            ]
        )

        return ExtractionResult(
            title=self.title_from_url(url, source_name),
            body=body,
            author=DEFAULT_AUTHOR,
            published_at=now_utc(),
            source_name=source_name,
            canonical_url=normalize_url(url),
            extraction_method=ExtractionMethod.FALLBACK,
        )
