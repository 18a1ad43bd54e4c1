"""On-demand single-article analysis."""

from newsbias.analysis.bias_analyzer import BiasAnalyzer
from newsbias.core.article import AnalysisResponse, Article
from newsbias.database.repository import ArticleStore
from newsbias.pipeline.classifier import ArticleClassifier
from newsbias.pipeline.extractors.base import BaseExtractor
from newsbias.utils.exceptions import DatabaseError
from newsbias.utils.logging import get_logger
from newsbias.utils.text_utils import normalize_url, validate_url

logger = get_logger(__name__)


class OnDemandAnalyzer:
    """Analyze one user-supplied URL, reusing a stored result when present."""

    def __init__(
        self,
        repository: ArticleStore,
        extractor: BaseExtractor,
        analyzer: BiasAnalyzer,
        classifier: ArticleClassifier,
    ):
        self.repository = repository
        self.extractor = extractor
        self.analyzer = analyzer
        self.classifier = classifier

    async def analyze_url(self, url: str) -> AnalysisResponse:
        """Return the stored analysis for url, or extract and analyze it now.

        A cache hit increments the article's view counter. A fresh result is
        persisted; if persistence fails the error is logged and the unsaved
        article is still returned. Every request that resolves to a stored
        article is appended to the analysis history.

        Args:
            url: Article URL.

        Returns:
            Analysis response with the article and whether it was cached.

        Raises:
            InvalidURLError: If url is not an absolute http(s) URL.
        """
        url = validate_url(url)
        canonical_url = normalize_url(url)

        cached = self.repository.find_by_url(canonical_url)
        if cached is not None:
            if cached.id is not None:
                self.repository.increment_views(cached.id)
                cached = cached.model_copy(update={"view_count": cached.view_count + 1})
                self._record_history(cached, cached=True)
            logger.info("on_demand_cache_hit", url=canonical_url, id=cached.id)
            return AnalysisResponse(article=cached, cached=True)

        extraction = await self.extractor.extract(url)
        analysis = self.analyzer.analyze(extraction.title, extraction.body, extraction.source_name)
        article = self.classifier.build_article(extraction, analysis)
        article = article.model_copy(update={"url": canonical_url})

        try:
            article = self.repository.insert(article)
        except DatabaseError as e:
            logger.error("on_demand_save_failed", url=canonical_url, error=str(e))
        else:
            self._record_history(article, cached=False)

        logger.info(
            "on_demand_analysis_complete",
            url=canonical_url,
            method=article.extraction_method.value,
            overall=article.bias_score.overall,
        )
        return AnalysisResponse(article=article, cached=False)

    def _record_history(self, article: Article, cached: bool) -> None:
        try:
            self.repository.record_analysis(article, cached=cached)
        except DatabaseError as e:
            logger.warning("analysis_history_failed", id=article.id, error=str(e))
