"""Ingestion orchestrator: poll feeds, extract, score, classify and persist."""

import asyncio
import uuid
from datetime import datetime
from typing import Awaitable, Callable, Dict, List, Sequence, TypeVar

from newsbias.analysis.bias_analyzer import BiasAnalyzer
from newsbias.core.article import CycleStats, FeedItem
from newsbias.core.config import IngestionConfig
from newsbias.core.enums import ItemOutcome
from newsbias.database.repository import ArticleStore
from newsbias.pipeline.classifier import ArticleClassifier
from newsbias.pipeline.collectors.base import BaseCollector
from newsbias.pipeline.extractors.base import BaseExtractor
from newsbias.services.source_registry import SourceRegistry
from newsbias.utils.date_utils import now_utc
from newsbias.utils.exceptions import CollectionError, CollectorError, DuplicateArticleError
from newsbias.utils.logging import get_logger, run_context
from newsbias.utils.text_utils import normalize_url

logger = get_logger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


def create_batches(items: Sequence[T], batch_size: int) -> List[List[T]]:
    """Split items into consecutive batches of at most batch_size."""
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    return [list(items[i : i + batch_size]) for i in range(0, len(items), batch_size)]


class IngestionOrchestrator:
    """Runs ingestion cycles over every feed in the source registry.

    Feeds are polled one at a time with a polite delay. Candidates are then
    processed in fixed-size batches whose items run concurrently; each batch
    is joined before the next starts. The repository is consulted before
    any extraction work and is the only cross-cycle deduplication state.
    """

    def __init__(
        self,
        config: IngestionConfig,
        repository: ArticleStore,
        registry: SourceRegistry,
        collector: BaseCollector,
        extractor: BaseExtractor,
        analyzer: BiasAnalyzer,
        classifier: ArticleClassifier,
        sleep: Sleep = asyncio.sleep,
    ):
        """Initialize orchestrator.

        Args:
            config: Batch size, delays and thresholds.
            repository: Article store used for dedup and persistence.
            registry: Source registry providing feeds and topic hints.
            collector: Feed collector.
            extractor: Article content extractor.
            analyzer: Bias scoring engine.
            classifier: Article classifier.
            sleep: Awaitable delay function (injected in tests).
        """
        self.config = config
        self.repository = repository
        self.registry = registry
        self.collector = collector
        self.extractor = extractor
        self.analyzer = analyzer
        self.classifier = classifier
        self.sleep = sleep

    async def run_cycle(self) -> CycleStats:
        """Run one ingestion cycle.

        Returns:
            Cycle statistics.

        Raises:
            CollectionError: If every configured feed failed.
        """
        stats = CycleStats()

        with run_context(self._generate_run_id()):
            logger.info("ingestion_cycle_starting", batch_size=self.config.batch_size)

            candidates = await self.collect_candidates(stats)
            candidates = self.dedupe_candidates(candidates)
            stats.candidates = len(candidates)

            batches = create_batches(candidates, self.config.batch_size)
            stats.batches = len(batches)

            for index, batch in enumerate(batches):
                logger.info("processing_batch", batch=index + 1, total=len(batches), size=len(batch))
                outcomes = await self.process_batch(batch)
                self._record(stats, outcomes)

                if index < len(batches) - 1 and self.config.batch_delay_sec > 0:
                    await self.sleep(self.config.batch_delay_sec)

            stats.finished_at = now_utc()
            stats.duration_seconds = (stats.finished_at - stats.started_at).total_seconds()
            self._log_summary(stats)

        return stats

    @staticmethod
    def _log_summary(stats: CycleStats) -> None:
        logger.info(
            "ingestion_cycle_complete",
            processed=stats.processed,
            saved=stats.saved,
            duplicates=stats.duplicates,
            skipped=stats.skipped,
            errors=stats.errors,
            duration_seconds=round(stats.duration_seconds, 2),
        )

    async def collect_candidates(self, stats: CycleStats) -> List[FeedItem]:
        """Poll every registry feed sequentially, tagging items with source hints.

        Raises:
            CollectionError: If feeds are configured but none succeeded.
        """
        feeds = self.registry.all_feeds()
        candidates: List[FeedItem] = []

        for index, (feed_url, source) in enumerate(feeds):
            stats.feeds_polled += 1
            try:
                items = await self.collector.collect(feed_url, source.name)
            except CollectorError as e:
                stats.feeds_failed += 1
                logger.warning("feed_collection_failed", source=source.name, feed_url=feed_url, error=str(e))
                items = []

            candidates.extend(
                item.model_copy(update={"source_name": source.name, "topic_hint": source.topic_hint})
                for item in items
            )

            if index < len(feeds) - 1 and self.config.feed_delay_sec > 0:
                await self.sleep(self.config.feed_delay_sec)

        if feeds and stats.feeds_failed == len(feeds):
            logger.error("all_feeds_failed", feeds=len(feeds))
            raise CollectionError(f"All {len(feeds)} feeds failed to collect")

        logger.info(
            "feed_collection_complete",
            feeds=len(feeds),
            failed=stats.feeds_failed,
            candidates=len(candidates),
        )
        return candidates

    @staticmethod
    def dedupe_candidates(candidates: List[FeedItem]) -> List[FeedItem]:
        """Drop later candidates sharing a canonical URL with an earlier one."""
        seen = set()
        unique = []
        for item in candidates:
            key = normalize_url(item.link)
            if key in seen:
                continue
            seen.add(key)
            unique.append(item)
        return unique

    async def process_batch(self, batch: List[FeedItem]) -> List[ItemOutcome]:
        """Process a batch concurrently; failures become ERROR outcomes."""
        results = await asyncio.gather(*(self.process_item(item) for item in batch), return_exceptions=True)

        outcomes = []
        for item, result in zip(batch, results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, BaseException):
                logger.error(
                    "article_processing_failed",
                    url=item.link,
                    source=item.source_name,
                    error=str(result),
                    error_type=type(result).__name__,
                )
                outcomes.append(ItemOutcome.ERROR)
            else:
                outcomes.append(result)
        return outcomes

    async def process_item(self, item: FeedItem) -> ItemOutcome:
        """Dedup check, extract, score, classify and persist one candidate."""
        canonical_url = normalize_url(item.link)

        if self.repository.find_by_url(canonical_url) is not None:
            logger.debug("article_already_stored", url=canonical_url)
            return ItemOutcome.DUPLICATE

        extraction = await self.extractor.extract(item.link)
        if len(extraction.body) < self.config.min_body_chars:
            logger.info("article_insufficient_content", url=canonical_url, body_length=len(extraction.body))
            return ItemOutcome.INSUFFICIENT

        analysis = self.analyzer.analyze(extraction.title, extraction.body, item.source_name)
        article = self.classifier.build_article(
            extraction,
            analysis,
            hint=item.topic_hint,
            published_at=item.published_at,
        )
        article = article.model_copy(update={"url": canonical_url})

        try:
            saved = self.repository.insert(article)
        except DuplicateArticleError:
            logger.debug("article_inserted_concurrently", url=canonical_url)
            return ItemOutcome.DUPLICATE

        logger.info(
            "article_saved",
            id=saved.id,
            title=saved.title,
            category=saved.category.value,
            method=saved.extraction_method.value,
        )
        return ItemOutcome.SAVED

    @staticmethod
    def _record(stats: CycleStats, outcomes: List[ItemOutcome]) -> None:
        counters: Dict[ItemOutcome, str] = {
            ItemOutcome.SAVED: "saved",
            ItemOutcome.DUPLICATE: "duplicates",
            ItemOutcome.INSUFFICIENT: "skipped",
            ItemOutcome.ERROR: "errors",
        }
        for outcome in outcomes:
            stats.processed += 1
            field = counters[outcome]
            setattr(stats, field, getattr(stats, field) + 1)

    @staticmethod
    def _generate_run_id() -> str:
        """Generate unique run ID.

        Returns:
            Run ID string (timestamp + short UUID).
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        short_uuid = str(uuid.uuid4())[:8]
        return f"{timestamp}_{short_uuid}"
