# tests/integration/test_orchestrator.py
"""Integration tests for ingestion cycles."""

import asyncio
from typing import List

import pytest

from newsbias.core.article import ExtractionResult
from newsbias.core.config import IngestionConfig, SourceProfile
from newsbias.core.enums import Category
from newsbias.pipeline.extractors.base import BaseExtractor
from newsbias.pipeline.orchestrator import IngestionOrchestrator, create_batches
from newsbias.services.source_registry import SourceRegistry
from newsbias.utils.exceptions import CollectionError

TOI_FEED = "https://timesofindia.indiatimes.com/rssfeedstopstories.cms"
MINT_FEED = "https://www.livemint.com/rss/markets"
DEAD_FEED = "https://example.org/dead.rss"


class RecordingSleep:
    """Awaitable sleep stand-in that records requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class InFlightExtractor(BaseExtractor):
    """Extractor that yields to the event loop and records concurrency."""

    def __init__(self, inner: BaseExtractor):
        self.inner = inner
        self.in_flight = 0
        self.peak = 0
        self.completed = 0
        self.completed_at_start: List[int] = []

    async def extract(self, url: str) -> ExtractionResult:
        self.completed_at_start.append(self.completed)
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        try:
            await asyncio.sleep(0.01)
            return await self.inner.extract(url)
        finally:
            self.in_flight -= 1
            self.completed += 1


def _registry(*sources: SourceProfile) -> SourceRegistry:
    return SourceRegistry(sources)


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def build_orchestrator(memory_repository, analyzer, classifier, fake_extractor, sleep):
    """Factory wiring an orchestrator around in-memory fakes."""

    def _build(registry, collector, extractor=None, config=None):
        return IngestionOrchestrator(
            config=config or IngestionConfig(batch_size=3),
            repository=memory_repository,
            registry=registry,
            collector=collector,
            extractor=extractor or fake_extractor(),
            analyzer=analyzer,
            classifier=classifier,
            sleep=sleep,
        )

    return _build


@pytest.mark.unit
class TestCreateBatches:
    """Tests for create_batches."""

    def test_groups(self):
        """Should split seven items into groups of 3, 3 and 1."""
        assert create_batches(list(range(7)), 3) == [[0, 1, 2], [3, 4, 5], [6]]

    def test_empty(self):
        """Should return no batches for no items."""
        assert create_batches([], 3) == []

    def test_invalid_size(self):
        """Should reject non-positive batch sizes."""
        with pytest.raises(ValueError):
            create_batches([1], 0)


@pytest.mark.integration
@pytest.mark.asyncio
class TestIngestionCycle:
    """Integration tests for IngestionOrchestrator.run_cycle."""

    async def test_full_cycle(self, build_orchestrator, fake_collector, make_feed_items, memory_repository, sleep):
        """Should save every candidate in three batches."""
        registry = _registry(SourceProfile(name="Times of India", feed_urls=[TOI_FEED]))
        collector = fake_collector({TOI_FEED: make_feed_items(7)})
        orchestrator = build_orchestrator(registry, collector)

        stats = await orchestrator.run_cycle()

        assert stats.candidates == 7
        assert stats.batches == 3
        assert stats.processed == 7
        assert stats.saved == 7
        assert stats.duplicates == stats.skipped == stats.errors == 0
        assert stats.feeds_polled == 1
        assert stats.finished_at is not None
        assert len(memory_repository.articles) == 7
        # Delay between batches only, not after the last one
        assert sleep.delays == [2.0, 2.0]

    async def test_batches_run_concurrently_and_in_sequence(
        self, build_orchestrator, fake_collector, fake_extractor, make_feed_items, memory_repository
    ):
        """Should run each batch's items together and finish a batch before starting the next."""
        registry = _registry(SourceProfile(name="Times of India", feed_urls=[TOI_FEED]))
        collector = fake_collector({TOI_FEED: make_feed_items(7)})
        extractor = InFlightExtractor(fake_extractor())
        orchestrator = build_orchestrator(registry, collector, extractor=extractor)

        stats = await orchestrator.run_cycle()

        assert stats.saved == 7
        assert extractor.peak == 3
        assert extractor.completed_at_start == [0, 0, 0, 3, 3, 3, 6]
        assert len(memory_repository.articles) == 7

    async def test_repeated_cycle_saves_nothing_new(
        self, build_orchestrator, fake_collector, fake_extractor, make_feed_items, memory_repository
    ):
        """Should report every candidate as duplicate on the second cycle."""
        registry = _registry(SourceProfile(name="Times of India", feed_urls=[TOI_FEED]))
        collector = fake_collector({TOI_FEED: make_feed_items(7)})
        extractor = fake_extractor()
        orchestrator = build_orchestrator(registry, collector, extractor=extractor)

        await orchestrator.run_cycle()
        second = await orchestrator.run_cycle()

        assert second.saved == 0
        assert second.duplicates == 7
        assert len(memory_repository.articles) == 7
        # Stored URLs are not extracted again
        assert len(extractor.calls) == 7

    async def test_all_feeds_failed(self, build_orchestrator, fake_collector):
        """Should raise CollectionError when no feed could be collected."""
        registry = _registry(SourceProfile(name="Dead", feed_urls=[DEAD_FEED]))
        orchestrator = build_orchestrator(registry, fake_collector({}))

        with pytest.raises(CollectionError):
            await orchestrator.run_cycle()

    async def test_partial_feed_failure(self, build_orchestrator, fake_collector, make_feed_items, sleep):
        """Should continue past a failing feed and count it."""
        registry = _registry(
            SourceProfile(name="Dead", feed_urls=[DEAD_FEED]),
            SourceProfile(name="Times of India", feed_urls=[TOI_FEED]),
        )
        collector = fake_collector({TOI_FEED: make_feed_items(2)})
        orchestrator = build_orchestrator(registry, collector)

        stats = await orchestrator.run_cycle()

        assert stats.feeds_polled == 2
        assert stats.feeds_failed == 1
        assert stats.saved == 2
        assert collector.calls == [DEAD_FEED, TOI_FEED]
        # One delay between the two feeds, one batch so no batch delay
        assert sleep.delays == [1.0]

    async def test_no_feeds_configured(self, build_orchestrator, fake_collector):
        """Should run an empty cycle when the registry has no feeds."""
        orchestrator = build_orchestrator(_registry(SourceProfile(name="NDTV")), fake_collector({}))

        stats = await orchestrator.run_cycle()

        assert stats.candidates == 0
        assert stats.batches == 0
        assert stats.processed == 0

    async def test_failing_item_isolated(self, build_orchestrator, fake_collector, fake_extractor, make_feed_items):
        """Should count a crashing item as an error without failing its batch."""
        items = make_feed_items(3)
        registry = _registry(SourceProfile(name="Times of India", feed_urls=[TOI_FEED]))
        extractor = fake_extractor(failing={items[1].link})
        orchestrator = build_orchestrator(registry, fake_collector({TOI_FEED: items}), extractor=extractor)

        stats = await orchestrator.run_cycle()

        assert stats.errors == 1
        assert stats.saved == 2
        assert stats.processed == 3

    async def test_short_body_skipped(self, build_orchestrator, fake_collector, fake_extractor, make_feed_items):
        """Should skip articles whose body is under the minimum length."""
        registry = _registry(SourceProfile(name="Times of India", feed_urls=[TOI_FEED]))
        orchestrator = build_orchestrator(
            registry,
            fake_collector({TOI_FEED: make_feed_items(2)}),
            extractor=fake_extractor(body="Too short to analyze."),
        )

        stats = await orchestrator.run_cycle()

        assert stats.skipped == 2
        assert stats.saved == 0

    async def test_duplicate_candidates_collapse(
        self, build_orchestrator, fake_collector, make_feed_items, memory_repository
    ):
        """Should process a story listed by two feeds only once."""
        items = make_feed_items(3)
        tracked = [item.model_copy(update={"link": item.link + "?utm_source=rss"}) for item in items]
        registry = _registry(
            SourceProfile(name="Times of India", feed_urls=[TOI_FEED]),
            SourceProfile(name="Mint", feed_urls=[MINT_FEED]),
        )
        collector = fake_collector({TOI_FEED: items, MINT_FEED: tracked})
        orchestrator = build_orchestrator(registry, collector)

        stats = await orchestrator.run_cycle()

        assert stats.candidates == 3
        assert stats.saved == 3
        assert set(memory_repository.articles) == {item.link for item in items}

    async def test_topic_hint_applied(self, build_orchestrator, fake_collector, make_feed_items, memory_repository):
        """Should vote with the feed source's topic hint."""
        registry = _registry(
            SourceProfile(name="Times of India", feed_urls=[TOI_FEED]),
            SourceProfile(name="Mint", feed_urls=[MINT_FEED], topic_hint=Category.BUSINESS),
        )
        collector = fake_collector(
            {
                TOI_FEED: make_feed_items(1, prefix="https://timesofindia.indiatimes.com/india/story"),
                MINT_FEED: make_feed_items(1, prefix="https://www.livemint.com/economy/story"),
            }
        )
        orchestrator = build_orchestrator(registry, collector)

        await orchestrator.run_cycle()

        toi = memory_repository.articles["https://timesofindia.indiatimes.com/india/story-0"]
        mint = memory_repository.articles["https://www.livemint.com/economy/story-0"]
        assert toi.category == Category.POLITICS
        assert mint.category == Category.BUSINESS
