"""Wire pipeline components from application configuration."""

import random
from dataclasses import dataclass
from typing import Optional

from newsbias.analysis.bias_analyzer import BiasAnalyzer
from newsbias.core.config import Config
from newsbias.database.connection import DatabaseConnection
from newsbias.database.repository import ArticleRepository
from newsbias.pipeline.classifier import ArticleClassifier
from newsbias.pipeline.collectors.rss import RSSCollector
from newsbias.pipeline.extractors.content_extractor import ContentExtractor
from newsbias.pipeline.extractors.fetcher import HtmlFetcher
from newsbias.pipeline.on_demand import OnDemandAnalyzer
from newsbias.pipeline.orchestrator import IngestionOrchestrator
from newsbias.services.config_loader import load_keyword_tables
from newsbias.services.source_registry import SourceRegistry
from newsbias.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class Components:
    """Fully wired pipeline sharing one registry, keyword set and store."""

    registry: SourceRegistry
    repository: ArticleRepository
    collector: RSSCollector
    extractor: ContentExtractor
    analyzer: BiasAnalyzer
    classifier: ArticleClassifier
    orchestrator: IngestionOrchestrator
    on_demand: OnDemandAnalyzer


def build_components(
    config: Config,
    db: DatabaseConnection,
    rng: Optional[random.Random] = None,
) -> Components:
    """Build every pipeline component from configuration.

    Args:
        config: Application configuration.
        db: Open database connection backing the repository.
        rng: Random source for the trending gate and User-Agent rotation.

    Returns:
        Wired components.

    Raises:
        ConfigurationError: If the source or keyword tables are invalid.
    """
    rng = rng or random.Random()
    ingestion = config.ingestion_config()

    registry = SourceRegistry.from_data_dir(config.data_dir)
    keywords = load_keyword_tables(config.data_dir)
    repository = ArticleRepository(db)

    collector = RSSCollector(
        timeout=config.feed_timeout_sec,
        max_items=ingestion.max_items_per_feed,
        known_sources=[source.name for source in registry],
    )
    fetcher = HtmlFetcher(
        timeout=config.request_timeout_sec,
        alternative_timeout=config.alternative_timeout_sec,
        rng=rng,
    )
    extractor = ContentExtractor(registry, fetcher=fetcher, min_body_chars=ingestion.min_body_chars)
    analyzer = BiasAnalyzer(keywords, registry=registry)
    classifier = ArticleClassifier(keywords, config=ingestion, rng=rng)

    orchestrator = IngestionOrchestrator(
        config=ingestion,
        repository=repository,
        registry=registry,
        collector=collector,
        extractor=extractor,
        analyzer=analyzer,
        classifier=classifier,
    )
    on_demand = OnDemandAnalyzer(repository, extractor, analyzer, classifier)

    logger.debug("components_built", sources=len(registry), keywords_version=keywords.version)

    return Components(
        registry=registry,
        repository=repository,
        collector=collector,
        extractor=extractor,
        analyzer=analyzer,
        classifier=classifier,
        orchestrator=orchestrator,
        on_demand=on_demand,
    )
