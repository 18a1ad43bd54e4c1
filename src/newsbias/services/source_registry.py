"""Source registry: publisher lookup by name and by article domain."""

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from newsbias.core.config import DEFAULT_DATA_DIR, SelectorConfig, SourceProfile
from newsbias.core.enums import BiasLean
from newsbias.services.config_loader import load_sources_config
from newsbias.utils.exceptions import ConfigurationError
from newsbias.utils.logging import get_logger
from newsbias.utils.text_utils import extract_domain

logger = get_logger(__name__)

DEFAULT_DESCRIPTION = "independent"
DEFAULT_RELIABILITY = 70
DEFAULT_BIAS_PRIOR = BiasLean.CENTER


class SourceRegistry:
    """Read-only table of known publishers.

    Domain lookups ignore a leading "www." and accept subdomains, so
    ``m.thehindu.com`` resolves to the profile registered for
    ``thehindu.com``. Unknown publishers fall back to neutral priors.
    """

    def __init__(self, sources: Iterable[SourceProfile]):
        self._sources: List[SourceProfile] = list(sources)
        self._by_name: Dict[str, SourceProfile] = {}
        self._by_domain: List[Tuple[str, SourceProfile]] = []

        for source in self._sources:
            if source.name in self._by_name:
                raise ConfigurationError(f"Duplicate source name: {source.name}")
            self._by_name[source.name] = source
            for domain in source.domains:
                self._by_domain.append((domain, source))

        # Longest domain first so the most specific registration wins
        self._by_domain.sort(key=lambda entry: len(entry[0]), reverse=True)

    @classmethod
    def from_data_dir(cls, data_dir: Path = DEFAULT_DATA_DIR) -> "SourceRegistry":
        """Build a registry from sources.yaml in data_dir."""
        registry = cls(load_sources_config(data_dir))
        logger.info("source_registry_loaded", sources=len(registry))
        return registry

    def __len__(self) -> int:
        return len(self._sources)

    def __iter__(self):
        return iter(self._sources)

    def get(self, name: str) -> Optional[SourceProfile]:
        """Look up a source by its display name."""
        return self._by_name.get(name)

    def for_url(self, url: str) -> Optional[SourceProfile]:
        """Find the source whose registered domain matches the URL's host.

        Args:
            url: Article URL

        Returns:
            Matching SourceProfile, or None for unknown publishers
        """
        host = extract_domain(url)
        if not host:
            return None

        for domain, source in self._by_domain:
            if host == domain or host.endswith("." + domain):
                return source
        return None

    def source_name_for_url(self, url: str) -> str:
        """Display name for the URL's publisher, or its bare domain if unknown."""
        source = self.for_url(url)
        if source is not None:
            return source.name
        return extract_domain(url) or "Unknown Source"

    def selectors_for_url(self, url: str) -> Optional[SelectorConfig]:
        """Per-domain CSS selectors, if the publisher has any configured."""
        source = self.for_url(url)
        if source is None:
            return None
        selectors = source.selectors
        if not (selectors.title or selectors.body or selectors.author or selectors.date):
            return None
        return selectors

    def description_for(self, source_name: str) -> str:
        source = self.get(source_name)
        return source.description if source else DEFAULT_DESCRIPTION

    def reliability_for(self, source_name: str) -> int:
        """Reliability prior (0-100) for a source, 70 when unknown."""
        source = self.get(source_name)
        return source.reliability_prior if source else DEFAULT_RELIABILITY

    def bias_prior_for(self, source_name: str) -> BiasLean:
        """Bias lean prior for a source, center when unknown."""
        source = self.get(source_name)
        return source.bias_prior if source else DEFAULT_BIAS_PRIOR

    def all_feeds(self) -> List[Tuple[str, SourceProfile]]:
        """Every (feed_url, source) pair, in registry order."""
        return [(feed_url, source) for source in self._sources for feed_url in source.feed_urls]
