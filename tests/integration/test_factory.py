# tests/integration/test_factory.py
"""Integration tests for pipeline wiring."""

import random

import pytest

from newsbias.core.config import Config
from newsbias.pipeline.factory import build_components


@pytest.mark.integration
class TestBuildComponents:
    """Tests for build_components."""

    def test_components_share_state(self, test_db, monkeypatch):
        """Should wire one registry and repository through every component."""
        monkeypatch.setenv("NEWSBIAS_BATCH_SIZE", "4")
        monkeypatch.setenv("NEWSBIAS_MAX_ITEMS_PER_FEED", "5")
        config = Config()  # type: ignore

        components = build_components(config, test_db, rng=random.Random(1))

        assert components.orchestrator.registry is components.registry
        assert components.orchestrator.repository is components.repository
        assert components.on_demand.repository is components.repository
        assert components.extractor.registry is components.registry
        assert components.orchestrator.config.batch_size == 4
        assert components.collector.max_items == 5
        assert "Times of India" in components.collector.known_sources
        assert components.classifier.config.trending_gate == 0.7
