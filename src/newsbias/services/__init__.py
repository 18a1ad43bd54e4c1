"""Business logic services."""

from newsbias.services.config_loader import (
    load_keyword_tables,
    load_sources_config,
    load_yaml,
)
from newsbias.services.source_registry import SourceRegistry

__all__ = [
    "load_yaml",
    "load_sources_config",
    "load_keyword_tables",
    "SourceRegistry",
]
