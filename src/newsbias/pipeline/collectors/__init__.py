"""Feed collectors."""

from newsbias.pipeline.collectors.base import BaseCollector
from newsbias.pipeline.collectors.rss import RSSCollector, clean_summary, clean_title

__all__ = [
    "BaseCollector",
    "RSSCollector",
    "clean_title",
    "clean_summary",
]
