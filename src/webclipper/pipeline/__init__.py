"""Pipeline architecture for a single crawl request."""

from .base import CrawlPipeline, CrawlStep, EventEmitter, PageContext

__all__ = ["CrawlPipeline", "CrawlStep", "EventEmitter", "PageContext"]
