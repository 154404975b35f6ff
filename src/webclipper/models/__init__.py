"""Webclipper configuration, document and event models."""

from .config import (
    DEFAULT_RENDER_PATTERNS,
    DEFAULT_USER_AGENT,
    ClipperSettings,
    NetworkConfig,
    PaginationConfig,
    RenderServiceConfig,
    SiteProfile,
)
from .document import CrawlResult, ExtractedDocument, RawDocument, Reply, ResolvedContext
from .events import CrawlEvent, EventType

__all__ = [
    # Config
    "ClipperSettings",
    "DEFAULT_RENDER_PATTERNS",
    "DEFAULT_USER_AGENT",
    "NetworkConfig",
    "PaginationConfig",
    "RenderServiceConfig",
    "SiteProfile",
    # Documents
    "CrawlResult",
    "ExtractedDocument",
    "RawDocument",
    "Reply",
    "ResolvedContext",
    # Events
    "CrawlEvent",
    "EventType",
]
