"""
webclipper - Clip web pages (forum threads, social posts, articles) to Markdown.

Usage:
    from webclipper import WebCrawler, ClipperSettings

    async with WebCrawler(ClipperSettings()) as crawler:
        result = await crawler.fetch_web_content("https://example.com/post")
        print(result.title)
        print(result.markdown)
"""

__version__ = "1.0.0"

from .core.crawler import WebCrawler, fetch_web_content, fetch_web_content_blocking
from .errors import (
    ClipperError,
    FetchError,
    FetchTimeoutError,
    PaginationPageError,
    PatternError,
    RenderServiceError,
    RenderServiceUnavailable,
    TooManyRedirects,
)
from .matching import matches
from .models.config import (
    ClipperSettings,
    NetworkConfig,
    PaginationConfig,
    RenderServiceConfig,
    SiteProfile,
)
from .models.document import CrawlResult
from .models.events import CrawlEvent, EventType

__all__ = [
    "__version__",
    # Core
    "WebCrawler",
    "fetch_web_content",
    "fetch_web_content_blocking",
    "matches",
    # Config
    "ClipperSettings",
    "NetworkConfig",
    "PaginationConfig",
    "RenderServiceConfig",
    "SiteProfile",
    # Results and events
    "CrawlResult",
    "CrawlEvent",
    "EventType",
    # Errors
    "ClipperError",
    "FetchError",
    "FetchTimeoutError",
    "PaginationPageError",
    "PatternError",
    "RenderServiceError",
    "RenderServiceUnavailable",
    "TooManyRedirects",
]
