"""Value objects passed between pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ResolvedContext:
    """
    Network context for one request.

    Attributes:
        proxy_url: Proxy to route through, or None for a direct connection
        headers: Request headers (User-Agent, Cookie, Accept, ...)
        cookies: Raw cookie string of the matched site profile
    """

    proxy_url: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    cookies: str | None = None


@dataclass(frozen=True)
class RawDocument:
    """Unmodified page body as returned by a transport."""

    html: str
    source_url: str


@dataclass(frozen=True)
class ExtractedDocument:
    """
    Result of content extraction.

    Attributes:
        title: Page title (placeholder when none was found)
        body_html: Cleaned HTML fragment of the main content
        strategy: Name of the strategy that produced the document
        low_confidence: True when only the <body> / raw fallback matched
    """

    title: str
    body_html: str
    strategy: str = "generic"
    low_confidence: bool = False


@dataclass(frozen=True)
class Reply:
    """A single forum reply."""

    author: str
    body_html: str
    like_count: int = 0


@dataclass(frozen=True)
class CrawlResult:
    """Final output handed back to the host application."""

    title: str
    markdown: str
    raw_html: str

    @property
    def content(self) -> str:
        """Alias matching the host's {title, content, html} shape."""
        return self.markdown

    @property
    def html(self) -> str:
        return self.raw_html
