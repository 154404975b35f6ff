"""WebCrawler: the single-URL clipping entry point."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Mapping, Sequence
from types import TracebackType
from typing import Callable

from ..conversion.assembler import DocumentAssembler
from ..extraction.engine import ExtractionEngine
from ..http import AsyncHttpClient
from ..models.config import ClipperSettings, SiteProfile
from ..models.document import CrawlResult
from ..models.events import CrawlEvent
from ..pipeline.base import CrawlPipeline, PageContext
from ..pipeline.steps import AggregateStep, ConvertStep, ExtractStep, FetchStep, ResolveStep
from ..replies import ReplyFormatter
from ..resolvers.context import ContextResolver
from ..resolvers.proxy import PlatformProxyResolver, ProxyResolver, SystemProxyResolver
from ..transport import (
    DelegatedTransport,
    DirectTransport,
    RenderingNeedDetector,
    RenderServiceClient,
    TransportSelector,
)

logger = logging.getLogger(__name__)


class WebCrawler:
    """
    Fetches one URL and turns it into a Markdown clip.

    The crawler owns the HTTP session; everything else (proxy, headers,
    transport choice) is resolved fresh for every call, so one crawler can
    serve many independent requests, including concurrent ones.

    Example:
        settings = ClipperSettings(include_replies=True)

        async with WebCrawler(settings) as crawler:
            result = await crawler.fetch_web_content("https://v2ex.com/t/123456")

        print(result.title)
        print(result.markdown)
    """

    def __init__(
        self,
        settings: ClipperSettings | None = None,
        platform_proxy_resolver: PlatformProxyResolver | None = None,
        environ: Mapping[str, str] | None = None,
        engine: ExtractionEngine | None = None,
        detector: RenderingNeedDetector | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize the crawler.

        Args:
            settings: Default settings (per-call settings override them)
            platform_proxy_resolver: OS/host proxy lookup (system settings if None)
            environ: Environment used for HTTP_PROXY / HTTPS_PROXY lookup
            engine: Extraction engine (default strategies if None)
            detector: Rendering-need detector (built from settings if None)
            sleep: Pause function used between pagination fetches
        """
        self.settings = settings or ClipperSettings()
        self._proxy_resolver = ProxyResolver(
            platform_resolver=platform_proxy_resolver or SystemProxyResolver(),
            environ=environ,
        )
        self._engine = engine or ExtractionEngine()
        self._detector = detector
        self._sleep = sleep
        self._formatter = ReplyFormatter()
        self._assembler = DocumentAssembler()

        self._http_client: AsyncHttpClient | None = None

    @property
    def engine(self) -> ExtractionEngine:
        return self._engine

    async def __aenter__(self) -> WebCrawler:
        """Enter async context and open the HTTP session."""
        self._http_client = AsyncHttpClient(
            default_timeout=float(self.settings.network.timeout),
            verify_ssl=self.settings.network.verify_ssl,
        )
        await self._http_client.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and close the HTTP session."""
        if self._http_client:
            await self._http_client.__aexit__(exc_type, exc_val, exc_tb)
            self._http_client = None

    def build_pipeline(self, settings: ClipperSettings) -> CrawlPipeline:
        """Assemble the pipeline for one request."""
        if self._http_client is None:
            raise RuntimeError("WebCrawler not initialized. Use 'async with' context manager.")

        network = settings.network
        direct = DirectTransport(
            self._http_client,
            timeout=float(network.timeout),
            max_redirects=network.max_redirects,
        )

        render = settings.render_service
        delegated = None
        if render.enabled:
            delegated = DelegatedTransport(
                RenderServiceClient(
                    self._http_client,
                    service_url=render.url,
                    timeout=float(render.timeout),
                )
            )
        detector = self._detector or RenderingNeedDetector(render.patterns)

        return CrawlPipeline(
            steps=[
                ResolveStep(ContextResolver(proxy_resolver=self._proxy_resolver)),
                FetchStep(TransportSelector(direct, delegated, detector)),
                AggregateStep(direct, self._engine, sleep=self._sleep),
                ExtractStep(self._engine, self._formatter),
                ConvertStep(self._assembler),
            ]
        )

    async def crawl(
        self,
        url: str,
        site_profiles: Sequence[SiteProfile] | None = None,
        settings: ClipperSettings | None = None,
        on_event: Callable[[CrawlEvent], None] | None = None,
    ) -> PageContext:
        """
        Run the pipeline and return the final context without raising.

        Useful for callers that want partial state (e.g. the raw HTML)
        even when a later step failed.
        """
        effective = settings or self.settings
        profiles = list(site_profiles) if site_profiles is not None else None
        pipeline = self.build_pipeline(effective)
        ctx = await pipeline.execute(url, effective, site_profiles=profiles, emit=on_event)

        if ctx.exception is not None:
            logger.error(f"Crawl failed for {url}: {ctx.error}")
        else:
            logger.info(f"Clipped {url} ({ctx.pages} page(s))")
        return ctx

    async def fetch_web_content(
        self,
        url: str,
        site_profiles: Sequence[SiteProfile] | None = None,
        settings: ClipperSettings | None = None,
        on_event: Callable[[CrawlEvent], None] | None = None,
    ) -> CrawlResult:
        """
        Fetch a URL and return its title, Markdown and raw HTML.

        Args:
            url: Page to clip
            site_profiles: Profiles for cookies / User-Agent (settings' list if None)
            settings: Per-call settings (crawler defaults if None)
            on_event: Optional callback for progress events

        Returns:
            CrawlResult

        Raises:
            FetchError: Origin answered with status >= 400
            FetchTimeoutError: A network operation exceeded its deadline
            TooManyRedirects: Redirect chain longer than the configured bound
            RenderServiceUnavailable: Rendering Service is not running
            RenderServiceError: Rendering Service failed to render the page
        """
        ctx = await self.crawl(url, site_profiles, settings, on_event)
        if ctx.exception is not None:
            raise ctx.exception
        if ctx.result is None:
            raise RuntimeError(f"Pipeline finished without a result for {url}")
        return ctx.result


async def fetch_web_content(
    url: str,
    site_profiles: Sequence[SiteProfile] | None = None,
    settings: ClipperSettings | None = None,
    on_event: Callable[[CrawlEvent], None] | None = None,
) -> CrawlResult:
    """Clip one URL with a short-lived crawler."""
    async with WebCrawler(settings) as crawler:
        return await crawler.fetch_web_content(url, site_profiles, on_event=on_event)


def fetch_web_content_blocking(
    url: str,
    site_profiles: Sequence[SiteProfile] | None = None,
    settings: ClipperSettings | None = None,
    on_event: Callable[[CrawlEvent], None] | None = None,
) -> CrawlResult:
    """
    Blocking variant of :func:`fetch_web_content`.

    WARNING: Do not call from within an existing event loop (e.g., Jupyter,
    asyncio-based frameworks). Use the async API instead.

    Example:
        result = fetch_web_content_blocking("https://example.com/post")
        print(result.markdown)
    """
    try:
        asyncio.get_running_loop()
        raise RuntimeError(
            "fetch_web_content_blocking() called from async context. Use 'async with WebCrawler()' instead."
        )
    except RuntimeError as e:
        if "no running event loop" not in str(e).lower():
            raise

    return asyncio.run(fetch_web_content(url, site_profiles, settings, on_event))
