"""Base classes for the crawl pipeline."""

from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol, runtime_checkable

from ..models.config import ClipperSettings, SiteProfile
from ..models.document import CrawlResult, ExtractedDocument, RawDocument, ResolvedContext
from ..models.events import CrawlEvent, EventType

# Type alias for event emitter function
EventEmitter = Callable[[CrawlEvent], None]


@dataclass
class PageContext:
    """
    Context object passed through pipeline steps.

    Holds all state for one crawl request, accumulated as it moves
    through the pipeline.

    Attributes:
        url: The URL being crawled
        settings: Effective settings for this request
        site_profiles: Site profiles to match against the URL
        context: Resolved proxy and headers
        raw: Fetched page (merged across pages for threads)
        delegated: True when the page came from the Rendering Service
        pages: Number of pages merged into ``raw``
        extracted: Title and body selected by the extraction engine
        replies_html: Formatted replies fragment, if any
        result: Final CrawlResult
        exception: The exception that stopped the pipeline
        error: Human-readable form of ``exception``
    """

    url: str
    settings: ClipperSettings
    site_profiles: list[SiteProfile] = field(default_factory=list)

    # Accumulated state
    context: Optional[ResolvedContext] = None
    raw: Optional[RawDocument] = None
    delegated: bool = False
    pages: int = 1
    extracted: Optional[ExtractedDocument] = None
    replies_html: Optional[str] = None
    result: Optional[CrawlResult] = None

    # Status
    exception: Optional[BaseException] = None
    error: Optional[str] = None


@runtime_checkable
class CrawlStep(Protocol):
    """
    Protocol for pipeline steps.

    Each step receives a PageContext, processes it, and returns the
    (possibly modified) context. Steps raise on failure; the pipeline
    records the exception and stops. Recoverable problems (a skipped
    pagination page, a failing site strategy) are handled inside the step.

    Example implementation:
        class AnnotateStep:
            name = "annotate"

            async def execute(
                self,
                ctx: PageContext,
                emit: Optional[EventEmitter] = None
            ) -> PageContext:
                ctx.replies_html = (ctx.replies_html or "") + "<p>clipped</p>"
                return ctx
    """

    name: str

    async def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        """
        Execute this pipeline step.

        Args:
            ctx: The page context with accumulated state
            emit: Optional callback to emit events

        Returns:
            The (possibly modified) page context
        """
        ...


@dataclass
class CrawlPipeline:
    """
    Pipeline for processing a single URL through ordered steps.

    If a step raises, the exception is stored on ``ctx.exception`` and
    processing stops.

    Example:
        pipeline = CrawlPipeline(steps=[
            ResolveStep(context_resolver),
            FetchStep(selector),
            AggregateStep(direct, engine),
            ExtractStep(engine),
            ConvertStep(assembler),
        ])

        ctx = await pipeline.execute(url, settings, emit=log_event)
        if ctx.exception:
            raise ctx.exception
        print(ctx.result.markdown)
    """

    steps: list[CrawlStep]

    async def execute(
        self,
        url: str,
        settings: ClipperSettings,
        site_profiles: Optional[list[SiteProfile]] = None,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        """
        Execute the pipeline for a URL.

        Args:
            url: The URL to process
            settings: Effective settings
            site_profiles: Profiles to use instead of ``settings.site_profiles``
            emit: Optional callback for emitting events

        Returns:
            PageContext with final state (check ``exception`` for failure)
        """
        profiles = list(settings.site_profiles if site_profiles is None else site_profiles)
        ctx = PageContext(url=url, settings=settings, site_profiles=profiles)

        if emit:
            emit(CrawlEvent(type=EventType.STARTED, url=url))

        for step in self.steps:
            try:
                ctx = await step.execute(ctx, emit)
            except Exception as e:
                ctx.exception = e
                ctx.error = f"{step.name}: {e}"

                if emit:
                    emit(
                        CrawlEvent(
                            type=EventType.FAILED,
                            url=url,
                            error=ctx.error,
                        )
                    )
                return ctx

        if emit:
            emit(CrawlEvent(type=EventType.COMPLETED, url=url))
        return ctx

    def add_step(self, step: CrawlStep) -> "CrawlPipeline":
        """
        Add a step to the pipeline (fluent API).

        Returns:
            Self for chaining
        """
        self.steps.append(step)
        return self
