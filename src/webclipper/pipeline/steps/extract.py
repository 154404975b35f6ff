"""ExtractStep - title, body and replies selection."""

import logging
from typing import Optional

from ...extraction.base import ThreadStrategy
from ...extraction.engine import ExtractionEngine
from ...models.events import CrawlEvent, EventType
from ...replies import ReplyFormatter
from ..base import EventEmitter, PageContext

logger = logging.getLogger(__name__)


class ExtractStep:
    """
    Pipeline step that extracts content from the fetched markup.

    Populates:
        ctx.extracted: Title and body HTML
        ctx.replies_html: Formatted replies, when the strategy handles a
            thread and ``include_replies`` is set
    """

    name = "extract"

    def __init__(
        self,
        engine: Optional[ExtractionEngine] = None,
        formatter: Optional[ReplyFormatter] = None,
    ) -> None:
        self._engine = engine or ExtractionEngine()
        self._formatter = formatter or ReplyFormatter()

    def _replies(self, html: str, url: str, strategy: ThreadStrategy) -> Optional[str]:
        try:
            replies = strategy.extract_replies(html)
        except Exception as e:
            logger.warning(f"Reply extraction failed for {url}: {e}")
            return None
        return self._formatter.format(replies) or None

    async def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        if ctx.raw is None:
            raise ValueError(f"No content fetched for {ctx.url}")

        ctx.extracted = self._engine.extract(ctx.raw.html, ctx.raw.source_url)

        if emit:
            emit(
                CrawlEvent(
                    type=EventType.CONTENT_EXTRACTED,
                    url=ctx.url,
                    strategy=ctx.extracted.strategy,
                    message=ctx.extracted.title,
                )
            )

        strategy = self._engine.strategy_for(ctx.raw.source_url)
        if ctx.settings.include_replies and isinstance(strategy, ThreadStrategy):
            ctx.replies_html = self._replies(ctx.raw.html, ctx.url, strategy)
            if ctx.replies_html and emit:
                emit(CrawlEvent(type=EventType.REPLIES_FORMATTED, url=ctx.url))

        return ctx
