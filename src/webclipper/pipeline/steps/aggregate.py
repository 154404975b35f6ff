"""AggregateStep - merging later pages of a forum thread."""

import asyncio
import logging
from collections.abc import Awaitable
from typing import Callable, Optional

from ...aggregation import PaginationAggregator
from ...extraction.base import ThreadStrategy
from ...extraction.engine import ExtractionEngine
from ...models.document import RawDocument, ResolvedContext
from ...models.events import CrawlEvent, EventType
from ...transport.base import Transport
from ..base import EventEmitter, PageContext

logger = logging.getLogger(__name__)


class AggregateStep:
    """
    Pipeline step that fetches and splices pages 2..N of a thread.

    Only runs when the URL's extraction strategy describes a paginated
    thread. Extra pages always go through the direct transport.

    Populates:
        ctx.raw: Replaced with the merged markup
        ctx.pages: Number of pages the thread spans
    """

    name = "aggregate"

    def __init__(
        self,
        direct: Transport,
        engine: ExtractionEngine,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._direct = direct
        self._engine = engine
        self._sleep = sleep

    async def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        strategy = self._engine.strategy_for(ctx.url)
        if ctx.raw is None or not isinstance(strategy, ThreadStrategy):
            return ctx

        pagination = ctx.settings.pagination
        aggregator = PaginationAggregator(
            self._direct,
            strategy.pagination,
            page_delay=pagination.page_delay,
            max_pages=pagination.max_pages,
            sleep=self._sleep,
        )

        ctx.pages = aggregator.total_pages(ctx.raw.html)
        if ctx.pages <= 1:
            return ctx

        merged = await aggregator.aggregate(
            ctx.url,
            ctx.raw.html,
            ctx.context or ResolvedContext(),
            emit=emit,
        )
        ctx.raw = RawDocument(html=merged, source_url=ctx.raw.source_url)

        if emit:
            emit(
                CrawlEvent(
                    type=EventType.PAGES_AGGREGATED,
                    url=ctx.url,
                    total=ctx.pages,
                    bytes_downloaded=len(merged),
                )
            )
        return ctx
