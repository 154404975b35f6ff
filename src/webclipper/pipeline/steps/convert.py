"""Pipeline step for HTML to Markdown conversion."""

import logging
from typing import Optional

from ...conversion.assembler import DocumentAssembler
from ...models.events import CrawlEvent, EventType
from ..base import EventEmitter, PageContext

logger = logging.getLogger(__name__)


class ConvertStep:
    """
    Pipeline step that assembles the final CrawlResult.

    Reads ctx.extracted, ctx.replies_html and ctx.raw; writes ctx.result.
    """

    name = "convert"

    def __init__(self, assembler: Optional[DocumentAssembler] = None) -> None:
        self._assembler = assembler or DocumentAssembler()

    async def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        if ctx.extracted is None or ctx.raw is None:
            raise ValueError(f"Nothing to convert for {ctx.url}")

        ctx.result = self._assembler.assemble(ctx.extracted, ctx.raw, ctx.replies_html)

        if emit:
            emit(
                CrawlEvent(
                    type=EventType.PAGE_CONVERTED,
                    url=ctx.url,
                    message=ctx.result.title,
                    bytes_downloaded=len(ctx.result.markdown),
                )
            )
        return ctx
