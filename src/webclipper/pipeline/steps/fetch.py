"""FetchStep - first-page fetch through the selected transport."""

import logging
from typing import Optional

from ...models.document import ResolvedContext
from ...models.events import CrawlEvent, EventType
from ...transport.selector import TransportSelector
from ..base import EventEmitter, PageContext

logger = logging.getLogger(__name__)


class FetchStep:
    """
    Pipeline step that fetches the page.

    Uses delegated rendering for URLs the detector flags, direct HTTP for
    everything else.

    Populates:
        ctx.raw: Fetched HTML and final URL
        ctx.delegated: Whether the Rendering Service was used

    Raises whatever the transport raises (FetchError, FetchTimeoutError,
    TooManyRedirects, RenderServiceUnavailable, RenderServiceError).
    """

    name = "fetch"

    def __init__(self, selector: TransportSelector) -> None:
        self._selector = selector

    async def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        url = ctx.url
        transport = self._selector.select(url)
        delegated = transport is not self._selector.direct

        if emit:
            emit(
                CrawlEvent(
                    type=EventType.FETCH_STARTED,
                    url=url,
                    delegated=delegated,
                    message=f"Fetching {url} via {transport.name}",
                )
            )

        try:
            ctx.raw = await transport.fetch(url, ctx.context or ResolvedContext())
        except Exception as e:
            logger.error(f"Fetch error for {url}: {e}")
            if emit:
                emit(
                    CrawlEvent(
                        type=EventType.FETCH_FAILED,
                        url=url,
                        error=str(e),
                        delegated=delegated,
                    )
                )
            raise

        ctx.delegated = delegated
        logger.debug(f"Fetched {url} via {transport.name}: {len(ctx.raw.html)} chars")

        if emit:
            emit(
                CrawlEvent(
                    type=EventType.FETCH_COMPLETED,
                    url=url,
                    delegated=delegated,
                    bytes_downloaded=len(ctx.raw.html),
                )
            )
        return ctx
