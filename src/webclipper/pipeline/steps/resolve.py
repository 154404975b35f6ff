"""ResolveStep - per-request proxy and header resolution."""

import logging
from typing import Optional

from ...models.events import CrawlEvent, EventType
from ...resolvers.context import ContextResolver
from ..base import EventEmitter, PageContext

logger = logging.getLogger(__name__)


class ResolveStep:
    """
    Pipeline step that resolves the network context for the URL.

    Populates:
        ctx.context: Proxy URL, request headers and profile cookies
    """

    name = "resolve"

    def __init__(self, resolver: Optional[ContextResolver] = None) -> None:
        self._resolver = resolver or ContextResolver()

    async def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        ctx.context = await self._resolver.resolve(ctx.url, ctx.site_profiles, ctx.settings.network)

        proxy = ctx.context.proxy_url or "direct connection"
        logger.debug(f"Resolved context for {ctx.url}: {proxy}, cookies={'yes' if ctx.context.cookies else 'no'}")

        if emit:
            emit(
                CrawlEvent(
                    type=EventType.CONTEXT_RESOLVED,
                    url=ctx.url,
                    message=f"Using {proxy}",
                )
            )
        return ctx
