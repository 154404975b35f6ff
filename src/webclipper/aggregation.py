"""Merging additional pages of a paginated forum thread."""

from __future__ import annotations

import asyncio
import logging
import math
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

from .errors import PaginationPageError
from .models.document import ResolvedContext
from .models.events import CrawlEvent, EventType
from .transport.base import Transport

logger = logging.getLogger(__name__)

EventEmitter = Callable[[CrawlEvent], None]


@dataclass(frozen=True)
class PaginationSpec:
    """
    Site-specific description of how a thread is paginated.

    Attributes:
        reply_count_pattern: Regex whose first group is the total reply count
        page_size: Replies per page on the site
        reply_marker: Regex matching the start of a reply block
        footer_marker: Literal text that starts the page footer
        page_param: Query parameter selecting a page
    """

    reply_count_pattern: re.Pattern[str]
    page_size: int
    reply_marker: re.Pattern[str]
    footer_marker: str
    page_param: str = "p"


def base_thread_url(url: str) -> str:
    """Strip query string and fragment from a thread URL."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


class PaginationAggregator:
    """
    Splices the reply regions of pages 2..N into the first page.

    Pages are fetched one after another in increasing order through the
    direct transport, with a pacing delay between fetches. A page that
    fails is logged and skipped; the merged result of the remaining pages
    is still returned.

    Example:
        aggregator = PaginationAggregator(direct_transport, spec)
        merged = await aggregator.aggregate(url, first_page_html, context)
    """

    def __init__(
        self,
        transport: Transport,
        spec: PaginationSpec,
        page_delay: float = 0.5,
        max_pages: Optional[int] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._transport = transport
        self._spec = spec
        self._page_delay = page_delay
        self._max_pages = max_pages
        self._sleep = sleep

    def reply_count(self, html: str) -> Optional[int]:
        match = self._spec.reply_count_pattern.search(html)
        if not match:
            return None
        return int(match.group(1))

    def total_pages(self, html: str) -> int:
        """Number of pages the thread spans (1 when no reply count is shown)."""
        count = self.reply_count(html)
        if count is None:
            return 1
        pages = max(1, math.ceil(count / self._spec.page_size))
        if self._max_pages is not None:
            pages = min(pages, self._max_pages)
        return pages

    def page_url(self, base_url: str, page: int) -> str:
        return f"{base_url}?{self._spec.page_param}={page}"

    def extract_reply_region(self, html: str) -> str:
        """
        Return the markup between the first reply block and the footer.

        Empty when the page has no reply blocks.
        """
        first = self._spec.reply_marker.search(html)
        if not first:
            return ""
        end = html.find(self._spec.footer_marker, first.start())
        if end == -1:
            end = len(html)
        return html[first.start() : end]

    def splice(self, merged: str, region: str) -> str:
        """Insert a reply region right before the footer of the merged page."""
        if not region:
            return merged
        index = merged.rfind(self._spec.footer_marker)
        if index == -1:
            return merged + region
        return merged[:index] + region + merged[index:]

    async def _fetch_page(self, url: str, page: int, context: ResolvedContext) -> str:
        try:
            document = await self._transport.fetch(url, context)
        except Exception as e:
            raise PaginationPageError(url, page, e) from e
        return document.html

    async def aggregate(
        self,
        url: str,
        first_page_html: str,
        context: ResolvedContext,
        emit: Optional[EventEmitter] = None,
    ) -> str:
        """
        Fetch and merge every additional page of a thread.

        Args:
            url: Thread URL (any page)
            first_page_html: HTML of the page already fetched
            context: Network context reused for every page
            emit: Optional callback for progress events

        Returns:
            First page HTML with the reply regions of later pages spliced in
        """
        total = self.total_pages(first_page_html)
        if total <= 1:
            return first_page_html

        base_url = base_thread_url(url)
        logger.info(f"Thread {base_url} spans {total} pages; fetching pages 2-{total}")

        merged = first_page_html
        fetched = 0
        for page in range(2, total + 1):
            if page > 2 and self._page_delay > 0:
                await self._sleep(self._page_delay)

            page_url = self.page_url(base_url, page)
            try:
                html = await self._fetch_page(page_url, page, context)
            except PaginationPageError as e:
                logger.warning(f"Skipping page {page}/{total}: {e}")
                if emit:
                    emit(
                        CrawlEvent(
                            type=EventType.PAGE_SKIPPED,
                            url=page_url,
                            current=page,
                            total=total,
                            error=str(e),
                        )
                    )
                continue

            merged = self.splice(merged, self.extract_reply_region(html))
            fetched += 1
            logger.debug(f"Merged page {page}/{total}")
            if emit:
                emit(
                    CrawlEvent(
                        type=EventType.PAGE_FETCHED,
                        url=page_url,
                        current=page,
                        total=total,
                        bytes_downloaded=len(html),
                    )
                )

        logger.info(f"Merged {fetched} of {total - 1} additional pages for {base_url}")
        return merged
