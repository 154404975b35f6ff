"""Combining extracted content and replies into the final result."""

from __future__ import annotations

import logging
from typing import Optional

from ..models.document import CrawlResult, ExtractedDocument, RawDocument
from .markdown import HtmlToMarkdown

logger = logging.getLogger(__name__)


class DocumentAssembler:
    """
    Builds a CrawlResult from an extracted document.

    The replies fragment, when given, is appended to the body before a
    single Markdown conversion. ``raw_html`` on the result is the full page
    markup that was fetched (merged across pages for threads).
    """

    def __init__(self, converter: Optional[HtmlToMarkdown] = None) -> None:
        self._converter = converter or HtmlToMarkdown()

    def assemble(
        self,
        extracted: ExtractedDocument,
        raw: RawDocument,
        replies_html: Optional[str] = None,
    ) -> CrawlResult:
        html = extracted.body_html
        if replies_html:
            html = f"{html}\n{replies_html}"

        markdown = self._converter.convert(html, raw.source_url)
        logger.debug(f"Assembled {len(markdown)} chars of Markdown for {raw.source_url}")
        return CrawlResult(title=extracted.title, markdown=markdown, raw_html=raw.html)
