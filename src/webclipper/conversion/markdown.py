"""HTML to Markdown conversion and note frontmatter."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Any, Optional

import html2text
from bs4 import BeautifulSoup

from ..extraction.html_utils import parse_html, resolve_links

logger = logging.getLogger(__name__)


class HtmlToMarkdown:
    """
    Converts clipped HTML to Markdown.

    Uses html2text with settings suited to notes: no line wrapping, inline
    links, images kept.

    Example:
        converter = HtmlToMarkdown()
        markdown = converter.convert(html_string, "https://example.com/post")
    """

    def __init__(
        self,
        body_width: int = 0,
        inline_links: bool = True,
        ignore_images: bool = False,
        ignore_tables: bool = False,
        unicode_snob: bool = True,
        mark_code: bool = True,
    ):
        """
        Initialize the Markdown converter.

        Args:
            body_width: Max line width (0 = no wrapping)
            inline_links: Use inline [text](url) vs reference style
            ignore_images: Skip image conversion
            ignore_tables: Skip table conversion
            unicode_snob: Use Unicode chars where possible
            mark_code: Mark code blocks with backticks
        """
        self._options = {
            "body_width": body_width,
            "inline_links": inline_links,
            "wrap_links": False,
            "protect_links": False,
            "ignore_images": ignore_images,
            "ignore_tables": ignore_tables,
            "unicode_snob": unicode_snob,
            "escape_snob": False,
            "mark_code": mark_code,
            "default_image_alt": "",
            "single_line_break": False,
        }

    def _converter(self) -> html2text.HTML2Text:
        # html2text keeps parser state, so every call gets a fresh instance
        converter = html2text.HTML2Text()
        for name, value in self._options.items():
            setattr(converter, name, value)
        return converter

    def _clean_output(self, markdown: str) -> str:
        # <br> renders as "  \n"; strip lines first so blank runs collapse
        markdown = "\n".join(line.rstrip() for line in markdown.split("\n"))
        markdown = re.sub(r"\n{3,}", "\n\n", markdown)
        return markdown.strip() + "\n"

    def convert(self, html: str, url: str) -> str:
        """
        Convert HTML to Markdown.

        Relative links and image sources are made absolute against ``url``
        before conversion.

        Args:
            html: HTML content string
            url: Source URL for resolving relative links

        Returns:
            Markdown string
        """
        try:
            soup = parse_html(html)
            resolve_links(soup, url)
            markdown = self._converter().handle(str(soup))
            return self._clean_output(markdown)
        except Exception as e:
            logger.error(f"Failed to convert HTML to Markdown: {e}")
            # Plain text keeps the clip usable
            text: str = BeautifulSoup(html, "html.parser").get_text(separator="\n")
            return text.strip() + "\n"


class FrontmatterBuilder:
    """
    Builds YAML frontmatter for a clipped note.

    Example:
        builder = FrontmatterBuilder()
        frontmatter = builder.build(url="https://example.com/post")
    """

    def build(
        self,
        url: Optional[str] = None,
        time: Optional[datetime] = None,
        title: Optional[str] = None,
        **extra_fields: Any,
    ) -> str:
        """
        Build YAML frontmatter string.

        Args:
            url: Source URL
            time: Clip time (defaults to now)
            title: Optional note title
            **extra_fields: Additional frontmatter fields

        Returns:
            YAML frontmatter string (with --- delimiters)
        """
        lines = ["---"]

        if title:
            safe_title = title.replace('"', '\\"')
            lines.append(f'title: "{safe_title}"')

        if url:
            lines.append(f"source: {url}")

        clipped_at = time or datetime.now()
        lines.append(f"time: {clipped_at.isoformat(timespec='seconds')}")

        for key, value in extra_fields.items():
            if value is None:
                continue
            if isinstance(value, str):
                safe_value = value.replace('"', '\\"')
                lines.append(f'{key}: "{safe_value}"')
            elif isinstance(value, (list, tuple)):
                lines.append(f"{key}:")
                for item in value:
                    lines.append(f"  - {item}")
            else:
                lines.append(f"{key}: {value}")

        lines.append("---")
        return "\n".join(lines) + "\n\n"
