"""Forum thread extraction (V2EX-style topics with paginated replies)."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import TYPE_CHECKING, Optional
from urllib.parse import unquote, urlsplit

from bs4 import BeautifulSoup, NavigableString, Tag

from ..aggregation import PaginationSpec
from ..matching import matches_any
from ..models.document import Reply
from .generic import GenericStrategy
from .html_utils import clean_text, has_visible_content, inner_html, parse_html

if TYPE_CHECKING:
    from ..replies import ReplyExtractor

logger = logging.getLogger(__name__)

FORUM_URL_PATTERNS = [
    "https://v2ex.com/t/*",
    "https://v2ex.com/amp/t/*",
    "http://v2ex.com/t/*",
    "http://v2ex.com/amp/t/*",
]

# Replies per page on V2EX; later pages are requested with ?p=N
V2EX_PAGE_SIZE = 100

V2EX_PAGINATION = PaginationSpec(
    reply_count_pattern=re.compile(r"(\d+)\s*条回复"),
    page_size=V2EX_PAGE_SIZE,
    reply_marker=re.compile(r"""<div[^>]*\bid=["']r_\d+["']"""),
    footer_marker='<div id="Bottom"',
)

ANONYMOUS_AUTHOR = "Anonymous"
LIKE_MARKER = "❤️"

_REPLY_ID = re.compile(r"^r_\d+$")
_DIGITS = re.compile(r"\d+")
_SLUG = re.compile(r"[a-z]", re.IGNORECASE)


class ForumReplyExtractor:
    """
    Extracts replies from V2EX-style thread markup.

    Each reply is a ``div#r_<id>.cell`` containing the author link
    (``/member/<handle>`` with class ``dark``), a ``.reply_content`` body and
    an optional ``span.small.fade`` badge with a ❤️ image followed by the
    like count.
    """

    def __init__(self, like_marker: str = LIKE_MARKER) -> None:
        self._like_marker = like_marker

    def _author(self, block: Tag) -> str:
        link = block.select_one('strong > a[href^="/member/"]') or block.select_one('a.dark[href^="/member/"]')
        if link is None:
            return ANONYMOUS_AUTHOR
        display = clean_text(link.get_text())
        if display:
            return display
        handle = str(link.get("href", "")).rsplit("/member/", 1)[-1].strip("/")
        return handle or ANONYMOUS_AUTHOR

    def _like_count(self, block: Tag) -> int:
        for badge in block.select("span.small.fade"):
            marker = badge.find("img", alt=self._like_marker)
            if marker is None:
                continue
            following = "".join(
                str(node) for node in marker.next_siblings if isinstance(node, NavigableString)
            )
            match = _DIGITS.search(following) or _DIGITS.search(badge.get_text())
            if match:
                return int(match.group())
        return 0

    def extract_replies(self, html: str) -> list[Reply]:
        soup = parse_html(html)
        replies: list[Reply] = []
        for block in soup.find_all("div", id=_REPLY_ID):
            content = block.find(class_="reply_content")
            body = inner_html(content) if isinstance(content, Tag) else ""
            if not has_visible_content(body):
                continue
            replies.append(
                Reply(
                    author=self._author(block),
                    body_html=body,
                    like_count=self._like_count(block),
                )
            )
        logger.debug(f"Extracted {len(replies)} replies")
        return replies


class ForumThreadStrategy(GenericStrategy):
    """
    Strategy for forum threads.

    Body extraction reuses the generic chain, whose first step targets the
    topic container. On top of that the strategy owns the site's pagination
    layout and reply markup, so both stay local to this site.
    """

    name = "forum_thread"

    def __init__(
        self,
        url_patterns: Optional[Sequence[str]] = None,
        pagination: PaginationSpec = V2EX_PAGINATION,
        reply_extractor: Optional[ReplyExtractor] = None,
        title_suffixes: Sequence[str] = (" - V2EX",),
    ) -> None:
        super().__init__()
        self._url_patterns = list(url_patterns or FORUM_URL_PATTERNS)
        self.pagination = pagination
        self._reply_extractor = reply_extractor or ForumReplyExtractor()
        self._title_suffixes = tuple(title_suffixes)

    def handles(self, url: str) -> bool:
        return matches_any(url, self._url_patterns)

    def derive_title(self, url: str, soup: BeautifulSoup) -> Optional[str]:
        """
        Title from the URL slug or the page.

        Thread URLs shaped like ``/t/<slug>/<id>`` carry the title in the
        slug; numeric-only paths fall through to the page's own title.
        """
        segments = [unquote(part) for part in urlsplit(url).path.split("/") if part]
        for segment in reversed(segments[1:]):
            if _SLUG.search(segment) and segment != "t":
                return clean_text(re.sub(r"[-_]+", " ", segment))

        title_tag = soup.find("title")
        if isinstance(title_tag, Tag):
            title = clean_text(title_tag.get_text())
            for suffix in self._title_suffixes:
                if title.endswith(suffix):
                    return title[: -len(suffix)].strip()
        return None

    def extract_replies(self, html: str) -> list[Reply]:
        return self._reply_extractor.extract_replies(html)
