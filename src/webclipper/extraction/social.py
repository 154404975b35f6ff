"""Single-post social media extraction (x.com / twitter.com)."""

from __future__ import annotations

import html
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Optional

from bs4 import BeautifulSoup, Tag

from ..matching import matches_any
from ..models.document import ExtractedDocument
from .generic import GenericStrategy
from .html_utils import clean_text, parse_html, sanitize_title

logger = logging.getLogger(__name__)

SOCIAL_URL_PATTERNS = [
    "https://x.com/*/status/*",
    "https://twitter.com/*/status/*",
    "https://mobile.twitter.com/*/status/*",
]

DEFAULT_POST_TITLE = "Twitter post"
TITLE_MAX_LENGTH = 30

MEDIA_HOST = "pbs.twimg.com/media/"
LARGEST_MEDIA_VARIANT = "name=4096x4096"

_SIZE_PARAM = re.compile(r"name=\w+")


def upgrade_media_url(url: str) -> str:
    """Request the largest variant of a media URL."""
    if _SIZE_PARAM.search(url):
        return _SIZE_PARAM.sub(LARGEST_MEDIA_VARIANT, url)
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{LARGEST_MEDIA_VARIANT}"


def dedupe_media(urls: Sequence[str]) -> list[str]:
    """Keep the first URL per base path (query string ignored), upgraded."""
    seen: set[str] = set()
    result: list[str] = []
    for url in urls:
        base = url.split("?", 1)[0]
        if base in seen:
            continue
        seen.add(base)
        result.append(upgrade_media_url(url))
    return result


@dataclass
class SocialPost:
    """Fields pulled out of a rendered post page."""

    text: str = ""
    text_html: str = ""
    handle: str = ""
    display_name: str = ""
    timestamp: str = ""
    media: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.text or self.media)

    def title(self) -> str:
        first_line = self.text.split("\n", 1)[0] if self.text else ""
        title = sanitize_title(first_line, TITLE_MAX_LENGTH)
        if title:
            return title
        identity = " ".join(part for part in (self.display_name, self.handle) if part)
        return sanitize_title(identity) or DEFAULT_POST_TITLE


class SocialPostStrategy(GenericStrategy):
    """
    Strategy for interactive single-post pages.

    Targets the post's own elements instead of the generic fallback
    chain: ``[data-testid="tweetText"]`` for the body, the
    ``[data-testid="User-Name"]`` block for display name and handle, and
    ``<time datetime>`` for the timestamp. The body is prefixed by a small
    metadata header and followed by the deduplicated media.

    Falls back to the generic chain when the page carries no post text or
    media, e.g. a login wall returned instead of the rendered post.
    """

    name = "social_post"

    def __init__(self, url_patterns: Optional[Sequence[str]] = None) -> None:
        super().__init__()
        self._url_patterns = list(url_patterns or SOCIAL_URL_PATTERNS)

    def handles(self, url: str) -> bool:
        return matches_any(url, self._url_patterns)

    def _identity(self, soup: BeautifulSoup, post: SocialPost) -> None:
        block = soup.select_one('[data-testid="User-Name"]') or soup.select_one('[data-testid="User-Names"]')
        if block is not None:
            texts = [clean_text(s) for s in block.stripped_strings]
            texts = [t for t in texts if t and t != "·"]
            for text in texts:
                if text.startswith("@") and not post.handle:
                    post.handle = text
                elif not post.display_name and not text.startswith("@"):
                    post.display_name = text
            return

        # Older markup: display name span followed by a span.username
        username = soup.select_one("span.username")
        if username is not None:
            post.handle = clean_text(username.get_text())
            previous = username.find_previous_sibling("span")
            if isinstance(previous, Tag):
                post.display_name = clean_text(previous.get_text())

    def parse(self, html_text: str) -> SocialPost:
        soup = parse_html(html_text)
        post = SocialPost()

        text_el = soup.select_one('[data-testid="tweetText"]')
        if isinstance(text_el, Tag):
            for br in text_el.find_all("br"):
                br.replace_with("\n")
            post.text = text_el.get_text().strip()
            post.text_html = text_el.decode_contents().strip()

        self._identity(soup, post)

        time_el = soup.find("time", attrs={"datetime": True})
        if isinstance(time_el, Tag):
            post.timestamp = str(time_el["datetime"])

        sources = [str(img["src"]) for img in soup.find_all("img", src=True) if MEDIA_HOST in str(img["src"])]
        post.media = dedupe_media(sources)
        return post

    def render(self, post: SocialPost) -> str:
        """Metadata header, post text and media as HTML."""
        parts: list[str] = []
        if post.display_name:
            parts.append(f"<p><strong>Author:</strong> {html.escape(post.display_name)}</p>")
        if post.handle:
            parts.append(f"<p><strong>Handle:</strong> {html.escape(post.handle)}</p>")
        if post.timestamp:
            parts.append(f"<p><strong>Time:</strong> {html.escape(post.timestamp)}</p>")
        if parts:
            parts.append("<hr>")

        if post.text:
            lines = post.text.split("\n")
            parts.append("<p>" + "<br>".join(html.escape(line) for line in lines) + "</p>")

        for url in post.media:
            parts.append(f'<p><img src="{html.escape(url, quote=True)}" alt=""></p>')
        return "\n".join(parts)

    def extract(self, html: str, url: str) -> ExtractedDocument:
        post = self.parse(html)
        if post.is_empty:
            logger.debug(f"No post content found at {url}; using generic extraction")
            return super().extract(html, url)

        return ExtractedDocument(
            title=post.title(),
            body_html=self.render(post),
            strategy=self.name,
        )
