"""Generic fallback-chain extraction."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Optional, Union

from bs4 import BeautifulSoup, Tag

from ..models.document import ExtractedDocument
from .base import resolve_title
from .html_utils import inner_html, parse_html, remove_noise, resolve_links

logger = logging.getLogger(__name__)

# Named containers accepted only when they hold real text
CONTENT_SELECTORS = [
    ".post-content",
    "#content",
    ".content",
    '[itemprop="articleBody"]',
]

# Text shown instead of the topic body when a forum requires login
LOGIN_NOTICE_MARKERS = (
    "需要先登录",
    "需要登录",
    "登录后查看",
    "Sign in to view",
    "You need to sign in",
    "Login required",
)


class GenericStrategy:
    """
    Extracts title and body with an ordered fallback chain.

    Body resolution (first hit wins):
        1. Forum topic container (nested variant, then flat), unless it
           only shows a login notice
        2. <article>
        3. <main>
        4. Named content containers with more than ``min_content_length``
           characters of text
        5. <body> (low confidence)
        6. The whole document (low confidence)

    <script>, <style> and <noscript> are always removed and relative links
    are made absolute.

    Example:
        strategy = GenericStrategy()
        doc = strategy.extract(html, "https://example.com/post")
        print(doc.title, len(doc.body_html))
    """

    name = "generic"

    def __init__(
        self,
        topic_class: str = "topic_content",
        topic_inner_class: str = "markdown_body",
        content_selectors: Optional[Sequence[str]] = None,
        login_markers: Sequence[str] = LOGIN_NOTICE_MARKERS,
        min_content_length: int = 50,
    ) -> None:
        """
        Initialize the strategy.

        Args:
            topic_class: CSS class of the forum topic container
            topic_inner_class: CSS class of the nested body inside the topic container
            content_selectors: Named containers tried after <main>
            login_markers: Phrases that mark a login-required placeholder
            min_content_length: Minimum text length for named containers
        """
        self._topic_class = topic_class
        self._topic_inner_class = topic_inner_class
        self._content_selectors = list(content_selectors or CONTENT_SELECTORS)
        self._login_markers = tuple(login_markers)
        self._min_content_length = min_content_length

    def handles(self, url: str) -> bool:
        return True

    def derive_title(self, url: str, soup: BeautifulSoup) -> Optional[str]:
        """Site-specific title hook; the generic strategy has none."""
        return None

    def _requires_login(self, tag: Tag) -> bool:
        text = tag.get_text(" ")
        return any(marker in text for marker in self._login_markers)

    def _find_topic(self, soup: BeautifulSoup) -> Optional[Tag]:
        topic = soup.find(class_=self._topic_class)
        if not isinstance(topic, Tag):
            return None
        if self._requires_login(topic):
            logger.debug("Topic container shows a login notice; skipping it")
            return None

        nested = topic.find(class_=self._topic_inner_class)
        if isinstance(nested, Tag) and inner_html(nested):
            return nested
        if inner_html(topic):
            return topic
        return None

    def _find_tag(self, soup: BeautifulSoup, name: str) -> Optional[Tag]:
        tag = soup.find(name)
        if isinstance(tag, Tag) and inner_html(tag):
            return tag
        return None

    def _find_named_container(self, soup: BeautifulSoup) -> Optional[Tag]:
        for selector in self._content_selectors:
            element = soup.select_one(selector)
            if element is None:
                continue
            if len(element.get_text(strip=True)) > self._min_content_length:
                return element
            logger.debug(f"Container {selector!r} too short, ignoring")
        return None

    def select_body(self, soup: BeautifulSoup) -> tuple[Union[BeautifulSoup, Tag], bool]:
        """
        Run the fallback chain.

        Returns:
            Tuple of (selected element, low_confidence)
        """
        for finder in (
            self._find_topic,
            lambda s: self._find_tag(s, "article"),
            lambda s: self._find_tag(s, "main"),
            self._find_named_container,
        ):
            element = finder(soup)
            if element is not None:
                return element, False

        body = self._find_tag(soup, "body")
        if body is not None:
            return body, True

        return soup, True

    def extract(self, html: str, url: str) -> ExtractedDocument:
        soup = parse_html(html)
        title = resolve_title(soup, self.derive_title(url, soup))

        remove_noise(soup)
        element, low_confidence = self.select_body(soup)
        resolve_links(element, url)

        body_html = inner_html(element)
        if not body_html:
            # Nothing survived cleaning; hand back the raw markup.
            body_html = html
            low_confidence = True

        if low_confidence:
            logger.debug(f"Low-confidence extraction for {url}")

        return ExtractedDocument(
            title=title,
            body_html=body_html,
            strategy=self.name,
            low_confidence=low_confidence,
        )
