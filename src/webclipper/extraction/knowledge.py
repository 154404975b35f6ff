"""Knowledge-site extraction (zhihu questions, answers and columns)."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Optional, Union

from bs4 import BeautifulSoup, Tag

from ..matching import matches_any
from .generic import GenericStrategy
from .html_utils import LAZY_IMAGE_ATTRS, clean_text, promote_lazy_images

logger = logging.getLogger(__name__)

KNOWLEDGE_URL_PATTERNS = [
    "https://www.zhihu.com/question/*",
    "https://zhuanlan.zhihu.com/p/*",
]

TITLE_SELECTORS = ("h1.QuestionHeader-title", "h1.Post-Title")
BODY_SELECTORS = (".RichContent-inner", ".Post-RichText", ".RichText")


class KnowledgeAnswerStrategy(GenericStrategy):
    """
    Strategy for question/answer and column pages.

    Title comes from the question header, body from the first rich-text
    answer. Lazy-loaded images keep their real source in ``data-original``
    or ``data-actualsrc``; those are copied into ``src``.
    """

    name = "knowledge_answer"

    def __init__(
        self,
        url_patterns: Optional[Sequence[str]] = None,
        lazy_image_attrs: Sequence[str] = LAZY_IMAGE_ATTRS,
    ) -> None:
        super().__init__()
        self._url_patterns = list(url_patterns or KNOWLEDGE_URL_PATTERNS)
        self._lazy_image_attrs = tuple(lazy_image_attrs)

    def handles(self, url: str) -> bool:
        return matches_any(url, self._url_patterns)

    def derive_title(self, url: str, soup: BeautifulSoup) -> Optional[str]:
        for selector in TITLE_SELECTORS:
            heading = soup.select_one(selector)
            if heading is not None:
                title = clean_text(heading.get_text(" "))
                if title:
                    return title
        return None

    def select_body(self, soup: BeautifulSoup) -> tuple[Union[BeautifulSoup, Tag], bool]:
        for selector in BODY_SELECTORS:
            element = soup.select_one(selector)
            if element is not None and element.get_text(strip=True):
                body, low_confidence = element, False
                break
        else:
            body, low_confidence = super().select_body(soup)

        rewritten = promote_lazy_images(body, self._lazy_image_attrs)
        if rewritten:
            logger.debug(f"Rewrote {rewritten} lazy-loaded images")
        return body, low_confidence
