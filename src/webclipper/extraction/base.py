"""Extraction strategy protocol and title resolution."""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from bs4 import BeautifulSoup, Tag

from ..aggregation import PaginationSpec
from ..models.document import ExtractedDocument, Reply
from .html_utils import clean_text

DEFAULT_TITLE = "Untitled"


@runtime_checkable
class ExtractionStrategy(Protocol):
    """
    Protocol for turning raw page markup into an ExtractedDocument.

    Implementations must never return an empty ``body_html`` for non-empty
    input.

    Example implementation:
        class ChangelogStrategy:
            name = "changelog"

            def handles(self, url: str) -> bool:
                return "/changelog" in url

            def extract(self, html: str, url: str) -> ExtractedDocument:
                ...
    """

    name: str

    def handles(self, url: str) -> bool: ...

    def extract(self, html: str, url: str) -> ExtractedDocument: ...


def resolve_title(soup: BeautifulSoup, derived: Optional[str] = None) -> str:
    """
    Pick a title: derived value, then <title>, then the first <h1>.

    Returns DEFAULT_TITLE when none of them carries text.
    """
    if derived and derived.strip():
        return clean_text(derived)

    title_tag = soup.find("title")
    if isinstance(title_tag, Tag):
        title = clean_text(title_tag.get_text(" "))
        if title:
            return title

    h1 = soup.find("h1")
    if isinstance(h1, Tag):
        title = clean_text(h1.get_text(" "))
        if title:
            return title

    return DEFAULT_TITLE


@runtime_checkable
class ThreadStrategy(Protocol):
    """
    A strategy for paginated discussion threads.

    Besides extracting the opening post it describes how the thread is
    paginated and how replies are pulled out of the merged markup.
    """

    name: str
    pagination: PaginationSpec

    def handles(self, url: str) -> bool: ...

    def extract(self, html: str, url: str) -> ExtractedDocument: ...

    def extract_replies(self, html: str) -> list[Reply]: ...
