"""Small BeautifulSoup helpers shared by extraction strategies."""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Optional, Union
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

NOISE_TAGS = ("script", "style", "noscript")

# Elements that count as content even without text
MEDIA_TAGS = ("img", "video", "iframe")

# Attributes that hold the real image source on lazy-loading sites
LAZY_IMAGE_ATTRS = ("data-original", "data-actualsrc", "data-src")

ILLEGAL_TITLE_CHARS = re.compile(r'[<>:"/\\|?*]')


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def remove_noise(root: Union[BeautifulSoup, Tag]) -> None:
    """Remove <script>, <style> and <noscript> blocks in place."""
    for element in root.find_all(NOISE_TAGS):
        element.decompose()


def inner_html(tag: Union[BeautifulSoup, Tag]) -> str:
    return tag.decode_contents().strip()


def clean_text(value: Optional[str]) -> str:
    """Collapse runs of whitespace into single spaces."""
    if not value:
        return ""
    return re.sub(r"\s+", " ", value).strip()


def text_of(fragment: str) -> str:
    """Strip tags from an HTML fragment and decode entities."""
    return clean_text(parse_html(fragment).get_text(" "))


def resolve_links(root: Union[BeautifulSoup, Tag], base_url: str) -> None:
    """Convert relative href/src attributes to absolute URLs."""
    for tag in root.find_all("a", href=True):
        href = tag["href"]
        if href.startswith("#"):
            continue
        if not href.startswith(("http://", "https://", "//", "mailto:", "tel:", "javascript:")):
            tag["href"] = urljoin(base_url, href)

    for tag in root.find_all(src=True):
        src = tag["src"]
        if not src.startswith(("http://", "https://", "//", "data:")):
            tag["src"] = urljoin(base_url, src)


def promote_lazy_images(root: Union[BeautifulSoup, Tag], attrs: Iterable[str] = LAZY_IMAGE_ATTRS) -> int:
    """
    Copy the real image source from lazy-loading attributes into ``src``.

    Returns:
        Number of images rewritten
    """
    rewritten = 0
    attrs = tuple(attrs)
    for img in root.find_all("img"):
        for attr in attrs:
            real = img.get(attr)
            if real and not str(real).startswith("data:"):
                if img.get("src") != real:
                    img["src"] = real
                    rewritten += 1
                break
    return rewritten


def sanitize_title(value: str, max_length: Optional[int] = None) -> str:
    """Drop characters that are illegal in file names and optionally truncate."""
    value = value.strip()
    if max_length is not None and len(value) > max_length:
        value = value[:max_length]
    return ILLEGAL_TITLE_CHARS.sub("", value).strip()


def has_visible_content(fragment: Optional[str]) -> bool:
    """True when a fragment renders text or embeds media."""
    if not fragment or not fragment.strip():
        return False
    if text_of(fragment):
        return True
    return parse_html(fragment).find(MEDIA_TAGS) is not None
