"""Rendering extracted forum replies as an HTML fragment."""

from __future__ import annotations

import html
from collections.abc import Sequence
from typing import Protocol

from .extraction.html_utils import has_visible_content
from .models.document import Reply


class ReplyExtractor(Protocol):
    """Pulls structured replies out of (merged) thread HTML."""

    def extract_replies(self, html: str) -> list[Reply]: ...


class ReplyFormatter:
    """
    Formats replies as HTML ready to append to the main content.

    Output layout:
        <h2>Replies (N)</h2>
        <h3>#1 author <strong>❤️ 3</strong></h3>
        <div>reply body</div>
        <hr>
        ...

    Replies keep document order; bodies that render nothing (no text,
    no media) are dropped.
    """

    def __init__(self, heading: str = "Replies", like_symbol: str = "❤️") -> None:
        self._heading = heading
        self._like_symbol = like_symbol

    def format(self, replies: Sequence[Reply]) -> str:
        """
        Render replies to an HTML fragment.

        Returns:
            HTML fragment, or an empty string when no reply has visible content
        """
        kept = [reply for reply in replies if has_visible_content(reply.body_html)]
        if not kept:
            return ""

        parts = [f"<h2>{html.escape(self._heading)} ({len(kept)})</h2>"]
        for index, reply in enumerate(kept, start=1):
            heading = f"#{index} {html.escape(reply.author)}"
            if reply.like_count > 0:
                heading += f" <strong>{self._like_symbol} {reply.like_count}</strong>"
            parts.append(f"<h3>{heading}</h3>")
            parts.append(f"<div>{reply.body_html.strip()}</div>")
            if index < len(kept):
                parts.append("<hr>")
        return "\n".join(parts)
