"""Transport protocol shared by direct and delegated fetching."""

from __future__ import annotations

from typing import Protocol

from ..models.document import RawDocument, ResolvedContext


class Transport(Protocol):
    """
    Fetches the HTML of one URL.

    Implementations raise FetchError, FetchTimeoutError, TooManyRedirects,
    RenderServiceUnavailable or RenderServiceError on failure.
    """

    name: str

    async def fetch(self, url: str, context: ResolvedContext) -> RawDocument: ...
