"""Protocol definitions for HTTP client abstraction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class HttpResponse:
    """
    Immutable HTTP response returned by HttpClient.

    Attributes:
        status_code: HTTP status code (200, 404, etc.)
        content: Raw response content as bytes
        content_type: Content-Type header value
        headers: All response headers
        url: URL that produced this response (no redirects are followed)
    """

    status_code: int
    content: bytes
    content_type: str
    headers: dict[str, str]
    url: str

    @property
    def is_redirect(self) -> bool:
        return self.status_code in (301, 302, 303, 307, 308)

    @property
    def location(self) -> str | None:
        for key, value in self.headers.items():
            if key.lower() == "location":
                return value
        return None


class HttpClient(Protocol):
    """
    Protocol for HTTP clients.

    This abstraction allows for:
    - Mock implementations in tests
    - Different backends (aiohttp, httpx, etc.)
    - Consistent interface across the codebase
    """

    async def get(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        proxy: str | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        """
        Perform a single HTTP GET without following redirects.

        Raises:
            FetchTimeoutError: If the request exceeds its timeout
        """
        ...

    async def post_json(
        self,
        url: str,
        payload: dict[str, Any],
        *,
        timeout: float | None = None,
    ) -> HttpResponse:
        """
        POST a JSON body and return the raw response.

        Raises:
            FetchTimeoutError: If the request exceeds its timeout
        """
        ...

    def decode_content(self, response: HttpResponse) -> str:
        """Decode response bytes to text."""
        ...
