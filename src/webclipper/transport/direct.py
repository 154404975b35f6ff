"""Direct HTTP(S) fetching with bounded redirect following."""

from __future__ import annotations

import logging
from urllib.parse import urljoin

from ..errors import FetchError, TooManyRedirects
from ..http.protocols import HttpClient
from ..models.document import RawDocument, ResolvedContext

logger = logging.getLogger(__name__)

REDIRECT_STATUS_CODES = frozenset({301, 302, 303, 307, 308})


class DirectTransport:
    """
    Fetches pages straight from the origin.

    Each hop is a separate request with its own timeout. Redirects are
    followed through the ``Location`` header (relative targets resolved
    against the current URL) up to ``max_redirects`` hops.

    Example:
        async with AsyncHttpClient() as client:
            transport = DirectTransport(client)
            doc = await transport.fetch(url, context)
    """

    name = "direct"

    def __init__(
        self,
        http_client: HttpClient,
        timeout: float = 60.0,
        max_redirects: int = 10,
    ) -> None:
        self._client = http_client
        self._timeout = timeout
        self._max_redirects = max_redirects

    async def fetch(self, url: str, context: ResolvedContext) -> RawDocument:
        """
        Fetch a URL, following redirects.

        Raises:
            FetchError: On HTTP status >= 400
            FetchTimeoutError: If any hop times out
            TooManyRedirects: If the redirect chain exceeds the bound
        """
        current = url
        for hop in range(self._max_redirects + 1):
            response = await self._client.get(
                current,
                headers=context.headers,
                proxy=context.proxy_url,
                timeout=self._timeout,
            )

            if response.status_code in REDIRECT_STATUS_CODES and response.location:
                target = urljoin(current, response.location)
                logger.debug(f"Redirect {response.status_code} ({hop + 1}): {current} -> {target}")
                current = target
                continue

            if response.status_code >= 400:
                raise FetchError(current, response.status_code)

            html = self._client.decode_content(response)
            logger.debug(f"Fetched {current}: {len(response.content)} bytes")
            return RawDocument(html=html, source_url=current)

        raise TooManyRedirects(url, self._max_redirects)
