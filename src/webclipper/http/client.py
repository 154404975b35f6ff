"""Async HTTP client built on aiohttp."""

from __future__ import annotations

import asyncio
import logging
from types import TracebackType
from typing import Any

import aiohttp
from charset_normalizer import from_bytes as detect_encoding

from ..errors import FetchTimeoutError
from .protocols import HttpResponse

logger = logging.getLogger(__name__)


class AsyncHttpClient:
    """
    Async HTTP client for single-hop requests.

    Features:
    - Per-request proxy and headers (contexts are resolved per request)
    - No automatic redirects: callers decide how to follow them
    - Optional TLS verification (off tolerates self-signed certificates)
    - Content size limits to prevent memory exhaustion
    - Intelligent encoding detection
    - Timeouts surfaced as FetchTimeoutError

    Example:
        async with AsyncHttpClient(verify_ssl=False) as client:
            response = await client.get("https://example.com", proxy="http://127.0.0.1:7890")
            print(client.decode_content(response))
    """

    MAX_CONTENT_SIZE = 50 * 1024 * 1024  # 50 MB

    def __init__(
        self,
        default_timeout: float = 60.0,
        max_content_size: int = MAX_CONTENT_SIZE,
        verify_ssl: bool = False,
    ) -> None:
        """
        Initialize the HTTP client.

        Args:
            default_timeout: Default request timeout in seconds
            max_content_size: Maximum response size in bytes
            verify_ssl: Validate TLS certificates
        """
        self._default_timeout = default_timeout
        self._max_content_size = max_content_size
        self._verify_ssl = verify_ssl

        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> AsyncHttpClient:
        """Enter async context and create session."""
        connector = aiohttp.TCPConnector(
            limit=20,
            ttl_dns_cache=300,
            ssl=self._verify_ssl,
        )
        # Cookies come from site profiles only; never persist server cookies.
        self._session = aiohttp.ClientSession(
            connector=connector,
            cookie_jar=aiohttp.DummyCookieJar(),
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and close session."""
        if self._session:
            await self._session.close()
            self._session = None

    def _require_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            raise RuntimeError("Client not initialized. Use 'async with' context manager.")
        return self._session

    def _decode_content(self, content: bytes, content_type: str) -> str:
        """
        Decode content with intelligent encoding detection.

        Fallback chain:
        1. Content-Type header charset
        2. Strict UTF-8
        3. charset-normalizer detection
        4. UTF-8 with replacement
        """
        encoding = None
        if content_type:
            for part in content_type.split(";"):
                part = part.strip()
                if part.lower().startswith("charset="):
                    encoding = part.split("=", 1)[1].strip().strip("\"'")
                    break

        if encoding:
            try:
                return content.decode(encoding)
            except (UnicodeDecodeError, LookupError):
                logger.debug(f"Failed to decode with declared encoding: {encoding}")

        try:
            return content.decode("utf-8")
        except UnicodeDecodeError:
            pass

        best_match = detect_encoding(content).best()
        if best_match:
            logger.debug(f"Detected encoding: {best_match.encoding}")
            return str(best_match)

        return content.decode("utf-8", errors="replace")

    async def _read_limited(self, response: aiohttp.ClientResponse) -> bytes:
        content_length = response.headers.get("Content-Length")
        if content_length and content_length.isdigit() and int(content_length) > self._max_content_size:
            raise ValueError(f"Content too large: {content_length} bytes")

        chunks: list[bytes] = []
        size = 0
        async for chunk in response.content.iter_chunked(8192):
            size += len(chunk)
            if size > self._max_content_size:
                raise ValueError(f"Content size limit exceeded: >{self._max_content_size} bytes")
            chunks.append(chunk)
        return b"".join(chunks)

    async def get(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        proxy: str | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        """
        Perform one HTTP GET request without following redirects.

        Args:
            url: The URL to fetch
            headers: Request headers
            proxy: Proxy URL for this request
            timeout: Request timeout in seconds (uses default if None)

        Returns:
            HttpResponse with status, content, and headers

        Raises:
            FetchTimeoutError: If the request exceeds the timeout
            aiohttp.ClientError: On network errors
            ValueError: On content size exceeded
        """
        session = self._require_session()
        timeout_val = timeout or self._default_timeout

        try:
            async with session.get(
                url,
                headers=headers,
                proxy=proxy,
                timeout=aiohttp.ClientTimeout(total=timeout_val),
                allow_redirects=False,
            ) as response:
                content = await self._read_limited(response)
                return HttpResponse(
                    status_code=response.status,
                    content=content,
                    content_type=response.headers.get("Content-Type", ""),
                    headers=dict(response.headers),
                    url=str(response.url),
                )
        except asyncio.TimeoutError as e:
            raise FetchTimeoutError(url, timeout_val) from e

    async def post_json(
        self,
        url: str,
        payload: dict[str, Any],
        *,
        timeout: float | None = None,
    ) -> HttpResponse:
        """
        POST a JSON payload.

        Args:
            url: Endpoint URL
            payload: JSON-serializable body
            timeout: Request timeout in seconds (uses default if None)

        Returns:
            HttpResponse with the raw body

        Raises:
            FetchTimeoutError: If the request exceeds the timeout
            aiohttp.ClientError: On network errors (including refused connections)
        """
        session = self._require_session()
        timeout_val = timeout or self._default_timeout

        try:
            async with session.post(
                url,
                json=payload,
                timeout=aiohttp.ClientTimeout(total=timeout_val),
            ) as response:
                content = await self._read_limited(response)
                return HttpResponse(
                    status_code=response.status,
                    content=content,
                    content_type=response.headers.get("Content-Type", ""),
                    headers=dict(response.headers),
                    url=str(response.url),
                )
        except asyncio.TimeoutError as e:
            raise FetchTimeoutError(url, timeout_val) from e

    def decode_content(self, response: HttpResponse) -> str:
        """
        Decode response content to string.

        Convenience method that uses intelligent encoding detection.
        """
        return self._decode_content(response.content, response.content_type)
