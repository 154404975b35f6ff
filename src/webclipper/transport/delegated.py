"""Delegation to the external dynamic-rendering service."""

from __future__ import annotations

import json
import logging
from typing import Any

import aiohttp

from ..errors import FetchTimeoutError, RenderServiceError, RenderServiceUnavailable
from ..http.protocols import HttpClient
from ..models.document import RawDocument, ResolvedContext

logger = logging.getLogger(__name__)


class RenderServiceClient:
    """
    Client for the rendering service protocol.

    Protocol:
        POST {service}/crawl  {"url": ..., "proxy"?: ..., "cookies"?: ...}
        200 {"success": true, "html": "..."}
        non-2xx or {"success": false, "error": "..."} on failure

    A refused connection means the service is not running and raises
    RenderServiceUnavailable, distinct from a failed render.
    """

    def __init__(
        self,
        http_client: HttpClient,
        service_url: str = "http://localhost:3737",
        timeout: float = 90.0,
    ) -> None:
        self._client = http_client
        self._service_url = service_url.rstrip("/")
        self._timeout = timeout

    @property
    def endpoint(self) -> str:
        return f"{self._service_url}/crawl"

    def _build_payload(self, url: str, context: ResolvedContext) -> dict[str, Any]:
        payload: dict[str, Any] = {"url": url}
        if context.proxy_url:
            payload["proxy"] = context.proxy_url
        if context.cookies:
            payload["cookies"] = context.cookies
        return payload

    async def render(self, url: str, context: ResolvedContext) -> str:
        """
        Ask the service to render a URL.

        Returns:
            Rendered HTML

        Raises:
            RenderServiceUnavailable: If the service cannot be reached
            RenderServiceError: If the service reports a failure
            FetchTimeoutError: If rendering exceeds the timeout
        """
        payload = self._build_payload(url, context)
        logger.info(f"Delegating {url} to rendering service at {self._service_url}")

        try:
            response = await self._client.post_json(self.endpoint, payload, timeout=self._timeout)
        except aiohttp.ClientConnectorError as e:
            raise RenderServiceUnavailable(self._service_url, str(e)) from e

        body: dict[str, Any] = {}
        text = self._client.decode_content(response)
        try:
            decoded = json.loads(text) if text else {}
            if isinstance(decoded, dict):
                body = decoded
        except json.JSONDecodeError:
            logger.debug(f"Rendering service returned non-JSON body for {url}")

        if not 200 <= response.status_code < 300:
            message = body.get("error") or f"HTTP {response.status_code}"
            raise RenderServiceError(url, str(message), status_code=response.status_code)

        if not body.get("success"):
            raise RenderServiceError(url, str(body.get("error") or "unknown error"))

        html = body.get("html")
        if not isinstance(html, str):
            raise RenderServiceError(url, "response carried no html")

        logger.debug(f"Rendered {url}: {len(html)} characters")
        return html

    async def ping(self, timeout: float = 5.0) -> bool:
        """Return True if the service accepts connections."""
        try:
            await self._client.post_json(self.endpoint, {}, timeout=timeout)
        except (aiohttp.ClientConnectorError, FetchTimeoutError) as e:
            logger.debug(f"Rendering service at {self._service_url} unreachable: {e}")
            return False
        return True


class DelegatedTransport:
    """Transport that fetches pages through the rendering service."""

    name = "delegated"

    def __init__(self, render_client: RenderServiceClient) -> None:
        self._render_client = render_client

    async def fetch(self, url: str, context: ResolvedContext) -> RawDocument:
        html = await self._render_client.render(url, context)
        return RawDocument(html=html, source_url=url)
