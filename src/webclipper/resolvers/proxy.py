"""Outbound proxy selection."""

from __future__ import annotations

import asyncio
import logging
import os
import re
import urllib.request
from collections.abc import Mapping
from typing import Protocol, runtime_checkable
from urllib.parse import urlparse

from ..models.config import NetworkConfig

logger = logging.getLogger(__name__)

_PAC_PROXY = re.compile(r"\b(?:PROXY|HTTPS?)\s+([^\s;]+)", re.IGNORECASE)


@runtime_checkable
class PlatformProxyResolver(Protocol):
    """
    Host capability that reports which proxy the platform would use.

    Implementations return a proxy URL such as ``http://127.0.0.1:7890``,
    a PAC-style answer such as ``PROXY 127.0.0.1:7890; DIRECT``, or None
    for a direct connection.
    """

    async def resolve(self, url: str) -> str | None: ...


def parse_pac_result(result: str | None) -> str | None:
    """
    Convert a PAC-style answer into a proxy URL.

    Example:
        >>> parse_pac_result("PROXY 127.0.0.1:7890; DIRECT")
        'http://127.0.0.1:7890'
        >>> parse_pac_result("DIRECT") is None
        True
    """
    if not result:
        return None
    match = _PAC_PROXY.search(result)
    if not match:
        return None
    return f"http://{match.group(1)}"


def normalize_platform_proxy(answer: str | None) -> str | None:
    """Turn a platform answer (proxy URL or PAC string) into a proxy URL."""
    if not answer or not answer.strip():
        return None
    answer = answer.strip()
    if "://" in answer:
        return answer
    return parse_pac_result(answer)


class SystemProxyResolver:
    """
    Platform proxy lookup backed by the operating system settings.

    Uses ``urllib.request.getproxies`` which reads the Windows registry,
    macOS System Configuration or the environment depending on platform.
    Honours the platform bypass list via ``proxy_bypass``.
    """

    async def resolve(self, url: str) -> str | None:
        return await asyncio.to_thread(self._resolve_sync, url)

    def _resolve_sync(self, url: str) -> str | None:
        parsed = urlparse(url)
        host = parsed.hostname or ""
        if host and urllib.request.proxy_bypass(host):
            return None

        proxies = urllib.request.getproxies()
        proxy = proxies.get(parsed.scheme) or proxies.get("https") or proxies.get("http")
        if proxy and "://" not in proxy:
            proxy = f"http://{proxy}"
        return proxy or None


def proxy_from_environment(url: str, environ: Mapping[str, str] | None = None) -> str | None:
    """
    Read HTTP_PROXY / HTTPS_PROXY from the environment.

    Keys are compared case-insensitively; the key matching the target
    scheme is preferred.
    """
    env = os.environ if environ is None else environ
    lowered = {key.lower(): value for key, value in env.items() if value}

    scheme = urlparse(url).scheme.lower()
    preferred = ["https_proxy", "http_proxy"] if scheme == "https" else ["http_proxy", "https_proxy"]
    for key in preferred:
        if lowered.get(key):
            return lowered[key]
    return None


class ProxyResolver:
    """
    Decides which proxy a request goes through.

    Priority (first hit wins):
        1. Manual ``proxy_url`` from settings
        2. Platform proxy, when ``use_platform_proxy`` is enabled
        3. HTTP_PROXY / HTTPS_PROXY environment variables
        4. Direct connection (logged as a warning)

    Example:
        resolver = ProxyResolver(platform_resolver=SystemProxyResolver())
        proxy = await resolver.resolve("https://example.com", settings.network)
    """

    def __init__(
        self,
        platform_resolver: PlatformProxyResolver | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._platform_resolver = platform_resolver
        self._environ = environ

    async def resolve(self, target_url: str, network: NetworkConfig) -> str | None:
        if network.proxy_url and network.proxy_url.strip():
            proxy = network.proxy_url.strip()
            logger.info(f"Using manual proxy: {proxy}")
            return proxy

        if network.use_platform_proxy and self._platform_resolver is not None:
            try:
                proxy = normalize_platform_proxy(await self._platform_resolver.resolve(target_url))
            except Exception as e:
                logger.warning(f"Platform proxy lookup failed for {target_url}: {e}")
                proxy = None
            if proxy:
                logger.info(f"Using platform proxy: {proxy}")
                return proxy

        proxy = proxy_from_environment(target_url, self._environ)
        if proxy:
            logger.info(f"Using environment proxy: {proxy}")
            return proxy

        logger.warning(f"No proxy configured for {target_url}; connecting directly")
        return None
