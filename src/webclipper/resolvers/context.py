"""Per-request network context (proxy + headers)."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..models.config import NetworkConfig, SiteProfile
from ..models.document import ResolvedContext
from .credentials import CredentialResolver
from .proxy import ProxyResolver

logger = logging.getLogger(__name__)


class ContextResolver:
    """
    Combines credential and proxy resolution into a ResolvedContext.

    A context is computed fresh for every request and never cached, since
    cookies and proxy settings may change between calls.
    """

    def __init__(
        self,
        proxy_resolver: ProxyResolver | None = None,
        credential_resolver: CredentialResolver | None = None,
    ) -> None:
        self._proxy_resolver = proxy_resolver or ProxyResolver()
        self._credential_resolver = credential_resolver or CredentialResolver()

    async def resolve(
        self,
        url: str,
        profiles: Sequence[SiteProfile],
        network: NetworkConfig,
    ) -> ResolvedContext:
        profile = self._credential_resolver.resolve(url, profiles)
        headers = self._credential_resolver.build_headers(profile, network)
        proxy_url = await self._proxy_resolver.resolve(url, network)
        return ResolvedContext(
            proxy_url=proxy_url,
            headers=headers,
            cookies=profile.cookies if profile else None,
        )
