"""Credential and proxy resolution for webclipper."""

from .context import ContextResolver
from .credentials import CredentialResolver, format_cookies, parse_cookies
from .proxy import (
    PlatformProxyResolver,
    ProxyResolver,
    SystemProxyResolver,
    normalize_platform_proxy,
    parse_pac_result,
    proxy_from_environment,
)

__all__ = [
    "ContextResolver",
    "CredentialResolver",
    "PlatformProxyResolver",
    "ProxyResolver",
    "SystemProxyResolver",
    "format_cookies",
    "normalize_platform_proxy",
    "parse_cookies",
    "parse_pac_result",
    "proxy_from_environment",
]
