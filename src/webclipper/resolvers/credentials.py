"""Site profile selection and request header construction."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..matching import matches
from ..models.config import NetworkConfig, SiteProfile

logger = logging.getLogger(__name__)

DEFAULT_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8"


def parse_cookies(cookie_string: str | None) -> dict[str, str]:
    """
    Parse a ``key1=value1; key2=value2`` cookie string into a dict.

    Entries without a name or value are dropped.
    """
    cookies: dict[str, str] = {}
    if not cookie_string:
        return cookies

    for part in cookie_string.split(";"):
        key, sep, value = part.strip().partition("=")
        if key and sep and value:
            cookies[key.strip()] = value.strip()
    return cookies


def format_cookies(cookies: dict[str, str]) -> str:
    """Serialize a cookie dict back to a Cookie header value."""
    return "; ".join(f"{key}={value}" for key, value in cookies.items())


class CredentialResolver:
    """
    Selects the site profile used to authenticate a request.

    Profiles are checked in configured order and the first whose
    ``url_pattern`` matches wins. No match is a normal outcome: the page is
    fetched anonymously.

    Example:
        resolver = CredentialResolver()
        profile = resolver.resolve(url, settings.site_profiles)
        headers = resolver.build_headers(profile, settings.network)
    """

    def resolve(self, url: str, profiles: Sequence[SiteProfile]) -> SiteProfile | None:
        for profile in profiles:
            if matches(url, profile.url_pattern):
                logger.debug(f"Using site profile {profile.url_pattern!r} for {url}")
                return profile
        return None

    def build_headers(self, profile: SiteProfile | None, network: NetworkConfig) -> dict[str, str]:
        """
        Build request headers for a fetch.

        Args:
            profile: Matched site profile, if any
            network: Network settings supplying defaults

        Returns:
            Header mapping with User-Agent, Accept, Accept-Language and,
            when the profile carries them, cookies
        """
        user_agent = (profile.user_agent if profile else None) or network.user_agent
        headers = {
            "User-Agent": user_agent,
            "Accept": DEFAULT_ACCEPT,
            "Accept-Language": network.accept_language,
            "Connection": "keep-alive",
            "Upgrade-Insecure-Requests": "1",
        }
        if profile and profile.cookies:
            headers["Cookie"] = profile.cookies
        return headers
