"""Tests for credential, proxy and context resolution."""

from unittest.mock import AsyncMock

import pytest
from webclipper.models.config import NetworkConfig, SiteProfile
from webclipper.resolvers import (
    ContextResolver,
    CredentialResolver,
    PlatformProxyResolver,
    ProxyResolver,
    SystemProxyResolver,
    format_cookies,
    normalize_platform_proxy,
    parse_cookies,
    parse_pac_result,
    proxy_from_environment,
)


class TestCookies:
    """Tests for cookie string helpers."""

    def test_parse(self):
        """Test parsing a cookie header value."""
        assert parse_cookies("a=1; b=2;c=x=y") == {"a": "1", "b": "2", "c": "x=y"}

    def test_parse_skips_incomplete_entries(self):
        """Test that entries without a name or value are dropped."""
        assert parse_cookies("a=1; junk; =2; b=") == {"a": "1"}
        assert parse_cookies(None) == {}

    def test_format(self):
        """Test serializing cookies."""
        assert format_cookies({"a": "1", "b": "2"}) == "a=1; b=2"


class TestCredentialResolver:
    """Tests for CredentialResolver."""

    def test_first_match_wins(self):
        """Test that profiles are checked in order."""
        profiles = [
            SiteProfile(url_pattern="https://example.com/private/*", cookies="first=1"),
            SiteProfile(url_pattern="https://example.com/*", cookies="second=1"),
        ]
        resolver = CredentialResolver()
        assert resolver.resolve("https://example.com/private/x", profiles).cookies == "first=1"
        assert resolver.resolve("https://example.com/public", profiles).cookies == "second=1"

    def test_no_match(self):
        """Test that no matching profile returns None."""
        profiles = [SiteProfile(url_pattern="https://example.com/*")]
        assert CredentialResolver().resolve("https://other.com/", profiles) is None

    def test_headers_without_profile(self):
        """Test default headers."""
        headers = CredentialResolver().build_headers(None, NetworkConfig())
        assert headers["User-Agent"] == NetworkConfig().user_agent
        assert headers["Accept-Language"] == "zh-CN,zh;q=0.9,en;q=0.8"
        assert headers["Connection"] == "keep-alive"
        assert headers["Upgrade-Insecure-Requests"] == "1"
        assert "text/html" in headers["Accept"]
        assert "Cookie" not in headers

    def test_headers_with_profile(self):
        """Test that profile cookies and User-Agent are applied."""
        profile = SiteProfile(url_pattern="https://example.com/*", cookies="a=1", user_agent="Custom/1.0")
        headers = CredentialResolver().build_headers(profile, NetworkConfig())
        assert headers["Cookie"] == "a=1"
        assert headers["User-Agent"] == "Custom/1.0"


class TestPacParsing:
    """Tests for parse_pac_result()."""

    def test_proxy_entry(self):
        assert parse_pac_result("PROXY 127.0.0.1:7890; DIRECT") == "http://127.0.0.1:7890"

    def test_direct(self):
        assert parse_pac_result("DIRECT") is None
        assert parse_pac_result("") is None
        assert parse_pac_result(None) is None

    def test_normalize_platform_proxy(self):
        assert normalize_platform_proxy(" http://127.0.0.1:7890 ") == "http://127.0.0.1:7890"
        assert normalize_platform_proxy("PROXY 127.0.0.1:7890") == "http://127.0.0.1:7890"
        assert normalize_platform_proxy("DIRECT") is None
        assert normalize_platform_proxy("  ") is None


class TestEnvironmentProxy:
    """Tests for proxy_from_environment()."""

    def test_scheme_specific_key_preferred(self):
        """Test that the key matching the target scheme wins."""
        env = {"HTTP_PROXY": "http://plain:1", "HTTPS_PROXY": "http://secure:2"}
        assert proxy_from_environment("https://example.com", env) == "http://secure:2"
        assert proxy_from_environment("http://example.com", env) == "http://plain:1"

    def test_case_insensitive_keys(self):
        """Test lowercase variable names."""
        assert proxy_from_environment("https://example.com", {"https_proxy": "http://p:3"}) == "http://p:3"

    def test_falls_back_to_other_scheme(self):
        """Test that HTTP_PROXY is used for https targets when HTTPS_PROXY is unset."""
        assert proxy_from_environment("https://example.com", {"HTTP_PROXY": "http://p:4"}) == "http://p:4"

    def test_none(self):
        assert proxy_from_environment("https://example.com", {}) is None


class TestProxyResolver:
    """Tests for the proxy priority chain."""

    @pytest.fixture
    def platform(self):
        """Create a mock platform resolver."""
        resolver = AsyncMock()
        resolver.resolve.return_value = "http://platform:8080"
        return resolver

    @pytest.mark.asyncio
    async def test_manual_proxy_wins(self, platform):
        """Test that the manual proxy beats platform and environment."""
        resolver = ProxyResolver(platform_resolver=platform, environ={"HTTPS_PROXY": "http://env:1"})
        network = NetworkConfig(proxy_url="http://127.0.0.1:9")
        assert await resolver.resolve("https://example.com", network) == "http://127.0.0.1:9"
        platform.resolve.assert_not_called()

    @pytest.mark.asyncio
    async def test_platform_before_environment(self, platform):
        """Test that the platform proxy beats the environment."""
        resolver = ProxyResolver(platform_resolver=platform, environ={"HTTPS_PROXY": "http://env:1"})
        assert await resolver.resolve("https://example.com", NetworkConfig()) == "http://platform:8080"

    @pytest.mark.asyncio
    async def test_platform_disabled(self, platform):
        """Test that use_platform_proxy=False skips the platform lookup."""
        resolver = ProxyResolver(platform_resolver=platform, environ={"HTTPS_PROXY": "http://env:1"})
        network = NetworkConfig(use_platform_proxy=False)
        assert await resolver.resolve("https://example.com", network) == "http://env:1"
        platform.resolve.assert_not_called()

    @pytest.mark.asyncio
    async def test_platform_failure_falls_through(self, platform):
        """Test that a failing platform lookup is treated as a miss."""
        platform.resolve.side_effect = RuntimeError("no platform")
        resolver = ProxyResolver(platform_resolver=platform, environ={"HTTPS_PROXY": "http://env:1"})
        assert await resolver.resolve("https://example.com", NetworkConfig()) == "http://env:1"

    @pytest.mark.asyncio
    async def test_no_proxy_logs_warning(self, platform, caplog):
        """Test that no proxy at all returns None with a warning."""
        platform.resolve.return_value = None
        resolver = ProxyResolver(platform_resolver=platform, environ={})
        with caplog.at_level("WARNING", logger="webclipper.resolvers.proxy"):
            assert await resolver.resolve("https://example.com", NetworkConfig()) is None
        assert "No proxy" in caplog.text

    @pytest.mark.asyncio
    async def test_platform_pac_answer_normalized(self, platform):
        """Test that a PAC-style platform answer becomes a proxy URL."""
        platform.resolve.return_value = "PROXY 10.0.0.1:8080; DIRECT"
        resolver = ProxyResolver(platform_resolver=platform, environ={"HTTPS_PROXY": "http://env:1"})
        assert await resolver.resolve("https://example.com", NetworkConfig()) == "http://10.0.0.1:8080"

    @pytest.mark.asyncio
    async def test_platform_direct_answer_falls_through(self, platform):
        """Test that a DIRECT platform answer defers to the environment."""
        platform.resolve.return_value = "DIRECT"
        resolver = ProxyResolver(platform_resolver=platform, environ={"HTTPS_PROXY": "http://env:1"})
        assert await resolver.resolve("https://example.com", NetworkConfig()) == "http://env:1"

    def test_system_resolver_satisfies_protocol(self):
        """Test that SystemProxyResolver is a PlatformProxyResolver."""
        assert isinstance(SystemProxyResolver(), PlatformProxyResolver)


class TestContextResolver:
    """Tests for ContextResolver."""

    @pytest.mark.asyncio
    async def test_resolve(self):
        """Test combining proxy and credentials."""
        resolver = ContextResolver(proxy_resolver=ProxyResolver(environ={}))
        profiles = [SiteProfile(url_pattern="https://v2ex.com/*", cookies="A2=token")]
        network = NetworkConfig(proxy_url="http://127.0.0.1:7890")

        ctx = await resolver.resolve("https://www.v2ex.com/t/1", profiles, network)

        assert ctx.proxy_url == "http://127.0.0.1:7890"
        assert ctx.cookies == "A2=token"
        assert ctx.headers["Cookie"] == "A2=token"

    @pytest.mark.asyncio
    async def test_resolve_anonymous(self):
        """Test resolution with no profile and no proxy."""
        resolver = ContextResolver(proxy_resolver=ProxyResolver(environ={}))
        ctx = await resolver.resolve("https://example.com/post", [], NetworkConfig(use_platform_proxy=False))
        assert ctx.proxy_url is None
        assert ctx.cookies is None
        assert "Cookie" not in ctx.headers
