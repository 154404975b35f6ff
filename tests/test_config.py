"""Tests for configuration models."""

import pytest
from pydantic import ValidationError
from webclipper.models.config import (
    DEFAULT_RENDER_PATTERNS,
    ClipperSettings,
    NetworkConfig,
    SiteProfile,
)


class TestDefaults:
    """Tests for default settings values."""

    def test_settings_defaults(self):
        """Test top-level defaults."""
        settings = ClipperSettings()
        assert settings.include_replies is True
        assert settings.save_path == "WebCrawler"
        assert settings.site_profiles == []

    def test_network_defaults(self):
        """Test network defaults."""
        network = NetworkConfig()
        assert network.proxy_url is None
        assert network.use_platform_proxy is True
        assert network.timeout == 60.0
        assert network.max_redirects == 10
        assert network.verify_ssl is False
        assert "Chrome" in network.user_agent

    def test_render_service_defaults(self):
        """Test rendering service defaults."""
        settings = ClipperSettings()
        assert settings.render_service.url == "http://localhost:3737"
        assert settings.render_service.timeout == 90.0
        assert settings.render_service.patterns == DEFAULT_RENDER_PATTERNS

    def test_render_patterns_not_shared(self):
        """Test that each settings object gets its own pattern list."""
        a = ClipperSettings()
        a.render_service.patterns.append("https://spa.example/*")
        assert "https://spa.example/*" not in ClipperSettings().render_service.patterns

    def test_pagination_defaults(self):
        """Test pagination defaults."""
        settings = ClipperSettings()
        assert settings.pagination.page_delay == 0.5
        assert settings.pagination.max_pages is None


class TestValidation:
    """Tests for validation rules."""

    def test_unknown_field_rejected(self):
        """Test that unknown keys are rejected."""
        with pytest.raises(ValidationError):
            ClipperSettings(unknown_option=True)

    def test_negative_timeout_rejected(self):
        """Test that timeouts must be positive."""
        with pytest.raises(ValidationError):
            NetworkConfig(timeout=0)

    def test_site_profile_is_frozen(self):
        """Test that site profiles are immutable."""
        profile = SiteProfile(url_pattern="https://example.com/*")
        with pytest.raises(ValidationError):
            profile.cookies = "a=b"


class TestEnvironmentExpansion:
    """Tests for $VAR expansion in site profiles."""

    def test_cookie_expansion(self, monkeypatch):
        """Test ${VAR} expansion in cookies."""
        monkeypatch.setenv("WEBCLIPPER_TEST_COOKIE", "A2=secret")
        profile = SiteProfile(url_pattern="https://v2ex.com/*", cookies="${WEBCLIPPER_TEST_COOKIE}; lang=zh")
        assert profile.cookies == "A2=secret; lang=zh"

    def test_unset_variable_left_alone(self, monkeypatch):
        """Test that unset variables are kept verbatim."""
        monkeypatch.delenv("WEBCLIPPER_MISSING", raising=False)
        profile = SiteProfile(url_pattern="https://v2ex.com/*", cookies="$WEBCLIPPER_MISSING")
        assert profile.cookies == "$WEBCLIPPER_MISSING"


class TestYaml:
    """Tests for YAML loading and saving."""

    def test_from_yaml(self):
        """Test loading settings from YAML."""
        settings = ClipperSettings.from_yaml(
            """
include_replies: false
network:
  proxy_url: http://127.0.0.1:7890
site_profiles:
  - url_pattern: https://www.v2ex.com/*
    cookies: A2=abc
pagination:
  max_pages: 3
"""
        )
        assert settings.include_replies is False
        assert settings.network.proxy_url == "http://127.0.0.1:7890"
        assert settings.site_profiles[0].cookies == "A2=abc"
        assert settings.pagination.max_pages == 3

    def test_empty_yaml(self):
        """Test that an empty document yields defaults."""
        assert ClipperSettings.from_yaml("") == ClipperSettings()

    def test_yaml_round_trip(self):
        """Test that to_yaml output loads back to equal settings."""
        settings = ClipperSettings(
            network=NetworkConfig(proxy_url="http://proxy:8080"),
            site_profiles=[SiteProfile(url_pattern="https://x.com/*", user_agent="UA")],
        )
        assert ClipperSettings.from_yaml(settings.to_yaml()) == settings

    def test_from_yaml_file(self, tmp_path):
        """Test loading from a file."""
        path = tmp_path / "webclipper.yaml"
        path.write_text("save_path: Clips\n", encoding="utf-8")
        assert ClipperSettings.from_yaml_file(path).save_path == "Clips"
