"""Pydantic configuration models for webclipper."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

DEFAULT_RENDER_PATTERNS = [
    "https://x.com/*",
    "https://twitter.com/*",
    "https://www.zhihu.com/*",
    "https://zhuanlan.zhihu.com/*",
]


def _expand_env_var(value: Optional[str]) -> Optional[str]:
    """Expand environment variable references in a string.

    Supports $VAR and ${VAR} syntax. Returns original value if
    the env var is not set.
    """
    import os
    import re

    if value is None:
        return None

    pattern = r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)"

    def replace(match: re.Match) -> str:
        var_name = match.group(1) or match.group(2)
        return os.environ.get(var_name, match.group(0))

    return re.sub(pattern, replace, value)


class SiteProfile(BaseModel):
    """Per-site request identity, selected by wildcard URL pattern.

    Cookie and password values support $VAR / ${VAR} expansion so secrets
    can stay out of configuration files.
    """

    url_pattern: str = Field(..., description='Wildcard URL pattern, e.g. "https://example.com/*"')
    cookies: Optional[str] = Field(None, description='Cookie header value: "key1=value1; key2=value2"')
    user_agent: Optional[str] = Field(None, description="User-Agent sent to matching sites")
    # Stored for hosts that persist them; no login flow reads these.
    username: Optional[str] = Field(None, description="Unused login name")
    password: Optional[str] = Field(None, description="Unused login password")

    model_config = {"extra": "forbid", "frozen": True}

    def model_post_init(self, __context: object) -> None:
        if self.cookies:
            object.__setattr__(self, "cookies", _expand_env_var(self.cookies))
        if self.password:
            object.__setattr__(self, "password", _expand_env_var(self.password))


class NetworkConfig(BaseModel):
    """Configuration for direct HTTP fetches and proxy selection."""

    proxy_url: Optional[str] = Field(
        None,
        description="Manual proxy override, e.g. http://127.0.0.1:7890",
    )
    use_platform_proxy: bool = Field(
        True,
        description="Ask the operating system for its proxy when no manual proxy is set",
    )
    timeout: float = Field(60.0, gt=0, description="Timeout per request / redirect hop in seconds")
    max_redirects: int = Field(10, ge=0, description="Maximum redirect hops before giving up")
    user_agent: str = Field(DEFAULT_USER_AGENT, description="Default User-Agent header")
    accept_language: str = Field("zh-CN,zh;q=0.9,en;q=0.8", description="Accept-Language header")
    verify_ssl: bool = Field(False, description="Validate TLS certificates (off tolerates self-signed)")

    model_config = {"extra": "forbid"}


class RenderServiceConfig(BaseModel):
    """Configuration for the external dynamic-rendering service."""

    enabled: bool = Field(True, description="Delegate matching sites to the rendering service")
    url: str = Field("http://localhost:3737", description="Base URL of the rendering service")
    timeout: float = Field(90.0, gt=0, description="Render request timeout in seconds")
    patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_RENDER_PATTERNS),
        description="Wildcard patterns of sites that need client-side rendering",
    )

    model_config = {"extra": "forbid"}


class PaginationConfig(BaseModel):
    """Configuration for multi-page thread aggregation."""

    page_delay: float = Field(0.5, ge=0, description="Seconds to wait between page fetches")
    max_pages: Optional[int] = Field(None, ge=1, description="Cap on total pages (None = all)")

    model_config = {"extra": "forbid"}


class ClipperSettings(BaseModel):
    """
    Root configuration model for webclipper.

    Example:
        settings = ClipperSettings(
            network=NetworkConfig(proxy_url="http://127.0.0.1:7890"),
            site_profiles=[SiteProfile(url_pattern="https://www.v2ex.com/*", cookies="A2=...")],
        )

    YAML format:
        include_replies: true
        network:
          proxy_url: http://127.0.0.1:7890
        site_profiles:
          - url_pattern: https://www.v2ex.com/*
            cookies: ${V2EX_COOKIES}
    """

    include_replies: bool = Field(True, description="Append forum replies to the document")
    save_path: str = Field("WebCrawler", description="Folder the host saves clipped notes into")
    site_profiles: list[SiteProfile] = Field(default_factory=list, description="Ordered site profiles")

    network: NetworkConfig = Field(default_factory=NetworkConfig)
    render_service: RenderServiceConfig = Field(default_factory=RenderServiceConfig)
    pagination: PaginationConfig = Field(default_factory=PaginationConfig)

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field("INFO", description="Logging level")
    log_file: Optional[Path] = Field(None, description="Log file path")

    model_config = {"extra": "forbid"}

    def to_yaml(self) -> str:
        """Serialize settings to YAML string."""
        import yaml

        return yaml.dump(self.model_dump(mode="json", exclude_none=True), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ClipperSettings":
        """Load settings from YAML string."""
        import yaml

        data = yaml.safe_load(yaml_str) or {}
        return cls.model_validate(data)

    @classmethod
    def from_yaml_file(cls, path: Path) -> "ClipperSettings":
        """Load settings from YAML file."""
        return cls.from_yaml(path.read_text(encoding="utf-8"))
