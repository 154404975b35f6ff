"""Diagnostics: installed dependencies, proxy connectivity, rendering service."""

import asyncio
import sys
from importlib import import_module
from typing import Optional

import aiohttp
from rich.console import Console
from rich.table import Table

from .errors import ClipperError
from .http import AsyncHttpClient
from .models.config import ClipperSettings
from .resolvers.proxy import ProxyResolver, SystemProxyResolver
from .transport.delegated import RenderServiceClient

PROXY_CHECK_URL = "https://www.google.com"
PROXY_CHECK_TIMEOUT = 15.0

CORE_DEPENDENCIES = [
    ("aiohttp", "aiohttp"),
    ("bs4", "beautifulsoup4"),
    ("charset_normalizer", "charset-normalizer"),
    ("html2text", "html2text"),
    ("pydantic", "pydantic"),
    ("yaml", "pyyaml"),
    ("rich", "rich"),
]


def check_dependency(module_name: str, package_name: Optional[str] = None) -> tuple[bool, str]:
    """
    Check if a Python module is importable.

    Returns:
        Tuple of (success: bool, message: str)
    """
    display_name = package_name or module_name
    try:
        import_module(module_name)
        return True, f"[OK] {display_name}"
    except ImportError:
        return False, f"[MISSING] {display_name}"


async def check_proxy(
    settings: ClipperSettings,
    check_url: str = PROXY_CHECK_URL,
    timeout: float = PROXY_CHECK_TIMEOUT,
) -> tuple[bool, str]:
    """
    Fetch a check URL through the proxy the settings resolve to.

    Any HTTP answer counts as success; only network errors and timeouts fail.
    """
    resolver = ProxyResolver(
        platform_resolver=SystemProxyResolver() if settings.network.use_platform_proxy else None,
    )
    proxy = await resolver.resolve(check_url, settings.network)
    route = proxy or "direct connection"

    async with AsyncHttpClient(default_timeout=timeout, verify_ssl=settings.network.verify_ssl) as client:
        try:
            response = await client.get(check_url, proxy=proxy, timeout=timeout)
        except (ClipperError, aiohttp.ClientError, OSError) as e:
            return False, f"[FAIL] {check_url} via {route} - {type(e).__name__}: {e}"

    return True, f"[OK] {check_url} via {route} (HTTP {response.status_code})"


async def check_render_service(settings: ClipperSettings) -> tuple[bool, str]:
    """Check that the rendering service accepts connections."""
    url = settings.render_service.url
    async with AsyncHttpClient() as client:
        reachable = await RenderServiceClient(client, service_url=url).ping()
    if reachable:
        return True, f"[OK] Rendering service at {url}"
    return False, f"[FAIL] Rendering service at {url} - not running"


def run_doctor(settings: Optional[ClipperSettings] = None, network: bool = True) -> int:
    """
    Run diagnostic checks and display results.

    Args:
        settings: Settings whose proxy and rendering service are checked
        network: Also run the proxy and rendering-service checks

    Returns:
        Exit code (0 if all core dependencies OK, 1 if any is missing)
    """
    settings = settings or ClipperSettings()
    console = Console()
    console.print("Running webclipper diagnostics...\n")

    core_results = [check_dependency(mod, pkg) for mod, pkg in CORE_DEPENDENCIES]
    all_checks = {"Core Dependencies": core_results}

    if network:

        async def _network_checks() -> list[tuple[bool, str]]:
            return [await check_proxy(settings), await check_render_service(settings)]

        all_checks["Network"] = asyncio.run(_network_checks())

    for category, results in all_checks.items():
        table = Table(title=category, show_header=False, box=None)
        table.add_column("Status", style="bold")
        for success, message in results:
            table.add_row(message, style="green" if success else "red")
        console.print(table)
        console.print()

    if any(not success for success, _ in core_results):
        console.print("[red]Some core dependencies are missing![/red]")
        console.print("\nRecommended fixes:")
        console.print("  1. For pip users: pip install --upgrade --force-reinstall webclipper")
        console.print("  2. For development: pip install -e .[dev]")
        return 1

    console.print("[green]All core dependencies installed correctly![/green]")
    return 0


if __name__ == "__main__":
    sys.exit(run_doctor())
