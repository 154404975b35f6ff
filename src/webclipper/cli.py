"""Command-line interface for webclipper."""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from . import __version__
from .conversion import FrontmatterBuilder, generate_file_name
from .core.crawler import WebCrawler
from .errors import ClipperError, RenderServiceUnavailable
from .logging_config import setup_logging
from .models.config import ClipperSettings, SiteProfile
from .models.document import CrawlResult
from .models.events import CrawlEvent, EventType

RENDER_SERVICE_GUIDANCE = """\
This page needs JavaScript rendering, which is done by the rendering service.
Start the service (it listens on {url} by default), then run the command again.
Check it with: webclipper --check-render-service"""


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="webclipper",
        description="Clip a web page (forum thread, social post, article) to Markdown",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print a page as Markdown
  webclipper https://example.com/post

  # Save a forum thread with all reply pages into a folder
  webclipper https://www.v2ex.com/t/123456 --save-dir WebCrawler

  # Go through a manual proxy, skip replies
  webclipper https://example.com/post --proxy http://127.0.0.1:7890 --no-replies

  # Check proxy connectivity and the rendering service
  webclipper --check-proxy --check-render-service
        """,
    )

    parser.add_argument(
        "url",
        nargs="?",
        help="URL to clip",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        metavar="FILE",
        help="YAML settings file",
    )

    # Diagnostics
    diag_group = parser.add_argument_group("diagnostics")
    diag_group.add_argument(
        "--doctor",
        action="store_true",
        help="Run diagnostic checks",
    )
    diag_group.add_argument(
        "--check-proxy",
        action="store_true",
        help="Test connectivity through the resolved proxy",
    )
    diag_group.add_argument(
        "--check-url",
        default=None,
        metavar="URL",
        help="URL used by --check-proxy (default: https://www.google.com)",
    )
    diag_group.add_argument(
        "--check-render-service",
        action="store_true",
        help="Check that the rendering service is running",
    )

    # Network settings
    network_group = parser.add_argument_group("network settings")
    network_group.add_argument(
        "--proxy",
        type=str,
        metavar="URL",
        help="Manual proxy URL (overrides system and environment proxies)",
    )
    network_group.add_argument(
        "--no-platform-proxy",
        action="store_true",
        help="Do not use the operating system proxy settings",
    )
    network_group.add_argument(
        "--cookies",
        type=str,
        metavar="COOKIES",
        help='Cookie header for this URL: "key1=value1; key2=value2"',
    )
    network_group.add_argument(
        "--user-agent",
        type=str,
        help="Custom User-Agent string",
    )
    network_group.add_argument(
        "--timeout",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Timeout per request (default: 60)",
    )

    # Rendering service
    render_group = parser.add_argument_group("rendering service")
    render_group.add_argument(
        "--render-service",
        type=str,
        metavar="URL",
        help="Rendering service base URL (default: http://localhost:3737)",
    )
    render_group.add_argument(
        "--no-render-service",
        action="store_true",
        help="Always fetch directly, even for sites that need rendering",
    )

    # Content
    content_group = parser.add_argument_group("content")
    content_group.add_argument(
        "--no-replies",
        action="store_true",
        help="Do not append forum replies",
    )
    content_group.add_argument(
        "--max-pages",
        type=int,
        default=None,
        help="Maximum thread pages to merge",
    )

    # Output control
    output_group = parser.add_argument_group("output control")
    destination = output_group.add_mutually_exclusive_group()
    destination.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        metavar="FILE",
        help="Write the note to FILE instead of stdout",
    )
    destination.add_argument(
        "--save-dir",
        "-d",
        type=Path,
        default=None,
        metavar="DIR",
        help="Write the note into DIR, named after the page title",
    )
    output_group.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )
    output_group.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress output",
    )

    return parser


def build_settings(args: argparse.Namespace) -> ClipperSettings:
    """Load settings from --config and apply command-line overrides."""
    settings = ClipperSettings.from_yaml_file(args.config) if args.config else ClipperSettings()
    data: dict[str, Any] = settings.model_dump()

    network = data["network"]
    if args.proxy:
        network["proxy_url"] = args.proxy
    if args.no_platform_proxy:
        network["use_platform_proxy"] = False
    if args.user_agent:
        network["user_agent"] = args.user_agent
    if args.timeout is not None:
        network["timeout"] = args.timeout

    render = data["render_service"]
    if args.render_service:
        render["url"] = args.render_service
    if args.no_render_service:
        render["enabled"] = False

    if args.max_pages is not None:
        data["pagination"]["max_pages"] = args.max_pages
    if args.no_replies:
        data["include_replies"] = False

    if args.cookies and args.url:
        # Command-line cookies apply to this URL only and win over profiles
        profile = {"url_pattern": args.url, "cookies": args.cookies}
        data["site_profiles"] = [profile, *data["site_profiles"]]

    if args.verbose:
        data["log_level"] = "DEBUG"
    elif args.quiet:
        data["log_level"] = "ERROR"

    return ClipperSettings.model_validate(data)


def render_note(result: CrawlResult, url: str) -> str:
    """Markdown note with frontmatter, as written to disk."""
    frontmatter = FrontmatterBuilder().build(url=url)
    return f"{frontmatter}# {result.title}\n\n{result.markdown}"


def write_result(result: CrawlResult, url: str, args: argparse.Namespace) -> Optional[Path]:
    """Write the note where the arguments ask; None means it went to stdout."""
    if args.output:
        path: Path = args.output
    elif args.save_dir:
        path = args.save_dir / f"{generate_file_name(result.title)}.md"
    else:
        sys.stdout.write(result.markdown)
        return None

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_note(result, url), encoding="utf-8")
    return path


def run_checks(args: argparse.Namespace, settings: ClipperSettings, console: Console) -> int:
    from .doctor import PROXY_CHECK_URL, check_proxy, check_render_service

    async def run() -> list[tuple[bool, str]]:
        results = []
        if args.check_proxy:
            results.append(await check_proxy(settings, check_url=args.check_url or PROXY_CHECK_URL))
        if args.check_render_service:
            results.append(await check_render_service(settings))
        return results

    results = asyncio.run(run())
    for success, message in results:
        console.print(message, style="green" if success else "red", markup=False)
    return 0 if all(success for success, _ in results) else 1


def run_clipper(args: argparse.Namespace, settings: ClipperSettings, console: Console) -> int:
    """Clip args.url and write the result."""
    url: str = args.url

    async def run() -> CrawlResult:
        async with WebCrawler(settings) as crawler:
            if args.quiet:
                return await crawler.fetch_web_content(url)

            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                transient=True,
            ) as progress:
                task = progress.add_task("Starting...", total=None)

                def on_event(event: CrawlEvent) -> None:
                    if event.type == EventType.FETCH_STARTED:
                        via = "rendering service" if event.delegated else "direct"
                        progress.update(task, description=f"[cyan]Fetching {event.url} ({via})")
                    elif event.type == EventType.PAGE_FETCHED:
                        progress.update(task, description=f"[cyan]Merged page {event.current}/{event.total}")
                    elif event.type == EventType.PAGE_SKIPPED:
                        console.print(f"[yellow]Skipped page {event.current}:[/yellow] {event.error}")
                    elif event.type == EventType.CONTENT_EXTRACTED:
                        progress.update(task, description=f"[cyan]Extracted with {event.strategy} strategy")

                return await crawler.fetch_web_content(url, on_event=on_event)

    try:
        result = asyncio.run(run())
    except RenderServiceUnavailable as e:
        console.print(f"[red]Error:[/red] {e}")
        console.print(RENDER_SERVICE_GUIDANCE.format(url=settings.render_service.url), markup=False)
        return 1
    except (ClipperError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1

    path = write_result(result, url, args)
    if not args.quiet:
        console.print(f"[green]Clipped:[/green] {result.title}")
        if path is not None:
            console.print(f"Saved to {path}")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Status goes to stderr; stdout carries the Markdown
    console = Console(stderr=True)

    try:
        settings = build_settings(args)
    except Exception as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        return 1

    setup_logging(
        level=settings.log_level,
        log_file=str(settings.log_file) if settings.log_file else None,
    )

    if args.doctor:
        from .doctor import run_doctor

        return run_doctor(settings)

    if args.check_proxy or args.check_render_service:
        return run_checks(args, settings, console)

    if not args.url:
        console.print("[red]Error:[/red] Please provide a URL to clip")
        return 1

    return run_clipper(args, settings, console)


if __name__ == "__main__":
    sys.exit(main())
