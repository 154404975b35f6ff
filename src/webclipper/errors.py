"""Exception types raised while clipping a page."""

from __future__ import annotations


class ClipperError(Exception):
    """Base class for all webclipper errors."""


class PatternError(ClipperError, ValueError):
    """A wildcard URL pattern could not be compiled."""

    def __init__(self, pattern: str, reason: str = "invalid pattern") -> None:
        self.pattern = pattern
        super().__init__(f"Invalid URL pattern {pattern!r}: {reason}")


class FetchError(ClipperError):
    """The origin answered with an HTTP error status."""

    def __init__(self, url: str, status_code: int, reason: str | None = None) -> None:
        self.url = url
        self.status_code = status_code
        message = f"HTTP {status_code} for {url}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class FetchTimeoutError(ClipperError, TimeoutError):
    """A network operation exceeded its deadline."""

    def __init__(self, url: str, timeout: float) -> None:
        self.url = url
        self.timeout = timeout
        super().__init__(f"Request to {url} timed out after {timeout:g}s")


class TooManyRedirects(ClipperError):
    """Redirect chain was longer than the configured bound."""

    def __init__(self, url: str, max_redirects: int) -> None:
        self.url = url
        self.max_redirects = max_redirects
        super().__init__(f"Exceeded {max_redirects} redirects starting from {url}")


class RenderServiceUnavailable(ClipperError):
    """The dynamic-rendering service could not be reached."""

    def __init__(self, service_url: str, cause: str | None = None) -> None:
        self.service_url = service_url
        message = (
            f"Rendering service is not running at {service_url}. "
            "Start it before clipping pages that need JavaScript rendering."
        )
        if cause:
            message = f"{message} ({cause})"
        super().__init__(message)


class RenderServiceError(ClipperError):
    """The rendering service answered but reported a failure."""

    def __init__(self, url: str, message: str, status_code: int | None = None) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(f"Rendering service failed for {url}: {message}")


class PaginationPageError(ClipperError):
    """One additional page of a paginated thread could not be fetched."""

    def __init__(self, url: str, page: int, cause: BaseException | None = None) -> None:
        self.url = url
        self.page = page
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to fetch page {page} ({url}){detail}")
