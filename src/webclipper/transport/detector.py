"""Detection of sites that only render content client-side."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..matching import matches_any
from ..models.config import DEFAULT_RENDER_PATTERNS

logger = logging.getLogger(__name__)


class RenderingNeedDetector:
    """
    Decides whether a URL must go through the rendering service.

    The allow-list is plain configuration and can be extended at runtime.

    Example:
        detector = RenderingNeedDetector(["https://x.com/*"])
        detector.add_pattern("https://example-spa.com/*")
        detector.needs_delegated_rendering("https://x.com/user/status/1")  # True
    """

    def __init__(self, patterns: Iterable[str] | None = None) -> None:
        self._patterns = list(DEFAULT_RENDER_PATTERNS if patterns is None else patterns)

    @property
    def patterns(self) -> list[str]:
        return list(self._patterns)

    def add_pattern(self, pattern: str) -> None:
        if pattern not in self._patterns:
            self._patterns.append(pattern)

    def needs_delegated_rendering(self, url: str) -> bool:
        needed = matches_any(url, self._patterns)
        if needed:
            logger.debug(f"{url} requires delegated rendering")
        return needed
