"""Choice between direct and delegated transport per URL."""

from __future__ import annotations

import logging

from .base import Transport
from .detector import RenderingNeedDetector

logger = logging.getLogger(__name__)


class TransportSelector:
    """
    Picks the transport for a URL.

    Delegated rendering is used only when it is enabled and the detector
    flags the URL; everything else is fetched directly.
    """

    def __init__(
        self,
        direct: Transport,
        delegated: Transport | None = None,
        detector: RenderingNeedDetector | None = None,
    ) -> None:
        self.direct = direct
        self.delegated = delegated
        self.detector = detector or RenderingNeedDetector()

    def select(self, url: str) -> Transport:
        if self.delegated is not None and self.detector.needs_delegated_rendering(url):
            return self.delegated
        return self.direct
