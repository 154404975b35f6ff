"""Transports: direct HTTP fetching and delegated rendering."""

from .base import Transport
from .delegated import DelegatedTransport, RenderServiceClient
from .detector import RenderingNeedDetector
from .direct import REDIRECT_STATUS_CODES, DirectTransport
from .selector import TransportSelector

__all__ = [
    "DelegatedTransport",
    "DirectTransport",
    "REDIRECT_STATUS_CODES",
    "RenderServiceClient",
    "RenderingNeedDetector",
    "Transport",
    "TransportSelector",
]
