"""Pipeline steps for a crawl request."""

from .aggregate import AggregateStep
from .convert import ConvertStep
from .extract import ExtractStep
from .fetch import FetchStep
from .resolve import ResolveStep

__all__ = [
    "AggregateStep",
    "ConvertStep",
    "ExtractStep",
    "FetchStep",
    "ResolveStep",
]
