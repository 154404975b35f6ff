"""Event types emitted while a page moves through the crawl pipeline."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class EventType(str, Enum):
    """Types of events emitted during a crawl."""

    # Lifecycle
    STARTED = "started"
    COMPLETED = "completed"
    FAILED = "failed"

    # Network context
    CONTEXT_RESOLVED = "context_resolved"

    # Fetch phase
    FETCH_STARTED = "fetch_started"
    FETCH_COMPLETED = "fetch_completed"
    FETCH_FAILED = "fetch_failed"

    # Pagination
    PAGE_FETCHED = "page_fetched"
    PAGE_SKIPPED = "page_skipped"
    PAGES_AGGREGATED = "pages_aggregated"

    # Processing
    CONTENT_EXTRACTED = "content_extracted"
    REPLIES_FORMATTED = "replies_formatted"
    PAGE_CONVERTED = "page_converted"


@dataclass
class CrawlEvent:
    """
    Event emitted during a crawl.

    Example:
        def on_event(event: CrawlEvent) -> None:
            if event.type == EventType.PAGE_FETCHED:
                print(f"Page {event.current}/{event.total}")
            elif event.is_error:
                print(f"Error: {event.url} - {event.error}")
    """

    type: EventType

    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    url: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None

    # Pagination progress
    current: Optional[int] = None
    total: Optional[int] = None

    bytes_downloaded: Optional[int] = None
    strategy: Optional[str] = None
    delegated: Optional[bool] = None

    @property
    def progress_percent(self) -> Optional[float]:
        """Calculate progress percentage if current and total are set."""
        if self.current is not None and self.total and self.total > 0:
            return (self.current / self.total) * 100
        return None

    @property
    def is_error(self) -> bool:
        """Check if this is an error event."""
        return self.type in (EventType.FAILED, EventType.FETCH_FAILED)
