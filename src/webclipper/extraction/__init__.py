"""Content extraction for webclipper (title and body selection per site)."""

from .base import DEFAULT_TITLE, ExtractionStrategy, ThreadStrategy, resolve_title
from .engine import ExtractionEngine, default_strategies
from .forum import V2EX_PAGINATION, ForumReplyExtractor, ForumThreadStrategy
from .generic import GenericStrategy
from .knowledge import KnowledgeAnswerStrategy
from .social import SocialPostStrategy, dedupe_media, upgrade_media_url

__all__ = [
    # Protocols
    "ExtractionStrategy",
    "ThreadStrategy",
    # Engine
    "ExtractionEngine",
    "default_strategies",
    # Strategies
    "GenericStrategy",
    "ForumThreadStrategy",
    "ForumReplyExtractor",
    "SocialPostStrategy",
    "KnowledgeAnswerStrategy",
    # Helpers
    "DEFAULT_TITLE",
    "V2EX_PAGINATION",
    "resolve_title",
    "dedupe_media",
    "upgrade_media_url",
]
