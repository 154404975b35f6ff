"""Strategy registry and dispatch."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Optional

from ..models.document import ExtractedDocument
from .base import ExtractionStrategy
from .forum import ForumThreadStrategy
from .generic import GenericStrategy
from .knowledge import KnowledgeAnswerStrategy
from .social import SocialPostStrategy

logger = logging.getLogger(__name__)


def default_strategies() -> list[ExtractionStrategy]:
    return [ForumThreadStrategy(), SocialPostStrategy(), KnowledgeAnswerStrategy()]


class ExtractionEngine:
    """
    Ordered registry of extraction strategies.

    The first registered strategy whose ``handles(url)`` returns True wins;
    the generic strategy serves everything else. A strategy that raises is
    logged and the generic strategy runs instead, so extraction never fails
    on non-empty input.

    Example:
        engine = ExtractionEngine()
        engine.register(ChangelogStrategy(), first=True)
        doc = engine.extract(html, "https://example.com/changelog")
    """

    def __init__(
        self,
        strategies: Optional[Iterable[ExtractionStrategy]] = None,
        fallback: Optional[GenericStrategy] = None,
    ) -> None:
        self._strategies: list[ExtractionStrategy] = list(
            default_strategies() if strategies is None else strategies
        )
        self._fallback = fallback or GenericStrategy()

    @property
    def strategies(self) -> list[ExtractionStrategy]:
        return list(self._strategies)

    @property
    def fallback(self) -> GenericStrategy:
        return self._fallback

    def register(self, strategy: ExtractionStrategy, first: bool = False) -> None:
        """Add a strategy, ahead of the others when ``first`` is set."""
        if first:
            self._strategies.insert(0, strategy)
        else:
            self._strategies.append(strategy)

    def strategy_for(self, url: str) -> ExtractionStrategy:
        for strategy in self._strategies:
            if strategy.handles(url):
                return strategy
        return self._fallback

    def extract(self, html: str, url: str) -> ExtractedDocument:
        strategy = self.strategy_for(url)
        try:
            document = strategy.extract(html, url)
        except Exception as e:
            if strategy is self._fallback:
                raise
            logger.warning(f"Strategy {strategy.name} failed for {url}: {e}; using generic extraction")
            return self._fallback.extract(html, url)

        logger.debug(f"Extracted {url} with {document.strategy} strategy")
        return document
