"""Wildcard URL pattern matching used by site profiles and render detection."""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Iterable

from .errors import PatternError

logger = logging.getLogger(__name__)

# Leading "www." on the host, after an optional (possibly wildcard) scheme
_WWW_PREFIX = re.compile(r"^([^/]*//)?www\.", re.IGNORECASE)


@lru_cache(maxsize=256)
def wildcard_to_regex(pattern: str) -> re.Pattern[str]:
    """
    Compile a wildcard URL pattern to an anchored, case-insensitive regex.

    Every regex metacharacter is escaped except ``*``, which matches any
    run of characters.

    Args:
        pattern: Wildcard pattern such as ``https://example.com/*``

    Returns:
        Compiled regular expression

    Raises:
        PatternError: If the pattern is empty or cannot be compiled
    """
    if not isinstance(pattern, str) or not pattern.strip():
        raise PatternError(str(pattern), "empty pattern")

    body = ".*".join(re.escape(part) for part in pattern.strip().split("*"))
    try:
        return re.compile(rf"\A{body}\Z", re.IGNORECASE)
    except re.error as e:
        raise PatternError(pattern, str(e)) from e


def strip_www(value: str) -> str:
    """Remove a leading ``www.`` from the host part of a URL or pattern."""
    return _WWW_PREFIX.sub(lambda m: m.group(1) or "", value, count=1)


def matches(url: str, pattern: str) -> bool:
    """
    Check whether a URL matches a wildcard pattern.

    A strict match is tried first; if it fails, both sides are retried with
    any leading ``www.`` removed from the host, so ``https://example.com/*``
    also covers ``https://www.example.com/...`` and vice versa.

    Malformed patterns never raise; they simply do not match.

    Example:
        >>> matches("https://www.example.com/a", "https://example.com/*")
        True
    """
    try:
        regex = wildcard_to_regex(pattern)
        if regex.fullmatch(url):
            return True

        relaxed_pattern = strip_www(pattern.strip())
        relaxed_url = strip_www(url)
        if relaxed_pattern == pattern.strip() and relaxed_url == url:
            return False
        return wildcard_to_regex(relaxed_pattern).fullmatch(relaxed_url) is not None
    except PatternError as e:
        logger.debug(f"Skipping pattern: {e}")
        return False


def matches_any(url: str, patterns: Iterable[str]) -> bool:
    """Return True if the URL matches at least one pattern."""
    return any(matches(url, pattern) for pattern in patterns)
