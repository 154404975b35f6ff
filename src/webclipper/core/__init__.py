"""Core crawl entry points."""

from .crawler import WebCrawler, fetch_web_content, fetch_web_content_blocking

__all__ = ["WebCrawler", "fetch_web_content", "fetch_web_content_blocking"]
