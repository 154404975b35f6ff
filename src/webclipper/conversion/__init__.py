"""Content conversion for webclipper (HTML to Markdown, frontmatter, file names)."""

from .assembler import DocumentAssembler
from .markdown import FrontmatterBuilder, HtmlToMarkdown
from .naming import generate_file_name

__all__ = [
    "DocumentAssembler",
    "HtmlToMarkdown",
    "FrontmatterBuilder",
    "generate_file_name",
]
