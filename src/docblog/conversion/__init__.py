"""Content conversion for docblog (HTML normalization, Markdown, frontmatter)."""

from .assembler import DocumentAssembler, FrontmatterBuilder, slugify_title
from .markdown import HtmlToMarkdown
from .normalizer import StyleNormalizer
from .protocols import MarkdownConverter
from .structure import DEFAULT_CATEGORY, DEFAULT_TITLE, DocumentStructure, StructureExtractor

__all__ = [
    # Protocols
    "MarkdownConverter",
    # Implementations
    "DocumentAssembler",
    "FrontmatterBuilder",
    "HtmlToMarkdown",
    "StructureExtractor",
    "StyleNormalizer",
    # Results and helpers
    "DEFAULT_CATEGORY",
    "DEFAULT_TITLE",
    "DocumentStructure",
    "slugify_title",
]
