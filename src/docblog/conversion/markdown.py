"""HTML to Markdown conversion."""

from __future__ import annotations

import logging
import re

import html2text

from ..errors import EmptyContentError

logger = logging.getLogger(__name__)


class HtmlToMarkdown:
    """
    Converts document body HTML to blog Markdown.

    Uses html2text configured for ATX headings, ``-`` bullets, ``*`` / ``**``
    emphasis and pipe tables.

    Example:
        converter = HtmlToMarkdown()
        markdown = converter.convert(str(soup.body))
    """

    def __init__(
        self,
        body_width: int = 0,
        bullet_marker: str = "-",
        emphasis_mark: str = "*",
        strong_mark: str = "**",
        ignore_images: bool = False,
        ignore_tables: bool = False,
        unicode_snob: bool = True,
        escape_snob: bool = False,
    ):
        """
        Initialize the Markdown converter.

        Args:
            body_width: Max line width (0 = no wrapping, keeps image URLs intact)
            bullet_marker: Marker for unordered list items
            emphasis_mark: Delimiter for <em>
            strong_mark: Delimiter for <strong>
            ignore_images: Skip image conversion
            ignore_tables: Skip table conversion
            unicode_snob: Use Unicode chars where possible
            escape_snob: Escape every special Markdown char
        """
        self._body_width = body_width
        self._bullet_marker = bullet_marker
        self._emphasis_mark = emphasis_mark
        self._strong_mark = strong_mark
        self._ignore_images = ignore_images
        self._ignore_tables = ignore_tables
        self._unicode_snob = unicode_snob
        self._escape_snob = escape_snob

    def _build_converter(self) -> html2text.HTML2Text:
        """Create a configured parser; HTML2Text keeps state between feeds."""
        converter = html2text.HTML2Text()

        converter.body_width = self._body_width
        converter.ul_item_mark = self._bullet_marker
        converter.emphasis_mark = self._emphasis_mark
        converter.strong_mark = self._strong_mark

        # Links and images
        converter.inline_links = True
        converter.wrap_links = False
        converter.protect_links = False
        converter.ignore_images = self._ignore_images
        converter.default_image_alt = ""

        # Tables as GFM pipe tables
        converter.ignore_tables = self._ignore_tables
        converter.bypass_tables = False
        converter.pad_tables = True

        converter.unicode_snob = self._unicode_snob
        converter.escape_snob = self._escape_snob
        converter.single_line_break = False
        return converter

    def _clean_output(self, markdown: str) -> str:
        """Clean up the converted Markdown."""
        # Remove trailing whitespace on each line
        markdown = "\n".join(line.rstrip() for line in markdown.split("\n"))

        # Remove excessive blank lines
        markdown = re.sub(r"\n{3,}", "\n\n", markdown)

        return markdown.strip() + "\n"

    def convert(self, html: str) -> str:
        """
        Convert HTML to Markdown.

        Args:
            html: Body markup with title/category headings already removed

        Returns:
            Markdown string ending in a single newline

        Raises:
            EmptyContentError: If the conversion yields only whitespace
        """
        markdown = self._build_converter().handle(html)
        if not markdown.strip():
            raise EmptyContentError("Translated Markdown is empty; the export markup may be malformed")

        markdown = self._clean_output(markdown)
        logger.debug(f"Converted {len(html)} bytes of HTML to {len(markdown)} bytes of Markdown")
        return markdown
