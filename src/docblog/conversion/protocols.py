"""Protocol definitions for content conversion."""

from typing import Protocol


class MarkdownConverter(Protocol):
    """
    Protocol for converting HTML to Markdown.

    Implementations raise EmptyContentError when nothing usable is produced.
    """

    def convert(self, html: str) -> str:
        """
        Convert HTML to Markdown.

        Args:
            html: Body markup string

        Returns:
            Markdown string
        """
        ...
