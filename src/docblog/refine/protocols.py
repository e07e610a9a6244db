"""Protocol definitions for text refinement."""

from typing import Protocol


class TextRewriter(Protocol):
    """
    Protocol for an external text rewriting service.

    Implementations raise RefinementError on any failure.
    """

    async def rewrite(self, text: str) -> str:
        """Return the rewritten text."""
        ...
