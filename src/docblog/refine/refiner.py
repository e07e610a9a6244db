"""Best-effort Markdown refinement."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .protocols import TextRewriter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RefinementResult:
    """
    Tagged refinement outcome.

    ``refined`` is always usable: it holds the original text whenever
    ``applied`` is False.
    """

    refined: str
    applied: bool
    error: Optional[str] = None


class ContentRefiner:
    """
    Wraps a TextRewriter so that refinement can never fail a conversion.

    Example:
        refiner = ContentRefiner(OpenAIRewriter(client, api_key))
        result = await refiner.refine(markdown)
        body = result.refined
    """

    def __init__(self, rewriter: Optional[TextRewriter] = None) -> None:
        """
        Args:
            rewriter: Rewriting service; None disables refinement
        """
        self._rewriter = rewriter

    @property
    def enabled(self) -> bool:
        return self._rewriter is not None

    async def refine(self, markdown: str) -> RefinementResult:
        """Return the rewritten Markdown, or the input unchanged on any failure."""
        if self._rewriter is None:
            return RefinementResult(refined=markdown, applied=False)

        try:
            refined = await self._rewriter.rewrite(markdown)
        except Exception as e:
            logger.error(f"Refinement failed, keeping unrefined Markdown: {e}")
            return RefinementResult(refined=markdown, applied=False, error=str(e))

        logger.debug(f"Refined Markdown: {len(markdown)} -> {len(refined)} characters")
        return RefinementResult(refined=refined, applied=True)
