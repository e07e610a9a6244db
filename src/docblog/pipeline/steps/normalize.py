"""NormalizeStep - parse export HTML and rewrite styled emphasis."""

import logging
from typing import Optional

from bs4 import BeautifulSoup

from ...conversion.normalizer import StyleNormalizer
from ...models.document import PipelineStage
from ..base import DocumentContext, EventEmitter

logger = logging.getLogger(__name__)


class NormalizeStep:
    """
    Pipeline step that parses ctx.source into ctx.soup and normalizes emphasis.

    Example:
        ctx = await NormalizeStep().execute(ctx)
        # ctx.soup now holds <strong>/<em> instead of styled spans
    """

    name = "normalize"
    stage = PipelineStage.NORMALIZING

    def __init__(self, normalizer: Optional[StyleNormalizer] = None) -> None:
        self._normalizer = normalizer or StyleNormalizer()

    async def execute(
        self,
        ctx: DocumentContext,
        emit: Optional[EventEmitter] = None,
    ) -> DocumentContext:
        if ctx.source is None:
            raise ValueError("No HTML content to normalize")

        ctx.soup = BeautifulSoup(ctx.source.html, "html.parser")
        rewritten = self._normalizer.normalize(ctx.soup)
        logger.debug(f"Normalized {ctx.doc_id}: {rewritten} emphasis spans")
        return ctx
