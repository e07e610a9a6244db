"""StructureStep - title and category extraction."""

import logging
from typing import Optional

from ...conversion.structure import StructureExtractor
from ...models.document import PipelineStage
from ..base import DocumentContext, EventEmitter

logger = logging.getLogger(__name__)


class StructureStep:
    """Pipeline step that sets ctx.title / ctx.category and strips their headings."""

    name = "structure"
    stage = PipelineStage.EXTRACTING_STRUCTURE

    def __init__(self, extractor: Optional[StructureExtractor] = None) -> None:
        self._extractor = extractor or StructureExtractor()

    async def execute(
        self,
        ctx: DocumentContext,
        emit: Optional[EventEmitter] = None,
    ) -> DocumentContext:
        if ctx.soup is None:
            raise ValueError("Document has not been parsed")

        structure = self._extractor.extract(ctx.soup)
        ctx.title = structure.title
        ctx.category = structure.category
        logger.info(f"{ctx.doc_id}: title={structure.title!r} category={structure.category!r}")
        return ctx
