"""RefineStep - best-effort Markdown refinement pipeline step."""

from typing import Optional

from ...models.document import PipelineStage
from ...models.events import ConversionEvent, EventType
from ...refine.refiner import ContentRefiner
from ..base import DocumentContext, EventEmitter


class RefineStep:
    """Pipeline step that tidies ctx.markdown; never raises for service failures."""

    name = "refine"
    stage = PipelineStage.REFINING

    def __init__(self, refiner: ContentRefiner) -> None:
        self._refiner = refiner

    async def execute(
        self,
        ctx: DocumentContext,
        emit: Optional[EventEmitter] = None,
    ) -> DocumentContext:
        if ctx.markdown is None:
            raise ValueError("No Markdown to refine")
        if not self._refiner.enabled:
            return ctx

        result = await self._refiner.refine(ctx.markdown)
        ctx.markdown = result.refined
        ctx.refined = result.applied

        if emit:
            if result.applied:
                emit(ConversionEvent(type=EventType.DOCUMENT_REFINED, doc_id=ctx.doc_id))
            else:
                emit(
                    ConversionEvent(
                        type=EventType.REFINEMENT_FAILED,
                        doc_id=ctx.doc_id,
                        error=result.error,
                        message="Kept unrefined Markdown",
                    )
                )
        return ctx
