"""AssembleStep - frontmatter, slug and file write pipeline step."""

from datetime import date, datetime, timezone
from typing import Callable, Optional

from ...conversion.assembler import DocumentAssembler
from ...models.document import DocumentMetadata, PipelineStage
from ...models.events import ConversionEvent, EventType
from ..base import DocumentContext, EventEmitter


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


class AssembleStep:
    """
    Pipeline step that writes the final Markdown file.

    Populates:
        ctx.metadata: Frontmatter fields (date is the processing date)
        ctx.output_path: Path of the written file

    Raises WriteError on filesystem failures.
    """

    name = "assemble"
    stage = PipelineStage.ASSEMBLING

    def __init__(
        self,
        assembler: DocumentAssembler,
        today: Callable[[], date] = _utc_today,
    ) -> None:
        self._assembler = assembler
        self._today = today

    async def execute(
        self,
        ctx: DocumentContext,
        emit: Optional[EventEmitter] = None,
    ) -> DocumentContext:
        if ctx.markdown is None or ctx.title is None or ctx.category is None or ctx.cover_image is None:
            raise ValueError("Document is missing content or metadata")

        ctx.metadata = DocumentMetadata(
            title=ctx.title,
            category=ctx.category,
            cover_image=ctx.cover_image,
            date=self._today(),
        )
        artifact = self._assembler.build(ctx.metadata, ctx.markdown)
        ctx.output_path = await self._assembler.write(artifact, ctx.metadata.title)

        if emit:
            emit(
                ConversionEvent(
                    type=EventType.DOCUMENT_SAVED,
                    doc_id=ctx.doc_id,
                    output_path=ctx.output_path,
                    message=f"Saved to {ctx.output_path}",
                )
            )
        return ctx
