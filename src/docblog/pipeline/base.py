"""Base classes for the document conversion pipeline."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Protocol, runtime_checkable

from bs4 import BeautifulSoup

from ..models.document import ConversionOutcome, DocumentMetadata, PipelineStage, SourceDocument
from ..models.events import ConversionEvent, EventType

logger = logging.getLogger(__name__)

# Type alias for event emitter function
EventEmitter = Callable[[ConversionEvent], None]


@dataclass
class DocumentContext:
    """
    Context object passed through pipeline steps.

    Holds all state for converting a single document, accumulated as it
    moves through the pipeline.

    Attributes:
        doc_id: The document being converted
        stage: Current pipeline stage
        source: Raw export of the document
        soup: Parsed tree, mutated by normalization and structure extraction
        title: Extracted post title
        category: Extracted post category
        markdown: Translated (later relocated, then refined) Markdown
        cover_image: Chosen cover image URL
        metadata: Frontmatter fields, set during assembly
        output_path: Written file, set during assembly
        refined: True when the refinement pass changed the body
        error: "<step>: <message>" if a step raised
    """

    doc_id: str
    stage: PipelineStage = PipelineStage.PENDING

    # Content (accumulated through pipeline)
    source: Optional[SourceDocument] = None
    soup: Optional[BeautifulSoup] = None
    title: Optional[str] = None
    category: Optional[str] = None
    markdown: Optional[str] = None
    cover_image: Optional[str] = None
    metadata: Optional[DocumentMetadata] = None
    output_path: Optional[Path] = None

    # Status
    refined: bool = False
    error: Optional[str] = None

    def to_outcome(self) -> ConversionOutcome:
        return ConversionOutcome(
            doc_id=self.doc_id,
            success=self.stage == PipelineStage.DONE,
            stage=self.stage,
            error=self.error,
            output_path=self.output_path,
        )


@runtime_checkable
class ConversionStep(Protocol):
    """
    Protocol for pipeline steps.

    Each step receives a DocumentContext, processes it, and returns the
    (possibly modified) context.

    Error Handling Contract:
    - For failures that should fail the document: raise an exception
    - The pipeline catches it, records ctx.error and stops
    - Recoverable problems (a single image, the refinement call) are
      handled inside the step and reported through events

    Example implementation:
        class NormalizeStep:
            name = "normalize"
            stage = PipelineStage.NORMALIZING

            async def execute(
                self,
                ctx: DocumentContext,
                emit: Optional[EventEmitter] = None
            ) -> DocumentContext:
                self._normalizer.normalize(ctx.soup)
                return ctx
    """

    name: str
    stage: PipelineStage

    async def execute(
        self,
        ctx: DocumentContext,
        emit: Optional[EventEmitter] = None,
    ) -> DocumentContext:
        """
        Execute this pipeline step.

        Args:
            ctx: The document context with accumulated state
            emit: Optional callback to emit events

        Returns:
            The (possibly modified) document context
        """
        ...


@dataclass
class ConversionPipeline:
    """
    Converts a single document by running its steps in order.

    Stages advance FETCHING -> NORMALIZING -> EXTRACTING_STRUCTURE ->
    TRANSLATING -> RELOCATING_ASSETS -> REFINING -> ASSEMBLING -> DONE.
    If a step raises, the context moves to FAILED with the error message
    and no further step runs. Nothing is retried.

    Example:
        pipeline = ConversionPipeline(steps=[
            FetchStep(exporter),
            NormalizeStep(),
            StructureStep(),
            TranslateStep(),
            RelocateStep(relocator),
            RefineStep(refiner),
            AssembleStep(assembler),
        ])

        outcome = await pipeline.execute("1AbC...", emit=log_event)
        if not outcome.success:
            logger.error(f"Failed: {outcome.error}")
    """

    steps: list[ConversionStep]

    async def run(
        self,
        doc_id: str,
        emit: Optional[EventEmitter] = None,
    ) -> DocumentContext:
        """
        Run all steps for a document and return the final context.

        Args:
            doc_id: The document to convert
            emit: Optional callback for emitting events

        Returns:
            DocumentContext in stage DONE or FAILED
        """
        ctx = DocumentContext(doc_id=doc_id)

        for step in self.steps:
            ctx.stage = step.stage
            try:
                ctx = await step.execute(ctx, emit)
            except Exception as e:
                ctx.error = f"{step.name}: {e}"
                ctx.stage = PipelineStage.FAILED
                logger.error(f"Conversion of {doc_id} failed at {step.name}: {e}")

                if emit:
                    emit(
                        ConversionEvent(
                            type=EventType.DOCUMENT_FAILED,
                            doc_id=doc_id,
                            error=ctx.error,
                            stage=step.stage.value,
                        )
                    )
                return ctx

        ctx.stage = PipelineStage.DONE
        return ctx

    async def execute(
        self,
        doc_id: str,
        emit: Optional[EventEmitter] = None,
    ) -> ConversionOutcome:
        """Convert a document and report success or failure."""
        ctx = await self.run(doc_id, emit)
        return ctx.to_outcome()
