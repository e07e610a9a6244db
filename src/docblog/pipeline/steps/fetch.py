"""FetchStep - raw document export pipeline step."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from ...models.document import PipelineStage, SourceDocument
from ...models.events import ConversionEvent, EventType
from ...sources.protocols import DocumentSource
from ..base import DocumentContext, EventEmitter

logger = logging.getLogger(__name__)


async def save_debug_copy(directory: Path, source: SourceDocument) -> None:
    """Write the raw export to ``<directory>/<doc_id>.html``; failures only warn."""
    path = directory / f"{source.doc_id}.html"
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread(path.write_text, source.html, encoding="utf-8")
        logger.info(f"Saved raw export HTML to {path}")
    except OSError as e:
        logger.warning(f"Could not save raw export HTML to {path}: {e}")


class FetchStep:
    """
    Pipeline step that fetches the raw export HTML.

    Populates:
        ctx.source: SourceDocument holding the raw export markup

    Raises FetchError / EmptyDocumentError from the source.

    Example:
        step = FetchStep(GoogleDocsExporter(http_client))
        ctx = await step.execute(ctx)
    """

    name = "fetch"
    stage = PipelineStage.FETCHING

    def __init__(
        self,
        source: DocumentSource,
        debug_html_dir: Optional[Path] = None,
    ) -> None:
        """
        Initialize the fetch step.

        Args:
            source: Document source implementing DocumentSource protocol
            debug_html_dir: If set, raw HTML is also saved as <doc_id>.html
        """
        self._source = source
        self._debug_html_dir = debug_html_dir

    async def execute(
        self,
        ctx: DocumentContext,
        emit: Optional[EventEmitter] = None,
    ) -> DocumentContext:
        html = await self._source.fetch(ctx.doc_id)
        ctx.source = SourceDocument(doc_id=ctx.doc_id, html=html)

        if self._debug_html_dir is not None:
            await save_debug_copy(self._debug_html_dir, ctx.source)

        if emit:
            emit(
                ConversionEvent(
                    type=EventType.DOCUMENT_FETCHED,
                    doc_id=ctx.doc_id,
                    message=f"Fetched {len(html)} characters of HTML",
                )
            )
        return ctx
