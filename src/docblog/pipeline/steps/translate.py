"""TranslateStep - HTML to Markdown pipeline step."""

import logging
from typing import Optional

from ...conversion.markdown import HtmlToMarkdown
from ...conversion.protocols import MarkdownConverter
from ...models.document import PipelineStage
from ...models.events import ConversionEvent, EventType
from ..base import DocumentContext, EventEmitter

logger = logging.getLogger(__name__)


class TranslateStep:
    """
    Pipeline step that converts the normalized body to Markdown.

    Reads ctx.soup, writes ctx.markdown. Raises EmptyContentError when the
    result is blank.
    """

    name = "translate"
    stage = PipelineStage.TRANSLATING

    def __init__(self, converter: Optional[MarkdownConverter] = None) -> None:
        self._converter = converter or HtmlToMarkdown()

    async def execute(
        self,
        ctx: DocumentContext,
        emit: Optional[EventEmitter] = None,
    ) -> DocumentContext:
        if ctx.soup is None:
            raise ValueError("Document has not been parsed")

        body = ctx.soup.body if ctx.soup.body is not None else ctx.soup
        ctx.markdown = self._converter.convert(str(body))

        if emit:
            emit(
                ConversionEvent(
                    type=EventType.DOCUMENT_TRANSLATED,
                    doc_id=ctx.doc_id,
                    message=f"Converted to {len(ctx.markdown)} characters of Markdown",
                )
            )
        return ctx
