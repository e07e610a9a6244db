"""RelocateStep - image upload and cover selection pipeline step."""

import logging
from typing import Optional

from ...assets.relocator import AssetRelocator
from ...models.document import PipelineStage
from ...models.events import ConversionEvent, EventType
from ..base import DocumentContext, EventEmitter

logger = logging.getLogger(__name__)


class RelocateStep:
    """
    Pipeline step that moves embedded images to the asset host.

    Rewrites ctx.markdown, sets ctx.cover_image and releases ctx.soup, which
    is not needed after this point. Individual upload failures are reported
    as IMAGE_FAILED events and never fail the document.
    """

    name = "relocate"
    stage = PipelineStage.RELOCATING_ASSETS

    def __init__(self, relocator: AssetRelocator) -> None:
        self._relocator = relocator

    async def execute(
        self,
        ctx: DocumentContext,
        emit: Optional[EventEmitter] = None,
    ) -> DocumentContext:
        if ctx.soup is None or ctx.markdown is None:
            raise ValueError("Document has not been translated")

        result = await self._relocator.relocate(ctx.soup, ctx.markdown)
        ctx.markdown = result.markdown
        ctx.cover_image = result.cover_image
        ctx.soup = None

        if emit:
            for image in result.images:
                if image.uploaded:
                    emit(
                        ConversionEvent(
                            type=EventType.IMAGE_UPLOADED,
                            doc_id=ctx.doc_id,
                            image_url=image.durable_url,
                            message=f"Relocated {image.original_url}",
                        )
                    )
                else:
                    emit(
                        ConversionEvent(
                            type=EventType.IMAGE_FAILED,
                            doc_id=ctx.doc_id,
                            image_url=image.original_url,
                            error=image.error,
                        )
                    )

        logger.debug(
            f"{ctx.doc_id}: {result.uploaded_count} images relocated, "
            f"{result.failed_count} failed, cover={result.cover_image}"
        )
        return ctx
