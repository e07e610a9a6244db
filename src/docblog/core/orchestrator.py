"""Batch orchestrator with streaming event API."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator, Sequence
from types import TracebackType
from typing import Callable

from ..assets import AssetRelocator, CloudinaryUploader, DisabledImageHost, ImageHost
from ..conversion import DocumentAssembler
from ..http import AsyncHttpClient
from ..models.config import DocblogConfig
from ..models.events import BatchStats, ConversionEvent, EventType
from ..pipeline.base import ConversionPipeline
from ..pipeline.steps import (
    AssembleStep,
    FetchStep,
    NormalizeStep,
    RefineStep,
    RelocateStep,
    StructureStep,
    TranslateStep,
)
from ..refine import ContentRefiner, OpenAIRewriter
from ..sources import GoogleDocsExporter
from ..state import StateManager

logger = logging.getLogger(__name__)


class BatchOrchestrator:
    """
    Primary API for docblog: converts documents one at a time, yielding events.

    Two modes:
    - Ad hoc: ``run(["id1", "id2"])`` converts the given ids and leaves the
      state files alone.
    - Tracked: ``run()`` reads the pending list, and after each successful
      conversion moves the id to the completed list. Failed ids stay pending
      and are retried on the next run.

    Documents are processed strictly sequentially in list order.

    Example:
        config = DocblogConfig(output=OutputConfig(directory=Path("./posts")))

        async with BatchOrchestrator(config) as orchestrator:
            async for event in orchestrator.run():
                if event.type == EventType.DOCUMENT_FAILED:
                    print(f"Error: {event.doc_id} - {event.error}")

        print(f"Stats: {orchestrator.stats.to_dict()}")
    """

    def __init__(
        self,
        config: DocblogConfig,
        pipeline: ConversionPipeline | None = None,
        state: StateManager | None = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            config: Configuration, built once at process start
            pipeline: Prebuilt pipeline (built from config in __aenter__ if None)
            state: State manager (built from config.state if None)
        """
        self.config = config
        self._stats = BatchStats()
        self._pipeline = pipeline
        self._state = state or StateManager(
            pending_file=config.state.pending_file,
            completed_file=config.state.completed_file,
        )

        # Owned only when the pipeline is built here
        self._http_client: AsyncHttpClient | None = None
        self._rewriter: OpenAIRewriter | None = None

    @property
    def stats(self) -> BatchStats:
        """Get current batch statistics."""
        return self._stats

    @property
    def state(self) -> StateManager:
        return self._state

    def _build_image_host(self) -> ImageHost:
        assets = self.config.assets
        if not assets.is_configured:
            logger.warning("Cloudinary credentials are not configured; images will keep their original URLs")
            return DisabledImageHost()

        return CloudinaryUploader(
            cloud_name=assets.cloud_name or "",
            api_key=assets.api_key or "",
            api_secret=assets.api_secret or "",
            folder=assets.folder,
            timeout=self.config.network.timeout,
        )

    def _build_refiner(self) -> ContentRefiner:
        refine = self.config.refine
        if not refine.is_active:
            if refine.enabled:
                logger.info("No refinement API key configured; skipping refinement")
            return ContentRefiner(None)

        self._rewriter = OpenAIRewriter(
            api_key=refine.api_key or "",
            model=refine.model,
            temperature=refine.temperature,
            base_url=refine.base_url,
            timeout=self.config.network.timeout,
            system_prompt=refine.system_prompt,
        )
        return ContentRefiner(self._rewriter)

    def build_pipeline(self, http_client: AsyncHttpClient) -> ConversionPipeline:
        """Wire the collaborators from config into a conversion pipeline."""
        source = GoogleDocsExporter(
            http_client,
            export_url=self.config.source.export_url,
            min_length=self.config.source.min_length,
        )
        relocator = AssetRelocator(
            self._build_image_host(),
            default_image=self.config.assets.default_image,
        )

        return ConversionPipeline(
            steps=[
                FetchStep(source, debug_html_dir=self.config.source.debug_html_dir),
                NormalizeStep(),
                StructureStep(),
                TranslateStep(),
                RelocateStep(relocator),
                RefineStep(self._build_refiner()),
                AssembleStep(DocumentAssembler(self.config.output.directory)),
            ]
        )

    async def __aenter__(self) -> BatchOrchestrator:
        """Enter async context and initialize components."""
        if self._pipeline is None:
            network = self.config.network
            self._http_client = AsyncHttpClient(
                max_retries=network.max_retries,
                user_agent=network.user_agent,
                proxy=network.proxy,
                default_timeout=network.timeout,
            )
            await self._http_client.__aenter__()
            self._pipeline = self.build_pipeline(self._http_client)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and cleanup resources."""
        if self._rewriter:
            await self._rewriter.close()
            self._rewriter = None
        if self._http_client:
            await self._http_client.__aexit__(exc_type, exc_val, exc_tb)
            self._http_client = None
            self._pipeline = None

    def _record(self, event: ConversionEvent) -> None:
        if event.type == EventType.IMAGE_UPLOADED:
            self._stats.images_uploaded += 1
        elif event.type == EventType.IMAGE_FAILED:
            self._stats.images_failed += 1
        elif event.type == EventType.DOCUMENT_REFINED:
            self._stats.documents_refined += 1

    async def run(self, doc_ids: Sequence[str] | None = None) -> AsyncIterator[ConversionEvent]:
        """
        Convert documents, yielding events.

        Args:
            doc_ids: Explicit ids for an ad hoc run; None for a tracked run
                over the pending list

        Yields:
            ConversionEvent objects for each significant operation

        Raises:
            StateFileError: In tracked mode, if the pending list is missing,
                malformed or empty, or a state file cannot be written
        """
        if self._pipeline is None:
            raise RuntimeError("Orchestrator not initialized. Use 'async with' context manager.")

        tracked = doc_ids is None
        ids = self._state.load() if doc_ids is None else list(doc_ids)

        start_time = time.monotonic()
        self._stats.documents_total = len(ids)

        yield ConversionEvent(
            type=EventType.STARTED,
            total=len(ids),
            message=f"Converting {len(ids)} documents ({'tracked' if tracked else 'ad hoc'} mode)",
        )

        collected_events: list[ConversionEvent] = []

        def collect_event(event: ConversionEvent) -> None:
            collected_events.append(event)

        try:
            for i, doc_id in enumerate(ids):
                yield ConversionEvent(
                    type=EventType.DOCUMENT_STARTED,
                    doc_id=doc_id,
                    current=i + 1,
                    total=len(ids),
                    message=f"Converting {i + 1}/{len(ids)}: {doc_id}",
                )

                if self.config.dry_run:
                    yield ConversionEvent(
                        type=EventType.DOCUMENT_SKIPPED,
                        doc_id=doc_id,
                        message=f"[dry-run] Would convert {doc_id}",
                    )
                    continue

                collected_events.clear()
                outcome = await self._pipeline.execute(doc_id, emit=collect_event)

                for event in collected_events:
                    self._record(event)
                    yield event

                if not outcome.success:
                    self._stats.documents_failed += 1
                    continue

                self._stats.documents_converted += 1
                if tracked:
                    self._state.mark_completed(doc_id)
                    yield ConversionEvent(
                        type=EventType.STATE_UPDATED,
                        doc_id=doc_id,
                        message=f"Moved {doc_id} to completed ({len(self._state.pending)} pending)",
                    )

            self._stats.duration_seconds = time.monotonic() - start_time

            yield ConversionEvent(
                type=EventType.COMPLETED,
                message=(
                    f"Batch completed: {self._stats.documents_converted} converted, "
                    f"{self._stats.documents_failed} failed"
                ),
            )

        except Exception as e:
            self._stats.duration_seconds = time.monotonic() - start_time
            yield ConversionEvent(
                type=EventType.FAILED,
                error=str(e),
                message=f"Batch failed: {e}",
            )
            raise


def convert_blocking(
    doc_ids: Sequence[str] | None = None,
    config: DocblogConfig | None = None,
    on_event: Callable[[ConversionEvent], None] | None = None,
) -> BatchStats:
    """
    Blocking batch run with optional event callback.

    WARNING: Do not call from within an existing event loop. Use the async
    BatchOrchestrator API instead.

    Args:
        doc_ids: Explicit ids (ad hoc mode) or None (tracked mode)
        config: Configuration (defaults if None)
        on_event: Optional callback for events

    Returns:
        BatchStats for the run
    """
    try:
        asyncio.get_running_loop()
        raise RuntimeError("convert_blocking() called from async context. Use 'async with BatchOrchestrator()' instead.")
    except RuntimeError as e:
        if "no running event loop" not in str(e).lower():
            raise

    async def _run() -> BatchStats:
        async with BatchOrchestrator(config or DocblogConfig()) as orchestrator:
            async for event in orchestrator.run(doc_ids):
                if on_event:
                    on_event(event)
        return orchestrator.stats

    return asyncio.run(_run())
