"""
docblog - Convert editor documents into blog-ready Markdown.

Usage:
    from docblog import BatchOrchestrator, DocblogConfig

    config = DocblogConfig.from_yaml_file(Path("docblog.yaml"))

    async with BatchOrchestrator(config) as orchestrator:
        async for event in orchestrator.run():
            print(event)
"""

__version__ = "1.0.0"

from .core.orchestrator import BatchOrchestrator, convert_blocking
from .errors import (
    DocblogError,
    EmptyContentError,
    EmptyDocumentError,
    FetchError,
    RefinementError,
    StateFileError,
    UploadError,
    WriteError,
)
from .models.config import (
    AssetHostConfig,
    DocblogConfig,
    NetworkConfig,
    OutputConfig,
    RefineConfig,
    SourceConfig,
    StateConfig,
)
from .models.document import ConversionOutcome, DocumentMetadata, PipelineStage
from .models.events import BatchStats, ConversionEvent, EventType

__all__ = [
    "__version__",
    # Core
    "BatchOrchestrator",
    "convert_blocking",
    # Config
    "AssetHostConfig",
    "DocblogConfig",
    "NetworkConfig",
    "OutputConfig",
    "RefineConfig",
    "SourceConfig",
    "StateConfig",
    # Results and events
    "BatchStats",
    "ConversionEvent",
    "ConversionOutcome",
    "DocumentMetadata",
    "EventType",
    "PipelineStage",
    # Errors
    "DocblogError",
    "EmptyContentError",
    "EmptyDocumentError",
    "FetchError",
    "RefinementError",
    "StateFileError",
    "UploadError",
    "WriteError",
]
