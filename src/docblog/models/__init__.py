"""Docblog configuration, result and event models."""

from .config import (
    AssetHostConfig,
    DocblogConfig,
    NetworkConfig,
    OutputConfig,
    RefineConfig,
    SourceConfig,
    StateConfig,
)
from .document import ConversionOutcome, DocumentMetadata, MarkdownArtifact, SourceDocument
from .events import BatchStats, ConversionEvent, EventType

__all__ = [
    # Config
    "AssetHostConfig",
    "DocblogConfig",
    "NetworkConfig",
    "OutputConfig",
    "RefineConfig",
    "SourceConfig",
    "StateConfig",
    # Documents
    "ConversionOutcome",
    "DocumentMetadata",
    "MarkdownArtifact",
    "SourceDocument",
    # Events
    "BatchStats",
    "ConversionEvent",
    "EventType",
]
