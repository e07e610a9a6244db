"""Pipeline architecture for document conversion."""

from .base import ConversionPipeline, ConversionStep, DocumentContext, EventEmitter

__all__ = ["ConversionPipeline", "ConversionStep", "DocumentContext", "EventEmitter"]
