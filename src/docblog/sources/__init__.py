"""Raw document sources for docblog."""

from .google_docs import GoogleDocsExporter
from .protocols import DocumentSource

__all__ = ["DocumentSource", "GoogleDocsExporter"]
