"""Exception hierarchy for docblog.

Errors raised inside a pipeline step fail that one document only. The
batch orchestrator records the failure and moves on to the next id.
``UploadError`` and ``RefinementError`` are recovered inside their
stages and never reach the pipeline.
"""

from __future__ import annotations


class DocblogError(Exception):
    """Base class for all docblog errors."""


class FetchError(DocblogError):
    """The document export could not be retrieved."""

    def __init__(self, doc_id: str, status_code: int | None = None, reason: str | None = None) -> None:
        self.doc_id = doc_id
        self.status_code = status_code
        self.reason = reason
        if status_code is not None:
            message = f"Export of {doc_id} failed with HTTP {status_code}"
        else:
            message = f"Export of {doc_id} failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class EmptyDocumentError(DocblogError):
    """The export succeeded but is too short to be real content."""

    def __init__(self, doc_id: str, length: int, min_length: int) -> None:
        self.doc_id = doc_id
        self.length = length
        self.min_length = min_length
        super().__init__(f"Export of {doc_id} is only {length} characters (minimum {min_length})")


class EmptyContentError(DocblogError):
    """HTML to Markdown translation produced nothing usable."""


class UploadError(DocblogError):
    """An image could not be uploaded to the asset host."""

    def __init__(self, image_url: str, reason: str) -> None:
        self.image_url = image_url
        self.reason = reason
        super().__init__(f"Upload of {image_url} failed: {reason}")


class RefinementError(DocblogError):
    """The text refinement service call failed."""


class WriteError(DocblogError):
    """The Markdown file could not be written."""

    def __init__(self, path: object, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Could not write {path}: {reason}")


class StateFileError(DocblogError):
    """A pending/completed state file is missing, malformed or unwritable."""
