"""Event types for the streaming conversion API."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Optional


class EventType(str, Enum):
    """Types of events emitted during a batch run."""

    # Lifecycle events
    STARTED = "started"
    COMPLETED = "completed"
    FAILED = "failed"

    # Per-document events
    DOCUMENT_STARTED = "document_started"
    DOCUMENT_FETCHED = "document_fetched"
    DOCUMENT_TRANSLATED = "document_translated"
    DOCUMENT_REFINED = "document_refined"
    DOCUMENT_SAVED = "document_saved"
    DOCUMENT_FAILED = "document_failed"
    DOCUMENT_SKIPPED = "document_skipped"

    # Image relocation
    IMAGE_UPLOADED = "image_uploaded"
    IMAGE_FAILED = "image_failed"

    # Refinement fell back to the unrefined text
    REFINEMENT_FAILED = "refinement_failed"

    # Pending/completed lists rewritten
    STATE_UPDATED = "state_updated"


@dataclass
class ConversionEvent:
    """
    Event emitted during a batch run.

    Example:
        async for event in orchestrator.run():
            if event.type == EventType.DOCUMENT_SAVED:
                print(f"Saved: {event.output_path}")
            elif event.type == EventType.DOCUMENT_FAILED:
                print(f"Error: {event.doc_id} - {event.error}")
    """

    type: EventType

    # Timestamp (always UTC)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # Common fields
    doc_id: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None

    # Progress tracking
    current: Optional[int] = None
    total: Optional[int] = None

    # Typed payload fields for specific events
    output_path: Optional[Path] = None
    image_url: Optional[str] = None
    stage: Optional[str] = None


@dataclass
class BatchStats:
    """Cumulative statistics for a batch run."""

    documents_total: int = 0
    documents_converted: int = 0
    documents_failed: int = 0
    images_uploaded: int = 0
    images_failed: int = 0
    documents_refined: int = 0
    duration_seconds: float = 0.0

    @property
    def success_rate(self) -> float:
        """Calculate success rate as a percentage."""
        total = self.documents_converted + self.documents_failed
        if total == 0:
            return 0.0
        return (self.documents_converted / total) * 100

    def to_dict(self) -> dict:
        """Convert stats to dictionary for serialization."""
        return {
            "documents_total": self.documents_total,
            "documents_converted": self.documents_converted,
            "documents_failed": self.documents_failed,
            "images_uploaded": self.images_uploaded,
            "images_failed": self.images_failed,
            "documents_refined": self.documents_refined,
            "duration_seconds": round(self.duration_seconds, 2),
            "success_rate": round(self.success_rate, 1),
        }
