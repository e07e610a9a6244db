"""Document-level data passed between conversion stages."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from pathlib import Path


class PipelineStage(str, Enum):
    """States of a single document conversion."""

    PENDING = "pending"
    FETCHING = "fetching"
    NORMALIZING = "normalizing"
    EXTRACTING_STRUCTURE = "extracting_structure"
    TRANSLATING = "translating"
    RELOCATING_ASSETS = "relocating_assets"
    REFINING = "refining"
    ASSEMBLING = "assembling"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class SourceDocument:
    """Raw export of one document."""

    doc_id: str
    html: str


@dataclass(frozen=True)
class DocumentMetadata:
    """
    Frontmatter fields for one post.

    Attributes:
        title: Post title (never empty)
        category: Post category (never empty)
        cover_image: URL of the representative image, or the default placeholder
        date: Processing date, not the original authoring date
    """

    title: str
    category: str
    cover_image: str
    date: date


@dataclass(frozen=True)
class MarkdownArtifact:
    """Frontmatter block plus body; ``content`` is what lands on disk."""

    frontmatter: str
    body: str

    @property
    def content(self) -> str:
        return self.frontmatter + self.body


@dataclass(frozen=True)
class ConversionOutcome:
    """
    Result of running one document through the pipeline.

    Attributes:
        doc_id: The converted document id
        success: True when the Markdown file was written
        stage: Last stage reached (DONE or FAILED)
        error: "<step>: <message>" for failed conversions
        output_path: Path of the written file on success
    """

    doc_id: str
    success: bool
    stage: PipelineStage
    error: str | None = None
    output_path: Path | None = None
