"""Frontmatter assembly, slug derivation and file output."""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path
from typing import Any

from ..errors import WriteError
from ..models.document import DocumentMetadata, MarkdownArtifact

logger = logging.getLogger(__name__)

# Characters that are illegal in filenames on at least one platform
_ILLEGAL_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*]+')


def slugify_title(title: str) -> str:
    """
    Derive a filesystem-safe slug from a post title.

    Illegal characters are dropped (not replaced), whitespace runs become a
    single hyphen and the result is lowercased.

    Examples:
        >>> slugify_title("My: Article/Test")
        'my-articletest'
        >>> slugify_title("Hello   World")
        'hello-world'
    """
    slug = _ILLEGAL_FILENAME_CHARS.sub("", title)
    slug = re.sub(r"\s+", "-", slug)
    return slug.lower()


class FrontmatterBuilder:
    """
    Builds YAML frontmatter for Markdown files.

    Example:
        builder = FrontmatterBuilder()
        frontmatter = builder.build(title="Getting Started", tags=[], category="Guides")
    """

    @staticmethod
    def _quote(value: str) -> str:
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'

    def build(self, **fields: Any) -> str:
        """
        Build YAML frontmatter string.

        Fields are written in keyword order. Strings are double-quoted,
        sequences become block lists (``[]`` when empty), None is skipped.

        Returns:
            YAML frontmatter string (with --- delimiters and a trailing blank line)
        """
        lines = ["---"]

        for key, value in fields.items():
            if value is None:
                continue
            if isinstance(value, str):
                lines.append(f"{key}: {self._quote(value)}")
            elif isinstance(value, (list, tuple)):
                if not value:
                    lines.append(f"{key}: []")
                    continue
                lines.append(f"{key}:")
                for item in value:
                    lines.append(f"  - {self._quote(str(item))}")
            else:
                lines.append(f"{key}: {value}")

        lines.append("---")
        return "\n".join(lines) + "\n\n"


class DocumentAssembler:
    """
    Turns metadata and Markdown body into a file under the output directory.

    Example:
        assembler = DocumentAssembler(Path("./posts"))
        artifact = assembler.build(metadata, markdown)
        path = await assembler.write(artifact, metadata.title)
    """

    def __init__(
        self,
        output_dir: Path,
        frontmatter_builder: FrontmatterBuilder | None = None,
    ) -> None:
        self._output_dir = Path(output_dir)
        self._frontmatter_builder = frontmatter_builder or FrontmatterBuilder()

    def build(self, metadata: DocumentMetadata, body: str) -> MarkdownArtifact:
        """Combine frontmatter and body into an artifact."""
        frontmatter = self._frontmatter_builder.build(
            title=metadata.title,
            date=metadata.date.isoformat(),
            tags=[],
            category=metadata.category,
            image=metadata.cover_image,
        )
        return MarkdownArtifact(frontmatter=frontmatter, body=body)

    def output_path_for(self, title: str) -> Path:
        """Compute ``<output_dir>/<slug>.md`` for a title."""
        return self._output_dir / f"{slugify_title(title)}.md"

    async def write(self, artifact: MarkdownArtifact, title: str) -> Path:
        """
        Write the artifact, creating the output directory if needed.

        Returns:
            Path of the written file

        Raises:
            WriteError: On any filesystem failure
        """
        path = self.output_path_for(title)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            await asyncio.to_thread(path.write_text, artifact.content, encoding="utf-8")
        except OSError as e:
            raise WriteError(path, str(e)) from e

        logger.info(f"Saved: {path}")
        return path
