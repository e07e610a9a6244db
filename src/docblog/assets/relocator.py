"""Image relocation and cover image selection."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from bs4 import BeautifulSoup

from ..errors import UploadError
from ..models.config import DEFAULT_COVER_IMAGE
from .protocols import ImageHost

logger = logging.getLogger(__name__)

# Characters html2text backslash-escapes inside image URLs
_MD_ESCAPED_CHARS = re.compile(r"([\\\[\]()])")


@dataclass(frozen=True)
class ImageRelocation:
    """Outcome for one source image."""

    original_url: str
    durable_url: str | None = None
    error: str | None = None

    @property
    def uploaded(self) -> bool:
        return self.durable_url is not None


@dataclass
class RelocationResult:
    """Rewritten Markdown plus the chosen cover image."""

    markdown: str
    cover_image: str
    images: list[ImageRelocation] = field(default_factory=list)

    @property
    def uploaded_count(self) -> int:
        return sum(1 for image in self.images if image.uploaded)

    @property
    def failed_count(self) -> int:
        return sum(1 for image in self.images if not image.uploaded)


class DisabledImageHost:
    """Image host used when no credentials are configured; every upload fails."""

    async def upload(self, image_url: str) -> str:
        raise UploadError(image_url, "image host is not configured")


def _markdown_spellings(url: str) -> list[str]:
    """Spellings of ``url`` that may appear in converted Markdown."""
    escaped = _MD_ESCAPED_CHARS.sub(r"\\\1", url)
    return [url] if escaped == url else [escaped, url]


def _rewrite_urls(markdown: str, images: list[ImageRelocation]) -> str:
    """Point every spelling of each uploaded URL at its durable copy in one pass.

    Failed URLs are matched too (and left as they are), and longer spellings
    are tried first, so a URL that is a prefix of another never rewrites part
    of the longer one.
    """
    replacements: dict[str, str] = {}
    for image in images:
        for spelling in _markdown_spellings(image.original_url):
            replacements[spelling] = image.durable_url or spelling
    if not any(image.uploaded for image in images):
        return markdown

    pattern = re.compile("|".join(re.escape(s) for s in sorted(replacements, key=len, reverse=True)))
    return pattern.sub(lambda match: replacements[match.group(0)], markdown)


class AssetRelocator:
    """
    Uploads every embedded image and points the Markdown at the hosted copies.

    Images are processed one at a time in document order, so the first
    successful upload (the cover) is deterministic. A failed upload is
    logged and its original URL is left in place.

    Example:
        relocator = AssetRelocator(uploader, default_image="/default-thumbnail.jpg")
        result = await relocator.relocate(soup, markdown)
        print(result.cover_image)
    """

    def __init__(self, image_host: ImageHost, default_image: str = DEFAULT_COVER_IMAGE) -> None:
        self._image_host = image_host
        self._default_image = default_image

    @staticmethod
    def collect_image_urls(soup: BeautifulSoup) -> list[str]:
        """Image sources in document order, without duplicates or inline data URIs."""
        urls: list[str] = []
        for img in soup.find_all("img"):
            src = str(img.get("src") or "").strip()
            if not src or src.startswith("data:") or src in urls:
                continue
            urls.append(src)
        return urls

    async def relocate(self, soup: BeautifulSoup, markdown: str) -> RelocationResult:
        """
        Upload images found in ``soup`` and rewrite their URLs in ``markdown``.

        Args:
            soup: Parsed document the Markdown was produced from
            markdown: Translated Markdown

        Returns:
            RelocationResult with rewritten Markdown and cover image
        """
        cover_image: str | None = None
        images: list[ImageRelocation] = []

        for original_url in self.collect_image_urls(soup):
            logger.info(f"Found image: {original_url}")
            try:
                durable_url = await self._image_host.upload(original_url)
            except Exception as e:
                logger.error(f"Image upload failed for {original_url}: {e}")
                images.append(ImageRelocation(original_url=original_url, error=str(e)))
                continue

            if cover_image is None:
                cover_image = durable_url
            images.append(ImageRelocation(original_url=original_url, durable_url=durable_url))
            logger.info(f"Image relocated to {durable_url}")

        return RelocationResult(
            markdown=_rewrite_urls(markdown, images),
            cover_image=cover_image or self._default_image,
            images=images,
        )
