"""Title and category extraction from heading elements."""

import logging
import re
from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "untitled document"
DEFAULT_CATEGORY = "uncategorized"

# Titles shorter than this are replaced by the leading body text
MIN_TITLE_LENGTH = 5
FALLBACK_TITLE_LENGTH = 30


@dataclass(frozen=True)
class DocumentStructure:
    """Title and category pulled from a document."""

    title: str
    category: str


class StructureExtractor:
    """
    Pulls title and category out of the first two ``<h1>`` elements.

    The first heading becomes the title and the second the category; both
    are removed from the tree so they do not repeat in the body. Always
    returns a non-empty title and category.

    Example:
        structure = StructureExtractor().extract(soup)
        print(structure.title, structure.category)
    """

    def __init__(
        self,
        default_title: str = DEFAULT_TITLE,
        default_category: str = DEFAULT_CATEGORY,
    ):
        self._default_title = default_title
        self._default_category = default_category

    @staticmethod
    def _flatten_text(root: Tag) -> str:
        return re.sub(r"\s+", " ", root.get_text()).strip()

    def extract(self, soup: BeautifulSoup) -> DocumentStructure:
        """
        Extract title and category, removing their headings from ``soup``.

        Args:
            soup: Parsed document, mutated in place

        Returns:
            DocumentStructure with non-empty title and category
        """
        headings = soup.find_all("h1")[:2]

        title = ""
        category = ""
        if headings:
            title = headings[0].get_text().strip()
        if len(headings) > 1:
            category = headings[1].get_text().strip()

        for heading in headings:
            heading.decompose()

        if len(title) < MIN_TITLE_LENGTH:
            root = soup.body if isinstance(soup.body, Tag) else soup
            title = self._flatten_text(root)[:FALLBACK_TITLE_LENGTH]
            logger.warning(f"No usable <h1> title, using leading text: {title!r}")

        if not title:
            logger.warning(f"No text to derive a title from, using {self._default_title!r}")
            title = self._default_title

        if not category:
            category = self._default_category

        return DocumentStructure(title=title, category=category)
