"""Rewrite style-only emphasis markup into semantic tags."""

import logging
import re
from typing import Optional

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

_FONT_WEIGHT_RE = re.compile(r"font-weight\s*:\s*([a-z0-9]+)")
_FONT_STYLE_RE = re.compile(r"font-style\s*:\s*(italic|oblique)")

# Numeric weights at or above this render as bold
BOLD_WEIGHT_THRESHOLD = 700


class StyleNormalizer:
    """
    Converts inline-styled spans into ``<strong>`` / ``<em>``.

    Editor exports express emphasis through ``style="font-weight:700"`` on
    spans, which html2text cannot see. Bold is checked first, so a span that
    is both bold and italic becomes ``<strong>`` only.

    Example:
        soup = BeautifulSoup(html, "html.parser")
        StyleNormalizer().normalize(soup)
    """

    def _emphasis_tag(self, style: str) -> Optional[str]:
        """Return the semantic tag name for a style string, or None."""
        style = style.lower()

        weight = _FONT_WEIGHT_RE.search(style)
        if weight:
            value = weight.group(1)
            if value in ("bold", "bolder"):
                return "strong"
            if value.isdigit() and int(value) >= BOLD_WEIGHT_THRESHOLD:
                return "strong"

        if _FONT_STYLE_RE.search(style):
            return "em"

        return None

    def normalize(self, soup: BeautifulSoup) -> int:
        """
        Replace emphasis spans in place.

        Args:
            soup: Parsed document, mutated in place

        Returns:
            Number of spans rewritten
        """
        # Collect first, then mutate
        targets: list[tuple[Tag, str]] = []
        for span in soup.find_all("span", style=True):
            tag_name = self._emphasis_tag(str(span.get("style", "")))
            if tag_name:
                targets.append((span, tag_name))

        for span, tag_name in targets:
            replacement = soup.new_tag(tag_name)
            for child in list(span.contents):
                replacement.append(child.extract())
            span.replace_with(replacement)

        if targets:
            logger.debug(f"Rewrote {len(targets)} styled spans")
        return len(targets)
