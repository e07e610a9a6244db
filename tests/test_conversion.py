"""Tests for the conversion module."""

from datetime import date

import pytest
from bs4 import BeautifulSoup
from docblog.conversion import (
    DEFAULT_CATEGORY,
    DEFAULT_TITLE,
    DocumentAssembler,
    FrontmatterBuilder,
    HtmlToMarkdown,
    StructureExtractor,
    StyleNormalizer,
    slugify_title,
)
from docblog.errors import EmptyContentError, WriteError
from docblog.models.document import DocumentMetadata


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


class TestStyleNormalizer:
    """Tests for StyleNormalizer."""

    def test_numeric_bold_becomes_strong(self):
        """Test that font-weight 700 becomes <strong>."""
        soup = _soup('<p><span style="font-weight:700">Bold</span></p>')
        StyleNormalizer().normalize(soup)

        assert soup.find("span") is None
        assert soup.find("strong").get_text() == "Bold"

    def test_heavier_weight_becomes_strong(self):
        """Test that weights above 700 also count as bold."""
        soup = _soup('<p><span style="font-weight: 800">Heavy</span></p>')
        StyleNormalizer().normalize(soup)

        assert soup.find("strong").get_text() == "Heavy"

    def test_bold_keyword_is_case_insensitive(self):
        """Test that the bold keyword is matched regardless of case."""
        soup = _soup('<p><span style="FONT-WEIGHT: BOLD">Loud</span></p>')
        StyleNormalizer().normalize(soup)

        assert soup.find("strong").get_text() == "Loud"

    def test_italic_becomes_em(self):
        """Test that font-style italic becomes <em>."""
        soup = _soup('<p><span style="font-style:italic">Slanted</span></p>')
        StyleNormalizer().normalize(soup)

        assert soup.find("em").get_text() == "Slanted"

    def test_normal_weight_untouched(self):
        """Test that regular spans are left alone."""
        soup = _soup('<p><span style="font-weight:400;color:#000000">Plain</span></p>')
        rewritten = StyleNormalizer().normalize(soup)

        assert rewritten == 0
        assert soup.find("span").get_text() == "Plain"
        assert soup.find("strong") is None

    def test_bold_and_italic_renders_bold_only(self):
        """Test that the bold rule wins for combined styles."""
        soup = _soup('<p><span style="font-weight:700;font-style:italic">Both</span></p>')
        StyleNormalizer().normalize(soup)

        assert soup.find("strong").get_text() == "Both"
        assert soup.find("em") is None

    def test_inner_markup_preserved(self):
        """Test that nested content moves into the replacement tag."""
        soup = _soup('<p><span style="font-weight:700">see <a href="https://x.test">link</a></span></p>')
        StyleNormalizer().normalize(soup)

        strong = soup.find("strong")
        assert strong.find("a")["href"] == "https://x.test"
        assert strong.get_text() == "see link"

    def test_returns_rewrite_count(self):
        """Test that the number of rewritten spans is returned."""
        soup = _soup(
            '<p><span style="font-weight:700">a</span>'
            '<span style="font-style:italic">b</span>'
            "<span>c</span></p>"
        )
        assert StyleNormalizer().normalize(soup) == 2

    def test_rendered_markdown_uses_asterisks(self):
        """Test that normalized spans render as ** and * in Markdown."""
        soup = _soup(
            "<p>This is "
            '<span style="font-weight:700">bold</span> and '
            '<span style="font-style:italic">italic</span> text</p>'
        )
        StyleNormalizer().normalize(soup)

        markdown = HtmlToMarkdown().convert(str(soup))

        assert "**bold**" in markdown
        assert "*italic*" in markdown
        assert "_italic_" not in markdown


class TestStructureExtractor:
    """Tests for StructureExtractor."""

    def test_first_two_headings_become_title_and_category(self):
        """Test title/category extraction and heading removal."""
        soup = _soup(
            "<body><h1>My Great Title</h1><h1>Travel</h1><h1>Third</h1><p>Body text</p></body>"
        )
        structure = StructureExtractor().extract(soup)

        assert structure.title == "My Great Title"
        assert structure.category == "Travel"
        remaining = [h.get_text() for h in soup.find_all("h1")]
        assert remaining == ["Third"]

    def test_single_heading_uses_default_category(self):
        """Test that a missing second heading yields the default category."""
        soup = _soup("<body><h1>Only A Title</h1><p>Body</p></body>")
        structure = StructureExtractor().extract(soup)

        assert structure.title == "Only A Title"
        assert structure.category == DEFAULT_CATEGORY
        assert soup.find("h1") is None

    def test_no_heading_uses_first_30_characters(self):
        """Test title fallback to leading flattened text."""
        soup = _soup(
            "<body><p>The quick brown   fox\n jumps over the lazy dog again and again</p></body>"
        )
        structure = StructureExtractor().extract(soup)

        assert structure.title == "The quick brown fox jumps over"
        assert len(structure.title) == 30

    def test_short_heading_falls_back_to_body_text(self):
        """Test that titles under five characters are replaced."""
        soup = _soup("<body><h1>Hi</h1><p>Some longer body text</p></body>")
        structure = StructureExtractor().extract(soup)

        assert structure.title == "Some longer body text"

    def test_empty_document_uses_default_title(self):
        """Test the constant fallback when there is no text at all."""
        soup = _soup("<body><p>   </p></body>")
        structure = StructureExtractor().extract(soup)

        assert structure.title == DEFAULT_TITLE
        assert structure.category == DEFAULT_CATEGORY

    def test_empty_second_heading_uses_default_category(self):
        """Test that a blank category heading is replaced."""
        soup = _soup("<body><h1>Proper Title</h1><h1>  </h1><p>Body</p></body>")
        structure = StructureExtractor().extract(soup)

        assert structure.category == DEFAULT_CATEGORY
        assert soup.find("h1") is None

    def test_custom_defaults(self):
        """Test configurable fallback constants."""
        soup = _soup("<body></body>")
        structure = StructureExtractor(default_title="draft", default_category="misc").extract(soup)

        assert structure.title == "draft"
        assert structure.category == "misc"


class TestHtmlToMarkdown:
    """Tests for HtmlToMarkdown converter."""

    def test_converts_headings_atx(self):
        """Test ATX heading conversion."""
        result = HtmlToMarkdown().convert("<h2>Subtitle</h2><h3>Section</h3>")

        assert "## Subtitle" in result
        assert "### Section" in result

    def test_bullets_use_dash(self):
        """Test unordered list marker."""
        result = HtmlToMarkdown().convert("<ul><li>One</li><li>Two</li></ul>")

        assert "- One" in result
        assert "- Two" in result
        assert "* One" not in result

    def test_converts_tables(self):
        """Test table conversion to pipe syntax."""
        html = (
            "<table><tr><th>Name</th><th>Age</th></tr>"
            "<tr><td>Ann</td><td>31</td></tr></table>"
        )
        result = HtmlToMarkdown().convert(html)

        assert "|" in result
        assert "---" in result
        assert "Name" in result
        assert "Ann" in result

    def test_converts_images(self):
        """Test image conversion keeps the source URL."""
        result = HtmlToMarkdown().convert('<p><img src="https://example.com/a.png"></p>')

        assert "![](https://example.com/a.png)" in result

    def test_no_line_wrapping(self):
        """Test that long paragraphs are not wrapped."""
        words = " ".join(["word"] * 60)
        result = HtmlToMarkdown().convert(f"<p>{words}</p>")

        assert words in result

    def test_collapses_blank_lines(self):
        """Test cleanup of excessive blank lines."""
        result = HtmlToMarkdown().convert("<p>A</p><br><br><br><br><p>B</p>")

        assert "\n\n\n" not in result
        assert result.endswith("\n")

    def test_empty_output_raises(self):
        """Test that blank translations raise EmptyContentError."""
        with pytest.raises(EmptyContentError):
            HtmlToMarkdown().convert("<body><p>   </p></body>")

    def test_converter_is_reusable(self):
        """Test that consecutive conversions do not leak state."""
        converter = HtmlToMarkdown()
        converter.convert("<p>First document</p>")
        second = converter.convert("<p>Second document</p>")

        assert "First document" not in second
        assert "Second document" in second


class TestSlugifyTitle:
    """Tests for slug derivation."""

    def test_illegal_characters_stripped_not_hyphenated(self):
        """Test that illegal characters vanish before hyphenation."""
        assert slugify_title("My: Article/Test") == "my-articletest"

    def test_whitespace_runs_collapse(self):
        """Test that whitespace runs become one hyphen."""
        assert slugify_title("Hello \t  World") == "hello-world"

    def test_all_illegal_characters(self):
        """Test every illegal character is removed."""
        assert slugify_title('a<b>c:d"e/f\\g|h?i*j') == "abcdefghij"

    def test_non_ascii_kept(self):
        """Test that non-ASCII titles survive."""
        assert slugify_title("留學 指南") == "留學-指南"


class TestFrontmatterBuilder:
    """Tests for FrontmatterBuilder."""

    def test_fields_in_order(self):
        """Test that fields keep keyword order."""
        result = FrontmatterBuilder().build(title="T", date="2024-01-02", tags=[], category="C", image="/i.jpg")

        assert result == (
            "---\n"
            'title: "T"\n'
            'date: "2024-01-02"\n'
            "tags: []\n"
            'category: "C"\n'
            'image: "/i.jpg"\n'
            "---\n\n"
        )

    def test_quotes_escaped(self):
        """Test that quotes in values are escaped."""
        result = FrontmatterBuilder().build(title='Say "hi"')

        assert 'title: "Say \\"hi\\""' in result

    def test_non_empty_list(self):
        """Test that lists render as block sequences."""
        result = FrontmatterBuilder().build(tags=["a", "b"])

        assert 'tags:\n  - "a"\n  - "b"' in result

    def test_none_skipped(self):
        """Test that None values are omitted."""
        result = FrontmatterBuilder().build(title="T", image=None)

        assert "image" not in result


class TestDocumentAssembler:
    """Tests for DocumentAssembler."""

    @pytest.fixture
    def metadata(self):
        return DocumentMetadata(
            title="My: Article/Test",
            category="Guides",
            cover_image="https://res.cloudinary.com/demo/cover.png",
            date=date(2024, 1, 2),
        )

    def test_build_artifact(self, tmp_path, metadata):
        """Test frontmatter and body concatenation."""
        artifact = DocumentAssembler(tmp_path).build(metadata, "Body text\n")

        assert artifact.body == "Body text\n"
        assert artifact.content.startswith("---\ntitle: \"My: Article/Test\"\n")
        assert 'date: "2024-01-02"' in artifact.frontmatter
        assert "tags: []" in artifact.frontmatter
        assert 'category: "Guides"' in artifact.frontmatter
        assert 'image: "https://res.cloudinary.com/demo/cover.png"' in artifact.frontmatter
        assert artifact.content.endswith("---\n\nBody text\n")

    @pytest.mark.asyncio
    async def test_write_creates_directory(self, tmp_path, metadata):
        """Test that the output directory is created."""
        output_dir = tmp_path / "nested" / "posts"
        assembler = DocumentAssembler(output_dir)
        artifact = assembler.build(metadata, "Body\n")

        path = await assembler.write(artifact, metadata.title)

        assert path == output_dir / "my-articletest.md"
        assert path.read_text(encoding="utf-8") == artifact.content

    @pytest.mark.asyncio
    async def test_write_failure_raises_write_error(self, tmp_path, metadata):
        """Test that filesystem errors become WriteError."""
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("x")
        assembler = DocumentAssembler(blocker)

        with pytest.raises(WriteError):
            await assembler.write(assembler.build(metadata, "Body\n"), metadata.title)
