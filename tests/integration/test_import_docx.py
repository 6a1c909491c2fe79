#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/integration/test_import_docx.py
"""Integration tests for importing DOCX documents as notes.

Source documents are written with python-docx so that the tests cover the
same paragraph, list and table structures Word produces.

"""

import re
from io import BytesIO

import pytest
from docx import Document as DocxDocument
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Inches

from kbconvert import ImportOptions, UnpackingError, docx_to_markdown, markdown_to_docx, save_conversion_result


def to_bytes(document):
    buffer = BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def add_hyperlink(paragraph, url, text):
    r_id = paragraph.part.relate_to(url, RT.HYPERLINK, is_external=True)
    hyperlink = OxmlElement("w:hyperlink")
    hyperlink.set(qn("r:id"), r_id)
    run = OxmlElement("w:r")
    text_element = OxmlElement("w:t")
    text_element.text = text
    run.append(text_element)
    hyperlink.append(run)
    paragraph._p.append(hyperlink)


@pytest.fixture
def report_bytes(png_bytes):
    """A document with one of each structure the importer handles."""
    document = DocxDocument()
    document.add_heading("Quarterly Report", level=1)
    document.add_heading("Summary", level=2)

    paragraph = document.add_paragraph("Revenue was ")
    paragraph.add_run("strong").bold = True
    paragraph.add_run(" and ")
    paragraph.add_run("steady").italic = True
    paragraph.add_run(".")

    document.add_paragraph("Apples", style="List Bullet")
    document.add_paragraph("Pears", style="List Bullet")
    document.add_paragraph("Open the file", style="List Number")
    document.add_paragraph("Save it", style="List Number")

    table = document.add_table(rows=2, cols=2)
    table.cell(0, 0).text = "Name"
    table.cell(0, 1).text = "Age"
    table.cell(1, 0).text = "Alice"
    table.cell(1, 1).text = "30"

    document.add_paragraph("Check the repository state:")
    document.add_paragraph("git status")

    code = document.add_paragraph()
    code.add_run("print('hello')").font.name = "Consolas"

    link_paragraph = document.add_paragraph("Read ")
    add_hyperlink(link_paragraph, "https://example.com/guide", "the guide")

    document.add_picture(BytesIO(png_bytes), width=Inches(1))
    return to_bytes(document)


@pytest.mark.integration
class TestDocxToMarkdown:
    """Tests for converting documents with python-docx structures."""

    def test_headings(self, report_bytes):
        """Test that heading styles become hash headings."""
        markdown = docx_to_markdown(report_bytes, base_name="report").markdown
        assert markdown.startswith("# Quarterly Report\n\n## Summary\n")

    def test_inline_formatting(self, report_bytes):
        """Test bold and italic runs."""
        markdown = docx_to_markdown(report_bytes, base_name="report").markdown
        assert "Revenue was **strong** and *steady*." in markdown

    def test_lists(self, report_bytes):
        """Test bullet and numbered list styles."""
        markdown = docx_to_markdown(report_bytes, base_name="report").markdown
        assert "- Apples\n- Pears" in markdown
        assert "1. Open the file\n2. Save it" in markdown

    def test_table(self, report_bytes):
        """Test that tables become pipe tables."""
        markdown = docx_to_markdown(report_bytes, base_name="report").markdown
        assert "| Name | Age |" in markdown
        assert "| Alice | 30 |" in markdown

    def test_command_paragraph(self, report_bytes):
        """Test that a command typed as prose becomes inline code."""
        markdown = docx_to_markdown(report_bytes, base_name="report").markdown
        assert "Check the repository state:\n\n`git status`" in markdown

    def test_monospace_paragraph(self, report_bytes):
        """Test that a paragraph set in a code font becomes a fenced block."""
        markdown = docx_to_markdown(report_bytes, base_name="report").markdown
        assert "```\nprint('hello')\n```" in markdown

    def test_hyperlink(self, report_bytes):
        """Test that hyperlinks keep their target."""
        markdown = docx_to_markdown(report_bytes, base_name="report").markdown
        assert "[the guide](https://example.com/guide)" in markdown

    def test_extract_images(self, report_bytes, png_bytes):
        """Test that images are named after the document and linked as embeds."""
        result = docx_to_markdown(report_bytes, base_name="report")
        assert [image.filename for image in result.images] == ["report-image-01.png"]
        assert result.images[0].data == png_bytes
        assert "![[report-image-01.png]]" in result.markdown
        assert "__IMAGE_" not in result.markdown

    def test_embed_images(self, report_bytes):
        """Test inline data URI images."""
        result = docx_to_markdown(report_bytes, base_name="report", options=ImportOptions(image_handling="embed"))
        assert result.images == []
        assert "![report-image-01.png](data:image/png;base64," in result.markdown

    def test_ignore_images(self, report_bytes):
        """Test dropping images."""
        result = docx_to_markdown(report_bytes, base_name="report", options=ImportOptions(image_handling="ignore"))
        assert result.images == []
        assert "![" not in result.markdown
        assert "__IMAGE_" not in result.markdown

    def test_output_ends_with_newline(self, report_bytes):
        """Test that the cleaned text ends with exactly one newline."""
        markdown = docx_to_markdown(report_bytes, base_name="report").markdown
        assert markdown.endswith("\n")
        assert not markdown.endswith("\n\n")
        assert "\n\n\n" not in markdown

    def test_save(self, report_bytes, tmp_path):
        """Test writing the note and its image folder."""
        result = docx_to_markdown(report_bytes, base_name="report")
        note = save_conversion_result(result, tmp_path)
        assert (tmp_path / "_assets" / "report" / "report-image-01.png").is_file()
        assert "> **Images**: 1 extracted to `./_assets/report`" in note.read_text(encoding="utf-8")

    def test_empty_document(self):
        """Test a document with no content."""
        assert docx_to_markdown(to_bytes(DocxDocument())).markdown == "\n"

    @pytest.mark.parametrize("data", [b"", b"PK\x03\x04 broken", b"plain text"])
    def test_unreadable_input(self, data):
        """Test that bytes that are not a DOCX package raise UnpackingError."""
        with pytest.raises(UnpackingError):
            docx_to_markdown(data)


@pytest.mark.integration
class TestRoundTrip:
    """Tests for exporting a note and importing it again."""

    NOTE = (
        "# Title\n"
        "\n"
        "Some **bold** text.\n"
        "\n"
        "- apple\n"
        "  - pip\n"
        "- pear\n"
        "\n"
        "1. first\n"
        "2. second\n"
        "\n"
        "```\n"
        "x = 1\n"
        "y = 2\n"
        "```\n"
        "\n"
        "| Name | Age |\n"
        "|---|---|\n"
        "| Alice | 30 |\n"
    )

    def _round_trip(self, text):
        return docx_to_markdown(markdown_to_docx(text), base_name="note").markdown

    def test_blocks_survive(self):
        """Test headings, paragraphs, lists and code after a round trip."""
        markdown = self._round_trip(self.NOTE)
        assert markdown.startswith("# Title\n")
        assert "Some **bold** text." in markdown
        assert "1. first\n2. second" in markdown
        assert "```\nx = 1\ny = 2\n```" in markdown

    def test_table_survives(self):
        """Test that the table comes back as a pipe table."""
        markdown = self._round_trip(self.NOTE)
        assert "| **Name** | **Age** |" in markdown
        assert "| Alice | 30 |" in markdown

    def test_nested_list_depth(self):
        """Test that nested list items keep their depth."""
        markdown = self._round_trip(self.NOTE)
        assert re.search(r"^- apple\n+[ \t]+- pip\n+- pear$", markdown, re.MULTILINE)

    def test_callout_text(self):
        """Test that callout text is kept as paragraphs."""
        markdown = self._round_trip("> [!tip] Remember\n> Back up first.")
        assert "**Tip: Remember**" in markdown
        assert "Back up first." in markdown

    def test_embedded_image(self, vault_dir):
        """Test that an embedded image comes back as an extracted file."""
        from kbconvert import VaultImageResolver

        data = markdown_to_docx("![[diagram.png]]", image_resolver=VaultImageResolver(vault_dir))
        result = docx_to_markdown(data, base_name="note")
        assert [image.filename for image in result.images] == ["note-image-01.png"]
        assert result.markdown == "![[note-image-01.png]]\n"
