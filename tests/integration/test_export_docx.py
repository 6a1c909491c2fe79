#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/integration/test_export_docx.py
"""Integration tests for exporting markdown notes to DOCX.

Each test converts note text with :func:`markdown_to_docx` and reads the
result back with python-docx to check the styles that ended up in the file.

"""

import asyncio
from io import BytesIO

import pytest
from docx import Document as DocxDocument
from docx.oxml.ns import qn
from docx.shared import Pt, RGBColor

from kbconvert import DocxRendererOptions, MarkdownParserOptions, VaultImageResolver, markdown_to_docx
from kbconvert.api import build_document_async, parse_markdown


def export(text, **kwargs):
    return DocxDocument(BytesIO(markdown_to_docx(text, **kwargs)))


def body_paragraphs(document):
    return [p for p in document.paragraphs if p.text.strip()]


@pytest.mark.integration
class TestDocumentStyles:
    """Tests for document-wide styles and properties."""

    def test_package_bytes(self):
        """Test that the output is a zip package even for empty input."""
        assert markdown_to_docx("")[:2] == b"PK"

    def test_heading_styles(self):
        """Test heading paragraphs and their style settings."""
        document = export("# Title\n\n## Section\n\n#### Minor")
        paragraphs = body_paragraphs(document)
        assert [p.style.name for p in paragraphs] == ["Heading 1", "Heading 2", "Heading 4"]
        assert [p.text for p in paragraphs] == ["Title", "Section", "Minor"]

        heading_1 = document.styles["Heading 1"]
        assert heading_1.font.size == Pt(16)
        assert heading_1.font.color.rgb == RGBColor.from_string("4F81BD")
        assert heading_1.font.bold is True
        assert document.styles["Heading 4"].font.italic is True

    def test_body_font(self):
        """Test the body font defaults and overrides."""
        document = export("text", options=DocxRendererOptions(default_font="Calibri", default_font_size=12))
        normal = document.styles["Normal"]
        assert normal.font.name == "Calibri"
        assert normal.font.size == Pt(12)

    def test_frontmatter_properties(self):
        """Test that frontmatter fills the document properties."""
        document = export("---\ntitle: Weekly Notes\nauthor: Sam\ntags: [ops, notes]\n---\nBody")
        assert document.core_properties.title == "Weekly Notes"
        assert document.core_properties.author == "Sam"
        assert document.core_properties.keywords == "ops, notes"
        assert body_paragraphs(document)[0].text == "Body"

    def test_template(self, tmp_path):
        """Test that a template document seeds the output."""
        template = tmp_path / "template.docx"
        DocxDocument().save(str(template))
        document = export("# From template", options=DocxRendererOptions(template_path=str(template)))
        assert body_paragraphs(document)[0].text == "From template"


@pytest.mark.integration
class TestInlineRuns:
    """Tests for run-level formatting."""

    def test_bold_italic_runs(self):
        """Test inherited formatting on the written runs."""
        paragraph = body_paragraphs(export("**bold *and italic* text**"))[0]
        assert [(r.text, bool(r.bold), bool(r.italic)) for r in paragraph.runs] == [
            ("bold ", True, False),
            ("and italic", True, True),
            (" text", True, False),
        ]

    def test_inline_code_run(self):
        """Test the font and shading of inline code."""
        paragraph = body_paragraphs(export("Run `ls -la` now"))[0]
        code_run = paragraph.runs[1]
        assert code_run.text == "ls -la"
        assert code_run.font.name == "Consolas"
        assert code_run._r.rPr.find(qn("w:shd")).get(qn("w:fill")) == "F5F5F5"

    def test_wiki_links_as_text(self):
        """Test the text mode for cross-reference links."""
        options = MarkdownParserOptions(wiki_link_mode="text")
        document = export("See [[Other Note|the other note]].", parser_options=options)
        assert body_paragraphs(document)[0].text == "See the other note."

    def test_wiki_links_removed_by_default(self):
        """Test that cross-reference links are removed by default."""
        assert body_paragraphs(export("See [[Other Note]] now"))[0].text == "See  now"


@pytest.mark.integration
class TestBlocks:
    """Tests for block-level output."""

    def test_lists(self):
        """Test list markers and indentation."""
        paragraphs = body_paragraphs(export("1. first\n2. second\n\n- apple\n  - pip"))
        assert [p.text for p in paragraphs] == ["1. first", "2. second", "• apple", "• pip"]
        assert paragraphs[0].paragraph_format.left_indent.twips == 720
        assert paragraphs[0].paragraph_format.first_line_indent.twips == -360
        assert paragraphs[3].paragraph_format.left_indent.twips == 1080

    def test_callout_box(self):
        """Test callout shading and borders."""
        paragraphs = body_paragraphs(export("> [!warning] Important Notice\n> This is a warning callout."))
        header, body = paragraphs
        assert header.text == "Warning: Important Notice"
        assert header.runs[0].bold
        assert body.text == "This is a warning callout."

        pPr = body._p.pPr
        assert pPr.find(qn("w:shd")).get(qn("w:fill")) == "FFF3E0"
        left = pPr.find(qn("w:pBdr")).find(qn("w:left"))
        assert left.get(qn("w:sz")) == "48"
        assert left.get(qn("w:color")) == "FF9800"

    def test_code_block(self):
        """Test that code blocks are one monospace paragraph with line breaks."""
        paragraphs = body_paragraphs(export("```python\na = 1\nb = 2\n```"))
        assert len(paragraphs) == 1
        code = paragraphs[0]
        assert code.text == "a = 1\nb = 2"
        assert all(run.font.name == "Consolas" for run in code.runs if run.text.strip())
        assert code._p.pPr.find(qn("w:shd")).get(qn("w:fill")) == "F5F5F5"

    def test_table(self):
        """Test table contents and header styling."""
        document = export("| Name | Age |\n|---|---|\n| Alice | 30 |")
        table = document.tables[0]
        assert [[cell.text for cell in row.cells] for row in table.rows] == [["Name", "Age"], ["Alice", "30"]]

        header_cell = table.rows[0].cells[0]
        assert header_cell._tc.tcPr.find(qn("w:shd")).get(qn("w:fill")) == "404040"
        assert header_cell.paragraphs[0].runs[0].bold
        assert table.rows[1].cells[0]._tc.tcPr.find(qn("w:shd")) is None

    def test_separator(self):
        """Test that a thematic break is an empty paragraph with a bottom border."""
        document = export("above\n\n---\n\nbelow")
        separator = document.paragraphs[1]
        assert separator.text == ""
        bottom = separator._p.pPr.find(qn("w:pBdr")).find(qn("w:bottom"))
        assert bottom.get(qn("w:sz")) == "6"

    def test_toc_section_skipped(self):
        """Test that the table of contents and its list are not exported."""
        document = export("# Table of Contents\n\n- Intro\n- Usage\n\n# Intro\n\nText")
        assert [p.text for p in body_paragraphs(document)] == ["Intro", "Text"]


@pytest.mark.integration
class TestImages:
    """Tests for image embeds."""

    def test_embed_from_vault(self, vault_dir):
        """Test that embeds are found in the vault and placed at the default size."""
        document = export("Diagram:\n\n![[diagram.png]]", image_resolver=VaultImageResolver(vault_dir))
        assert len(document.inline_shapes) == 1
        shape = document.inline_shapes[0]
        assert shape.width == 400 * 9525
        assert shape.height == 300 * 9525

    def test_embed_width(self, vault_dir):
        """Test that the embed width sets the picture size."""
        document = export("![[diagram.png|200]]", image_resolver=VaultImageResolver(vault_dir))
        assert document.inline_shapes[0].width == 200 * 9525
        assert document.inline_shapes[0].height == 150 * 9525

    def test_missing_image_omitted(self, vault_dir):
        """Test that unknown images are left out without failing."""
        document = export("before ![[missing.png]] after", image_resolver=VaultImageResolver(vault_dir))
        assert len(document.inline_shapes) == 0
        assert body_paragraphs(document)[0].text == "before  after"

    def test_build_inside_event_loop(self, vault_dir):
        """Test the async build from running async code."""

        async def convert():
            tree = parse_markdown("![[diagram.png]]")
            return await build_document_async(tree, image_resolver=VaultImageResolver(vault_dir))

        data = asyncio.run(convert())
        assert len(DocxDocument(BytesIO(data)).inline_shapes) == 1
