#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/kbconvert/renderers/docx.py
"""DOCX packaging of styled blocks.

:class:`DocxPackager` writes the builder's styled block sequence into a Word
document with python-docx. Global defaults (body font, heading sizes,
colors and spacing) are applied to the document styles; everything else is
set as direct formatting on paragraphs, runs and table cells.

"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import Any, Optional, Sequence

from docx import Document
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Emu, Pt, RGBColor, Twips

from kbconvert.constants import CODE_BLOCK_BORDER_SIZE, CODE_BLOCK_INDENT, CODE_BLOCK_SPACING, TABLE_BORDER_SIZE
from kbconvert.exceptions import RenderingError
from kbconvert.options.docx import DocxRendererOptions
from kbconvert.options.styles import CodeBlockStyle, TableStyle
from kbconvert.renderers.blocks import (
    BorderSpec,
    BoxStyle,
    BreakRun,
    ImageRun,
    Indent,
    Run,
    Spacing,
    StyledBlock,
    StyledCodeBlock,
    StyledHeading,
    StyledParagraph,
    StyledSeparator,
    StyledTable,
    TextRun,
)

logger = logging.getLogger(__name__)

EMU_PER_PIXEL = 9525

# Elements that must follow w:pBdr inside w:pPr
_PBDR_SUCCESSORS = (
    "w:shd",
    "w:tabs",
    "w:suppressAutoHyphens",
    "w:kinsoku",
    "w:wordWrap",
    "w:overflowPunct",
    "w:topLinePunct",
    "w:autoSpaceDE",
    "w:autoSpaceDN",
    "w:bidi",
    "w:adjustRightInd",
    "w:snapToGrid",
    "w:spacing",
    "w:ind",
    "w:contextualSpacing",
    "w:mirrorIndents",
    "w:suppressOverlap",
    "w:jc",
    "w:textDirection",
    "w:textAlignment",
    "w:textboxTightWrap",
    "w:outlineLvl",
    "w:divId",
    "w:cnfStyle",
    "w:rPr",
    "w:sectPr",
    "w:pPrChange",
)
_SHD_SUCCESSORS = _PBDR_SUCCESSORS[1:]

_THEME_FONT_ATTRIBUTES = ("w:asciiTheme", "w:hAnsiTheme", "w:eastAsiaTheme", "w:cstheme")


def _border_element(tag: str, border: BorderSpec) -> Any:
    element = OxmlElement(tag)
    element.set(qn("w:val"), "single")
    element.set(qn("w:sz"), str(border.size))
    element.set(qn("w:space"), "1")
    element.set(qn("w:color"), border.color)
    return element


def _shading_element(fill: str) -> Any:
    shading = OxmlElement("w:shd")
    shading.set(qn("w:val"), "clear")
    shading.set(qn("w:color"), "auto")
    shading.set(qn("w:fill"), fill)
    return shading


def apply_box_style(paragraph: Any, box: BoxStyle) -> None:
    """Add borders and background shading to a paragraph.

    Parameters
    ----------
    paragraph : docx.text.paragraph.Paragraph
        Paragraph to decorate
    box : BoxStyle
        Edges to draw and fill color

    """
    pPr = paragraph._p.get_or_add_pPr()

    edges = [(name, getattr(box, name)) for name in ("top", "left", "bottom", "right")]
    if any(border is not None for _, border in edges):
        pBdr = OxmlElement("w:pBdr")
        pPr.insert_element_before(pBdr, *_PBDR_SUCCESSORS)
        for name, border in edges:
            if border is not None:
                pBdr.append(_border_element(f"w:{name}", border))

    if box.background:
        pPr.insert_element_before(_shading_element(box.background), *_SHD_SUCCESSORS)


def _set_style_font(style: Any, name: str) -> None:
    """Set a style's font and drop theme font references that would override it."""
    style.font.name = name
    rPr = style.element.get_or_add_rPr()
    rFonts = rPr.find(qn("w:rFonts"))
    if rFonts is None:
        return
    for attribute in _THEME_FONT_ATTRIBUTES:
        rFonts.attrib.pop(qn(attribute), None)
    rFonts.set(qn("w:eastAsia"), name)


class DocxPackager:
    """Write styled blocks to a DOCX package.

    Parameters
    ----------
    options : DocxRendererOptions or None, default = None
        Global style defaults and optional template
    code_style : CodeBlockStyle or None, default = None
        Font and shading for inline code runs

    Examples
    --------
        >>> packager = DocxPackager()
        >>> data = packager.pack([StyledParagraph(runs=[TextRun("Hello")])])
        >>> data[:2]
        b'PK'

    """

    def __init__(self, options: DocxRendererOptions | None = None, code_style: CodeBlockStyle | None = None):
        """Initialize the packager with options."""
        self.options = options or DocxRendererOptions()
        self.code_style = code_style or CodeBlockStyle()

    def pack(self, blocks: Sequence[StyledBlock], metadata: Optional[dict[str, Any]] = None) -> bytes:
        """Render ``blocks`` into DOCX bytes.

        Parameters
        ----------
        blocks : sequence of StyledBlock
            Output of the document tree builder
        metadata : dict or None
            Document properties (title, author, subject, keywords)

        Returns
        -------
        bytes
            DOCX file content

        Raises
        ------
        RenderingError
            If python-docx fails while building or saving the document

        """
        try:
            document = Document(self.options.template_path) if self.options.template_path else Document()
            self._set_document_defaults(document)
            if metadata:
                self._set_document_properties(document, metadata)

            for block in blocks:
                self._add_block(document, block)

            buffer = BytesIO()
            document.save(buffer)
        except RenderingError:
            raise
        except Exception as e:
            raise RenderingError(f"Failed to package DOCX: {e!r}", rendering_stage="package", original_error=e) from e

        logger.debug("Packaged %d blocks into %d bytes", len(blocks), buffer.tell())
        return buffer.getvalue()

    # ------------------------------------------------------------------
    # Document-wide styles
    # ------------------------------------------------------------------

    def _set_document_defaults(self, document: Any) -> None:
        normal = document.styles["Normal"]
        _set_style_font(normal, self.options.default_font)
        normal.font.size = Pt(self.options.default_font_size)
        normal.font.color.rgb = RGBColor.from_string(self.options.body_color)

        for level in range(1, 7):
            try:
                style = document.styles[f"Heading {level}"]
            except KeyError:
                logger.debug("Template has no Heading %d style", level)
                continue
            _set_style_font(style, self.options.default_font)
            style.font.size = Pt(self.options.heading_size(level))
            style.font.color.rgb = RGBColor.from_string(self.options.heading_color)
            style.font.bold = level <= 3
            style.font.italic = level == 4
            style.paragraph_format.space_before = Twips(self.options.heading_space_before(level))
            style.paragraph_format.space_after = Twips(self.options.heading_spacing_after)

    @staticmethod
    def _set_document_properties(document: Any, metadata: dict[str, Any]) -> None:
        core_props = document.core_properties
        if "title" in metadata:
            core_props.title = str(metadata["title"])
        if "author" in metadata:
            core_props.author = str(metadata["author"])
        if "subject" in metadata:
            core_props.subject = str(metadata["subject"])
        keywords = metadata.get("keywords") or metadata.get("tags")
        if keywords:
            core_props.keywords = ", ".join(str(k) for k in keywords) if isinstance(keywords, list) else str(keywords)

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def _add_block(self, document: Any, block: StyledBlock) -> None:
        if isinstance(block, StyledHeading):
            heading = document.add_heading(level=block.level)
            self._add_runs(heading, block.runs)
        elif isinstance(block, StyledParagraph):
            paragraph = document.add_paragraph()
            if block.box is not None:
                apply_box_style(paragraph, block.box)
            self._apply_layout(paragraph, block.indent, block.spacing)
            self._add_runs(paragraph, block.runs)
        elif isinstance(block, StyledCodeBlock):
            self._add_code_block(document, block)
        elif isinstance(block, StyledTable):
            self._add_table(document, block)
        elif isinstance(block, StyledSeparator):
            paragraph = document.add_paragraph()
            apply_box_style(paragraph, BoxStyle(bottom=block.border))
            self._apply_layout(paragraph, None, block.spacing)
        else:
            logger.debug("Skipping unknown block %s", type(block).__name__)

    @staticmethod
    def _apply_layout(paragraph: Any, indent: Indent | None, spacing: Spacing | None) -> None:
        fmt = paragraph.paragraph_format
        if indent is not None:
            if indent.left:
                fmt.left_indent = Twips(indent.left)
            if indent.right:
                fmt.right_indent = Twips(indent.right)
            if indent.hanging:
                fmt.first_line_indent = Twips(-indent.hanging)
        if spacing is not None:
            if spacing.before is not None:
                fmt.space_before = Twips(spacing.before)
            if spacing.after is not None:
                fmt.space_after = Twips(spacing.after)

    def _add_runs(self, paragraph: Any, runs: Sequence[Run]) -> None:
        for run in runs:
            if isinstance(run, TextRun):
                docx_run = paragraph.add_run(run.text)
                if run.bold:
                    docx_run.bold = True
                if run.italic:
                    docx_run.italic = True
                if run.code:
                    self._apply_code_font(docx_run, self.code_style)
                    docx_run._r.get_or_add_rPr().append(_shading_element(self.code_style.background))
            elif isinstance(run, BreakRun):
                paragraph.add_run().add_break()
            elif isinstance(run, ImageRun):
                paragraph.add_run().add_picture(
                    BytesIO(run.data),
                    width=Emu(run.width * EMU_PER_PIXEL),
                    height=Emu(run.height * EMU_PER_PIXEL),
                )

    @staticmethod
    def _apply_code_font(docx_run: Any, style: CodeBlockStyle) -> None:
        docx_run.font.name = style.font
        docx_run.font.size = Pt(style.size)

    def _add_code_block(self, document: Any, block: StyledCodeBlock) -> None:
        style = block.style
        paragraph = document.add_paragraph()
        border = BorderSpec(size=CODE_BLOCK_BORDER_SIZE, color=style.border_color)
        apply_box_style(
            paragraph, BoxStyle(background=style.background, top=border, left=border, bottom=border, right=border)
        )
        self._apply_layout(
            paragraph,
            Indent(left=CODE_BLOCK_INDENT, right=CODE_BLOCK_INDENT),
            Spacing(before=CODE_BLOCK_SPACING, after=CODE_BLOCK_SPACING),
        )

        for index, line in enumerate(block.lines):
            if index > 0:
                paragraph.add_run().add_break()
            self._apply_code_font(paragraph.add_run(line), style)

    def _add_table(self, document: Any, block: StyledTable) -> None:
        column_count = block.column_count
        if column_count == 0:
            return

        table = document.add_table(rows=len(block.rows), cols=column_count)
        self._set_full_width(table)
        style: TableStyle = block.style
        border = BorderSpec(size=TABLE_BORDER_SIZE, color=style.border_color)

        for row_index, row in enumerate(block.rows):
            for col_index in range(column_count):
                docx_cell = table.rows[row_index].cells[col_index]
                cell = row[col_index] if col_index < len(row) else None
                paragraph = docx_cell.paragraphs[0]
                if cell is not None and cell.text:
                    run = paragraph.add_run(cell.text)
                    if cell.is_header:
                        run.bold = True
                        run.font.color.rgb = RGBColor.from_string(style.header_text_color)

                tcPr = docx_cell._tc.get_or_add_tcPr()
                borders = OxmlElement("w:tcBorders")
                for name in ("top", "left", "bottom", "right"):
                    borders.append(_border_element(f"w:{name}", border))
                tcPr.append(borders)
                if row_index == 0:
                    tcPr.append(_shading_element(style.header_background))

    @staticmethod
    def _set_full_width(table: Any) -> None:
        tblPr = table._tbl.tblPr
        tblW = tblPr.find(qn("w:tblW"))
        if tblW is None:
            tblW = OxmlElement("w:tblW")
            tblPr.append(tblW)
        tblW.set(qn("w:type"), "pct")
        tblW.set(qn("w:w"), "5000")
