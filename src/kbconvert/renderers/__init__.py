#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Write direction: AST to styled blocks to DOCX."""

from kbconvert.renderers.blocks import (
    BreakRun,
    FormattingContext,
    ImageRun,
    StyledBlock,
    StyledCell,
    StyledCodeBlock,
    StyledHeading,
    StyledParagraph,
    StyledSeparator,
    StyledTable,
    TextRun,
)
from kbconvert.renderers.builder import DocumentTreeBuilder, is_toc_heading
from kbconvert.renderers.docx import DocxPackager

__all__ = [
    "DocumentTreeBuilder",
    "DocxPackager",
    "is_toc_heading",
    "BreakRun",
    "FormattingContext",
    "ImageRun",
    "StyledBlock",
    "StyledCell",
    "StyledCodeBlock",
    "StyledHeading",
    "StyledParagraph",
    "StyledSeparator",
    "StyledTable",
    "TextRun",
]
