#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/kbconvert/renderers/blocks.py
"""Styled block model produced by the document tree builder.

These are plain values describing *what* the office document contains and
how each piece is styled. They know nothing about the DOCX byte format;
:mod:`kbconvert.renderers.docx` turns a sequence of them into a package.

Measurements follow the document format: indents and spacing in twips,
border sizes in eighths of a point, image sizes in pixels.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

from kbconvert.options.styles import CodeBlockStyle, TableStyle


@dataclass(frozen=True)
class FormattingContext:
    """Bold/italic state inherited down an inline tree.

    Wrappers only ever switch flags on, so nesting composes.
    """

    bold: bool = False
    italic: bool = False

    def with_bold(self) -> FormattingContext:
        return FormattingContext(bold=True, italic=self.italic)

    def with_italic(self) -> FormattingContext:
        return FormattingContext(bold=self.bold, italic=True)


@dataclass(frozen=True)
class TextRun:
    """A span of text with its formatting.

    ``code`` marks inline code, which the packager sets in the code font with
    background shading.
    """

    text: str
    bold: bool = False
    italic: bool = False
    code: bool = False


@dataclass(frozen=True)
class BreakRun:
    """An explicit line break inside a paragraph."""


@dataclass(frozen=True)
class ImageRun:
    """An inline picture with its display size in pixels."""

    data: bytes
    width: int
    height: int
    filename: str = ""


Run = Union[TextRun, BreakRun, ImageRun]


@dataclass(frozen=True)
class BorderSpec:
    """A single paragraph border edge."""

    size: int
    color: str


@dataclass(frozen=True)
class BoxStyle:
    """Shading and borders around a paragraph.

    Any edge left as None is not drawn.
    """

    background: Optional[str] = None
    top: Optional[BorderSpec] = None
    bottom: Optional[BorderSpec] = None
    left: Optional[BorderSpec] = None
    right: Optional[BorderSpec] = None


@dataclass(frozen=True)
class Indent:
    """Paragraph indentation in twips."""

    left: int = 0
    right: int = 0
    hanging: int = 0


@dataclass(frozen=True)
class Spacing:
    """Space above and below a paragraph in twips."""

    before: Optional[int] = None
    after: Optional[int] = None


@dataclass(frozen=True)
class StyledHeading:
    """A heading paragraph at level 1-6."""

    level: int
    runs: list[Run] = field(default_factory=list)


@dataclass(frozen=True)
class StyledParagraph:
    """A body, list or callout line.

    Parameters
    ----------
    runs : list of Run
        Paragraph content
    indent : Indent or None
        Left/right/hanging indentation
    spacing : Spacing or None
        Space before and after
    box : BoxStyle or None
        Shading and borders (callout lines)
    kind : str
        What produced the paragraph: "body", "list" or "callout"

    """

    runs: list[Run] = field(default_factory=list)
    indent: Optional[Indent] = None
    spacing: Optional[Spacing] = None
    box: Optional[BoxStyle] = None
    kind: str = "body"

    @property
    def text(self) -> str:
        """Concatenated text of the text runs."""
        return "".join(run.text for run in self.runs if isinstance(run, TextRun))


@dataclass(frozen=True)
class StyledCell:
    """Flattened cell text; formatting inside cells is not kept."""

    text: str
    is_header: bool = False


@dataclass(frozen=True)
class StyledTable:
    """A table whose first row is rendered as the header row."""

    rows: list[list[StyledCell]]
    style: TableStyle = field(default_factory=TableStyle)

    @property
    def column_count(self) -> int:
        return max((len(row) for row in self.rows), default=0)


@dataclass(frozen=True)
class StyledCodeBlock:
    """A boxed block of monospace lines.

    ``lines`` are rendered as separate runs joined by explicit breaks. The
    language is informational only.
    """

    lines: list[str]
    language: Optional[str] = None
    style: CodeBlockStyle = field(default_factory=CodeBlockStyle)


@dataclass(frozen=True)
class StyledSeparator:
    """An empty paragraph carrying only a bottom border."""

    border: BorderSpec
    spacing: Spacing


StyledBlock = Union[StyledHeading, StyledParagraph, StyledTable, StyledCodeBlock, StyledSeparator]
