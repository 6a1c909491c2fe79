#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for building and packaging DOCX documents.

``DocxRendererOptions`` carries the global style defaults handed to the
packager along with the layout constants the tree builder uses for lists and
images.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from kbconvert.constants import (
    DEFAULT_BODY_COLOR,
    DEFAULT_BODY_FONT,
    DEFAULT_BODY_FONT_SIZE,
    DEFAULT_HEADING_COLOR,
    DEFAULT_HEADING_FONT_SIZES,
    DEFAULT_HEADING_SPACING_AFTER,
    DEFAULT_HEADING_SPACING_BEFORE,
    DEFAULT_IMAGE_HEIGHT,
    DEFAULT_IMAGE_WIDTH,
    DEFAULT_LIST_BASE_INDENT,
    DEFAULT_LIST_HANGING_INDENT,
    DEFAULT_LIST_LEVEL_INDENT,
    DEFAULT_LIST_SPACING_AFTER,
)
from kbconvert.options.base import CloneFrozenMixin


# src/kbconvert/options/docx.py
@dataclass(frozen=True)
class DocxRendererOptions(CloneFrozenMixin):
    """Configuration options for rendering an AST to DOCX.

    Parameters
    ----------
    default_font : str, default "Tenorite"
        Font for body text and headings.
    default_font_size : int, default 11
        Body font size in points.
    body_color : str, default "000000"
        Body text color.
    heading_color : str, default "4F81BD"
        Color of all heading levels.
    heading_font_sizes : dict[int, int]
        Font size in points per heading level 1-6.
    heading_spacing_before : dict[int, int]
        Space before each heading level, in twips.
    heading_spacing_after : int, default 120
        Space after headings, in twips.
    list_base_indent : int, default 720
        Left indent of top-level list items, in twips.
    list_level_indent : int, default 360
        Extra left indent per nesting level, in twips.
    list_hanging_indent : int, default 360
        Hanging indent reserved for the bullet or number, in twips.
    list_spacing_after : int, default 120
        Space after each list line, in twips.
    default_image_width, default_image_height : int, default 400 x 300
        Image size in pixels when the resolver does not report one.
    skip_toc : bool, default True
        Drop table-of-contents headings and the list right after them.
    template_path : str or None, default None
        Optional .docx template whose styles seed the output document.

    """

    default_font: str = field(default=DEFAULT_BODY_FONT, metadata={"help": "Default font for body text"})
    default_font_size: int = field(
        default=DEFAULT_BODY_FONT_SIZE, metadata={"help": "Default font size in points", "type": int}
    )
    body_color: str = field(default=DEFAULT_BODY_COLOR, metadata={"help": "Body text color"})
    heading_color: str = field(default=DEFAULT_HEADING_COLOR, metadata={"help": "Heading text color"})
    heading_font_sizes: dict[int, int] = field(
        default_factory=lambda: dict(DEFAULT_HEADING_FONT_SIZES),
        metadata={"help": "Font sizes for heading levels 1-6"},
    )
    heading_spacing_before: dict[int, int] = field(
        default_factory=lambda: dict(DEFAULT_HEADING_SPACING_BEFORE),
        metadata={"help": "Space before headings per level, in twips"},
    )
    heading_spacing_after: int = field(
        default=DEFAULT_HEADING_SPACING_AFTER, metadata={"help": "Space after headings, in twips", "type": int}
    )
    list_base_indent: int = field(
        default=DEFAULT_LIST_BASE_INDENT, metadata={"help": "Top-level list indent in twips", "type": int}
    )
    list_level_indent: int = field(
        default=DEFAULT_LIST_LEVEL_INDENT, metadata={"help": "Indent per list level in twips", "type": int}
    )
    list_hanging_indent: int = field(
        default=DEFAULT_LIST_HANGING_INDENT, metadata={"help": "Hanging indent for list markers", "type": int}
    )
    list_spacing_after: int = field(
        default=DEFAULT_LIST_SPACING_AFTER, metadata={"help": "Space after list lines in twips", "type": int}
    )
    default_image_width: int = field(
        default=DEFAULT_IMAGE_WIDTH, metadata={"help": "Fallback image width in pixels", "type": int}
    )
    default_image_height: int = field(
        default=DEFAULT_IMAGE_HEIGHT, metadata={"help": "Fallback image height in pixels", "type": int}
    )
    skip_toc: bool = field(default=True, metadata={"help": "Drop table-of-contents headings and their list"})
    template_path: str | None = field(
        default=None, metadata={"help": "Path to .docx template file for styles (None = blank document)"}
    )

    def __post_init__(self) -> None:
        """Validate numeric ranges.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.default_font_size <= 0:
            raise ValueError(f"default_font_size must be positive, got {self.default_font_size}")
        if self.default_image_width <= 0 or self.default_image_height <= 0:
            raise ValueError("default image dimensions must be positive")
        for name in ("list_base_indent", "list_level_indent", "list_hanging_indent", "list_spacing_after"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative, got {getattr(self, name)}")
        for level in self.heading_font_sizes:
            if not 1 <= int(level) <= 6:
                raise ValueError(f"heading_font_sizes keys must be 1-6, got {level}")

    def heading_size(self, level: int) -> int:
        """Return the font size for a heading level, falling back to the body size."""
        return int(self.heading_font_sizes.get(level, self.default_font_size))

    def heading_space_before(self, level: int) -> int:
        """Return the spacing before a heading level in twips."""
        return int(self.heading_spacing_before.get(level, self.heading_spacing_after))
