#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Style configuration for callouts, code blocks and tables.

The builder looks these up at render time. Callout types are free-form, so
``StyleConfig.callout_style_for`` falls back to one fixed default style for
any type it does not know.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from kbconvert.constants import (
    DEFAULT_CALLOUT_BACKGROUND,
    DEFAULT_CALLOUT_BORDER,
    DEFAULT_CALLOUT_LEFT_BORDER_WEIGHT,
    DEFAULT_CALLOUT_STYLES,
    DEFAULT_CODE_BACKGROUND,
    DEFAULT_CODE_BORDER_COLOR,
    DEFAULT_CODE_FONT,
    DEFAULT_CODE_FONT_SIZE,
    DEFAULT_TABLE_BORDER_COLOR,
    DEFAULT_TABLE_HEADER_BACKGROUND,
    DEFAULT_TABLE_HEADER_TEXT_COLOR,
)
from kbconvert.options.base import CloneFrozenMixin

_HEX_COLOR = re.compile(r"^[0-9A-Fa-f]{6}$")


def _check_color(name: str, value: str) -> None:
    if not _HEX_COLOR.match(value):
        raise ValueError(f"{name} must be a 6-digit hex color without '#', got {value!r}")


@dataclass(frozen=True)
class CalloutStyle(CloneFrozenMixin):
    """Box style for one callout type.

    Parameters
    ----------
    background : str
        Shading color of every callout line
    border : str
        Border color on all four sides
    left_border_weight : int
        Left border weight in half-points (the other sides are thinner)

    """

    background: str = field(default=DEFAULT_CALLOUT_BACKGROUND, metadata={"help": "Callout background color"})
    border: str = field(default=DEFAULT_CALLOUT_BORDER, metadata={"help": "Callout border color"})
    left_border_weight: int = field(
        default=DEFAULT_CALLOUT_LEFT_BORDER_WEIGHT,
        metadata={"help": "Left border weight in half-points", "type": int},
    )

    def __post_init__(self) -> None:
        """Validate colors and border weight."""
        _check_color("background", self.background)
        _check_color("border", self.border)
        if self.left_border_weight <= 0:
            raise ValueError(f"left_border_weight must be positive, got {self.left_border_weight}")


DEFAULT_CALLOUT_STYLE = CalloutStyle()


def _default_callout_styles() -> dict[str, CalloutStyle]:
    return {
        name: CalloutStyle(background=background, border=border, left_border_weight=weight)
        for name, (background, border, weight) in DEFAULT_CALLOUT_STYLES.items()
    }


@dataclass(frozen=True)
class CodeBlockStyle(CloneFrozenMixin):
    """Style applied to fenced code blocks and inline code spans."""

    font: str = field(default=DEFAULT_CODE_FONT, metadata={"help": "Monospace font name"})
    size: int = field(default=DEFAULT_CODE_FONT_SIZE, metadata={"help": "Font size in points", "type": int})
    background: str = field(default=DEFAULT_CODE_BACKGROUND, metadata={"help": "Background shading color"})
    border_color: str = field(default=DEFAULT_CODE_BORDER_COLOR, metadata={"help": "Border color"})

    def __post_init__(self) -> None:
        """Validate colors and font size."""
        _check_color("background", self.background)
        _check_color("border_color", self.border_color)
        if self.size <= 0:
            raise ValueError(f"size must be positive, got {self.size}")


@dataclass(frozen=True)
class TableStyle(CloneFrozenMixin):
    """Style applied to tables: header shading and a uniform cell border."""

    header_background: str = field(
        default=DEFAULT_TABLE_HEADER_BACKGROUND, metadata={"help": "Header row background color"}
    )
    header_text_color: str = field(default=DEFAULT_TABLE_HEADER_TEXT_COLOR, metadata={"help": "Header text color"})
    border_color: str = field(default=DEFAULT_TABLE_BORDER_COLOR, metadata={"help": "Cell border color"})

    def __post_init__(self) -> None:
        """Validate colors."""
        _check_color("header_background", self.header_background)
        _check_color("header_text_color", self.header_text_color)
        _check_color("border_color", self.border_color)


@dataclass(frozen=True)
class StyleConfig(CloneFrozenMixin):
    """Complete style configuration consumed by the document tree builder.

    Parameters
    ----------
    callout_styles : dict[str, CalloutStyle]
        Style per lower-case callout type
    code_block_style : CodeBlockStyle
        Style for code blocks and inline code
    table_style : TableStyle
        Style for tables

    Examples
    --------
    >>> config = StyleConfig()
    >>> config.callout_style_for("tip").border
    '4CAF50'
    >>> config.callout_style_for("made-up") == DEFAULT_CALLOUT_STYLE
    True

    """

    callout_styles: dict[str, CalloutStyle] = field(
        default_factory=_default_callout_styles,
        metadata={"help": "Callout styles keyed by callout type"},
    )
    code_block_style: CodeBlockStyle = field(default_factory=CodeBlockStyle, metadata={"help": "Code block style"})
    table_style: TableStyle = field(default_factory=TableStyle, metadata={"help": "Table style"})

    def callout_style_for(self, callout_type: str) -> CalloutStyle:
        """Return the style for ``callout_type``, or the default style if unknown."""
        return self.callout_styles.get(callout_type.lower(), DEFAULT_CALLOUT_STYLE)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StyleConfig:
        """Build a style config from nested mappings (as found in config files).

        Callout entries are merged over the defaults, so a config only needs
        to list the types it changes or adds.

        """
        unknown = set(data) - cls.field_names()
        if unknown:
            raise ValueError(f"Unknown option(s) for {cls.__name__}: {', '.join(sorted(unknown))}")

        callouts = _default_callout_styles()
        for name, values in (data.get("callout_styles") or {}).items():
            callouts[str(name).lower()] = CalloutStyle.from_dict(values)

        kwargs: dict[str, Any] = {"callout_styles": callouts}
        if "code_block_style" in data:
            kwargs["code_block_style"] = CodeBlockStyle.from_dict(data["code_block_style"])
        if "table_style" in data:
            kwargs["table_style"] = TableStyle.from_dict(data["table_style"])
        return cls(**kwargs)
