#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for kbconvert conversions.

Each stage of the pipeline has its own frozen options dataclass. Use
``create_updated`` (or :func:`create_updated_options`) to derive a modified
copy instead of mutating an instance.
"""

from __future__ import annotations

from typing import Any

from kbconvert.options.base import CloneFrozenMixin
from kbconvert.options.cleanup import CleanupOptions
from kbconvert.options.docx import DocxRendererOptions
from kbconvert.options.importer import ImportOptions
from kbconvert.options.markdown import MarkdownParserOptions
from kbconvert.options.styles import (
    DEFAULT_CALLOUT_STYLE,
    CalloutStyle,
    CodeBlockStyle,
    StyleConfig,
    TableStyle,
)


def create_updated_options(options: Any, **kwargs: Any) -> Any:
    """Create a new options instance with updated values.

    Parameters
    ----------
    options : Any
        The original options instance (must be a frozen options dataclass)
    **kwargs
        Field names and their new values

    Returns
    -------
    Any
        A new options instance of the same type

    """
    return options.create_updated(**kwargs)


__all__ = [
    "CloneFrozenMixin",
    "CleanupOptions",
    "DocxRendererOptions",
    "ImportOptions",
    "MarkdownParserOptions",
    "StyleConfig",
    "CalloutStyle",
    "CodeBlockStyle",
    "TableStyle",
    "DEFAULT_CALLOUT_STYLE",
    "create_updated_options",
]
