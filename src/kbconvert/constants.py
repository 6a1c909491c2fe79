#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values used throughout kbconvert.

Colors are hex strings without a leading ``#``. Indents and spacing are in
twips (1/20 pt), font sizes in points, border weights in eighths of a point
unless a name says otherwise.
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Markdown parsing
# =============================================================================

WikiLinkMode = Literal["keep", "remove", "text"]
DEFAULT_WIKI_LINK_MODE: WikiLinkMode = "remove"

# =============================================================================
# Document defaults (company template)
# =============================================================================

DEFAULT_BODY_FONT = "Tenorite"
DEFAULT_BODY_FONT_SIZE = 11
DEFAULT_BODY_COLOR = "000000"
DEFAULT_HEADING_COLOR = "4F81BD"
DEFAULT_HEADING_FONT_SIZES: dict[int, int] = {1: 16, 2: 14, 3: 12, 4: 12, 5: 12, 6: 12}
DEFAULT_HEADING_SPACING_BEFORE: dict[int, int] = {1: 480, 2: 200, 3: 200, 4: 200, 5: 200, 6: 200}
DEFAULT_HEADING_SPACING_AFTER = 120

DEFAULT_LIST_BASE_INDENT = 720
DEFAULT_LIST_LEVEL_INDENT = 360
DEFAULT_LIST_HANGING_INDENT = 360
DEFAULT_LIST_SPACING_AFTER = 120
BULLET_MARKER = "• "

DEFAULT_IMAGE_WIDTH = 400
DEFAULT_IMAGE_HEIGHT = 300

SEPARATOR_BORDER_SIZE = 6
SEPARATOR_BORDER_COLOR = "000000"
SEPARATOR_SPACING = 200

# =============================================================================
# Styles
# =============================================================================

DEFAULT_CALLOUT_BACKGROUND = "E8F4FD"
DEFAULT_CALLOUT_BORDER = "4A90E2"
DEFAULT_CALLOUT_LEFT_BORDER_WEIGHT = 12

# (background, border, left border weight in half-points)
DEFAULT_CALLOUT_STYLES: dict[str, tuple[str, str, int]] = {
    "note": ("E8F4FD", "4A90E2", 12),
    "tip": ("E8F5E9", "4CAF50", 12),
    "warning": ("FFF3E0", "FF9800", 12),
    "danger": ("FFEBEE", "F44336", 12),
    "info": ("E1F5FE", "00BCD4", 12),
    "question": ("F3E5F5", "9C27B0", 12),
}

CALLOUT_SIDE_BORDER_SIZE = 16
CALLOUT_SPACING = 120
CALLOUT_INDENT = 240

DEFAULT_CODE_FONT = "Consolas"
DEFAULT_CODE_FONT_SIZE = 9
DEFAULT_CODE_BACKGROUND = "F5F5F5"
DEFAULT_CODE_BORDER_COLOR = "CCCCCC"
CODE_BLOCK_BORDER_SIZE = 16
CODE_BLOCK_SPACING = 120
CODE_BLOCK_INDENT = 120

DEFAULT_TABLE_HEADER_BACKGROUND = "404040"
DEFAULT_TABLE_HEADER_TEXT_COLOR = "FFFFFF"
DEFAULT_TABLE_BORDER_COLOR = "000000"
TABLE_BORDER_SIZE = 4

# =============================================================================
# Import (DOCX -> markdown)
# =============================================================================

ImageHandling = Literal["extract", "embed", "ignore"]
ImageLinkFormat = Literal["wikilink", "markdown-relative", "markdown-absolute"]
AssetsLocation = Literal["subfolder", "same", "custom"]

DEFAULT_IMAGE_HANDLING: ImageHandling = "extract"
DEFAULT_IMAGE_LINK_FORMAT: ImageLinkFormat = "wikilink"
DEFAULT_ASSETS_LOCATION: AssetsLocation = "subfolder"
DEFAULT_ASSETS_FOLDER_NAME = "_assets"
DEFAULT_CUSTOM_ASSETS_PATH = "attachments"
DEFAULT_SOURCE_CALLOUT_TYPE = "note"
DEFAULT_SOURCE_CALLOUT_TITLE = "Source Document"
DEFAULT_DOCUMENT_BASENAME = "document"

IMAGE_PLACEHOLDER_TEMPLATE = "__IMAGE_{index}__"

# Content type fragment -> file extension; anything unmatched is png
IMAGE_EXTENSIONS_BY_CONTENT_TYPE: tuple[tuple[tuple[str, ...], str], ...] = (
    (("jpeg", "jpg"), ".jpg"),
    (("gif",), ".gif"),
    (("webp",), ".webp"),
)
DEFAULT_IMAGE_EXTENSION = ".png"
DEFAULT_IMAGE_CONTENT_TYPE = "image/png"

# =============================================================================
# Cleanup
# =============================================================================

DEFAULT_CODE_BLOCK_LANGUAGE = "bash"
DEFAULT_MAX_INLINE_COMMAND_LENGTH = 80
DEFAULT_MAX_QUOTED_COMMAND_LENGTH = 60

# =============================================================================
# Configuration discovery
# =============================================================================

CONFIG_FILENAMES = [".kbconvert.toml", ".kbconvert.yaml", ".kbconvert.yml", ".kbconvert.json", "pyproject.toml"]
PYPROJECT_TOOL_SECTION = "kbconvert"
