#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for markdown parsing and note-syntax extensions."""

from __future__ import annotations

from dataclasses import dataclass, field

from kbconvert.constants import DEFAULT_WIKI_LINK_MODE, WikiLinkMode
from kbconvert.options.base import CloneFrozenMixin

_WIKI_LINK_MODES = ("keep", "remove", "text")


@dataclass(frozen=True)
class MarkdownParserOptions(CloneFrozenMixin):
    """Configuration options for markdown-to-AST parsing.

    Parameters
    ----------
    wiki_link_mode : {"keep", "remove", "text"}, default "remove"
        How ``[[target]]`` / ``[[target|alias]]`` cross-references are handled:
        - "keep": leave the text untouched
        - "remove": delete the link span
        - "text": replace the span with the alias, or the target if no alias
    parse_callouts : bool, default True
        Turn ``> [!type] Title`` block quotes into Callout nodes.
    parse_image_embeds : bool, default True
        Turn ``![[file.png]]`` and ``![[file.png|400]]`` embeds into Image nodes.
    parse_tables : bool, default True
        Enable pipe-table parsing.

    """

    wiki_link_mode: WikiLinkMode = field(
        default=DEFAULT_WIKI_LINK_MODE,
        metadata={"help": "Cross-reference link handling: keep, remove, or text", "choices": list(_WIKI_LINK_MODES)},
    )
    parse_callouts: bool = field(default=True, metadata={"help": "Convert [!type] block quotes to callouts"})
    parse_image_embeds: bool = field(default=True, metadata={"help": "Convert ![[file]] embeds to images"})
    parse_tables: bool = field(default=True, metadata={"help": "Parse pipe tables"})

    def __post_init__(self) -> None:
        """Validate the wiki-link mode."""
        if self.wiki_link_mode not in _WIKI_LINK_MODES:
            raise ValueError(f"wiki_link_mode must be one of {_WIKI_LINK_MODES}, got {self.wiki_link_mode!r}")
