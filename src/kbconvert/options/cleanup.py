#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for the post-conversion text cleanup passes."""

from dataclasses import dataclass, field

from kbconvert.constants import (
    DEFAULT_CODE_BLOCK_LANGUAGE,
    DEFAULT_MAX_INLINE_COMMAND_LENGTH,
    DEFAULT_MAX_QUOTED_COMMAND_LENGTH,
)
from kbconvert.options.base import CloneFrozenMixin


# src/kbconvert/options/cleanup.py
@dataclass(frozen=True)
class CleanupOptions(CloneFrozenMixin):
    """Configuration for the heuristic cleanup of HTML-derived markdown.

    Parameters
    ----------
    repair_tables : bool, default True
        Rejoin table rows whose cells were split across lines.
    detect_commands : bool, default True
        Wrap lines that look like shell commands in code spans or fences.
    format_inline_commands : bool, default True
        Wrap quoted commands and tool-plus-flag phrases inside prose.
    collapse_blank_lines : bool, default True
        Reduce runs of blank lines to a single blank line and trim trailing
        whitespace on every line.
    code_block_language : str, default "bash"
        Info string used on fences created for detected commands.
    max_inline_command_length : int, default 80
        Commands longer than this are emitted as fenced blocks.
    max_quoted_command_length : int, default 60
        Upper bound on quoted or tool-mention spans wrapped inside prose.

    """

    repair_tables: bool = field(default=True, metadata={"help": "Repair tables split across lines"})
    detect_commands: bool = field(default=True, metadata={"help": "Format command-line snippets as code"})
    format_inline_commands: bool = field(default=True, metadata={"help": "Wrap commands mentioned in prose"})
    collapse_blank_lines: bool = field(default=True, metadata={"help": "Collapse runs of blank lines"})
    code_block_language: str = field(
        default=DEFAULT_CODE_BLOCK_LANGUAGE, metadata={"help": "Language tag for generated code fences"}
    )
    max_inline_command_length: int = field(
        default=DEFAULT_MAX_INLINE_COMMAND_LENGTH,
        metadata={"help": "Longest command rendered inline", "type": int},
    )
    max_quoted_command_length: int = field(
        default=DEFAULT_MAX_QUOTED_COMMAND_LENGTH,
        metadata={"help": "Longest quoted command wrapped inside prose", "type": int},
    )

    def __post_init__(self) -> None:
        """Validate length limits."""
        if self.max_inline_command_length <= 0:
            raise ValueError(f"max_inline_command_length must be positive, got {self.max_inline_command_length}")
        if self.max_quoted_command_length <= 0:
            raise ValueError(f"max_quoted_command_length must be positive, got {self.max_quoted_command_length}")
