#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/kbconvert/cleanup/__init__.py
"""Heuristic cleanup of markdown recovered from HTML.

:func:`cleanup_converted_text` runs the passes in a fixed order:

1. table repair (:mod:`kbconvert.cleanup.tables`)
2. command detection (:mod:`kbconvert.cleanup.commands`)
3. trailing-whitespace trim and blank-line collapse

and finally strips the text so it ends with exactly one newline. None of the
passes raise on odd input; each resolves ambiguity with a fixed rule.

"""

from __future__ import annotations

import logging
import re

from kbconvert.cleanup.commands import (
    CLI_COMMANDS,
    CommandFormatStats,
    format_commands,
    format_inline_commands,
    looks_like_command,
    should_be_code_block,
)
from kbconvert.cleanup.tables import TableRepairContext, repair_tables
from kbconvert.options.cleanup import CleanupOptions

logger = logging.getLogger(__name__)

_BLANK_RUN_PATTERN = re.compile(r"\n{3,}")


def collapse_blank_lines(text: str) -> str:
    """Trim trailing whitespace on each line, then reduce blank-line runs to one.

    Running it twice gives the same result as running it once.

    >>> collapse_blank_lines("a  \\n\\n \\n\\nb")
    'a\\n\\nb'

    """
    trimmed = "\n".join(line.rstrip() for line in text.split("\n"))
    return _BLANK_RUN_PATTERN.sub("\n\n", trimmed)


def cleanup_converted_text(raw_text: str, options: CleanupOptions | None = None) -> str:
    """Repair and tidy markdown produced by HTML-to-text conversion.

    Parameters
    ----------
    raw_text : str
        Output of the HTML-to-text step
    options : CleanupOptions, optional
        Selects the passes to run and their limits

    Returns
    -------
    str
        Cleaned text ending in a single newline

    Examples
    --------
        >>> cleanup_converted_text("Run this:\\n\\n\\n\\ngit status\\n")
        'Run this:\\n\\n`git status`\\n'

    """
    options = options or CleanupOptions()
    text = raw_text.replace("\r\n", "\n").replace("\r", "\n")

    if options.repair_tables:
        text = repair_tables(text)

    if options.detect_commands:
        stats = CommandFormatStats()
        text = format_commands(
            text,
            format_inline=options.format_inline_commands,
            language=options.code_block_language,
            max_inline_length=options.max_inline_command_length,
            max_quoted_length=options.max_quoted_command_length,
            stats=stats,
        )
        logger.debug(
            "Command formatting: %d inline, %d fenced, %d inline mention line(s)",
            stats.inline,
            stats.fenced,
            stats.inline_mentions,
        )

    if options.collapse_blank_lines:
        text = collapse_blank_lines(text)

    return text.strip() + "\n"


__all__ = [
    "cleanup_converted_text",
    "collapse_blank_lines",
    "repair_tables",
    "format_commands",
    "format_inline_commands",
    "looks_like_command",
    "should_be_code_block",
    "CLI_COMMANDS",
    "CommandFormatStats",
    "TableRepairContext",
]
