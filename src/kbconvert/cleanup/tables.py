#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/kbconvert/cleanup/tables.py
"""Repair pipe tables whose cells were split across lines.

HTML-to-text conversion of Word tables sometimes emits each cell's content on
its own line between bare ``|`` lines::

    |
    Name
    |
    |---|---|
    |
    Alice
    |

:func:`repair_tables` walks the text once, buffering such fragments and
rebuilding them into proper rows once the separator line reveals the column
count. Ambiguous input always falls back to a fixed rule; it never raises.

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)

_SEPARATOR_PATTERN = re.compile(r"^\|[\s|:-]*\|$")
_BLOCK_START_PATTERN = re.compile(r"^(#{1,6}\s|[-*+]\s|\d+[.)]\s)")
_FENCE_PATTERN = re.compile(r"^(```|~~~)")


class TableState(Enum):
    OUTSIDE = "outside-table"
    INSIDE = "inside-table"


@dataclass
class TableRepairContext:
    """Mutable state for one :func:`repair_tables` run.

    ``pending`` holds pipe-led lines seen outside a table that may turn out to
    be a split header row; ``fragments`` holds cell pieces of the current row
    inside a table.
    """

    state: TableState = TableState.OUTSIDE
    columns: int = 0
    pending: list[str] = field(default_factory=list)
    fragments: list[str] = field(default_factory=list)
    output: list[str] = field(default_factory=list)
    rows_repaired: int = 0
    in_fence: bool = False


def is_separator_row(line: str) -> bool:
    """Return True for a pipe-table separator such as ``|---|:---:|``."""
    stripped = line.strip()
    return bool(_SEPARATOR_PATTERN.match(stripped)) and "-" in stripped


def is_table_row(line: str) -> bool:
    """Return True for a well-formed row: bounded by pipes with at least one inner pipe."""
    stripped = line.strip()
    return stripped.startswith("|") and stripped.endswith("|") and stripped.count("|") > 2


def column_count(separator: str) -> int:
    """Number of columns declared by a separator row."""
    return separator.strip().count("|") - 1


def split_fragments(lines: list[str]) -> list[str]:
    """Break buffered lines into non-empty cell texts."""
    cells: list[str] = []
    for line in lines:
        for piece in line.strip().strip("|").split("|"):
            piece = piece.strip()
            if piece:
                cells.append(piece)
    return cells


def build_row(cells: list[str], columns: int) -> str:
    """Join ``cells`` into a row padded or truncated to ``columns`` cells.

    >>> build_row(["Name"], 2)
    '| Name |  |'

    """
    if columns > 0:
        cells = (cells + [""] * columns)[:columns]
    return "| " + " | ".join(cells) + " |"


def _flush_pending(ctx: TableRepairContext, columns: int | None = None) -> None:
    """Emit the pending lines, rebuilt into a header row when ``columns`` is known."""
    if not ctx.pending:
        return
    if columns is None or (len(ctx.pending) == 1 and is_table_row(ctx.pending[0])):
        ctx.output.extend(ctx.pending)
    else:
        ctx.output.append(build_row(split_fragments(ctx.pending), columns))
        ctx.rows_repaired += 1
    ctx.pending = []


def _flush_fragments(ctx: TableRepairContext) -> None:
    if not ctx.fragments:
        return
    cells = split_fragments(ctx.fragments)
    if cells:
        ctx.output.append(build_row(cells, ctx.columns))
        ctx.rows_repaired += 1
    ctx.fragments = []


def _leave_table(ctx: TableRepairContext) -> None:
    _flush_fragments(ctx)
    ctx.state = TableState.OUTSIDE
    ctx.columns = 0


def _add_fragment(ctx: TableRepairContext, line: str) -> None:
    """Buffer ``line`` as cell content, starting a new row once the current one is full."""
    if ctx.columns > 0 and split_fragments([line]) and len(split_fragments(ctx.fragments)) >= ctx.columns:
        _flush_fragments(ctx)
    ctx.fragments.append(line)


def _process_line(ctx: TableRepairContext, line: str) -> None:
    stripped = line.strip()

    if _FENCE_PATTERN.match(stripped):
        _flush_pending(ctx)
        _leave_table(ctx)
        ctx.in_fence = not ctx.in_fence
        ctx.output.append(line)
        return
    if ctx.in_fence:
        ctx.output.append(line)
        return

    if is_separator_row(stripped):
        columns = column_count(stripped)
        if ctx.state is TableState.INSIDE:
            _flush_fragments(ctx)
        _flush_pending(ctx, columns)
        ctx.output.append(line)
        ctx.state = TableState.INSIDE
        ctx.columns = columns
        return

    if not stripped or _BLOCK_START_PATTERN.match(stripped):
        _flush_pending(ctx)
        _leave_table(ctx)
        ctx.output.append(line)
        return

    if ctx.state is TableState.INSIDE:
        if is_table_row(stripped):
            _flush_fragments(ctx)
            ctx.output.append(line)
        else:
            _add_fragment(ctx, line)
        return

    # Outside a table: pipe-led lines may be a header split across lines
    if ctx.pending or stripped.startswith("|"):
        ctx.pending.append(line)
    else:
        ctx.output.append(line)


def repair_tables(text: str, ctx: TableRepairContext | None = None) -> str:
    """Rebuild table rows that were split across several lines.

    Parameters
    ----------
    text : str
        Converted markdown text
    ctx : TableRepairContext, optional
        State object to use; pass one in to read ``rows_repaired`` afterwards

    Returns
    -------
    str
        The text with fragment lines merged into pipe-table rows

    Examples
    --------
        >>> repair_tables("|\\nName\\n|\\n|---|---|\\n|\\nAlice\\n|")
        '| Name |  |\\n|---|---|\\n| Alice |  |'

    """
    ctx = ctx if ctx is not None else TableRepairContext()
    for line in text.split("\n"):
        _process_line(ctx, line)

    _flush_pending(ctx)
    _leave_table(ctx)

    if ctx.rows_repaired:
        logger.info("Repaired %d split table row(s)", ctx.rows_repaired)
    return "\n".join(ctx.output)
