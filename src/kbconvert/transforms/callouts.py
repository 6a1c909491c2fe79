#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/kbconvert/transforms/callouts.py
"""Callout extraction.

Turns admonition block quotes written as::

    > [!warning] Important Notice
    > This is a warning callout.

into :class:`~kbconvert.ast.Callout` nodes. Only the first child of the
block quote is inspected; anything that does not match is left as an
ordinary quote.
"""

from __future__ import annotations

import logging
import re

from kbconvert.ast import BlockQuote, Callout, Node, Paragraph, Text
from kbconvert.ast.transforms import NodeTransformer, TransformResult

logger = logging.getLogger(__name__)

# The title is the rest of the marker line; later lines are body text
CALLOUT_MARKER_PATTERN = re.compile(r"^\[!(\w+)\][ \t]*([^\n]*)")


class CalloutTransform(NodeTransformer):
    """Replace ``> [!type] Title`` block quotes with Callout nodes.

    The callout type is lower-cased and kept free-form. Text left in the
    first paragraph after the marker line, together with the inline nodes
    that follow it, becomes the first body paragraph. Later Paragraph
    children of the quote become further body paragraphs; other children
    (lists, code, nested quotes) are dropped.

    Examples
    --------
    >>> quote = BlockQuote(children=[Paragraph(content=[Text("[!tip] Quick tip")])])
    >>> callout = CalloutTransform().transform(quote)
    >>> callout.callout_type, callout.title
    ('tip', 'Quick tip')

    """

    def visit_block_quote(self, node: BlockQuote) -> TransformResult:
        """Convert the quote to a callout when its first line carries a marker."""
        if not node.children:
            return self._generic_transform(node)

        first_child = node.children[0]
        if not isinstance(first_child, Paragraph) or not first_child.content:
            return self._generic_transform(node)

        first_inline = first_child.content[0]
        if not isinstance(first_inline, Text):
            return self._generic_transform(node)

        match = CALLOUT_MARKER_PATTERN.match(first_inline.content)
        if not match:
            return self._generic_transform(node)

        callout_type = match.group(1).lower()
        title = match.group(2).strip() or None

        content: list[Paragraph] = []

        first_body: list[Node] = []
        remaining_text = first_inline.content[match.end() :].lstrip()
        if remaining_text:
            first_body.append(Text(content=remaining_text))
        first_body.extend(first_child.content[1:])
        if first_body:
            content.append(Paragraph(content=first_body))

        dropped = 0
        for child in node.children[1:]:
            if isinstance(child, Paragraph):
                content.append(child)
            else:
                dropped += 1

        if dropped:
            logger.debug("Dropped %d non-paragraph block(s) from %r callout", dropped, callout_type)

        return Callout(
            callout_type=callout_type,
            title=title,
            children=self._transform_children(content),  # type: ignore[arg-type]
            metadata=node.metadata.copy(),
        )
