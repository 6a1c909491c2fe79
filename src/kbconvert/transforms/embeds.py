#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/kbconvert/transforms/embeds.py
"""Image embeds: ``![[file.png]]`` and ``![[file.png|400]]``."""

from __future__ import annotations

import re

from kbconvert.ast import Image, Node, Text
from kbconvert.ast.transforms import NodeTransformer, TransformResult

EMBED_PATTERN = re.compile(r"!\[\[([^\]|]+)(?:\|(\d+))?\]\]")


def find_image_embeds(text: str) -> list[tuple[str, int | None]]:
    """Return ``(filename, width)`` for every embed in ``text``, in order.

    >>> find_image_embeds("a ![[x.png|200]] b ![[y.jpg]]")
    [('x.png', 200), ('y.jpg', None)]

    """
    return [
        (match.group(1).strip(), int(match.group(2)) if match.group(2) else None)
        for match in EMBED_PATTERN.finditer(text)
    ]


class ImageEmbedTransform(NodeTransformer):
    """Split Text nodes around image embeds, turning each embed into an Image.

    The optional number after ``|`` is the display width in pixels and is
    stored on ``Image.width``.
    """

    def visit_text(self, node: Text) -> TransformResult:
        """Replace embed spans with Image nodes."""
        text = node.content
        pieces: list[Node] = []
        last_index = 0

        for match in EMBED_PATTERN.finditer(text):
            if match.start() > last_index:
                pieces.append(Text(content=text[last_index : match.start()], metadata=node.metadata.copy()))
            filename = match.group(1).strip()
            width = int(match.group(2)) if match.group(2) else None
            pieces.append(Image(url=filename, alt_text=filename, width=width))
            last_index = match.end()

        if not pieces:
            return super().visit_text(node)

        if last_index < len(text):
            pieces.append(Text(content=text[last_index:], metadata=node.metadata.copy()))
        return pieces
