#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/kbconvert/transforms/wikilinks.py
"""Cross-reference link handling for ``[[target]]`` and ``[[target|alias]]``."""

from __future__ import annotations

import dataclasses
import re
from typing import Optional

from kbconvert.ast import Callout, Text
from kbconvert.ast.transforms import NodeTransformer, TransformResult
from kbconvert.constants import WikiLinkMode

# Embeds (![[...]]) are left for image handling
WIKI_LINK_PATTERN = re.compile(r"(?<!!)\[\[([^\]|]+)(?:\|([^\]]+))?\]\]")


class WikiLinkTransform(NodeTransformer):
    """Remove cross-reference links or reduce them to plain text.

    Parameters
    ----------
    mode : {"keep", "remove", "text"}, default "remove"
        "keep" leaves Text nodes untouched, "remove" deletes every link span,
        "text" replaces each span with its alias (or its target when there is
        no alias).

    Notes
    -----
    Text around a link is preserved verbatim. When a node splits into several
    fragments they become sibling Text nodes in their original order; a node
    left with no text at all is removed from its parent. Callout titles are
    rewritten the same way; a title left empty becomes None.

    Examples
    --------
    >>> nodes = WikiLinkTransform(mode="text").transform(Text("See [[Page A|shown text]]."))
    >>> [node.content for node in nodes]
    ['See ', 'shown text', '.']

    """

    def __init__(self, mode: WikiLinkMode = "remove"):
        """Initialize with the link handling mode."""
        self.mode = mode

    def _split(self, text: str) -> Optional[list[str]]:
        """Return the text fragments left after rewriting, or None when nothing matched."""
        fragments: list[str] = []
        last_index = 0
        matched = False

        for match in WIKI_LINK_PATTERN.finditer(text):
            matched = True
            if match.start() > last_index:
                fragments.append(text[last_index : match.start()])
            if self.mode == "text":
                fragments.append(match.group(2) or match.group(1))
            last_index = match.end()

        if not matched:
            return None
        if last_index < len(text):
            fragments.append(text[last_index:])
        return fragments

    def visit_text(self, node: Text) -> TransformResult:
        """Rewrite link spans inside one Text node."""
        fragments = None if self.mode == "keep" else self._split(node.content)
        if fragments is None:
            return super().visit_text(node)

        if not fragments:
            return None
        if len(fragments) == 1:
            return Text(content=fragments[0], metadata=node.metadata.copy())
        return [Text(content=fragment, metadata=node.metadata.copy()) for fragment in fragments]

    def visit_callout(self, node: Callout) -> TransformResult:
        """Rewrite link spans in the callout title as well as its body."""
        result = super().visit_callout(node)
        fragments = None if self.mode == "keep" or not node.title else self._split(node.title)
        if fragments is None:
            return result
        return dataclasses.replace(result, title="".join(fragments).strip() or None)
