#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/kbconvert/ast/utils.py
"""Helpers for reading text out of AST subtrees."""

from __future__ import annotations

from kbconvert.ast.nodes import Code, Node, Text, get_node_children


def extract_text(nodes: Node | list[Node], include_code: bool = True) -> str:
    """Flatten the text of a node or node list in document order.

    Parameters
    ----------
    nodes : Node or list of Node
        Root node(s) to flatten
    include_code : bool, default True
        Whether inline code spans contribute their text

    Returns
    -------
    str
        Concatenated text with all formatting discarded

    Examples
    --------
    >>> extract_text([Text("a "), Strong(content=[Text("b")])])
    'a b'

    """
    node_list = nodes if isinstance(nodes, list) else [nodes]
    parts: list[str] = []

    def collect(node_seq: list[Node]) -> None:
        for node in node_seq:
            if isinstance(node, Text):
                parts.append(node.content)
            elif isinstance(node, Code):
                if include_code:
                    parts.append(node.content)
            else:
                collect(get_node_children(node))

    collect(node_list)
    return "".join(parts)
