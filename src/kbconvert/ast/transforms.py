#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/kbconvert/ast/transforms.py
"""AST transformation utilities.

This module provides the base transformer used by the extension preprocessor.
A transformer walks the tree and builds a new one; each ``visit_*`` method may
return a replacement node, a list of sibling nodes, or ``None`` to drop the
node from its parent.

"""

from __future__ import annotations

import copy
from typing import Union

from kbconvert.ast.nodes import (
    BlockQuote,
    Callout,
    Code,
    CodeBlock,
    Document,
    Emphasis,
    Heading,
    HTMLBlock,
    Image,
    LineBreak,
    Link,
    List,
    ListItem,
    Node,
    Paragraph,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
    get_node_children,
    replace_node_children,
)

TransformResult = Union[Node, list[Node], None]


class NodeTransformer:
    """Base class for transforming AST nodes.

    Subclasses override ``visit_*`` methods for the node kinds they care
    about. Every other node is copied with its children transformed.

    Examples
    --------
    >>> class UppercaseTransformer(NodeTransformer):
    ...     def visit_text(self, node):
    ...         return Text(content=node.content.upper())
    >>>
    >>> new_doc = UppercaseTransformer().transform(doc)

    """

    def transform(self, node: Node) -> TransformResult:
        """Transform an AST node.

        Parameters
        ----------
        node : Node
            Node to transform

        Returns
        -------
        Node, list of Node, or None
            Transformed node, replacement siblings, or None to remove

        """
        return node.accept(self)

    def _transform_children(self, children: list[Node]) -> list[Node]:
        """Transform a list of child nodes.

        Replacement lists are spliced into place and ``None`` results are
        dropped.

        """
        result: list[Node] = []
        for child in children:
            transformed = self.transform(child)
            if transformed is None:
                continue
            if isinstance(transformed, list):
                result.extend(transformed)
            else:
                result.append(transformed)
        return result

    def _generic_transform(self, node: Node) -> Node:
        """Copy a node with its children transformed."""
        children = get_node_children(node)
        if not children:
            return copy.copy(node)
        return replace_node_children(node, self._transform_children(children))

    def visit_document(self, node: Document) -> TransformResult:
        """Transform a Document node."""
        return Document(children=self._transform_children(node.children), metadata=node.metadata.copy())

    def visit_heading(self, node: Heading) -> TransformResult:
        """Transform a Heading node."""
        return self._generic_transform(node)

    def visit_paragraph(self, node: Paragraph) -> TransformResult:
        """Transform a Paragraph node."""
        return self._generic_transform(node)

    def visit_code_block(self, node: CodeBlock) -> TransformResult:
        """Transform a CodeBlock node."""
        return CodeBlock(content=node.content, language=node.language, metadata=node.metadata.copy())

    def visit_block_quote(self, node: BlockQuote) -> TransformResult:
        """Transform a BlockQuote node."""
        return self._generic_transform(node)

    def visit_list(self, node: List) -> TransformResult:
        """Transform a List node."""
        return List(
            ordered=node.ordered,
            items=self._transform_children(node.items),  # type: ignore[arg-type]
            start=node.start,
            metadata=node.metadata.copy(),
        )

    def visit_list_item(self, node: ListItem) -> TransformResult:
        """Transform a ListItem node."""
        return self._generic_transform(node)

    def visit_table(self, node: Table) -> TransformResult:
        """Transform a Table node."""
        return Table(
            rows=self._transform_children(node.rows),  # type: ignore[arg-type]
            header=self.transform(node.header) if node.header else None,  # type: ignore[arg-type]
            alignments=node.alignments.copy(),
            metadata=node.metadata.copy(),
        )

    def visit_table_row(self, node: TableRow) -> TransformResult:
        """Transform a TableRow node."""
        return TableRow(
            cells=self._transform_children(node.cells),  # type: ignore[arg-type]
            is_header=node.is_header,
            metadata=node.metadata.copy(),
        )

    def visit_table_cell(self, node: TableCell) -> TransformResult:
        """Transform a TableCell node."""
        return self._generic_transform(node)

    def visit_thematic_break(self, node: ThematicBreak) -> TransformResult:
        """Transform a ThematicBreak node."""
        return ThematicBreak(metadata=node.metadata.copy())

    def visit_html_block(self, node: HTMLBlock) -> TransformResult:
        """Transform an HTMLBlock node."""
        return HTMLBlock(content=node.content, metadata=node.metadata.copy())

    def visit_callout(self, node: Callout) -> TransformResult:
        """Transform a Callout node."""
        return self._generic_transform(node)

    def visit_text(self, node: Text) -> TransformResult:
        """Transform a Text node."""
        return Text(content=node.content, metadata=node.metadata.copy())

    def visit_emphasis(self, node: Emphasis) -> TransformResult:
        """Transform an Emphasis node."""
        return self._generic_transform(node)

    def visit_strong(self, node: Strong) -> TransformResult:
        """Transform a Strong node."""
        return self._generic_transform(node)

    def visit_code(self, node: Code) -> TransformResult:
        """Transform a Code node."""
        return Code(content=node.content, metadata=node.metadata.copy())

    def visit_link(self, node: Link) -> TransformResult:
        """Transform a Link node."""
        return Link(
            url=node.url,
            content=self._transform_children(node.content),
            title=node.title,
            metadata=node.metadata.copy(),
        )

    def visit_image(self, node: Image) -> TransformResult:
        """Transform an Image node."""
        return Image(
            url=node.url,
            alt_text=node.alt_text,
            title=node.title,
            width=node.width,
            metadata=node.metadata.copy(),
        )

    def visit_line_break(self, node: LineBreak) -> TransformResult:
        """Transform a LineBreak node."""
        return LineBreak(metadata=node.metadata.copy())
