#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/kbconvert/ast/nodes.py
"""Node types for parsed notes.

A note is parsed into a tree rooted at :class:`Document`. The markdown parser
produces the generic nodes; the extension transforms then add
:class:`Callout` blocks and turn ``![[...]]`` embeds into :class:`Image`
nodes. Every node accepts a visitor through ``accept``.

Node Kinds
----------
Blocks:
    - Document, Heading, Paragraph, CodeBlock, BlockQuote, Callout
    - List and ListItem; Table, TableRow and TableCell
    - ThematicBreak, HTMLBlock

Inlines:
    - Text, Emphasis, Strong, Code
    - Link, Image, LineBreak

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Any, Literal, Optional

Alignment = Literal["left", "center", "right"]


class Node(ABC):
    """Base class for all AST nodes.

    Parameters
    ----------
    metadata : dict, default = empty dict
        Arbitrary metadata associated with this node

    """

    metadata: dict[str, Any]

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        pass


# ============================================================================
# Block-level Nodes
# ============================================================================


@dataclass
class Document(Node):
    """Root document node containing all other nodes.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes in the document
    metadata : dict, default = empty dict
        Document-level metadata (title, source file, etc.)

    """

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_document``."""
        return visitor.visit_document(self)


@dataclass
class Heading(Node):
    """Heading node (h1-h6).

    The level is stored as parsed. Renderers clamp it to 1-6 and treat values
    outside that range as level 1.

    Parameters
    ----------
    level : int
        Heading level (1-6, where 1 is most important)
    content : list of Node, default = empty list
        Inline nodes representing heading text
    metadata : dict, default = empty dict
        Heading metadata

    """

    level: int
    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_heading``."""
        return visitor.visit_heading(self)


@dataclass
class Paragraph(Node):
    """Paragraph node containing inline content.

    Parameters
    ----------
    content : list of Node, default = empty list
        Inline nodes representing paragraph content
    metadata : dict, default = empty dict
        Paragraph metadata

    """

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_paragraph``."""
        return visitor.visit_paragraph(self)


@dataclass
class CodeBlock(Node):
    """Code block node with optional language specification.

    Parameters
    ----------
    content : str
        Code content (not parsed as markdown)
    language : str or None, default = None
        Declared language of the fence info string
    metadata : dict, default = empty dict
        Code block metadata

    """

    content: str
    language: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_code_block``."""
        return visitor.visit_code_block(self)


@dataclass
class BlockQuote(Node):
    """Block quote node containing other block elements.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes in the quote
    metadata : dict, default = empty dict
        Block quote metadata

    """

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_block_quote``."""
        return visitor.visit_block_quote(self)


@dataclass
class List(Node):
    """List node (ordered or unordered).

    Parameters
    ----------
    ordered : bool
        True for ordered lists, False for unordered
    items : list of ListItem, default = empty list
        List items
    start : int, default = 1
        Starting number written in the source (informational only)
    metadata : dict, default = empty dict
        List metadata

    """

    ordered: bool
    items: list[ListItem] = field(default_factory=list)
    start: int = 1
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_list``."""
        return visitor.visit_list(self)


@dataclass
class ListItem(Node):
    """List item node containing block content.

    Represents a single item in a list, which can contain paragraphs,
    nested lists, or other block elements.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes in the list item
    metadata : dict, default = empty dict
        List item metadata

    """

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_list_item``."""
        return visitor.visit_list_item(self)


@dataclass
class Table(Node):
    """Table node with optional header.

    Parameters
    ----------
    rows : list of TableRow, default = empty list
        Table rows (excluding header)
    header : TableRow or None, default = None
        Optional header row
    alignments : list, default = empty list
        Column alignments ('left', 'center', 'right', or None)
    metadata : dict, default = empty dict
        Table metadata

    """

    rows: list[TableRow] = field(default_factory=list)
    header: Optional[TableRow] = None
    alignments: list[Alignment | None] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def all_rows(self) -> list[TableRow]:
        """Return the header row (if any) followed by the body rows."""
        rows: list[TableRow] = []
        if self.header is not None:
            rows.append(self.header)
        rows.extend(self.rows)
        return rows

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_table``."""
        return visitor.visit_table(self)


@dataclass
class TableRow(Node):
    """Table row node containing cells.

    Parameters
    ----------
    cells : list of TableCell, default = empty list
        Cells in this row
    is_header : bool, default = False
        Whether this is a header row
    metadata : dict, default = empty dict
        Row metadata

    """

    cells: list[TableCell] = field(default_factory=list)
    is_header: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_table_row``."""
        return visitor.visit_table_row(self)


@dataclass
class TableCell(Node):
    """Table cell node.

    Parameters
    ----------
    content : list of Node, default = empty list
        Inline content of the cell
    alignment : {'left', 'center', 'right'} or None, default = None
        Cell alignment
    metadata : dict, default = empty dict
        Cell metadata

    """

    content: list[Node] = field(default_factory=list)
    alignment: Alignment | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_table_cell``."""
        return visitor.visit_table_cell(self)


@dataclass
class ThematicBreak(Node):
    """Thematic break node (horizontal rule)."""

    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_thematic_break``."""
        return visitor.visit_thematic_break(self)


@dataclass
class HTMLBlock(Node):
    """Raw HTML block node.

    Kept in the tree so that round-trips do not lose content; the DOCX builder
    has no mapping for it and skips it.

    Parameters
    ----------
    content : str
        Raw HTML content

    """

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_html_block``."""
        return visitor.visit_html_block(self)


@dataclass
class Callout(Node):
    """Admonition block with a type tag, optional title and paragraphs.

    Produced by the callout extension from block quotes whose first line reads
    ``[!type] Title``. Callouts only ever appear in block position.

    Parameters
    ----------
    callout_type : str
        Lower-cased free-form tag (note, tip, warning, or anything else)
    title : str or None, default = None
        Text following the marker on the first line, if any
    children : list of Paragraph, default = empty list
        Content paragraphs of the callout
    metadata : dict, default = empty dict
        Callout metadata

    """

    callout_type: str
    title: Optional[str] = None
    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_callout``."""
        return visitor.visit_callout(self)


# ============================================================================
# Inline Nodes
# ============================================================================


@dataclass
class Text(Node):
    """Plain text node.

    Parameters
    ----------
    content : str
        Text content

    """

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_text``."""
        return visitor.visit_text(self)


@dataclass
class Emphasis(Node):
    """Emphasis (italic) node wrapping inline content."""

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_emphasis``."""
        return visitor.visit_emphasis(self)


@dataclass
class Strong(Node):
    """Strong (bold) node wrapping inline content."""

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_strong``."""
        return visitor.visit_strong(self)


@dataclass
class Code(Node):
    """Inline code span.

    Parameters
    ----------
    content : str
        Code text

    """

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_code``."""
        return visitor.visit_code(self)


@dataclass
class Link(Node):
    """Hyperlink node.

    Parameters
    ----------
    url : str
        Link target
    content : list of Node, default = empty list
        Inline nodes forming the link text
    title : str or None, default = None
        Optional link title

    """

    url: str
    content: list[Node] = field(default_factory=list)
    title: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_link``."""
        return visitor.visit_link(self)


@dataclass
class Image(Node):
    """Image node.

    Parameters
    ----------
    url : str
        Image source (a filename for vault embeds, a path or URL otherwise)
    alt_text : str, default = ""
        Alternative text
    title : str or None, default = None
        Optional title
    width : int or None, default = None
        Requested display width in pixels (from ``![[file|400]]`` embeds)

    """

    url: str
    alt_text: str = ""
    title: Optional[str] = None
    width: Optional[int] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_image``."""
        return visitor.visit_image(self)


@dataclass
class LineBreak(Node):
    """Hard line break inside a paragraph."""

    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_line_break``."""
        return visitor.visit_line_break(self)


def get_node_children(node: Node) -> list[Node]:
    """Get all child nodes from a node.

    Parameters
    ----------
    node : Node
        The node to get children from

    Returns
    -------
    list of Node
        List of child nodes (empty list if node has no children)

    Examples
    --------
    >>> heading = Heading(level=1, content=[Text("Hello"), Strong(content=[Text("world")])])
    >>> len(get_node_children(heading))
    2

    """
    if isinstance(node, (Document, BlockQuote, ListItem, Callout)):
        return list(node.children)

    if isinstance(node, (Heading, Paragraph, Emphasis, Strong, Link, TableCell)):
        return list(node.content)

    if isinstance(node, List):
        return list(node.items)

    if isinstance(node, Table):
        return list(node.all_rows())

    if isinstance(node, TableRow):
        return list(node.cells)

    # Leaf nodes (no children)
    return []


def replace_node_children(node: Node, new_children: list[Node]) -> Node:
    """Create a copy of a node with replaced children.

    Parameters
    ----------
    node : Node
        The node to copy and modify
    new_children : list of Node
        New children to use in the copy

    Returns
    -------
    Node
        New node with replaced children

    Raises
    ------
    ValueError
        If a Table receives children that are not TableRow instances

    Notes
    -----
    For Table nodes the first TableRow with ``is_header=True`` becomes the
    header; every other row becomes a body row.

    """
    if isinstance(node, (Document, BlockQuote, ListItem, Callout)):
        return replace(node, children=new_children)

    if isinstance(node, (Heading, Paragraph, Emphasis, Strong, Link, TableCell)):
        return replace(node, content=new_children)

    if isinstance(node, List):
        return replace(node, items=new_children)  # type: ignore[arg-type]

    if isinstance(node, Table):
        header_row: TableRow | None = None
        body_rows: list[TableRow] = []

        for child in new_children:
            if not isinstance(child, TableRow):
                raise ValueError(f"Table children must be TableRow instances, got {type(child).__name__}.")
            if child.is_header and header_row is None:
                header_row = child
            else:
                body_rows.append(child)

        return replace(node, header=header_row, rows=body_rows)

    if isinstance(node, TableRow):
        return replace(node, cells=new_children)  # type: ignore[arg-type]

    # Leaf nodes - return as-is
    return node
