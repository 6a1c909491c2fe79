#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Abstract Syntax Tree for markdown notes.

The AST is the hand-off point between the markdown parser, the extension
preprocessor and the DOCX tree builder.
"""

from kbconvert.ast.nodes import (
    Alignment,
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
from kbconvert.ast.transforms import NodeTransformer
from kbconvert.ast.utils import extract_text

__all__ = [
    "Alignment",
    "BlockQuote",
    "Callout",
    "Code",
    "CodeBlock",
    "Document",
    "Emphasis",
    "Heading",
    "HTMLBlock",
    "Image",
    "LineBreak",
    "Link",
    "List",
    "ListItem",
    "Node",
    "NodeTransformer",
    "Paragraph",
    "Strong",
    "Table",
    "TableCell",
    "TableRow",
    "Text",
    "ThematicBreak",
    "extract_text",
    "get_node_children",
    "replace_node_children",
]
