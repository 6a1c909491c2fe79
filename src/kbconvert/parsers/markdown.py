#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/kbconvert/parsers/markdown.py
"""Markdown to AST converter.

This module turns markdown notes into the kbconvert AST using the mistune
parser. mistune handles the grammar; the token walker here maps its token
dictionaries onto AST nodes. Note-specific syntax (callouts, cross-reference
links, image embeds) survives parsing as plain text and is lifted into
first-class nodes by :mod:`kbconvert.transforms`.

"""

from __future__ import annotations

import logging
from typing import Any, Union

import mistune
import yaml

from kbconvert.ast import (
    BlockQuote,
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
)
from kbconvert.exceptions import InvalidOptionsError, ParsingError
from kbconvert.options.markdown import MarkdownParserOptions

logger = logging.getLogger(__name__)


class MarkdownToAstConverter:
    r"""Convert Markdown to AST representation.

    Parameters
    ----------
    options : MarkdownParserOptions or None, default = None
        Parser configuration options

    Examples
    --------
        >>> converter = MarkdownToAstConverter()
        >>> doc = converter.parse("# Hello\\n\\nThis is **bold**.")
        >>> doc.children[0].level
        1

    """

    def __init__(self, options: MarkdownParserOptions | None = None):
        """Initialize the Markdown parser with options."""
        if options is not None and not isinstance(options, MarkdownParserOptions):
            raise InvalidOptionsError("markdown", MarkdownParserOptions, type(options))
        self.options: MarkdownParserOptions = options or MarkdownParserOptions()

    def parse(self, input_data: Union[str, bytes]) -> Document:
        """Parse Markdown input into an AST Document.

        Parameters
        ----------
        input_data : str or bytes
            Markdown text, or UTF-8 encoded markdown bytes

        Returns
        -------
        Document
            AST document node. YAML frontmatter, when present, is stripped
            from the body and stored in ``Document.metadata``.

        Raises
        ------
        ParsingError
            If the bytes cannot be decoded or mistune fails on the input

        """
        markdown_content = self._load_text_content(input_data)
        markdown_content, frontmatter = self._extract_frontmatter(markdown_content)

        plugins = []
        if self.options.parse_tables:
            plugins.append("table")

        # Tokens are processed directly, no HTML renderer
        markdown = mistune.create_markdown(plugins=plugins, renderer=None)

        try:
            tokens, _state = markdown.parse(markdown_content)
        except Exception as e:
            raise ParsingError(f"Failed to parse markdown: {e}", original_error=e) from e

        children = self._process_tokens(tokens) if isinstance(tokens, list) else []
        logger.debug("Parsed markdown into %d top-level blocks", len(children))
        return Document(children=children, metadata=frontmatter)

    @staticmethod
    def _load_text_content(input_data: Union[str, bytes]) -> str:
        if isinstance(input_data, bytes):
            try:
                return input_data.decode("utf-8-sig")
            except UnicodeDecodeError as e:
                raise ParsingError("Markdown input is not valid UTF-8", original_error=e) from e
        if not isinstance(input_data, str):
            raise ParsingError(f"Expected markdown text, got {type(input_data).__name__}")
        return input_data

    @staticmethod
    def _extract_frontmatter(content: str) -> tuple[str, dict[str, Any]]:
        """Split YAML frontmatter (--- ... ---) from the body.

        Returns the content unchanged and an empty mapping when there is no
        closed frontmatter block. Frontmatter that is not a YAML mapping is
        still stripped.

        """
        if not (content.startswith("---\n") or content.startswith("---\r\n")):
            return content, {}

        lines = content.splitlines(keepends=True)
        end_index = -1
        for i in range(1, len(lines)):
            if lines[i].strip() == "---":
                end_index = i
                break

        if end_index <= 0:
            return content, {}

        yaml_content = "".join(lines[1:end_index])
        remaining_content = "".join(lines[end_index + 1 :])

        try:
            data = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            logger.debug("Ignoring unparseable frontmatter: %s", e)
            return remaining_content, {}

        return remaining_content, data if isinstance(data, dict) else {}

    def _process_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        """Process a list of mistune block tokens into AST nodes."""
        nodes: list[Node] = []

        for token in tokens:
            node = self._process_token(token)
            if node is not None:
                nodes.append(node)

        return nodes

    def _process_token(self, token: dict[str, Any]) -> Node | None:
        """Process a single mistune block token.

        Parameters
        ----------
        token : dict
            Mistune token dictionary with 'type' and other fields

        Returns
        -------
        Node or None
            Resulting AST node, or None for tokens with no AST counterpart
            (blank lines, unknown plugins)

        """
        token_type = token.get("type", "")

        if token_type == "heading":
            return self._process_heading(token)
        elif token_type in ("paragraph", "block_text"):
            # block_text is used for tight list items
            return self._process_paragraph(token)
        elif token_type == "block_code":
            return self._process_code_block(token)
        elif token_type == "block_quote":
            return BlockQuote(children=self._process_tokens(token.get("children", [])))
        elif token_type == "list":
            return self._process_list(token)
        elif token_type == "table":
            return self._process_table(token)
        elif token_type == "thematic_break":
            return ThematicBreak()
        elif token_type == "block_html":
            return HTMLBlock(content=token.get("raw", ""))

        return None

    def _process_heading(self, token: dict[str, Any]) -> Heading:
        attrs = token.get("attrs", {})
        level = attrs.get("level", 1) if isinstance(attrs, dict) else 1
        content = self._process_inline_tokens(token.get("children", []))
        return Heading(level=level, content=content)

    def _process_paragraph(self, token: dict[str, Any]) -> Paragraph:
        return Paragraph(content=self._process_inline_tokens(token.get("children", [])))

    def _process_code_block(self, token: dict[str, Any]) -> CodeBlock:
        """Process a fenced or indented code block.

        The language is the first word of the info string; the rest of the
        info string is kept in metadata.

        """
        code_content = token.get("raw", "")
        attrs = token.get("attrs", {}) or {}
        info_string = (attrs.get("info") or "").strip()

        metadata: dict[str, Any] = {}
        language = None
        if info_string:
            parts = info_string.split(maxsplit=1)
            language = parts[0]
            if len(parts) > 1:
                metadata["info_attrs"] = parts[1]

        return CodeBlock(content=code_content, language=language, metadata=metadata)

    def _process_list(self, token: dict[str, Any]) -> List:
        attrs = token.get("attrs", {})
        if not isinstance(attrs, dict):
            attrs = {}

        children = token.get("children", [])
        if not isinstance(children, list):
            children = []

        items = [
            ListItem(children=self._process_tokens(child.get("children", [])))
            for child in children
            if isinstance(child, dict)
        ]
        return List(ordered=bool(attrs.get("ordered", False)), items=items, start=attrs.get("start", 1))

    def _process_table(self, token: dict[str, Any]) -> Table:
        """Process table token.

        mistune puts header cells directly under ``table_head`` and body cells
        under ``table_body`` / ``table_row``.

        """
        header = None
        rows: list[TableRow] = []
        alignments: list[Any] = []

        for row_token in token.get("children", []):
            row_type = row_token.get("type", "")
            if row_type == "table_head":
                cells = self._process_table_cells(row_token.get("children", []))
                alignments = [cell.alignment for cell in cells]
                header = TableRow(cells=cells, is_header=True)
            elif row_type == "table_body":
                for body_row_token in row_token.get("children", []):
                    rows.append(TableRow(cells=self._process_table_cells(body_row_token.get("children", []))))

        return Table(header=header, rows=rows, alignments=alignments)

    def _process_table_cells(self, cell_tokens: list[dict[str, Any]]) -> list[TableCell]:
        cells = []
        for cell_token in cell_tokens:
            if cell_token.get("type") != "table_cell":
                continue
            alignment = (cell_token.get("attrs") or {}).get("align")
            content = self._process_inline_tokens(cell_token.get("children", []))
            cells.append(TableCell(content=content, alignment=alignment))
        return cells

    def _process_inline_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        """Process inline tokens.

        mistune splits plain text into several ``text`` tokens around
        characters it tried to parse as markup (``[``, ``!``), and reports
        soft line breaks as separate tokens. Adjacent text and soft breaks are
        merged back into one Text node so that the extension transforms see
        whole lines.

        """
        nodes: list[Node] = []

        for token in tokens:
            node = self._process_inline_token(token)
            if node is None:
                continue
            if isinstance(node, Text) and nodes and isinstance(nodes[-1], Text):
                nodes[-1] = Text(content=nodes[-1].content + node.content)
            else:
                nodes.append(node)

        return nodes

    def _handle_text_token(self, token: dict[str, Any]) -> Text:
        return Text(content=token.get("raw", ""))

    def _handle_softbreak_token(self, token: dict[str, Any]) -> Text:
        return Text(content="\n")

    def _handle_strong_token(self, token: dict[str, Any]) -> Strong:
        return Strong(content=self._process_inline_tokens(token.get("children", [])))

    def _handle_emphasis_token(self, token: dict[str, Any]) -> Emphasis:
        return Emphasis(content=self._process_inline_tokens(token.get("children", [])))

    def _handle_codespan_token(self, token: dict[str, Any]) -> Code:
        return Code(content=token.get("raw", ""))

    def _handle_link_token(self, token: dict[str, Any]) -> Link:
        attrs = token.get("attrs", {})
        if not isinstance(attrs, dict):
            attrs = {}
        children = token.get("children", [])
        if not isinstance(children, list):
            children = []
        return Link(url=attrs.get("url", ""), content=self._process_inline_tokens(children), title=attrs.get("title"))

    def _handle_image_token(self, token: dict[str, Any]) -> Image:
        """Handle image token; alt text is carried in the children."""
        attrs = token.get("attrs", {})
        if not isinstance(attrs, dict):
            attrs = {}
        alt_parts = [
            child.get("raw", "")
            for child in token.get("children", []) or []
            if isinstance(child, dict) and child.get("type") == "text"
        ]
        return Image(url=attrs.get("url", ""), alt_text="".join(alt_parts), title=attrs.get("title"))

    def _handle_linebreak_token(self, token: dict[str, Any]) -> LineBreak:
        return LineBreak()

    def _handle_inline_html_token(self, token: dict[str, Any]) -> Text:
        """Keep inline HTML as literal text."""
        return Text(content=token.get("raw", ""))

    def _process_inline_token(self, token: dict[str, Any]) -> Node | None:
        token_type = token.get("type", "")

        handler_map: dict[str, Any] = {
            "text": self._handle_text_token,
            "softbreak": self._handle_softbreak_token,
            "strong": self._handle_strong_token,
            "emphasis": self._handle_emphasis_token,
            "codespan": self._handle_codespan_token,
            "link": self._handle_link_token,
            "image": self._handle_image_token,
            "linebreak": self._handle_linebreak_token,
            "inline_html": self._handle_inline_html_token,
        }

        handler = handler_map.get(token_type)
        if handler:
            return handler(token)
        return None


def markdown_to_ast(markdown_content: Union[str, bytes], options: MarkdownParserOptions | None = None) -> Document:
    r"""Convert a Markdown string to a generic AST (no note extensions applied).

    Parameters
    ----------
    markdown_content : str or bytes
        Markdown text to parse
    options : MarkdownParserOptions or None, default = None
        Parser configuration

    Returns
    -------
    Document
        AST document node

    Examples
    --------
    >>> doc = markdown_to_ast("# Hello\\n\\nWorld")
    >>> len(doc.children)
    2

    """
    return MarkdownToAstConverter(options).parse(markdown_content)
