#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Parsers that turn source text into the kbconvert AST."""

from kbconvert.parsers.markdown import MarkdownToAstConverter, markdown_to_ast

__all__ = ["MarkdownToAstConverter", "markdown_to_ast"]
