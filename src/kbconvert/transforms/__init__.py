#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/kbconvert/transforms/__init__.py
"""Note-syntax extensions applied to the parsed AST.

Markdown notes carry three pieces of syntax that a plain markdown parser
leaves as text: callout block quotes, ``[[cross-reference]]`` links and
``![[image]]`` embeds. :func:`apply_extensions` runs the matching
transformers over a parsed document, in that order, according to
:class:`~kbconvert.options.MarkdownParserOptions`.

Examples
--------
    >>> from kbconvert.parsers.markdown import markdown_to_ast
    >>> doc = apply_extensions(markdown_to_ast("> [!tip] Quick tip\\n> Body"))
    >>> doc.children[0].callout_type
    'tip'

"""

from __future__ import annotations

import logging

from kbconvert.ast import Document
from kbconvert.ast.transforms import NodeTransformer
from kbconvert.exceptions import ParsingError
from kbconvert.options.markdown import MarkdownParserOptions
from kbconvert.transforms.callouts import CALLOUT_MARKER_PATTERN, CalloutTransform
from kbconvert.transforms.embeds import EMBED_PATTERN, ImageEmbedTransform, find_image_embeds
from kbconvert.transforms.wikilinks import WIKI_LINK_PATTERN, WikiLinkTransform

logger = logging.getLogger(__name__)


def build_extension_pipeline(options: MarkdownParserOptions | None = None) -> list[NodeTransformer]:
    """Return the transformers enabled by ``options``, in application order."""
    options = options or MarkdownParserOptions()
    pipeline: list[NodeTransformer] = []
    if options.parse_callouts:
        pipeline.append(CalloutTransform())
    if options.parse_image_embeds:
        pipeline.append(ImageEmbedTransform())
    if options.wiki_link_mode != "keep":
        pipeline.append(WikiLinkTransform(mode=options.wiki_link_mode))
    return pipeline


def apply_extensions(document: Document, options: MarkdownParserOptions | None = None) -> Document:
    """Apply the enabled note-syntax extensions to a parsed document.

    Parameters
    ----------
    document : Document
        Root of a parsed markdown AST
    options : MarkdownParserOptions or None
        Selects which extensions run

    Returns
    -------
    Document
        The extended tree; the input is never modified

    Raises
    ------
    ParsingError
        If ``document`` is not a Document root

    """
    if not isinstance(document, Document):
        raise ParsingError(f"Extensions require a Document root, got {type(document).__name__}")

    result: Document = document
    for transformer in build_extension_pipeline(options):
        transformed = transformer.transform(result)
        if not isinstance(transformed, Document):
            raise ParsingError(f"{type(transformer).__name__} did not return a Document")
        result = transformed
        logger.debug("Applied %s", type(transformer).__name__)

    return result


__all__ = [
    "apply_extensions",
    "build_extension_pipeline",
    "CalloutTransform",
    "ImageEmbedTransform",
    "WikiLinkTransform",
    "find_image_embeds",
    "CALLOUT_MARKER_PATTERN",
    "EMBED_PATTERN",
    "WIKI_LINK_PATTERN",
]
