#  Copyright (c) 2025 Tom Villani, Ph.D.
"""High-level conversion functions.

Write direction
---------------
- :func:`parse_markdown` -- markdown note text to an extended AST
- :func:`build_document` / :func:`build_document_async` -- extended AST to DOCX bytes
- :func:`markdown_to_docx` -- both of the above in one call

Read direction
--------------
- :func:`docx_to_markdown` -- DOCX bytes to cleaned markdown plus images
- :func:`cleanup_converted_text` -- the heuristic cleanup passes on their own
- :func:`extract_and_name_images` -- image naming used by the import

Examples
--------
    >>> from kbconvert import markdown_to_docx, VaultImageResolver
    >>> data = markdown_to_docx("# Notes\\n\\n![[diagram.png]]", image_resolver=VaultImageResolver("~/vault"))

"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Union

from kbconvert.ast import Document
from kbconvert.cleanup import cleanup_converted_text
from kbconvert.converters.docx2markdown import (
    ConversionResult,
    ConvertedImage,
    docx_to_markdown,
    extract_and_name_images,
    save_conversion_result,
)
from kbconvert.exceptions import ParsingError
from kbconvert.images import ImageResolver
from kbconvert.options.docx import DocxRendererOptions
from kbconvert.options.markdown import MarkdownParserOptions
from kbconvert.options.styles import StyleConfig
from kbconvert.parsers.markdown import markdown_to_ast
from kbconvert.renderers.builder import DocumentTreeBuilder
from kbconvert.renderers.docx import DocxPackager
from kbconvert.transforms import apply_extensions

logger = logging.getLogger(__name__)


def parse_markdown(text: Union[str, bytes], options: MarkdownParserOptions | None = None) -> Document:
    """Parse note text and apply the enabled note-syntax extensions.

    Raises
    ------
    ParsingError
        If the text cannot be decoded or parsed

    """
    document = markdown_to_ast(text, options)
    return apply_extensions(document, options)


async def build_document_async(
    tree: Document,
    style_config: StyleConfig | None = None,
    image_resolver: ImageResolver | None = None,
    options: DocxRendererOptions | None = None,
) -> bytes:
    """Build DOCX bytes from an extended AST.

    Parameters
    ----------
    tree : Document
        Parsed document, extensions already applied
    style_config : StyleConfig, optional
        Callout, code block and table styles
    image_resolver : ImageResolver, optional
        Source of image bytes; images are omitted without one
    options : DocxRendererOptions, optional
        Fonts, colors, spacing and layout defaults

    Returns
    -------
    bytes
        DOCX file content

    Raises
    ------
    ParsingError
        If the tree breaks the builder's structural assumptions
    RenderingError
        If the package cannot be written

    """
    if not isinstance(tree, Document):
        raise ParsingError(f"Expected a Document root, got {type(tree).__name__}", parsing_stage="build")

    style_config = style_config or StyleConfig()
    options = options or DocxRendererOptions()

    builder = DocumentTreeBuilder(style_config=style_config, image_resolver=image_resolver, options=options)
    blocks = await builder.build(tree)

    packager = DocxPackager(options=options, code_style=style_config.code_block_style)
    return packager.pack(blocks, metadata=tree.metadata)


def build_document(
    tree: Document,
    style_config: StyleConfig | None = None,
    image_resolver: ImageResolver | None = None,
    options: DocxRendererOptions | None = None,
) -> bytes:
    """Synchronous form of :func:`build_document_async`.

    Must not be called from inside a running event loop; await
    :func:`build_document_async` there instead.
    """
    return asyncio.run(build_document_async(tree, style_config, image_resolver, options))


def markdown_to_docx(
    text: Union[str, bytes],
    options: DocxRendererOptions | None = None,
    image_resolver: ImageResolver | None = None,
    parser_options: MarkdownParserOptions | None = None,
    style_config: StyleConfig | None = None,
) -> bytes:
    """Convert note text straight to DOCX bytes."""
    tree = parse_markdown(text, parser_options)
    return build_document(tree, style_config=style_config, image_resolver=image_resolver, options=options)


def read_docx_file(path: Union[str, Path]) -> tuple[bytes, str]:
    """Return a DOCX file's bytes and the base name used for its note."""
    source = Path(path)
    return source.read_bytes(), source.stem


__all__ = [
    "ConversionResult",
    "ConvertedImage",
    "build_document",
    "build_document_async",
    "cleanup_converted_text",
    "docx_to_markdown",
    "extract_and_name_images",
    "markdown_to_docx",
    "parse_markdown",
    "read_docx_file",
    "save_conversion_result",
]
