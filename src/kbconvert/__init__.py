"""kbconvert - convert markdown notes to styled Word documents and back.

Notes written with callouts (``> [!tip] Title``), ``[[cross-reference]]``
links and ``![[image]]`` embeds are exported to DOCX with a consistent house
style. In the other direction Word documents are imported as notes: images
are extracted and renamed, and the recovered text is cleaned up (split table
rows are rejoined, shell commands are set as code).

Examples
--------
Export a note:

    >>> from kbconvert import markdown_to_docx, VaultImageResolver
    >>> data = markdown_to_docx(open("note.md").read(), image_resolver=VaultImageResolver("~/notes"))

Import a document:

    >>> from kbconvert import docx_to_markdown
    >>> result = docx_to_markdown(open("report.docx", "rb").read(), base_name="report")
    >>> [image.filename for image in result.images]
    ['report-image-01.png']

See Also
--------
kbconvert.cleanup : the heuristic cleanup passes
kbconvert.renderers : styled block model and DOCX packager

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

__version__ = "0.3.0"

from kbconvert.api import (
    build_document,
    build_document_async,
    cleanup_converted_text,
    docx_to_markdown,
    extract_and_name_images,
    markdown_to_docx,
    parse_markdown,
    save_conversion_result,
)
from kbconvert.converters.docx2markdown import ConversionResult, ConvertedImage
from kbconvert.exceptions import (
    ConfigError,
    HtmlConversionError,
    InvalidOptionsError,
    KbConvertError,
    ParsingError,
    RenderingError,
    UnpackingError,
    ValidationError,
)
from kbconvert.images import ImageResolutionCache, ImageResolver, ResolvedImage, VaultImageResolver
from kbconvert.options import (
    CleanupOptions,
    DocxRendererOptions,
    ImportOptions,
    MarkdownParserOptions,
    StyleConfig,
)

__all__ = [
    "__version__",
    "build_document",
    "build_document_async",
    "cleanup_converted_text",
    "docx_to_markdown",
    "extract_and_name_images",
    "markdown_to_docx",
    "parse_markdown",
    "save_conversion_result",
    "ConversionResult",
    "ConvertedImage",
    "ImageResolutionCache",
    "ImageResolver",
    "ResolvedImage",
    "VaultImageResolver",
    "CleanupOptions",
    "DocxRendererOptions",
    "ImportOptions",
    "MarkdownParserOptions",
    "StyleConfig",
    "KbConvertError",
    "ValidationError",
    "ConfigError",
    "InvalidOptionsError",
    "ParsingError",
    "RenderingError",
    "UnpackingError",
    "HtmlConversionError",
]
