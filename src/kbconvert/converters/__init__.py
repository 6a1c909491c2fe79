#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/kbconvert/converters/__init__.py
"""DOCX import: unpacking to HTML, HTML to markdown, and the full pipeline."""

from kbconvert.converters.docx2html import DocxToHtmlConverter, detect_list_level, docx_to_html
from kbconvert.converters.docx2markdown import (
    ConversionResult,
    ConvertedImage,
    compute_assets_folder,
    create_source_callout,
    docx_to_markdown,
    extract_and_name_images,
    finalize_markdown,
    format_image_link,
    image_extension,
    save_conversion_result,
)
from kbconvert.converters.html2text import NoteMarkdownConverter, html_to_text

__all__ = [
    "ConversionResult",
    "ConvertedImage",
    "DocxToHtmlConverter",
    "NoteMarkdownConverter",
    "compute_assets_folder",
    "create_source_callout",
    "detect_list_level",
    "docx_to_html",
    "docx_to_markdown",
    "extract_and_name_images",
    "finalize_markdown",
    "format_image_link",
    "html_to_text",
    "image_extension",
    "save_conversion_result",
]
