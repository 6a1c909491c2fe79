#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/kbconvert/converters/html2text.py
"""Convert the unpacked HTML into markdown text.

A thin layer over :mod:`markdownify` configured for note-style output: ATX
headings, ``-`` bullets, fenced code, and images written as ``![[src]]``
embeds so the import pipeline can swap image placeholders for file names.

"""

from __future__ import annotations

import logging

from bs4 import BeautifulSoup
from markdownify import ATX, MarkdownConverter

from kbconvert.exceptions import HtmlConversionError

logger = logging.getLogger(__name__)


class NoteMarkdownConverter(MarkdownConverter):
    """markdownify converter emitting embed-style image links."""

    def convert_img(self, el, text, parent_tags):
        src = (el.attrs.get("src") or "").strip()
        if not src:
            return ""
        return f"![[{src}]]"


def html_to_text(html_text: str) -> str:
    """Convert an HTML fragment to markdown.

    Parameters
    ----------
    html_text : str
        HTML produced by :mod:`kbconvert.converters.docx2html`

    Returns
    -------
    str
        Markdown text; still needs :func:`kbconvert.cleanup.cleanup_converted_text`

    Raises
    ------
    HtmlConversionError
        If the HTML cannot be parsed or converted

    """
    if not html_text.strip():
        return ""

    try:
        soup = BeautifulSoup(html_text, "html.parser")
        converter = NoteMarkdownConverter(
            heading_style=ATX, bullets="-", code_language="", escape_underscores=False, strip=["script", "style"]
        )
        text = converter.convert_soup(soup)
    except Exception as e:
        raise HtmlConversionError(f"Failed to convert HTML to markdown: {e}", original_error=e) from e

    logger.debug("Converted %d characters of HTML to %d characters of markdown", len(html_text), len(text))
    return text
