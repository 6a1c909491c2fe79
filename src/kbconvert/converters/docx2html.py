#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/kbconvert/converters/docx2html.py
"""Render a Word document as simple HTML.

This is the unpacking step of the import direction. Only the structure the
markdown side can express is kept: headings, paragraphs, nested lists, block
quotes, preformatted blocks, tables, hyperlinks, bold/italic/strike/code runs
and images. Images are handed to a callback that decides what goes into the
``src`` attribute; the import pipeline uses it to leave placeholders that are
swapped for real file names later.

"""

from __future__ import annotations

import html
import io
import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional

from kbconvert.constants import (
    BULLET_MARKER,
    DEFAULT_IMAGE_CONTENT_TYPE,
    DEFAULT_LIST_BASE_INDENT,
    DEFAULT_LIST_LEVEL_INDENT,
)
from kbconvert.exceptions import UnpackingError

if TYPE_CHECKING:
    import docx.document
    from docx.table import Table
    from docx.text.paragraph import Paragraph

logger = logging.getLogger(__name__)

#: Called with (image bytes, content type); returns the ``src`` to emit
ImageCallback = Callable[[bytes, str], str]

MONOSPACE_FONTS = frozenset(
    {"consolas", "courier", "courier new", "menlo", "monaco", "lucida console", "source code pro"}
)
INDENTATION_PT_PER_LEVEL = 36

_HEADING_STYLE_PATTERN = re.compile(r"^Heading\s*(\d)$", re.IGNORECASE)
_LIST_BULLET_STYLE_PATTERN = re.compile(r"List\s*Bullet\s?(?P<level>\d+)?", re.IGNORECASE)
_LIST_NUMBER_STYLE_PATTERN = re.compile(r"List\s*Number\s?(?P<level>\d+)?", re.IGNORECASE)
_NUMBER_MARKER_PATTERN = re.compile(r"^\d+[.)]\s+")
_QUOTE_STYLES = ("quote", "intense quote")
_CODE_STYLE_HINTS = ("code", "preformatted", "source")

_W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
_R_EMBED = "{http://schemas.openxmlformats.org/officeDocument/2006/relationships}embed"


@dataclass(frozen=True)
class _Segment:
    html: str
    bold: bool = False
    italic: bool = False
    strike: bool = False
    code: bool = False
    url: Optional[str] = None

    @property
    def key(self) -> tuple[bool, bool, bool, bool, Optional[str]]:
        return (self.bold, self.italic, self.strike, self.code, self.url)


def _w(name: str) -> str:
    return f"{{{_W_NS}}}{name}"


def _get_numbering_definitions(doc: "docx.document.Document") -> dict[str, dict[str, str]]:
    """Map numId -> {ilvl -> "bullet" | "number"} from the numbering part."""
    definitions: dict[str, dict[str, str]] = {}
    try:
        numbering_xml = doc.part.numbering_part.element
    except (AttributeError, KeyError, NotImplementedError):
        return definitions

    abstract_levels: dict[str, dict[str, str]] = {}
    for abstract in numbering_xml.iter(_w("abstractNum")):
        levels: dict[str, str] = {}
        for lvl in abstract.iter(_w("lvl")):
            fmt = lvl.find(_w("numFmt"))
            if fmt is not None:
                value = fmt.get(_w("val"))
                levels[lvl.get(_w("ilvl"), "0")] = "bullet" if value in ("bullet", "none") else "number"
        abstract_levels[abstract.get(_w("abstractNumId"), "")] = levels

    for num in numbering_xml.iter(_w("num")):
        abstract_id = num.find(_w("abstractNumId"))
        if abstract_id is not None and abstract_id.get(_w("val")) in abstract_levels:
            definitions[num.get(_w("numId"), "")] = abstract_levels[abstract_id.get(_w("val"))]
    return definitions


def _indent_level(paragraph: "Paragraph") -> int:
    indent = paragraph.paragraph_format.left_indent
    return int(indent.pt / INDENTATION_PT_PER_LEVEL) if indent else 0


def _typed_marker_level(paragraph: "Paragraph") -> int:
    """Depth of an indented paragraph laid out like an exported list line, or 0."""
    indent = paragraph.paragraph_format.left_indent
    if not indent or indent.twips < DEFAULT_LIST_BASE_INDENT:
        return 0
    return 1 + round((indent.twips - DEFAULT_LIST_BASE_INDENT) / DEFAULT_LIST_LEVEL_INDENT)


def detect_list_level(
    paragraph: "Paragraph", numbering: dict[str, dict[str, str]] | None = None
) -> tuple[str | None, int]:
    """Detect whether ``paragraph`` is a list item and at what depth.

    Checks, in order: Word numbering properties, the built-in "List Bullet" /
    "List Number" styles, and a leading bullet or number typed into the text
    with a left indent.

    Returns
    -------
    tuple of (str or None, int)
        ("bullet" | "number", 1-based level), or (None, 0) for ordinary paragraphs

    """
    num_pr = paragraph._p.find(f".//{_w('numPr')}")
    if num_pr is not None:
        ilvl = num_pr.find(_w("ilvl"))
        num_id = num_pr.find(_w("numId"))
        level_key = ilvl.get(_w("val"), "0") if ilvl is not None else "0"
        levels = (numbering or {}).get(num_id.get(_w("val"), "") if num_id is not None else "", {})
        list_type = levels.get(level_key) or levels.get("0")
        if list_type is None:
            list_type = "number" if _NUMBER_MARKER_PATTERN.match(paragraph.text.strip()) else "bullet"
        return list_type, int(level_key) + 1

    style_name = paragraph.style.name if paragraph.style is not None else ""
    if style_name == "List Paragraph":
        return "bullet", 1
    if match := _LIST_BULLET_STYLE_PATTERN.match(style_name):
        return "bullet", int(match.group("level") or 1) + _indent_level(paragraph)
    if match := _LIST_NUMBER_STYLE_PATTERN.match(style_name):
        return "number", int(match.group("level") or 1) + _indent_level(paragraph)

    # Markers typed into indented text
    indent_level = _typed_marker_level(paragraph)
    if indent_level > 0:
        text = paragraph.text.lstrip()
        if text.startswith(BULLET_MARKER.strip()):
            return "bullet", indent_level
        if _NUMBER_MARKER_PATTERN.match(text):
            return "number", indent_level
    return None, 0


def _strip_typed_marker(inner_html: str) -> str:
    stripped = inner_html.lstrip()
    marker = BULLET_MARKER.strip()
    if stripped.startswith(marker):
        return stripped[len(marker) :].lstrip()
    return _NUMBER_MARKER_PATTERN.sub("", stripped, count=1)


def _is_monospace(run: Any) -> bool:
    name = run.font.name
    return bool(name) and name.lower() in MONOSPACE_FONTS


def _wrap(segment_html: str, key: tuple[bool, bool, bool, bool, Optional[str]]) -> str:
    bold, italic, strike, code, url = key
    text = segment_html
    if code:
        text = f"<code>{text}</code>"
    if strike:
        text = f"<del>{text}</del>"
    if italic:
        text = f"<em>{text}</em>"
    if bold:
        text = f"<strong>{text}</strong>"
    if url:
        text = f'<a href="{html.escape(url, quote=True)}">{text}</a>'
    return text


class DocxToHtmlConverter:
    """Convert DOCX bytes into an HTML fragment.

    Parameters
    ----------
    image_callback : ImageCallback, optional
        Receives each embedded image's bytes and content type and returns the
        ``src`` to emit. Without a callback images are dropped.

    Examples
    --------
        >>> names = []
        >>> converter = DocxToHtmlConverter(lambda data, ctype: f"img-{len(names)}")
        >>> html_text = converter.convert(open("report.docx", "rb").read())

    """

    def __init__(self, image_callback: ImageCallback | None = None):
        """Initialize with an optional image callback."""
        self.image_callback = image_callback
        self._numbering: dict[str, dict[str, str]] = {}
        self.image_count = 0

    def convert(self, data: bytes) -> str:
        """Return the HTML rendering of the document in ``data``.

        Raises
        ------
        UnpackingError
            If ``data`` is not a readable DOCX package

        """
        import docx

        if not data:
            raise UnpackingError("Cannot unpack an empty document")

        try:
            doc = docx.Document(io.BytesIO(data))
        except Exception as e:
            raise UnpackingError(f"Failed to open DOCX document: {e}", original_error=e) from e

        self._numbering = _get_numbering_definitions(doc)
        self.image_count = 0
        try:
            parts = self._render_body(doc)
        except UnpackingError:
            raise
        except Exception as e:
            raise UnpackingError(f"Failed to read DOCX content: {e}", original_error=e) from e

        logger.debug("Rendered DOCX body to HTML with %d image(s)", self.image_count)
        return "\n".join(parts)

    def _render_body(self, doc: "docx.document.Document") -> list[str]:
        from docx.table import Table
        from docx.text.paragraph import Paragraph

        parts: list[str] = []
        list_stack: list[str] = []

        def close_lists(to_depth: int = 0) -> None:
            while len(list_stack) > to_depth:
                parts.append(f"</li></{list_stack.pop()}>")

        for block in doc.iter_inner_content():
            if isinstance(block, Paragraph):
                list_type, level = detect_list_level(block, self._numbering)
                if list_type is None:
                    close_lists()
                    rendered = self._render_paragraph(block)
                    if rendered:
                        parts.append(rendered)
                    continue

                tag = "ol" if list_type == "number" else "ul"
                if level > len(list_stack):
                    while len(list_stack) < level:
                        parts.append(f"<{tag}><li>")
                        list_stack.append(tag)
                else:
                    close_lists(level)
                    if list_stack and list_stack[-1] != tag:
                        close_lists(level - 1)
                        parts.append(f"<{tag}><li>")
                        list_stack.append(tag)
                    else:
                        parts.append("</li><li>")
                parts.append(_strip_typed_marker(self._render_inline(block)))
            elif isinstance(block, Table):
                close_lists()
                parts.append(self._render_table(block))

        close_lists()
        return parts

    def _render_paragraph(self, paragraph: "Paragraph") -> str:
        inner = self._render_inline(paragraph)
        if not inner.strip():
            return ""

        style_name = paragraph.style.name if paragraph.style is not None else ""
        if style_name == "Title":
            return f"<h1>{inner}</h1>"
        if match := _HEADING_STYLE_PATTERN.match(style_name):
            level = min(max(int(match.group(1)), 1), 6)
            return f"<h{level}>{inner}</h{level}>"
        if style_name.lower() in _QUOTE_STYLES:
            return f"<blockquote><p>{inner}</p></blockquote>"
        if any(hint in style_name.lower() for hint in _CODE_STYLE_HINTS) or self._is_code_paragraph(paragraph):
            return f"<pre><code>{html.escape(paragraph.text)}</code></pre>"
        return f"<p>{inner}</p>"

    def _is_code_paragraph(self, paragraph: "Paragraph") -> bool:
        """A paragraph set entirely in a monospace font reads as a code block."""
        runs = [run for run in paragraph.runs if run.text.strip()]
        return bool(runs) and all(_is_monospace(run) for run in runs)

    def _render_inline(self, paragraph: "Paragraph") -> str:
        from docx.text.hyperlink import Hyperlink

        segments: list[_Segment] = []
        for item in paragraph.iter_inner_content():
            if isinstance(item, Hyperlink):
                url = item.address or None
                for run in item.runs:
                    segments.extend(self._run_segments(run, paragraph, url))
            else:
                segments.extend(self._run_segments(item, paragraph, None))

        parts: list[str] = []
        current_key: tuple[bool, bool, bool, bool, Optional[str]] | None = None
        current: list[str] = []
        for segment in segments:
            if segment.key != current_key:
                if current and current_key is not None:
                    parts.append(_wrap("".join(current), current_key))
                current, current_key = [], segment.key
            current.append(segment.html)
        if current and current_key is not None:
            parts.append(_wrap("".join(current), current_key))
        return "".join(parts)

    def _run_segments(self, run: Any, paragraph: "Paragraph", url: Optional[str]) -> list[_Segment]:
        segments = [
            _Segment(html=self._render_image(blip_id, paragraph, pic))
            for pic, blip_id in self._run_pictures(run)
        ]
        segments = [segment for segment in segments if segment.html]

        text = run.text
        if text:
            escaped = html.escape(text).replace("\t", " ").replace("\n", "<br>")
            segments.append(
                _Segment(
                    html=escaped,
                    bold=bool(run.bold),
                    italic=bool(run.italic),
                    strike=bool(run.font.strike),
                    code=_is_monospace(run),
                    url=url,
                )
            )
        return segments

    @staticmethod
    def _run_pictures(run: Any) -> list[tuple[Any, str]]:
        pictures = []
        for pic in run._element.xpath(".//pic:pic"):
            blips = pic.xpath(".//a:blip")
            if blips and blips[0].get(_R_EMBED):
                pictures.append((pic, blips[0].get(_R_EMBED)))
        return pictures

    def _render_image(self, blip_id: str, paragraph: "Paragraph", pic: Any) -> str:
        if self.image_callback is None:
            return ""
        try:
            image_part = paragraph.part.related_parts[blip_id]
        except KeyError:
            logger.warning("Image relationship %s is missing; skipping image", blip_id)
            return ""

        content_type = getattr(image_part, "content_type", None) or DEFAULT_IMAGE_CONTENT_TYPE
        src = self.image_callback(image_part.blob, content_type)
        self.image_count += 1

        descriptions = pic.xpath(".//pic:cNvPr/@descr")
        alt = descriptions[0] if descriptions else ""
        return f'<img src="{html.escape(src, quote=True)}" alt="{html.escape(alt, quote=True)}">'

    def _render_table(self, table: "Table") -> str:
        rows: list[str] = []
        for index, row in enumerate(table.rows):
            tag = "th" if index == 0 else "td"
            cells = []
            for cell in row.cells:
                content = " ".join(
                    rendered for rendered in (self._render_inline(p) for p in cell.paragraphs) if rendered.strip()
                )
                cells.append(f"<{tag}>{content}</{tag}>")
            rows.append("<tr>" + "".join(cells) + "</tr>")
        return "<table>" + "".join(rows) + "</table>"


def docx_to_html(data: bytes, image_callback: ImageCallback | None = None) -> str:
    """Convert DOCX bytes to HTML; see :class:`DocxToHtmlConverter`."""
    return DocxToHtmlConverter(image_callback).convert(data)
