#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/kbconvert/renderers/builder.py
"""Document tree builder.

Walks an extended AST and produces the ordered list of styled blocks that
the packager writes out. This is the one place where document semantics are
mapped to styles: heading levels, list indentation and numbering, callout
boxes, code blocks, tables, separators, and inline formatting.

Image nodes are looked up asynchronously through an
:class:`~kbconvert.images.ImageResolutionCache`. An image that cannot be found
is left out of the output without raising.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from kbconvert.ast import (
    BlockQuote,
    Callout,
    Code,
    CodeBlock,
    Document,
    Emphasis,
    Heading,
    Image,
    LineBreak,
    Link,
    List,
    Node,
    Paragraph,
    Strong,
    Table,
    Text,
    ThematicBreak,
    extract_text,
)
from kbconvert.constants import (
    BULLET_MARKER,
    CALLOUT_INDENT,
    CALLOUT_SIDE_BORDER_SIZE,
    CALLOUT_SPACING,
    SEPARATOR_BORDER_COLOR,
    SEPARATOR_BORDER_SIZE,
    SEPARATOR_SPACING,
)
from kbconvert.exceptions import ParsingError
from kbconvert.images import (
    DOCX_PICTURE_FORMATS,
    ImageResolutionCache,
    ImageResolver,
    ResolvedImage,
    detect_image_format_from_bytes,
)
from kbconvert.options.docx import DocxRendererOptions
from kbconvert.options.styles import CalloutStyle, StyleConfig
from kbconvert.renderers.blocks import (
    BorderSpec,
    BoxStyle,
    BreakRun,
    FormattingContext,
    ImageRun,
    Indent,
    Run,
    Spacing,
    StyledBlock,
    StyledCell,
    StyledCodeBlock,
    StyledHeading,
    StyledParagraph,
    StyledSeparator,
    StyledTable,
    TextRun,
)

logger = logging.getLogger(__name__)

_TOC_EXACT_TITLES = frozenset({"toc", "contents"})


def is_toc_heading(text: str) -> bool:
    """Return True for headings that introduce a table of contents.

    Matching is case-insensitive: the text contains "table of contents" or
    is exactly "toc" or "contents". Headings that merely mention a table of
    contents also match.

    >>> is_toc_heading("Table of Contents")
    True
    >>> is_toc_heading("Contents of the box")
    False

    """
    lowered = text.strip().lower()
    return "table of contents" in lowered or lowered in _TOC_EXACT_TITLES


def capitalize_type(callout_type: str) -> str:
    """Upper-case the first character only (``"warning"`` -> ``"Warning"``)."""
    return callout_type[:1].upper() + callout_type[1:]


@dataclass
class BuildContext:
    """Mutable state for one build.

    A fresh context is created per :meth:`DocumentTreeBuilder.build` call, so
    one builder can serve several documents, including concurrently.
    """

    blocks: list[StyledBlock] = field(default_factory=list)
    skip_next_list: bool = False
    images_placed: int = 0
    images_skipped: int = 0
    toc_sections_skipped: int = 0


class DocumentTreeBuilder:
    """Build styled blocks from an extended AST.

    Parameters
    ----------
    style_config : StyleConfig or None
        Callout, code block and table styles
    image_resolver : ImageResolver or None
        Source of image bytes. A plain resolver is wrapped in an
        :class:`ImageResolutionCache`; a cache is used as given so that it can
        be shared between builds. With no resolver every image is omitted.
    options : DocxRendererOptions or None
        List layout, image defaults and the table-of-contents rule

    Examples
    --------
        >>> builder = DocumentTreeBuilder()
        >>> blocks = asyncio.run(builder.build(document))

    """

    def __init__(
        self,
        style_config: StyleConfig | None = None,
        image_resolver: ImageResolver | None = None,
        options: DocxRendererOptions | None = None,
    ):
        """Initialize the builder."""
        self.style_config = style_config or StyleConfig()
        self.options = options or DocxRendererOptions()
        if image_resolver is None or isinstance(image_resolver, ImageResolutionCache):
            self.image_cache = image_resolver
        else:
            self.image_cache = ImageResolutionCache(image_resolver)

    async def build(self, document: Document) -> list[StyledBlock]:
        """Produce the styled block sequence for ``document``.

        Raises
        ------
        ParsingError
            If the root is not a Document or a callout holds anything other
            than paragraphs

        """
        if not isinstance(document, Document):
            raise ParsingError(f"Expected a Document root, got {type(document).__name__}", parsing_stage="build")

        context = BuildContext()
        for child in document.children:
            await self._render_block(child, context)

        logger.debug(
            "Built %d blocks (%d images placed, %d skipped, %d TOC sections dropped)",
            len(context.blocks),
            context.images_placed,
            context.images_skipped,
            context.toc_sections_skipped,
        )
        return context.blocks

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    async def _render_block(self, node: Node, context: BuildContext) -> None:
        if isinstance(node, List):
            if context.skip_next_list:
                context.skip_next_list = False
                context.toc_sections_skipped += 1
                return
            await self._render_list(node, context, depth=0)
            return

        if isinstance(node, Heading):
            context.skip_next_list = False
            await self._render_heading(node, context)
        elif isinstance(node, Paragraph):
            context.skip_next_list = False
            runs = await self._render_inline(node.content, FormattingContext(), context)
            if runs:
                context.blocks.append(StyledParagraph(runs=runs))
        elif isinstance(node, CodeBlock):
            context.skip_next_list = False
            context.blocks.append(self._render_code_block(node))
        elif isinstance(node, BlockQuote):
            # Plain quotes are flattened into the surrounding flow
            context.skip_next_list = False
            for child in node.children:
                await self._render_block(child, context)
        elif isinstance(node, Table):
            context.skip_next_list = False
            table = self._render_table(node)
            if table is not None:
                context.blocks.append(table)
        elif isinstance(node, ThematicBreak):
            context.skip_next_list = False
            context.blocks.append(
                StyledSeparator(
                    border=BorderSpec(size=SEPARATOR_BORDER_SIZE, color=SEPARATOR_BORDER_COLOR),
                    spacing=Spacing(before=SEPARATOR_SPACING, after=SEPARATOR_SPACING),
                )
            )
        elif isinstance(node, Callout):
            context.skip_next_list = False
            await self._render_callout(node, context)
        else:
            logger.debug("Skipping unsupported block %s", type(node).__name__)

    async def _render_heading(self, node: Heading, context: BuildContext) -> None:
        if self.options.skip_toc and is_toc_heading(extract_text(node.content)):
            context.skip_next_list = True
            return

        level = node.level if isinstance(node.level, int) and 1 <= node.level <= 6 else 1
        runs = await self._render_inline(node.content, FormattingContext(), context)
        context.blocks.append(StyledHeading(level=level, runs=runs))

    def _render_code_block(self, node: CodeBlock) -> StyledCodeBlock:
        content = node.content[:-1] if node.content.endswith("\n") else node.content
        return StyledCodeBlock(
            lines=content.split("\n"),
            language=node.language,
            style=self.style_config.code_block_style,
        )

    def _render_table(self, node: Table) -> StyledTable | None:
        rows = node.all_rows()
        if not rows:
            return None

        styled_rows = [
            [StyledCell(text=extract_text(cell.content), is_header=row_index == 0) for cell in row.cells]
            for row_index, row in enumerate(rows)
        ]
        return StyledTable(rows=styled_rows, style=self.style_config.table_style)

    async def _render_list(self, node: List, context: BuildContext, depth: int) -> None:
        """Render list items as indented, prefixed paragraphs.

        Numbering restarts at 1 in every list, nested lists included, and
        ignores the source start number.

        """
        indent = Indent(
            left=self.options.list_base_indent + depth * self.options.list_level_indent,
            hanging=self.options.list_hanging_indent,
        )
        spacing = Spacing(after=self.options.list_spacing_after)

        for index, item in enumerate(node.items):
            marker = f"{index + 1}. " if node.ordered else BULLET_MARKER
            for child in item.children:
                if isinstance(child, Paragraph):
                    runs = await self._render_inline(child.content, FormattingContext(), context)
                    context.blocks.append(
                        StyledParagraph(runs=[TextRun(text=marker), *runs], indent=indent, spacing=spacing, kind="list")
                    )
                elif isinstance(child, List):
                    await self._render_list(child, context, depth + 1)
                else:
                    await self._render_block(child, context)

    async def _render_callout(self, node: Callout, context: BuildContext) -> None:
        style = self.style_config.callout_style_for(node.callout_type)
        box = self._callout_box(style)
        spacing = Spacing(before=CALLOUT_SPACING, after=CALLOUT_SPACING)
        indent = Indent(left=CALLOUT_INDENT, right=CALLOUT_INDENT)

        header = capitalize_type(node.callout_type) + ":"
        if node.title:
            header = f"{header} {node.title}"
        context.blocks.append(
            StyledParagraph(
                runs=[TextRun(text=header, bold=True)], indent=indent, spacing=spacing, box=box, kind="callout"
            )
        )

        for child in node.children:
            if not isinstance(child, Paragraph):
                raise ParsingError(
                    f"Callout {node.callout_type!r} may only contain paragraphs, found {type(child).__name__}",
                    parsing_stage="build",
                )
            runs = await self._render_inline(child.content, FormattingContext(), context)
            context.blocks.append(StyledParagraph(runs=runs, indent=indent, spacing=spacing, box=box, kind="callout"))

    @staticmethod
    def _callout_box(style: CalloutStyle) -> BoxStyle:
        # Weight is in half-points, border sizes in eighths
        side = BorderSpec(size=CALLOUT_SIDE_BORDER_SIZE, color=style.border)
        return BoxStyle(
            background=style.background,
            left=BorderSpec(size=style.left_border_weight * 4, color=style.border),
            top=side,
            right=side,
            bottom=side,
        )

    # ------------------------------------------------------------------
    # Inlines
    # ------------------------------------------------------------------

    async def _render_inline(
        self, nodes: list[Node], formatting: FormattingContext, context: BuildContext
    ) -> list[Run]:
        """Render inline nodes to runs, carrying bold/italic down the tree.

        Formatting applies to every leaf: text, inline code and link text.
        Link targets are dropped. Soft line breaks inside text become spaces.

        """
        runs: list[Run] = []

        for node in nodes:
            if isinstance(node, Text):
                if node.content:
                    text = node.content.replace("\n", " ")
                    runs.append(TextRun(text=text, bold=formatting.bold, italic=formatting.italic))
            elif isinstance(node, Strong):
                runs.extend(await self._render_inline(node.content, formatting.with_bold(), context))
            elif isinstance(node, Emphasis):
                runs.extend(await self._render_inline(node.content, formatting.with_italic(), context))
            elif isinstance(node, Code):
                runs.append(TextRun(text=node.content, bold=formatting.bold, italic=formatting.italic, code=True))
            elif isinstance(node, Link):
                runs.extend(await self._render_inline(node.content, formatting, context))
            elif isinstance(node, LineBreak):
                runs.append(BreakRun())
            elif isinstance(node, Image):
                image_run = await self._render_image(node, context)
                if image_run is not None:
                    runs.append(image_run)
            else:
                logger.debug("Skipping unsupported inline %s", type(node).__name__)

        return runs

    async def _render_image(self, node: Image, context: BuildContext) -> ImageRun | None:
        if self.image_cache is None or not node.url:
            context.images_skipped += 1
            return None

        image = await self.image_cache.resolve(node.url)
        if image is None:
            context.images_skipped += 1
            return None

        image_format = detect_image_format_from_bytes(image.data)
        if image_format not in DOCX_PICTURE_FORMATS:
            logger.warning("Skipping image %s: unsupported format %s", node.url, image_format or "unknown")
            context.images_skipped += 1
            return None

        width, height = self._image_size(image, node.width)
        context.images_placed += 1
        return ImageRun(data=image.data, width=width, height=height, filename=node.url)

    def _image_size(self, image: ResolvedImage, embed_width: int | None) -> tuple[int, int]:
        """Pick the display size: resolver size, then embed width, then defaults.

        A width without a height keeps the default 4:3 aspect ratio.

        """
        default_width = self.options.default_image_width
        default_height = self.options.default_image_height

        width = image.width or embed_width
        height = image.height
        if width and not height:
            height = max(1, round(width * default_height / default_width))
        if height and not width:
            width = max(1, round(height * default_width / default_height))
        return width or default_width, height or default_height
