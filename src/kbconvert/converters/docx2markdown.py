#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/kbconvert/converters/docx2markdown.py
"""Import a Word document as a markdown note.

The import runs in four steps:

1. unpack the DOCX to HTML, collecting embedded images and leaving an
   ``__IMAGE_{n}__`` placeholder as each image's ``src``
2. convert the HTML to markdown, images becoming ``![[__IMAGE_{n}__]]``
3. swap placeholders for the final image links
4. run the heuristic cleanup passes

:func:`save_conversion_result` then writes the note and its images to disk,
rewriting image links to the configured link format and prepending an
optional source callout.

"""

from __future__ import annotations

import base64
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Union

from kbconvert.cleanup import cleanup_converted_text
from kbconvert.constants import (
    DEFAULT_DOCUMENT_BASENAME,
    DEFAULT_IMAGE_CONTENT_TYPE,
    DEFAULT_IMAGE_EXTENSION,
    IMAGE_EXTENSIONS_BY_CONTENT_TYPE,
    IMAGE_PLACEHOLDER_TEMPLATE,
)
from kbconvert.converters.docx2html import DocxToHtmlConverter
from kbconvert.converters.html2text import html_to_text
from kbconvert.options.cleanup import CleanupOptions
from kbconvert.options.importer import ImportOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConvertedImage:
    """An image pulled out of an imported document.

    Parameters
    ----------
    filename : str
        Final file name, ``{base}-image-{NN}{ext}``
    data : bytes
        Raw image bytes
    content_type : str
        MIME type reported by the document package

    """

    filename: str
    data: bytes
    content_type: str = DEFAULT_IMAGE_CONTENT_TYPE


@dataclass
class ConversionResult:
    """Markdown text plus the images it links to."""

    markdown: str
    images: list[ConvertedImage] = field(default_factory=list)
    base_name: str = DEFAULT_DOCUMENT_BASENAME


def image_extension(content_type: str | None) -> str:
    """Return the file extension (with dot) for an image content type.

    >>> image_extension("image/jpeg")
    '.jpg'
    >>> image_extension("image/x-emf")
    '.png'

    """
    lowered = (content_type or "").lower()
    for fragments, extension in IMAGE_EXTENSIONS_BY_CONTENT_TYPE:
        if any(fragment in lowered for fragment in fragments):
            return extension
    return DEFAULT_IMAGE_EXTENSION


def image_placeholder(index: int) -> str:
    return IMAGE_PLACEHOLDER_TEMPLATE.format(index=index)


def extract_and_name_images(images: Iterable[tuple[bytes, str]], base_name: str) -> list[ConvertedImage]:
    """Name a document's images in order of appearance.

    Parameters
    ----------
    images : iterable of (bytes, str)
        Image bytes and content type, in document order
    base_name : str
        Document name the image names are derived from

    Returns
    -------
    list of ConvertedImage
        Images named ``{base_name}-image-01.png``, ``-02``, ...

    """
    named = []
    for index, (data, content_type) in enumerate(images, start=1):
        content_type = content_type or DEFAULT_IMAGE_CONTENT_TYPE
        filename = f"{base_name}-image-{index:02d}{image_extension(content_type)}"
        named.append(ConvertedImage(filename=filename, data=data, content_type=content_type))
    return named


def _data_uri(image: ConvertedImage) -> str:
    return f"data:{image.content_type};base64,{base64.b64encode(image.data).decode('ascii')}"


def docx_to_markdown(
    data: bytes,
    base_name: str = DEFAULT_DOCUMENT_BASENAME,
    options: ImportOptions | None = None,
    cleanup_options: CleanupOptions | None = None,
) -> ConversionResult:
    """Convert DOCX bytes into cleaned markdown and its images.

    Parameters
    ----------
    data : bytes
        Content of a ``.docx`` file
    base_name : str, default "document"
        Name used for the note and its image files
    options : ImportOptions, optional
        Image handling; link format and assets location only matter to
        :func:`save_conversion_result`
    cleanup_options : CleanupOptions, optional
        Passes applied to the converted text

    Returns
    -------
    ConversionResult
        Markdown with ``![[filename]]`` image links (``extract``), inline
        data URI images (``embed``) or no images (``ignore``)

    Raises
    ------
    UnpackingError
        If ``data`` is not a readable DOCX package
    HtmlConversionError
        If the intermediate HTML cannot be converted

    """
    options = options or ImportOptions()
    logger.info("Starting conversion of %s (%d bytes)", base_name, len(data))

    collected: list[tuple[bytes, str]] = []

    def collect_image(image_data: bytes, content_type: str) -> str:
        collected.append((image_data, content_type))
        return image_placeholder(len(collected) - 1)

    html_text = DocxToHtmlConverter(image_callback=collect_image).convert(data)
    markdown = html_to_text(html_text)

    images = extract_and_name_images(collected, base_name)
    logger.info("Processing %d image(s)", len(images))

    embeds: dict[str, str] = {}
    for index, image in enumerate(images):
        placeholder_link = f"![[{image_placeholder(index)}]]"
        if options.image_handling == "extract":
            markdown = markdown.replace(placeholder_link, f"![[{image.filename}]]")
        elif options.image_handling == "embed":
            # Data URIs are inserted after cleanup so the heuristics never scan them
            embeds[placeholder_link] = f"![{image.filename}]({_data_uri(image)})"
        else:
            markdown = markdown.replace(placeholder_link, "")

    markdown = cleanup_converted_text(markdown, cleanup_options)

    for placeholder_link, link in embeds.items():
        markdown = markdown.replace(placeholder_link, link)

    kept = images if options.image_handling == "extract" else []
    logger.info("Conversion complete; %d characters of markdown", len(markdown))
    return ConversionResult(markdown=markdown, images=kept, base_name=base_name)


def compute_assets_folder(
    base_name: str, output_folder: Union[str, Path], options: ImportOptions | None = None
) -> Path:
    """Return the folder extracted images are written to.

    ``same`` uses the note's folder; ``custom`` uses ``custom_assets_path``
    (relative paths are taken from the output folder); ``subfolder`` uses
    ``assets_folder_name`` inside the output folder. ``custom`` and
    ``subfolder`` add a per-document folder when ``create_document_subfolder``
    is set.
    """
    options = options or ImportOptions()
    output = Path(output_folder)

    if options.assets_location == "same":
        return output
    if options.assets_location == "custom":
        folder = output / Path(options.custom_assets_path).expanduser()
    else:
        folder = output / options.assets_folder_name

    if options.create_document_subfolder:
        folder = folder / base_name
    return folder


def _relative_posix(path: Path, start: Path) -> str:
    return Path(os.path.relpath(path, start)).as_posix()


def format_image_link(
    filename: str,
    assets_folder: Path,
    output_folder: Path,
    options: ImportOptions | None = None,
    vault_root: Optional[Path] = None,
) -> str:
    """Return the link for ``filename`` in the configured link format.

    Examples
    --------
        >>> format_image_link("a-image-01.png", Path("notes/_assets/a"), Path("notes"),
        ...                   ImportOptions(image_link_format="markdown-relative"))
        '![](./_assets/a/a-image-01.png)'

    """
    options = options or ImportOptions()
    target = assets_folder / filename

    if options.image_link_format == "markdown-relative":
        relative = _relative_posix(target, output_folder)
        return f"![]({relative if relative.startswith('..') else './' + relative})"
    if options.image_link_format == "markdown-absolute":
        root = vault_root if vault_root is not None else output_folder
        return f"![](/{_relative_posix(target, root)})"
    return f"![[{filename}]]"


def create_source_callout(
    base_name: str,
    image_count: int = 0,
    images_path: str | None = None,
    options: ImportOptions | None = None,
) -> str:
    """Build the callout naming the source document and where its images went.

    >>> print(create_source_callout("report"))
    > [!note] Source Document
    > This note was converted from a DOCX file.
    > **Local**: [[report.docx]]
    > **Images**: No images extracted

    """
    options = options or ImportOptions()
    if image_count and images_path:
        image_line = f"> **Images**: {image_count} extracted to `{images_path}`"
    else:
        image_line = "> **Images**: No images extracted"

    lines = [
        f"> [!{options.source_callout_type}] {options.source_callout_title}",
        "> This note was converted from a DOCX file.",
        f"> **Local**: [[{base_name}.docx]]",
        image_line,
    ]
    return "\n".join(lines)


def finalize_markdown(
    result: ConversionResult,
    output_folder: Union[str, Path],
    options: ImportOptions | None = None,
    vault_root: Union[str, Path, None] = None,
) -> str:
    """Apply link format and source callout to a conversion result's markdown."""
    options = options or ImportOptions()
    output = Path(output_folder)
    assets_folder = compute_assets_folder(result.base_name, output, options)
    root = Path(vault_root) if vault_root is not None else None

    markdown = result.markdown
    if options.image_link_format != "wikilink":
        for image in result.images:
            new_link = format_image_link(image.filename, assets_folder, output, options, root)
            markdown = markdown.replace(f"![[{image.filename}]]", new_link)
            logger.debug("Rewrote link to %s as %s", image.filename, new_link)

    if options.insert_source_callout:
        images_path = None
        if result.images:
            relative = _relative_posix(assets_folder, output)
            if relative == ".":
                images_path = "./"
            elif relative.startswith(".."):
                images_path = assets_folder.as_posix()
            else:
                images_path = "./" + relative
        callout = create_source_callout(result.base_name, len(result.images), images_path, options)
        markdown = callout + "\n\n" + markdown

    return markdown


def save_conversion_result(
    result: ConversionResult,
    output_folder: Union[str, Path],
    options: ImportOptions | None = None,
    vault_root: Union[str, Path, None] = None,
) -> Path:
    """Write a conversion result's images and markdown note to disk.

    Parameters
    ----------
    result : ConversionResult
        Output of :func:`docx_to_markdown`
    output_folder : str or Path
        Folder the ``{base_name}.md`` note is written to; created if needed
    options : ImportOptions, optional
        Assets location, link format and source callout settings
    vault_root : str or Path, optional
        Root that ``markdown-absolute`` links start from; defaults to the
        output folder

    Returns
    -------
    Path
        Path of the written markdown file

    """
    options = options or ImportOptions()
    output = Path(output_folder)
    output.mkdir(parents=True, exist_ok=True)

    if result.images:
        assets_folder = compute_assets_folder(result.base_name, output, options)
        assets_folder.mkdir(parents=True, exist_ok=True)
        logger.info("Saving %d image(s) to %s", len(result.images), assets_folder)
        for image in result.images:
            (assets_folder / image.filename).write_bytes(image.data)
            logger.debug("Saved image %s", image.filename)

    note_path = output / f"{result.base_name}.md"
    note_path.write_text(finalize_markdown(result, output, options, vault_root), encoding="utf-8")
    logger.info("Wrote %s", note_path)
    return note_path
