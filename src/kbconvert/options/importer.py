#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for importing DOCX documents as markdown notes.

These control where extracted images go, how the markdown links to them,
and whether a source callout is prepended to the note.
"""

from dataclasses import dataclass, field

from kbconvert.constants import (
    DEFAULT_ASSETS_FOLDER_NAME,
    DEFAULT_ASSETS_LOCATION,
    DEFAULT_CUSTOM_ASSETS_PATH,
    DEFAULT_IMAGE_HANDLING,
    DEFAULT_IMAGE_LINK_FORMAT,
    DEFAULT_SOURCE_CALLOUT_TITLE,
    DEFAULT_SOURCE_CALLOUT_TYPE,
    AssetsLocation,
    ImageHandling,
    ImageLinkFormat,
)
from kbconvert.options.base import CloneFrozenMixin

_IMAGE_HANDLING = ("extract", "embed", "ignore")
_LINK_FORMATS = ("wikilink", "markdown-relative", "markdown-absolute")
_ASSETS_LOCATIONS = ("subfolder", "same", "custom")


# src/kbconvert/options/importer.py
@dataclass(frozen=True)
class ImportOptions(CloneFrozenMixin):
    """Configuration options for DOCX-to-markdown import.

    Parameters
    ----------
    image_handling : {"extract", "embed", "ignore"}, default "extract"
        How embedded images are handled:
        - "extract": write image files and link to them
        - "embed": inline images as base64 data URIs
        - "ignore": drop image links from the output
    image_link_format : {"wikilink", "markdown-relative", "markdown-absolute"}, default "wikilink"
        Link syntax for extracted images.
    assets_location : {"subfolder", "same", "custom"}, default "subfolder"
        Where extracted images are written relative to the markdown file.
    assets_folder_name : str, default "_assets"
        Folder name used when ``assets_location`` is "subfolder".
    custom_assets_path : str, default "attachments"
        Folder used when ``assets_location`` is "custom".
    create_document_subfolder : bool, default True
        Put each document's images in a folder named after the document.
    insert_source_callout : bool, default True
        Prepend a callout naming the source file and image location.
    source_callout_type : str, default "note"
        Callout type of the source callout.
    source_callout_title : str, default "Source Document"
        Title of the source callout.

    """

    image_handling: ImageHandling = field(
        default=DEFAULT_IMAGE_HANDLING,
        metadata={"help": "Image handling: extract, embed, or ignore", "choices": list(_IMAGE_HANDLING)},
    )
    image_link_format: ImageLinkFormat = field(
        default=DEFAULT_IMAGE_LINK_FORMAT,
        metadata={"help": "Image link syntax", "choices": list(_LINK_FORMATS)},
    )
    assets_location: AssetsLocation = field(
        default=DEFAULT_ASSETS_LOCATION,
        metadata={"help": "Where extracted images are stored", "choices": list(_ASSETS_LOCATIONS)},
    )
    assets_folder_name: str = field(default=DEFAULT_ASSETS_FOLDER_NAME, metadata={"help": "Assets subfolder name"})
    custom_assets_path: str = field(default=DEFAULT_CUSTOM_ASSETS_PATH, metadata={"help": "Custom assets folder"})
    create_document_subfolder: bool = field(
        default=True, metadata={"help": "Store images in a per-document folder"}
    )
    insert_source_callout: bool = field(default=True, metadata={"help": "Prepend a source document callout"})
    source_callout_type: str = field(default=DEFAULT_SOURCE_CALLOUT_TYPE, metadata={"help": "Source callout type"})
    source_callout_title: str = field(
        default=DEFAULT_SOURCE_CALLOUT_TITLE, metadata={"help": "Source callout title"}
    )

    def __post_init__(self) -> None:
        """Validate enumerated choices."""
        if self.image_handling not in _IMAGE_HANDLING:
            raise ValueError(f"image_handling must be one of {_IMAGE_HANDLING}, got {self.image_handling!r}")
        if self.image_link_format not in _LINK_FORMATS:
            raise ValueError(f"image_link_format must be one of {_LINK_FORMATS}, got {self.image_link_format!r}")
        if self.assets_location not in _ASSETS_LOCATIONS:
            raise ValueError(f"assets_location must be one of {_ASSETS_LOCATIONS}, got {self.assets_location!r}")
        if not self.assets_folder_name.strip():
            raise ValueError("assets_folder_name must not be empty")
