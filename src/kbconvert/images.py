#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/kbconvert/images.py
"""Image lookup for the write direction.

The document builder asks an *image resolver* for the bytes behind every
Image node. Resolvers are asynchronous and return ``None`` when a file cannot
be found; a miss is never an error. :class:`ImageResolutionCache` memoizes a
resolver, negative results included, so each distinct filename is looked up
at most once per cache lifetime.

"""

from __future__ import annotations

import asyncio
import enum
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Union, runtime_checkable
from urllib.parse import unquote

logger = logging.getLogger(__name__)

# Formats python-docx can place in a document
DOCX_PICTURE_FORMATS = frozenset({"png", "jpg", "gif", "bmp", "tiff"})

_CONTENT_TYPES = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
    "bmp": "image/bmp",
    "tiff": "image/tiff",
    "svg": "image/svg+xml",
}


@dataclass(frozen=True)
class ResolvedImage:
    """Image bytes returned by a resolver.

    Parameters
    ----------
    data : bytes
        Raw image file content
    width, height : int or None
        Display size in pixels, when the resolver knows it
    content_type : str or None
        MIME type, when the resolver knows it

    """

    data: bytes
    width: Optional[int] = None
    height: Optional[int] = None
    content_type: Optional[str] = None


@runtime_checkable
class ImageResolver(Protocol):
    """Anything with an awaitable ``resolve(filename)`` method."""

    async def resolve(self, filename: str) -> ResolvedImage | None:
        """Return the image for ``filename`` or None when it cannot be found."""
        ...


class _Lookup(enum.Enum):
    FOUND = "found"
    ABSENT = "absent"


class ImageResolutionCache:
    """Memoizing wrapper around an image resolver.

    Every filename moves from *unresolved* to either *found* or *absent* on
    its first lookup and stays there until :meth:`clear`. Exceptions raised by
    the wrapped resolver are logged and cached as misses.

    Concurrent first lookups of the same filename are not deduplicated; both
    reach the resolver and the later result wins.

    Parameters
    ----------
    resolver : ImageResolver
        The resolver to memoize

    Examples
    --------
        >>> cache = ImageResolutionCache(VaultImageResolver("~/notes"))
        >>> image = asyncio.run(cache.resolve("diagram.png"))

    """

    def __init__(self, resolver: ImageResolver):
        """Wrap ``resolver`` with an empty cache."""
        self.resolver = resolver
        self._entries: dict[str, tuple[_Lookup, ResolvedImage | None]] = {}
        self.lookups = 0

    async def resolve(self, filename: str) -> ResolvedImage | None:
        """Return the cached result for ``filename``, looking it up on first use."""
        entry = self._entries.get(filename)
        if entry is not None:
            return entry[1]

        self.lookups += 1
        try:
            image = await self.resolver.resolve(filename)
        except Exception as e:
            logger.warning("Image lookup for %r failed: %s", filename, e)
            image = None

        if image is None:
            logger.debug("Image not found: %s", filename)
            self._entries[filename] = (_Lookup.ABSENT, None)
        else:
            self._entries[filename] = (_Lookup.FOUND, image)
        return image

    def state(self, filename: str) -> str:
        """Return ``"unresolved"``, ``"found"`` or ``"absent"`` for ``filename``."""
        entry = self._entries.get(filename)
        return entry[0].value if entry else "unresolved"

    def clear(self) -> None:
        """Forget every cached result."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, filename: object) -> bool:
        return filename in self._entries


class VaultImageResolver:
    """Find images anywhere under a notes directory by file name.

    Paths in image references are reduced to their last component and the
    whole tree under ``root`` is searched for a file with that name. Remote
    URLs and data URIs are not fetched and count as misses. File reads run in
    a worker thread.

    Parameters
    ----------
    root : str or Path
        Top directory of the notes collection

    """

    def __init__(self, root: Union[str, Path]):
        """Index lazily; nothing is read until the first lookup."""
        self.root = Path(root).expanduser()
        self._index: dict[str, Path] | None = None

    def _build_index(self) -> dict[str, Path]:
        index: dict[str, Path] = {}
        for dirpath, dirnames, filenames in os.walk(self.root):
            dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
            for name in sorted(filenames):
                index.setdefault(name, Path(dirpath) / name)
        logger.debug("Indexed %d files under %s", len(index), self.root)
        return index

    async def resolve(self, filename: str) -> ResolvedImage | None:
        """Return the bytes of the first file named like ``filename``."""
        if is_remote_or_data_uri(filename):
            logger.debug("Not fetching remote image %s", filename)
            return None

        name = reference_basename(filename)
        if not name:
            return None

        if self._index is None:
            self._index = await asyncio.to_thread(self._build_index)

        path = self._index.get(name)
        if path is None:
            return None

        try:
            data = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            logger.warning("Failed to read image %s: %s", path, e)
            return None

        image_format = detect_image_format_from_bytes(data)
        return ResolvedImage(data=data, content_type=_CONTENT_TYPES.get(image_format or ""))


def is_remote_or_data_uri(reference: str) -> bool:
    """Return True for http(s) URLs and data URIs."""
    return reference.lower().startswith(("http:", "https:", "data:"))


def reference_basename(reference: str) -> str:
    """Reduce an image reference to its file name.

    >>> reference_basename("assets/My%20Diagram.png")
    'My Diagram.png'

    """
    return unquote(reference).replace("\\", "/").rstrip("/").split("/")[-1].strip()


def detect_image_format_from_bytes(data: bytes) -> str | None:
    r"""Detect image format from magic bytes.

    Returns a lowercase extension without the dot (``"png"``, ``"jpg"``,
    ``"gif"``, ``"webp"``, ``"bmp"``, ``"tiff"``, ``"svg"``), or None.

    """
    if not data or len(data) < 4:
        return None

    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "png"
    if data.startswith(b"\xff\xd8\xff"):
        return "jpg"
    if data.startswith(b"GIF87a") or data.startswith(b"GIF89a"):
        return "gif"
    if len(data) >= 12 and data.startswith(b"RIFF") and data[8:12] == b"WEBP":
        return "webp"
    if data.startswith(b"BM"):
        return "bmp"
    if data.startswith(b"II*\x00") or data.startswith(b"MM\x00*"):
        return "tiff"

    stripped = data.lstrip()
    if stripped.startswith(b"<svg") or stripped.startswith(b"<?xml"):
        return "svg"

    return None


def content_type_for_bytes(data: bytes, default: str = "image/png") -> str:
    """Return the MIME type implied by ``data``'s magic bytes."""
    return _CONTENT_TYPES.get(detect_image_format_from_bytes(data) or "", default)
