#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_images.py
"""Unit tests for image resolvers and the resolution cache."""

import asyncio

import pytest

from kbconvert.images import (
    ImageResolutionCache,
    ImageResolver,
    ResolvedImage,
    VaultImageResolver,
    content_type_for_bytes,
    detect_image_format_from_bytes,
    is_remote_or_data_uri,
    reference_basename,
)


class CountingResolver:
    def __init__(self, images=None, error=None):
        self.images = images or {}
        self.error = error
        self.calls = 0

    async def resolve(self, filename):
        self.calls += 1
        if self.error:
            raise self.error
        return self.images.get(filename)


@pytest.mark.unit
class TestImageResolutionCache:
    """Tests for the memoizing cache."""

    def test_states(self):
        """Test the unresolved, found and absent states."""
        image = ResolvedImage(data=b"\x89PNG\r\n\x1a\n")
        cache = ImageResolutionCache(CountingResolver({"a.png": image}))
        assert cache.state("a.png") == "unresolved"

        assert asyncio.run(cache.resolve("a.png")) == image
        assert asyncio.run(cache.resolve("b.png")) is None

        assert cache.state("a.png") == "found"
        assert cache.state("b.png") == "absent"
        assert len(cache) == 2
        assert "b.png" in cache

    def test_hits_and_misses_cached(self):
        """Test that each name reaches the resolver once."""
        resolver = CountingResolver({"a.png": ResolvedImage(data=b"x")})
        cache = ImageResolutionCache(resolver)

        async def lookups():
            for name in ("a.png", "a.png", "b.png", "b.png", "b.png"):
                await cache.resolve(name)

        asyncio.run(lookups())
        assert resolver.calls == 2
        assert cache.lookups == 2

    def test_clear(self):
        """Test that clearing forgets every result."""
        resolver = CountingResolver()
        cache = ImageResolutionCache(resolver)
        asyncio.run(cache.resolve("a.png"))
        cache.clear()
        assert cache.state("a.png") == "unresolved"
        asyncio.run(cache.resolve("a.png"))
        assert resolver.calls == 2

    def test_resolver_error_cached_as_miss(self, caplog):
        """Test that resolver exceptions are logged and treated as misses."""
        resolver = CountingResolver(error=OSError("disk gone"))
        cache = ImageResolutionCache(resolver)
        assert asyncio.run(cache.resolve("a.png")) is None
        assert cache.state("a.png") == "absent"
        assert "disk gone" in caplog.text

    def test_protocol(self):
        """Test that resolvers satisfy the runtime-checkable protocol."""
        assert isinstance(CountingResolver(), ImageResolver)
        assert isinstance(VaultImageResolver("."), ImageResolver)


@pytest.mark.unit
class TestVaultImageResolver:
    """Tests for finding images under a notes directory."""

    def test_finds_nested_image(self, vault_dir, png_bytes):
        """Test that images are found by name anywhere in the tree."""
        image = asyncio.run(VaultImageResolver(vault_dir).resolve("diagram.png"))
        assert image is not None
        assert image.data == png_bytes
        assert image.content_type == "image/png"

    def test_path_reduced_to_name(self, vault_dir):
        """Test that directories in the reference are ignored."""
        image = asyncio.run(VaultImageResolver(vault_dir).resolve("some/other/dir/diagram.png"))
        assert image is not None

    def test_missing(self, vault_dir):
        """Test that unknown names resolve to None."""
        assert asyncio.run(VaultImageResolver(vault_dir).resolve("nope.png")) is None

    def test_remote_not_fetched(self, vault_dir):
        """Test that URLs are never fetched."""
        assert asyncio.run(VaultImageResolver(vault_dir).resolve("https://example.com/diagram.png")) is None

    def test_hidden_directories_skipped(self, tmp_path, png_bytes):
        """Test that dot-directories are not indexed."""
        (tmp_path / ".trash").mkdir()
        (tmp_path / ".trash" / "old.png").write_bytes(png_bytes)
        assert asyncio.run(VaultImageResolver(tmp_path).resolve("old.png")) is None


@pytest.mark.unit
class TestImageHelpers:
    """Tests for the module-level helpers."""

    @pytest.mark.parametrize(
        "data,expected",
        [
            (b"\x89PNG\r\n\x1a\n0000", "png"),
            (b"\xff\xd8\xff\xe0", "jpg"),
            (b"GIF89a..", "gif"),
            (b"RIFF\x00\x00\x00\x00WEBP", "webp"),
            (b"BM\x00\x00\x00\x00", "bmp"),
            (b"II*\x00", "tiff"),
            (b"  <svg xmlns='x'>", "svg"),
            (b"nope", None),
            (b"", None),
        ],
    )
    def test_detect_format(self, data, expected):
        """Test format detection from magic bytes."""
        assert detect_image_format_from_bytes(data) == expected

    def test_content_type_default(self):
        """Test the content type fallback for unknown bytes."""
        assert content_type_for_bytes(b"\xff\xd8\xff\xe0") == "image/jpeg"
        assert content_type_for_bytes(b"????") == "image/png"

    def test_reference_basename(self):
        """Test reducing references to file names."""
        assert reference_basename("assets/My%20Diagram.png") == "My Diagram.png"
        assert reference_basename("C:\\notes\\pic.png") == "pic.png"

    def test_remote_detection(self):
        """Test recognising URLs and data URIs."""
        assert is_remote_or_data_uri("HTTPS://example.com/x.png")
        assert is_remote_or_data_uri("data:image/png;base64,AAAA")
        assert not is_remote_or_data_uri("pic.png")
