#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Pytest configuration and shared fixtures for the kbconvert test suite."""

import logging
import os
import struct
import zlib
from pathlib import Path

import pytest
from hypothesis import Phase, Verbosity, settings

settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=20)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


def _png_chunk(kind: bytes, data: bytes) -> bytes:
    return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", zlib.crc32(kind + data) & 0xFFFFFFFF)


def make_png(width: int = 4, height: int = 3) -> bytes:
    """Build a small, valid RGB PNG."""
    header = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    raw_rows = b"".join(b"\x00" + b"\xff\x00\x00" * width for _ in range(height))
    return (
        b"\x89PNG\r\n\x1a\n"
        + _png_chunk(b"IHDR", header)
        + _png_chunk(b"IDAT", zlib.compress(raw_rows))
        + _png_chunk(b"IEND", b"")
    )


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo handler and level changes made by CLI logging setup."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def png_bytes() -> bytes:
    """Provide the bytes of a tiny PNG image."""
    return make_png()


@pytest.fixture
def vault_dir(tmp_path: Path, png_bytes: bytes) -> Path:
    """Provide a notes directory holding one image in a nested folder."""
    vault = tmp_path / "vault"
    (vault / "attachments" / "diagrams").mkdir(parents=True)
    (vault / "attachments" / "diagrams" / "diagram.png").write_bytes(png_bytes)
    (vault / "note.md").write_text("# Note\n\n![[diagram.png]]\n", encoding="utf-8")
    return vault
