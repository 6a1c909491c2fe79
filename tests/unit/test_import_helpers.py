#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_import_helpers.py
"""Unit tests for image naming, link formats and note layout on import."""

from pathlib import Path

import pytest

from kbconvert.converters.docx2markdown import (
    ConversionResult,
    ConvertedImage,
    compute_assets_folder,
    create_source_callout,
    extract_and_name_images,
    finalize_markdown,
    format_image_link,
    image_extension,
    image_placeholder,
    save_conversion_result,
)
from kbconvert.options import ImportOptions


@pytest.mark.unit
class TestImageNaming:
    """Tests for image file names."""

    @pytest.mark.parametrize(
        "content_type,extension",
        [
            ("image/jpeg", ".jpg"),
            ("image/jpg", ".jpg"),
            ("image/gif", ".gif"),
            ("image/webp", ".webp"),
            ("image/png", ".png"),
            ("image/x-emf", ".png"),
            ("", ".png"),
            (None, ".png"),
        ],
    )
    def test_extension(self, content_type, extension):
        """Test the content type to extension mapping."""
        assert image_extension(content_type) == extension

    def test_sequential_names(self):
        """Test that images are numbered in order with two digits."""
        images = extract_and_name_images(
            [(b"a", "image/png"), (b"b", "image/jpeg"), (b"c", "")], "Quarterly Report"
        )
        assert [image.filename for image in images] == [
            "Quarterly Report-image-01.png",
            "Quarterly Report-image-02.jpg",
            "Quarterly Report-image-03.png",
        ]
        assert images[2].content_type == "image/png"

    def test_tenth_image(self):
        """Test that numbering continues past nine."""
        images = extract_and_name_images([(b"x", "image/png")] * 10, "doc")
        assert images[-1].filename == "doc-image-10.png"

    def test_no_images(self):
        """Test an empty image list."""
        assert extract_and_name_images([], "doc") == []

    def test_placeholder(self):
        """Test the placeholder format."""
        assert image_placeholder(3) == "__IMAGE_3__"


@pytest.mark.unit
class TestAssetsFolder:
    """Tests for compute_assets_folder."""

    def test_subfolder_with_document_folder(self):
        """Test the default layout."""
        assert compute_assets_folder("report", Path("notes")) == Path("notes/_assets/report")

    def test_subfolder_without_document_folder(self):
        """Test a shared assets folder."""
        options = ImportOptions(create_document_subfolder=False)
        assert compute_assets_folder("report", Path("notes"), options) == Path("notes/_assets")

    def test_same_folder(self):
        """Test images next to the note."""
        options = ImportOptions(assets_location="same")
        assert compute_assets_folder("report", Path("notes"), options) == Path("notes")

    def test_custom_folder(self):
        """Test a custom assets folder."""
        options = ImportOptions(assets_location="custom", custom_assets_path="media")
        assert compute_assets_folder("report", Path("notes"), options) == Path("notes/media/report")


@pytest.mark.unit
class TestImageLinks:
    """Tests for format_image_link."""

    def test_wikilink(self):
        """Test the default embed link."""
        assert format_image_link("r-image-01.png", Path("n/_assets/r"), Path("n")) == "![[r-image-01.png]]"

    def test_relative(self):
        """Test a relative markdown link."""
        options = ImportOptions(image_link_format="markdown-relative")
        link = format_image_link("r-image-01.png", Path("n/_assets/r"), Path("n"), options)
        assert link == "![](./_assets/r/r-image-01.png)"

    def test_relative_outside_output(self):
        """Test a relative link that climbs out of the output folder."""
        options = ImportOptions(image_link_format="markdown-relative")
        link = format_image_link("x.png", Path("media"), Path("notes"), options)
        assert link == "![](../media/x.png)"

    def test_absolute_from_vault_root(self):
        """Test an absolute link measured from the vault root."""
        options = ImportOptions(image_link_format="markdown-absolute")
        link = format_image_link("x.png", Path("vault/notes/_assets"), Path("vault/notes"), options, Path("vault"))
        assert link == "![](/notes/_assets/x.png)"

    def test_absolute_defaults_to_output(self):
        """Test that absolute links start at the output folder without a vault root."""
        options = ImportOptions(image_link_format="markdown-absolute")
        link = format_image_link("x.png", Path("notes/_assets"), Path("notes"), options)
        assert link == "![](/_assets/x.png)"


@pytest.mark.unit
class TestSourceCallout:
    """Tests for create_source_callout."""

    def test_without_images(self):
        """Test the callout for a document with no images."""
        assert create_source_callout("report").split("\n") == [
            "> [!note] Source Document",
            "> This note was converted from a DOCX file.",
            "> **Local**: [[report.docx]]",
            "> **Images**: No images extracted",
        ]

    def test_with_images(self):
        """Test the image line when images were extracted."""
        callout = create_source_callout("report", 3, "./_assets/report")
        assert callout.endswith("> **Images**: 3 extracted to `./_assets/report`")

    def test_custom_type_and_title(self):
        """Test the callout type and title options."""
        options = ImportOptions(source_callout_type="info", source_callout_title="Imported")
        assert create_source_callout("r", options=options).startswith("> [!info] Imported\n")


@pytest.mark.unit
class TestSaveConversionResult:
    """Tests for writing a conversion result to disk."""

    def _result(self):
        return ConversionResult(
            markdown="# Report\n\n![[report-image-01.png]]\n",
            images=[ConvertedImage("report-image-01.png", b"PNGDATA")],
            base_name="report",
        )

    def test_default_layout(self, tmp_path):
        """Test the note, the image and the callout with default options."""
        note = save_conversion_result(self._result(), tmp_path)

        assert note == tmp_path / "report.md"
        assert (tmp_path / "_assets" / "report" / "report-image-01.png").read_bytes() == b"PNGDATA"
        text = note.read_text(encoding="utf-8")
        assert text.startswith("> [!note] Source Document\n")
        assert "> **Images**: 1 extracted to `./_assets/report`" in text
        assert "![[report-image-01.png]]" in text

    def test_relative_links_without_callout(self, tmp_path):
        """Test rewriting links and skipping the callout."""
        options = ImportOptions(image_link_format="markdown-relative", insert_source_callout=False)
        note = save_conversion_result(self._result(), tmp_path / "out", options)
        assert note.read_text(encoding="utf-8") == "# Report\n\n![](./_assets/report/report-image-01.png)\n"

    def test_same_folder(self, tmp_path):
        """Test writing images next to the note."""
        options = ImportOptions(assets_location="same")
        note = save_conversion_result(self._result(), tmp_path, options)
        assert (tmp_path / "report-image-01.png").exists()
        assert "extracted to `./`" in note.read_text(encoding="utf-8")

    def test_no_images_no_assets_folder(self, tmp_path):
        """Test that no assets folder is created for text-only documents."""
        save_conversion_result(ConversionResult(markdown="Text\n", base_name="plain"), tmp_path)
        assert not (tmp_path / "_assets").exists()
        assert "No images extracted" in (tmp_path / "plain.md").read_text(encoding="utf-8")

    def test_finalize_without_writing(self, tmp_path):
        """Test that finalize_markdown only builds text."""
        text = finalize_markdown(self._result(), tmp_path, ImportOptions(insert_source_callout=False))
        assert text == "# Report\n\n![[report-image-01.png]]\n"
        assert list(tmp_path.iterdir()) == []
