#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_options.py
"""Unit tests for the frozen option classes."""

from dataclasses import FrozenInstanceError

import pytest

from kbconvert.options import (
    DEFAULT_CALLOUT_STYLE,
    CalloutStyle,
    CleanupOptions,
    CodeBlockStyle,
    DocxRendererOptions,
    ImportOptions,
    MarkdownParserOptions,
    StyleConfig,
    create_updated_options,
)


@pytest.mark.unit
class TestCloneFrozen:
    """Tests for the shared cloning behaviour."""

    def test_frozen(self):
        """Test that options cannot be mutated."""
        options = DocxRendererOptions()
        with pytest.raises(FrozenInstanceError):
            options.default_font = "Arial"

    def test_create_updated(self):
        """Test that create_updated returns a modified copy."""
        options = DocxRendererOptions()
        updated = options.create_updated(default_font="Arial")
        assert updated.default_font == "Arial"
        assert options.default_font == "Tenorite"

    def test_create_updated_options(self):
        """Test the module-level helper."""
        updated = create_updated_options(MarkdownParserOptions(), wiki_link_mode="text")
        assert updated.wiki_link_mode == "text"

    def test_from_dict_rejects_unknown_keys(self):
        """Test that unknown option names are reported."""
        with pytest.raises(ValueError, match="bogus"):
            CleanupOptions.from_dict({"bogus": 1})

    def test_validation_on_update(self):
        """Test that updated copies are validated too."""
        with pytest.raises(ValueError):
            ImportOptions().create_updated(image_handling="print")


@pytest.mark.unit
class TestDefaults:
    """Tests for default values and validation."""

    def test_docx_defaults(self):
        """Test the house style defaults."""
        options = DocxRendererOptions()
        assert options.default_font_size == 11
        assert options.heading_color == "4F81BD"
        assert options.heading_size(1) == 16
        assert options.heading_size(7) == options.default_font_size
        assert options.skip_toc is True

    def test_import_defaults(self):
        """Test the import defaults."""
        options = ImportOptions()
        assert options.image_handling == "extract"
        assert options.image_link_format == "wikilink"
        assert options.assets_location == "subfolder"
        assert options.assets_folder_name == "_assets"
        assert options.insert_source_callout

    @pytest.mark.parametrize(
        "factory",
        [
            lambda: MarkdownParserOptions(wiki_link_mode="hide"),
            lambda: ImportOptions(image_link_format="html"),
            lambda: ImportOptions(assets_location="cloud"),
            lambda: ImportOptions(assets_folder_name="  "),
            lambda: CleanupOptions(max_inline_command_length=0),
            lambda: DocxRendererOptions(default_font_size=0),
            lambda: DocxRendererOptions(heading_font_sizes={7: 10}),
            lambda: DocxRendererOptions(list_level_indent=-1),
            lambda: CalloutStyle(background="#FFFFFF"),
            lambda: CodeBlockStyle(size=0),
        ],
    )
    def test_invalid_values(self, factory):
        """Test that out-of-range values raise ValueError."""
        with pytest.raises(ValueError):
            factory()


@pytest.mark.unit
class TestStyleConfig:
    """Tests for style lookup and loading."""

    def test_known_types(self):
        """Test that the standard callout types have styles."""
        config = StyleConfig()
        for name in ("note", "info", "tip", "warning", "danger"):
            assert name in config.callout_styles

    def test_lookup_case_insensitive(self):
        """Test that style lookup ignores case."""
        config = StyleConfig()
        assert config.callout_style_for("WARNING") == config.callout_style_for("warning")

    def test_unknown_falls_back(self):
        """Test the fixed fallback style."""
        assert StyleConfig().callout_style_for("recipe") == DEFAULT_CALLOUT_STYLE

    def test_from_dict_merges_callouts(self):
        """Test that configured callouts are merged over the defaults."""
        config = StyleConfig.from_dict({"callout_styles": {"Recipe": {"background": "FFEEDD"}}})
        assert config.callout_style_for("recipe").background == "FFEEDD"
        assert "warning" in config.callout_styles

    def test_from_dict_nested_styles(self):
        """Test loading code and table styles from mappings."""
        config = StyleConfig.from_dict(
            {"code_block_style": {"font": "Fira Code"}, "table_style": {"header_background": "000000"}}
        )
        assert config.code_block_style.font == "Fira Code"
        assert config.table_style.header_background == "000000"

    def test_from_dict_unknown_key(self):
        """Test that unknown style sections are rejected."""
        with pytest.raises(ValueError):
            StyleConfig.from_dict({"fonts": {}})
