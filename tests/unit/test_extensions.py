#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_extensions.py
"""Unit tests for the note-syntax extensions.

Tests cover:
- Callout extraction from block quotes
- Cross-reference link removal and text replacement
- Image embed splitting with optional widths
- The combined extension pipeline

"""

import pytest

from kbconvert.api import parse_markdown
from kbconvert.ast import BlockQuote, Callout, CodeBlock, Document, Image, Paragraph, Strong, Text
from kbconvert.exceptions import ParsingError
from kbconvert.options import MarkdownParserOptions
from kbconvert.transforms import (
    CalloutTransform,
    ImageEmbedTransform,
    WikiLinkTransform,
    apply_extensions,
    build_extension_pipeline,
    find_image_embeds,
)


def _quote(*paragraph_texts):
    return BlockQuote(children=[Paragraph(content=[Text(text)]) for text in paragraph_texts])


@pytest.mark.unit
class TestCalloutTransform:
    """Tests for callout extraction."""

    def test_type_and_title(self):
        """Test the type, title and body of a callout."""
        callout = CalloutTransform().transform(_quote("[!warning] Important Notice\nThis is a warning callout."))
        assert isinstance(callout, Callout)
        assert callout.callout_type == "warning"
        assert callout.title == "Important Notice"
        assert callout.children == [Paragraph(content=[Text("This is a warning callout.")])]

    def test_type_lower_cased(self):
        """Test that the callout type is lower-cased."""
        callout = CalloutTransform().transform(_quote("[!TIP] Shout"))
        assert callout.callout_type == "tip"

    def test_no_title(self):
        """Test that an empty title becomes None."""
        callout = CalloutTransform().transform(_quote("[!note]\nBody"))
        assert callout.title is None
        assert callout.children[0].content == [Text("Body")]

    def test_unknown_type_kept(self):
        """Test that callout types are free-form."""
        callout = CalloutTransform().transform(_quote("[!recipe] Pancakes"))
        assert callout.callout_type == "recipe"

    def test_following_paragraphs_become_body(self):
        """Test that later quote paragraphs are added as body paragraphs."""
        callout = CalloutTransform().transform(_quote("[!info] Title", "Second", "Third"))
        assert [p.content[0].content for p in callout.children] == ["Second", "Third"]

    def test_inline_siblings_kept(self):
        """Test that formatting after the marker line stays in the first body paragraph."""
        quote = BlockQuote(
            children=[Paragraph(content=[Text("[!tip] Title\nUse "), Strong(content=[Text("this")])])]
        )
        callout = CalloutTransform().transform(quote)
        assert callout.children[0].content == [Text("Use "), Strong(content=[Text("this")])]

    def test_non_paragraph_children_dropped(self):
        """Test that code blocks inside a callout quote are dropped."""
        quote = BlockQuote(
            children=[Paragraph(content=[Text("[!tip] Title")]), CodeBlock(content="x\n")]
        )
        callout = CalloutTransform().transform(quote)
        assert callout.children == []

    def test_plain_quote_untouched(self):
        """Test that a quote without a marker stays a quote."""
        result = CalloutTransform().transform(_quote("Just a quote"))
        assert isinstance(result, BlockQuote)

    def test_first_inline_not_text(self):
        """Test that a quote starting with formatting is not a callout."""
        quote = BlockQuote(children=[Paragraph(content=[Strong(content=[Text("[!tip] x")])])])
        assert isinstance(CalloutTransform().transform(quote), BlockQuote)

    def test_parsed_callout(self):
        """Test callout extraction on parsed markdown."""
        doc = parse_markdown("> [!warning] Important Notice\n> This is a warning callout.")
        callout = doc.children[0]
        assert isinstance(callout, Callout)
        assert callout.title == "Important Notice"
        assert callout.children[0].content == [Text("This is a warning callout.")]


@pytest.mark.unit
class TestWikiLinkTransform:
    """Tests for cross-reference link handling."""

    def test_text_mode_uses_alias(self):
        """Test that the alias replaces the link."""
        result = WikiLinkTransform(mode="text").transform(Text("See [[Page A|shown text]]."))
        assert [node.content for node in result] == ["See ", "shown text", "."]

    def test_text_mode_uses_target(self):
        """Test that the target is used when there is no alias."""
        result = WikiLinkTransform(mode="text").transform(Text("[[Page A]]"))
        assert result == Text("Page A")

    def test_remove_mode(self):
        """Test that links are deleted and surrounding text kept."""
        result = WikiLinkTransform(mode="remove").transform(Text("See [[Page A]] now"))
        assert [node.content for node in result] == ["See ", " now"]

    def test_remove_whole_text(self):
        """Test that a text node holding only a link disappears."""
        paragraph = Paragraph(content=[Text("[[Page A]]")])
        result = WikiLinkTransform(mode="remove").transform(paragraph)
        assert result.content == []

    def test_keep_mode(self):
        """Test that keep mode leaves links untouched."""
        assert WikiLinkTransform(mode="keep").transform(Text("[[Page A]]")) == Text("[[Page A]]")

    def test_embeds_ignored(self):
        """Test that image embeds are not treated as links."""
        assert WikiLinkTransform(mode="remove").transform(Text("![[pic.png]]")) == Text("![[pic.png]]")

    def test_callout_title_text_mode(self):
        """Test that links in a callout title are reduced to their alias."""
        body = Paragraph(content=[Text("body")])
        callout = Callout(callout_type="warning", title="See [[Page|alias]]", children=[body])
        result = WikiLinkTransform(mode="text").transform(callout)
        assert result.title == "See alias"
        assert result.children[0].content == [Text("body")]

    def test_callout_title_remove_mode(self):
        """Test that a title holding only a link is cleared."""
        result = WikiLinkTransform(mode="remove").transform(Callout(callout_type="note", title="[[Page]]"))
        assert result.title is None
        result = WikiLinkTransform(mode="remove").transform(Callout(callout_type="note", title="About [[Page]]"))
        assert result.title == "About"

    def test_callout_title_keep_mode(self):
        """Test that keep mode leaves the callout title alone."""
        result = WikiLinkTransform(mode="keep").transform(Callout(callout_type="note", title="[[Page]]"))
        assert result.title == "[[Page]]"


@pytest.mark.unit
class TestImageEmbedTransform:
    """Tests for image embed handling."""

    def test_find_embeds(self):
        """Test scanning text for embeds and widths."""
        assert find_image_embeds("a ![[x.png|200]] b ![[y.jpg]]") == [("x.png", 200), ("y.jpg", None)]

    def test_split_text(self):
        """Test that an embed splits its Text node around an Image."""
        result = ImageEmbedTransform().transform(Text("before ![[diagram.png|400]] after"))
        assert [type(node) for node in result] == [Text, Image, Text]
        assert result[1].url == "diagram.png"
        assert result[1].width == 400

    def test_embed_only(self):
        """Test a text node that is only an embed."""
        result = ImageEmbedTransform().transform(Text("![[pic.png]]"))
        assert len(result) == 1
        assert result[0].url == "pic.png"
        assert result[0].width is None

    def test_no_embed(self):
        """Test that plain text is unchanged."""
        assert ImageEmbedTransform().transform(Text("plain")) == Text("plain")


@pytest.mark.unit
class TestExtensionPipeline:
    """Tests for apply_extensions and build_extension_pipeline."""

    def test_default_pipeline(self):
        """Test the default transformer order."""
        pipeline = build_extension_pipeline()
        assert [type(t) for t in pipeline] == [CalloutTransform, ImageEmbedTransform, WikiLinkTransform]

    def test_disabled_extensions(self):
        """Test that options switch transformers off."""
        options = MarkdownParserOptions(parse_callouts=False, parse_image_embeds=False, wiki_link_mode="keep")
        assert build_extension_pipeline(options) == []

    def test_embed_and_link_in_callout(self):
        """Test all extensions on one document."""
        doc = parse_markdown(
            "> [!tip] Tip\n> See [[Other|the other note]] and ![[pic.png]]",
            MarkdownParserOptions(wiki_link_mode="text"),
        )
        body = doc.children[0].children[0].content
        assert [node.content for node in body if isinstance(node, Text)] == ["See ", "the other note", " and "]
        assert isinstance(body[-1], Image)

    def test_input_not_modified(self):
        """Test that the parsed document is not changed in place."""
        original = Document(children=[_quote("[!tip] Title")])
        apply_extensions(original)
        assert isinstance(original.children[0], BlockQuote)

    def test_requires_document(self):
        """Test that a non-Document root is rejected."""
        with pytest.raises(ParsingError):
            apply_extensions(Paragraph(content=[]))
