"""Tests for the Markdown renderer and the HTML document handle."""

import pytest

from teeny.html_utils import HtmlDocument
from teeny.protocols import Document, MarkdownConverter
from teeny.renderers import MarkdownRenderer, _generate_heading_id

# --- Renderer Tests ---


def test_heading_ids_are_slugged_and_deduplicated():
    html = MarkdownRenderer().render("# Hello World\n\n## Hello World\n")
    assert '<h1 id="hello-world">Hello World</h1>' in html
    assert '<h2 id="hello-world-1">Hello World</h2>' in html


def test_heading_ids_do_not_leak_between_renders():
    renderer = MarkdownRenderer()
    renderer.render("# Intro")
    assert '<h1 id="intro">' in renderer.render("# Intro")


def test_generate_heading_id():
    assert _generate_heading_id("  What's New?  ") == "whats-new"


def test_code_block_highlighting():
    renderer = MarkdownRenderer()
    highlighted = renderer.render("```python\nx = 1\n```\n")
    assert 'class="highlight"' in highlighted

    plain = renderer.render("```nolang-xyz\na < b\n```\n")
    assert '<pre><code class="language-nolang-xyz">a &lt; b' in plain


def test_renderer_satisfies_protocol():
    assert isinstance(MarkdownRenderer(), MarkdownConverter)


# --- Document Tests ---


def test_document_lookup_and_inner_html():
    doc = HtmlDocument.parse(
        '<html><body><div id="main"><p>old</p></div><h1>A <em>b</em></h1></body></html>'
    )
    assert isinstance(doc, Document)
    main = doc.get_element_by_id("main")
    assert main is not None
    assert doc.get_element_by_id("absent") is None

    doc.set_inner_html(main, "<span>new</span> text")
    assert doc.inner_html(main) == "<span>new</span> text"
    assert doc.inner_html(doc.get_elements_by_tag_name("h1")[0]) == "A <em>b</em>"


def test_set_title_creates_head_and_title():
    doc = HtmlDocument.parse("<html><body></body></html>")
    assert doc.get_title() is None
    doc.set_title("Fish & <Chips>")
    assert doc.get_title() == "Fish & <Chips>"
    assert doc.serialize() == (
        "<html><head><title>Fish &amp; &lt;Chips&gt;</title></head><body></body></html>"
    )


def test_set_title_reuses_existing_elements():
    doc = HtmlDocument.parse("<html><head><meta charset='utf-8'/></head><body></body></html>")
    doc.set_title("One")
    doc.set_title("Two")
    assert len(doc.get_elements_by_tag_name("title")) == 1
    assert doc.get_title() == "Two"


def test_serialize_drops_doctype_and_requires_html():
    doc = HtmlDocument.parse("<!DOCTYPE html><html><body>x</body></html>")
    assert doc.serialize() == "<html><body>x</body></html>"

    with pytest.raises(ValueError):
        HtmlDocument.parse("<p>fragment</p>").serialize()
