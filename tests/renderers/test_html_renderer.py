"""
Tests for HTMLRenderer.

This module checks the print-ready HTML produced from a render tree.
"""

import re

from docbuilder.config import RenderOptions
from docbuilder.models import Document, ImageBlock, NumberBlock, Page, TextBlock, TitleBlock
from docbuilder.models.signature import sign_block
from docbuilder.renderers import DocumentRenderer, HTMLRenderer
from docbuilder.renderers.render_utils import pt, px


def to_html(document, mode="template", data=None, signatures=None, scale=1.0):
    rendered = DocumentRenderer(document, RenderOptions(mode=mode)).render(data, signatures)
    return HTMLRenderer(rendered, scale).render()


class TestHTMLRenderer:
    """Test cases for HTMLRenderer class."""

    def test_document_shell(self, sample_document):
        html = to_html(sample_document)

        assert html.startswith("<!DOCTYPE html>")
        assert "<title>Order form</title>" in html
        assert "@page { size: A4 portrait; margin: 0; }" in html
        assert html.count('<section class="page"') == 2
        assert 'data-page-id="page-2"' in html

    def test_landscape_page_rule(self):
        document = Document(pages=[Page(id="p")])
        document.page_settings.orientation = "landscape"
        html = to_html(document)

        assert "size: A4 landscape" in html
        assert "width: 1122.66px" in html

    def test_page_and_block_pixels(self, sample_document):
        html = to_html(sample_document)

        assert "width: 793.8px; height: 1122.66px" in html
        title = re.search(r'<div class="block block-title" data-block-id="title" style="([^"]+)"', html).group(1)
        assert "left: 37.8px" in title
        assert "width: 378px" in title
        assert "height: 56.7px" in title
        assert "font-size: 24pt" in title
        assert "font-weight: bold" in title

    def test_scale_multiplies_pixels_and_fonts(self, sample_document):
        html = to_html(sample_document, scale=2.0)

        assert "width: 1587.6px" in html
        assert "left: 75.6px" in html
        assert "font-size: 48pt" in html

    def test_px_and_pt_helpers(self):
        assert px(10) == "37.8px"
        assert px(10, 2) == "75.6px"
        assert px(0) == "0px"
        assert pt(12, 1.5) == "18pt"

    def test_template_placeholders(self, sample_document):
        html = to_html(sample_document)

        assert "Full name" in html
        assert '<span class="required">*</span>' in html
        assert "☐" in html
        assert '<div class="signature-label">Client</div>' in html
        assert '<div class="signature-role">client</div>' in html
        assert "{{data.order.number}}" in html

    def test_instance_values_are_escaped(self, sample_document, data):
        html = to_html(sample_document, "instance", data)

        assert "Ada &lt;Lovelace&gt;" in html
        assert "Ada <Lovelace>" not in html
        assert "☑" in html
        assert "05/03/2024" in html

    def test_script_is_removed(self, sample_document, data):
        html = to_html(sample_document, "instance", data)
        assert "<script" not in html
        assert "alert(1)" not in html

    def test_table_columns(self, sample_document):
        html = to_html(sample_document)

        assert '<col style="width: 25%"><col style="width: 25%"><col style="width: 50%">' in html
        assert html.count("<td>&nbsp;</td>") == 6

    def test_signature_overlay(self, sample_document, png_data_url):
        record = sign_block("sig", png_data_url, "2024-03-05 14:30", "Europe/Warsaw")
        html = to_html(sample_document, "instance", {}, [record])

        assert "Signed at 2024-03-05 14:30 (Europe/Warsaw)" in html
        assert f"Hash: {record.signature_hash[:16]}…" in html
        assert 'class="signature-image"' in html

    def test_page_numbers(self, sample_document):
        html = to_html(sample_document)
        assert ">1 / 2<" in html
        assert ">2 / 2<" in html

    def test_unsafe_image_url_is_not_emitted(self):
        document = Document(pages=[Page(id="p", blocks=[
            ImageBlock(id="img", image_url="javascript:alert(1)", alt_text="Logo"),
        ])])
        html = to_html(document)

        assert "javascript:" not in html
        assert '<div class="image-placeholder">Logo</div>' in html

    def test_block_border(self):
        document = Document(pages=[Page(id="p", blocks=[TextBlock(id="t")])])
        document.pages[0].blocks[0].style.border = "thin"
        assert "border: 1px solid #ccc" in to_html(document)

    def test_save_to_file(self, sample_document, temp_dir):
        rendered = DocumentRenderer(sample_document).render()
        renderer = HTMLRenderer(rendered)
        output = temp_dir / "out.html"

        assert renderer.save_to_file(renderer.render(), output)
        assert output.read_text(encoding="utf-8").startswith("<!DOCTYPE html>")

    def test_margin_guide_with_grid(self):
        document = Document(pages=[Page(id="p")])
        rendered = DocumentRenderer(document, RenderOptions(show_grid=True)).render()
        html = HTMLRenderer(rendered).render()

        assert ('<div class="margin-guide" style="left: 37.8px; top: 37.8px; '
                'width: 718.2px; height: 1047.06px"></div>') in html
        assert 'class="margin-guide"' not in to_html(document)


def load(blocks, page_settings=None):
    return Document.from_dict({"pageSettings": page_settings or {}, "pages": [{"id": "p", "blocks": blocks}]})


class TestPersistedValuesInMarkup:
    """Stored style and level values cannot change the generated markup."""

    def test_block_align_cannot_close_the_style_attribute(self):
        document = load([{"type": "text", "id": "t", "style": {"align": 'left" onmouseover="alert(1)'}}])
        html = to_html(document)

        assert "onmouseover" not in html
        assert "text-align: left;" in html

    def test_band_align_cannot_close_the_style_attribute(self):
        document = load([], {"showHeader": True, "headerContent": "Head", "headerAlign": 'center" onclick="x()'})
        html = to_html(document)

        assert "onclick" not in html
        assert '<div class="band band-header"' in html

    def test_in_memory_values_go_through_the_whitelists(self):
        text = TextBlock(id="t")
        text.style.align = 'right" onmouseover="alert(1)'
        title = TitleBlock(id="h", text="Heading", level="img src=x onerror=alert(1)")
        html = to_html(Document(pages=[Page(id="p", blocks=[text, title])]))

        assert "onmouseover" not in html
        assert "<img" not in html
        assert "onerror" not in html
        assert '<h1 style="margin: 0; font-size: inherit; font-weight: inherit">Heading</h1>' in html

    def test_unknown_title_level_renders_h1(self):
        document = load([{"type": "title", "id": "h", "text": "Heading", "level": "h4"}])
        html = to_html(document)

        assert "<h4" not in html
        assert ">Heading</h1>" in html

    def test_numeric_label_is_text(self):
        html = to_html(load([{"type": "number", "id": "n", "label": 5}]))
        assert '<div class="field-label">5</div>' in html

    def test_failing_block_does_not_abort_the_document(self):
        broken = NumberBlock(id="n", label=5)
        document = Document(pages=[
            Page(id="a", blocks=[broken]),
            Page(id="b", blocks=[TextBlock(id="t", label="Still here")]),
        ])
        html = to_html(document)

        assert html.count('<section class="page"') == 2
        assert '<div class="block render-error"' in html
        assert "Still here" in html
        assert ">2 / 2<" in html
