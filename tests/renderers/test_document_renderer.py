"""
Tests for DocumentRenderer: template vs instance playback, bands and page stamps.
"""

import pytest

from docbuilder.config import RenderOptions
from docbuilder.models import (
    CheckboxBlock,
    DateTimeBlock,
    Document,
    Page,
    PageBreakBlock,
    RepeaterTableBlock,
    SelectBlock,
    TableColumn,
    TextBlock,
)
from docbuilder.models.signature import sign_block
from docbuilder.renderers.document_renderer import DocumentRenderer, is_checked
from docbuilder.renderers.render_tree import (
    CheckboxContent,
    ErrorContent,
    FieldContent,
    HeadingContent,
    PageBreakContent,
    RichTextContent,
    SignatureContent,
    TableContent,
    TextContent,
)

TEMPLATE = RenderOptions(mode="template")
INSTANCE = RenderOptions(mode="instance")


def render(document, options=TEMPLATE, data=None, signatures=None):
    return DocumentRenderer(document, options).render(data, signatures)


class TestTemplateMode:
    """Structure only: placeholders, verbatim expressions."""

    def test_fields_show_placeholders(self, sample_document, data):
        rendered = render(sample_document, data=data)
        name = rendered.find_block("name").content

        assert isinstance(name, FieldContent)
        assert name.value is None
        assert name.prompt == "Full name"
        assert name.required is True

    def test_expressions_are_left_verbatim(self, sample_document, data):
        rendered = render(sample_document, data=data)

        assert rendered.find_block("title").content.text == "Order {{data.order.number}}"
        assert "{{data.customer.name}}" in rendered.find_block("para").content.html

    def test_visible_if_is_ignored(self, sample_document):
        assert render(sample_document).find_block("vip") is not None

    def test_checkbox_unchecked_and_signature_blank(self, sample_document, data, png_data_url):
        record = sign_block("sig", png_data_url, "2024-03-05 14:30", "UTC")
        rendered = render(sample_document, data=data, signatures=[record])

        assert rendered.find_block("agree").content.checked is False
        assert rendered.find_block("sig").content.signed is False

    def test_page_break_marker_only_in_template(self):
        document = Document(pages=[Page(id="p", blocks=[PageBreakBlock(id="br", w_mm=180)])])

        assert render(document).find_block("br").content == PageBreakContent(show_marker=True)
        assert render(document, INSTANCE).find_block("br").content.show_marker is False


class TestInstanceMode:
    """Bindings, expressions, conditions and signatures."""

    def test_bound_values(self, sample_document, data):
        rendered = render(sample_document, INSTANCE, data)

        assert rendered.find_block("name").content.value == "Ada <Lovelace>"
        assert rendered.find_block("due").content.value == "05/03/2024"
        assert rendered.find_block("agree").content.checked is True

    def test_expressions_substituted(self, sample_document, data):
        rendered = render(sample_document, INSTANCE, data)

        assert rendered.find_block("title").content == HeadingContent(level="h1", text="Order 42")
        assert rendered.find_block("vip").content == TextContent(text="VIP: Ada <Lovelace>")

    def test_paragraph_is_escaped_and_sanitized(self, sample_document, data):
        html = render(sample_document, INSTANCE, data).find_block("para").content.html

        assert html == "<p>Dear Ada &lt;Lovelace&gt;,</p>"

    def test_injected_markup_in_data_is_not_executed(self, sample_document):
        data = {"customer": {"name": "<img src=x onerror=alert(1)>"}}
        html = render(sample_document, INSTANCE, data).find_block("para").content.html

        assert "<img" not in html
        assert "&lt;img" in html

    def test_visible_if(self, sample_document, data):
        assert render(sample_document, INSTANCE, data).find_block("vip") is not None

        data["customer"]["tier"] = "silver"
        assert render(sample_document, INSTANCE, data).find_block("vip") is None

    def test_missing_data_keeps_placeholders(self, sample_document):
        rendered = render(sample_document, INSTANCE, {})

        assert rendered.find_block("name").content.value is None
        assert rendered.find_block("title").content.text == "Order "
        assert rendered.find_block("vip") is None

    def test_signature_overlay(self, sample_document, png_data_url):
        record = sign_block("sig", png_data_url, "2024-03-05 14:30", "Europe/Warsaw")
        content = render(sample_document, INSTANCE, {}, [record]).find_block("sig").content

        assert isinstance(content, SignatureContent)
        assert content.record is record
        assert content.signed

    def test_datetime_modes(self):
        document = Document(pages=[Page(id="p", blocks=[
            DateTimeBlock(id="d", bind="at", mode="date"),
            DateTimeBlock(id="dt", bind="at", mode="datetime"),
            DateTimeBlock(id="t", bind="at", mode="time"),
            DateTimeBlock(id="raw", bind="text", mode="date"),
        ])])
        rendered = render(document, INSTANCE, {"at": "2024-03-05T14:30:00", "text": "soon"})

        assert rendered.find_block("d").content.value == "05/03/2024"
        assert rendered.find_block("dt").content.value == "05/03/2024 14:30"
        assert rendered.find_block("t").content.value == "14:30"
        assert rendered.find_block("raw").content.value == "soon"

    def test_select_shows_prompt_until_bound(self):
        document = Document(pages=[Page(id="p", blocks=[SelectBlock(id="s", options=["A", "B"], bind="choice")])])

        blank = render(document, INSTANCE, {}).find_block("s").content
        assert blank.value is None
        assert blank.prompt == "Select…"
        assert blank.options == ["A", "B"]
        assert render(document, INSTANCE, {"choice": "B"}).find_block("s").content.value == "B"

    @pytest.mark.parametrize("value, expected", [
        (True, True), (False, False), (1, True), (0, False), ("yes", True), ("X", True),
        ("no", False), ("", False), (None, False), ([1], False),
    ])
    def test_is_checked(self, value, expected):
        assert is_checked(value) is expected


class TestLayoutOutput:
    """Geometry, ordering, tables and bands."""

    def test_blocks_in_z_order(self):
        document = Document(pages=[Page(id="p", blocks=[
            TextBlock(id="top", z=5), TextBlock(id="bottom", z=-1), TextBlock(id="mid", z=2),
        ])])
        assert [block.block_id for block in render(document).pages[0].blocks] == ["bottom", "mid", "top"]

    def test_block_frame_and_font(self, sample_document):
        block = render(sample_document).find_block("title")

        assert (block.frame.x, block.frame.y, block.frame.width, block.frame.height) == (10, 10, 100, 15)
        assert block.font.size_pt == 24
        assert block.font.bold is True
        assert block.padding_mm == 2.0

    def test_table_columns(self, sample_document):
        content = render(sample_document).find_block("items").content

        assert isinstance(content, TableContent)
        assert [column.percent for column in content.columns] == [25.0, 25.0, 50.0]
        assert content.columns[2].required
        assert content.rows == 2

    def test_repeater_rows(self):
        document = Document(pages=[Page(id="p", blocks=[
            RepeaterTableBlock(id="r", min_rows=4, max_rows=3, columns=[TableColumn(id="c")]),
        ])])
        content = render(document).find_block("r").content

        assert content.repeater
        assert content.rows == 3
        assert content.max_rows == 3

    def test_page_number_stamp(self):
        document = Document(pages=[Page(id="a"), Page(id="b"), Page(id="c")])
        pages = render(document).pages

        assert [page.page_number.text for page in pages] == ["1 / 3", "2 / 3", "3 / 3"]
        stamp = pages[1].page_number
        assert (stamp.frame.x, stamp.frame.y, stamp.frame.width) == (170, 289, 30)

    def test_page_number_prefix_and_disabled(self):
        document = Document(pages=[Page(id="a"), Page(id="b")])
        options = RenderOptions(page_number_prefix="Page ")
        assert render(document, options).pages[1].page_number.text == "Page 2 / 2"

        document.page_settings.show_page_numbers = False
        assert render(document).pages[0].page_number is None

    def test_header_and_footer_bands(self, data):
        document = Document(pages=[Page(id="p")])
        settings = document.page_settings
        settings.show_header = True
        settings.header_content = "ACME for {{data.customer.name}}"
        settings.header_align = "center"
        settings.show_footer = True
        settings.footer_content = "Confidential"
        settings.footer_height = 8

        page = render(document, INSTANCE, data).pages[0]

        assert page.header.text == "ACME for Ada <Lovelace>"
        assert page.header.align == "center"
        assert (page.header.frame.y, page.header.frame.height, page.header.frame.width) == (3, 5, 190)
        assert (page.footer.frame.y, page.footer.frame.width, page.footer.frame.height) == (289, 155, 8)
        assert page.footer.font.size_pt == 10

    def test_bands_hidden_without_content(self):
        document = Document(pages=[Page(id="p")])
        document.page_settings.show_header = True

        page = render(document).pages[0]
        assert page.header is None
        assert page.footer is None

    def test_footer_uses_full_width_without_page_numbers(self):
        document = Document(pages=[Page(id="p")])
        document.page_settings.show_footer = True
        document.page_settings.footer_content = "x"
        document.page_settings.show_page_numbers = False

        assert render(document).pages[0].footer.frame.width == 190

    def test_grid_only_when_requested(self):
        document = Document(pages=[Page(id="p")])
        assert render(document).pages[0].grid_step_mm is None
        assert render(document, RenderOptions(show_grid=True)).pages[0].grid_step_mm == 5

    def test_landscape_page(self):
        document = Document(pages=[Page(id="p")])
        document.page_settings.orientation = "landscape"
        page = render(document).pages[0]
        assert (page.width_mm, page.height_mm) == (297, 210)

    def test_failed_block_becomes_error_placeholder(self, monkeypatch):
        document = Document(pages=[Page(id="p", blocks=[CheckboxBlock(id="c"), TextBlock(id="t")])])
        renderer = DocumentRenderer(document)
        original = renderer._content

        def broken(block):
            if block.id == "c":
                raise RuntimeError("boom")
            return original(block)

        monkeypatch.setattr(renderer, "_content", broken)
        rendered = renderer.render()

        assert isinstance(rendered.find_block("c").content, ErrorContent)
        assert isinstance(rendered.find_block("t").content, FieldContent)

    def test_rich_text_content_type(self, sample_document):
        assert isinstance(render(sample_document).find_block("para").content, RichTextContent)

    def test_checkbox_content_type(self, sample_document):
        assert isinstance(render(sample_document).find_block("agree").content, CheckboxContent)

    def test_options_validation(self):
        with pytest.raises(ValueError):
            RenderOptions(mode="draft")
        with pytest.raises(ValueError):
            RenderOptions(scale=0)


class TestMalformedTemplates:
    """A malformed field stays local to its block."""

    def test_boolean_visible_if_from_json_keeps_block_visible(self):
        document = Document.from_dict({"pages": [{"id": "p", "blocks": [
            {"type": "text", "id": "t", "visibleIf": True},
        ]}]})
        rendered = render(document, INSTANCE, {})
        assert rendered.find_block("t") is not None

    def test_non_string_visible_if_in_memory(self):
        document = Document(pages=[
            Page(id="a", blocks=[TextBlock(id="odd", visible_if=True)]),
            Page(id="b", blocks=[TextBlock(id="t", bind="name")]),
        ])
        rendered = render(document, INSTANCE, {"name": "Ada"})

        assert len(rendered.pages) == 2
        assert rendered.find_block("odd") is not None
        assert rendered.find_block("t").content.value == "Ada"

    def test_margins_shown_with_grid(self):
        document = Document(pages=[Page(id="p")])
        assert render(document).pages[0].show_margins is False
        page = render(document, RenderOptions(show_grid=True)).pages[0]

        assert page.show_margins is True
        frame = page.usable_frame
        assert (frame.x, frame.y, frame.width, frame.height) == (10, 10, 190, 277)
