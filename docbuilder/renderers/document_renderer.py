"""Turns a :class:`Document` into a positioned render tree.

Two modes share one code path:

* ``template``: structure only. Fields show their blank placeholders and
  expressions are left as written.
* ``instance``: bindings are resolved against the data context, ``{{ }}``
  expressions substituted, ``visibleIf`` conditions applied, checkboxes
  ticked and signatures overlaid.
"""

from __future__ import annotations

import logging
from html import escape
from typing import Any, Iterable, List, Mapping, Optional, assert_never

from ..config import RenderOptions
from ..engine.expression_engine import (
    apply_helper,
    evaluate_condition,
    replace_expressions,
    resolve_path,
    resolve_value,
)
from ..engine.geometry import Rect
from ..layout.canvas import paint_order
from ..models.blocks import (
    Block,
    CheckboxBlock,
    DateTimeBlock,
    DividerBlock,
    DynamicTextBlock,
    GroupBlock,
    HeaderBlock,
    ImageBlock,
    NumberBlock,
    PageBreakBlock,
    ParagraphBlock,
    RepeaterTableBlock,
    SelectBlock,
    SignatureBlock,
    SpacerBlock,
    TableBlock,
    TextBlock,
    TitleBlock,
    column_fractions,
    effective_font,
    repeater_row_count,
)
from ..models.document import Document
from ..models.page import Page
from ..models.signature import SignatureRecord, find_signature
from ..models.style import FontSpec, TableColumn
from .render_tree import (
    Band,
    BlockContent,
    CheckboxContent,
    DividerContent,
    ErrorContent,
    FieldContent,
    GroupContent,
    HeadingContent,
    ImageContent,
    PageBreakContent,
    PageNumberStamp,
    RenderedBlock,
    RenderedDocument,
    RenderedPage,
    RichTextContent,
    SignatureContent,
    SpacerContent,
    TableColumnNode,
    TableContent,
    TextContent,
)
from .sanitizer import sanitize_html

logger = logging.getLogger(__name__)

SELECT_PROMPT = "Select…"
SIGNATURE_LABEL = "Signature area"
BAND_GAP_MM = 2.0
PAGE_NUMBER_WIDTH_MM = 30.0
PAGE_NUMBER_GAP_MM = 5.0
PAGE_NUMBER_FONT_SIZE = 10.0

DATE_MODE_HELPERS = {"date": "formatDate", "time": "formatTime", "datetime": "formatDateTime"}

TRUTHY_STRINGS = frozenset({"true", "1", "yes", "on", "x"})


def is_checked(value: Any) -> bool:
    """Checkbox state of a bound value."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY_STRINGS
    return False


class DocumentRenderer:
    """Render a document in template or instance mode.

    Args:
        document: The template to play back
        options: Render options; ``options.mode`` selects template/instance
    """

    def __init__(self, document: Document, options: Optional[RenderOptions] = None):
        self.document = document
        self.options = options or RenderOptions()
        self.data: Mapping[str, Any] = {}
        self.signatures: List[SignatureRecord] = []

    @property
    def instance(self) -> bool:
        return self.options.instance

    def render(self, data: Optional[Mapping[str, Any]] = None,
               signatures: Optional[Iterable[SignatureRecord]] = None) -> RenderedDocument:
        """Render every page.

        Args:
            data: Data context for bindings and expressions (instance mode)
            signatures: Signature records keyed by block id (instance mode)
        """
        self.data = data or {}
        self.signatures = list(signatures or [])
        total = len(self.document.pages)
        rendered = RenderedDocument(
            title=self.document.title,
            orientation=self.document.page_settings.orientation,
            mode=self.options.mode,
            pages=[self.render_page(index, total) for index in range(total)],
        )
        logger.debug(f"Rendered {total} page(s) of {self.document.title!r} in {self.options.mode} mode")
        return rendered

    def render_page(self, index: int, total: Optional[int] = None) -> RenderedPage:
        """Render page ``index`` of ``total`` (defaults to the document's page count)."""
        page: Page = self.document.pages[index]
        settings = self.document.page_settings
        total = total if total is not None else len(self.document.pages)
        width, height = settings.page_size
        grid = settings.grid

        rendered = RenderedPage(
            index=index,
            page_id=page.id,
            width_mm=width,
            height_mm=height,
            margins=settings.margins,
            header=self._header_band(),
            footer=self._footer_band(),
            page_number=self._page_number(index, total),
            grid_step_mm=grid.step_mm if self.options.show_grid and grid.show and grid.step_mm > 0 else None,
            show_margins=self.options.show_grid,
        )
        for block in paint_order(page.blocks):
            if self.instance and block.visible_if and not evaluate_condition(block.visible_if, self.data):
                logger.debug(f"Block {block.id} hidden by visibleIf {block.visible_if!r}")
                continue
            rendered.blocks.append(self.render_block(block))
        return rendered

    # ------------------------------------------------------------------
    # Bands
    # ------------------------------------------------------------------
    def _band_font(self, family: str, size: float, bold: bool = False, italic: bool = False) -> FontSpec:
        return FontSpec(family=family, size_pt=size, bold=bold, italic=italic)

    def _header_band(self) -> Optional[Band]:
        settings = self.document.page_settings
        style = settings.band("header")
        if not (settings.show_header and style.content):
            return None
        area = settings.usable_area()
        frame = Rect(area.left, settings.margin_top - BAND_GAP_MM - style.height_mm, area.width, style.height_mm)
        return Band(
            frame=frame,
            text=self._text(style.content),
            font=self._band_font(style.font_family, style.font_size, style.bold, style.italic),
            align=style.align,
            vertical_align=style.vertical_align,
        )

    def _footer_band(self) -> Optional[Band]:
        settings = self.document.page_settings
        style = settings.band("footer")
        if not (settings.show_footer and style.content):
            return None
        area = settings.usable_area()
        width = area.width
        if settings.show_page_numbers:
            width -= PAGE_NUMBER_WIDTH_MM + PAGE_NUMBER_GAP_MM
        frame = Rect(area.left, area.bottom + BAND_GAP_MM, max(0.0, width), style.height_mm)
        return Band(
            frame=frame,
            text=self._text(style.content),
            font=self._band_font(style.font_family, style.font_size, style.bold, style.italic),
            align=style.align,
            vertical_align=style.vertical_align,
        )

    def _page_number(self, index: int, total: int) -> Optional[PageNumberStamp]:
        settings = self.document.page_settings
        if not settings.show_page_numbers:
            return None
        area = settings.usable_area()
        height = settings.band("footer").height_mm
        frame = Rect(area.right - PAGE_NUMBER_WIDTH_MM, area.bottom + BAND_GAP_MM, PAGE_NUMBER_WIDTH_MM, height)
        return PageNumberStamp(
            frame=frame,
            current=index + 1,
            total=total,
            font=self._band_font(self.options.default_font_family, PAGE_NUMBER_FONT_SIZE),
            prefix=self.options.page_number_prefix,
        )

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------
    def render_block(self, block: Block) -> RenderedBlock:
        """Render one block; failures become an error placeholder."""
        try:
            content = self._content(block)
        except Exception as e:
            logger.warning(f"Failed to render {block.kind} block {block.id}: {e}")
            content = ErrorContent(message=f"Cannot render {block.kind} block")

        style = block.style
        return RenderedBlock(
            block_id=block.id,
            kind=block.kind,
            frame=Rect(block.x_mm, block.y_mm, block.w_mm, block.height_mm),
            font=effective_font(block, self.options.default_font_family, self.options.default_font_size),
            align=style.align or "left",
            vertical_align=style.vertical_align or "top",
            padding_mm=style.padding_mm if style.padding_mm is not None else self.options.default_padding_mm,
            border=style.border or "none",
            z=block.z,
            content=content,
        )

    def _text(self, text: Optional[str]) -> str:
        """Template text: substituted in instance mode, verbatim otherwise."""
        if not self.instance:
            return text or ""
        return replace_expressions(text, {"data": self.data})

    def _bound(self, bind: Optional[str]) -> Optional[str]:
        """Display value of a binding, or None when the placeholder should show."""
        if not self.instance or not bind:
            return None
        return resolve_path(bind, self.data) or None

    def _date_value(self, block: DateTimeBlock) -> Optional[str]:
        raw = self._bound(block.bind)
        if raw is None:
            return None
        helper = DATE_MODE_HELPERS.get(block.mode, "formatDate")
        return apply_helper(helper, resolve_value(block.bind, self.data)) or raw

    def _columns(self, columns: List[TableColumn]) -> List[TableColumnNode]:
        return [
            TableColumnNode(header=column.header, fraction=fraction, required=column.required)
            for column, fraction in zip(columns, column_fractions(columns))
        ]

    def _content(self, block: Block) -> BlockContent:
        label = block.label or ""
        match block:
            case HeaderBlock():
                return TextContent(text=self._text(block.content), logo_url=block.logo_url)
            case TitleBlock():
                return HeadingContent(level=block.level, text=self._text(block.text))
            case ParagraphBlock():
                html = block.html or ""
                if self.instance:
                    html = replace_expressions(html, {"data": self.data}, transform=escape)
                return RichTextContent(html=sanitize_html(html))
            case TextBlock():
                return FieldContent(
                    label=label,
                    value=self._bound(block.bind),
                    required=block.required,
                    multiline=block.multiline,
                    prompt=block.placeholder or None,
                )
            case NumberBlock():
                return FieldContent(label=label, value=self._bound(block.bind), required=block.required)
            case DateTimeBlock():
                return FieldContent(label=label, value=self._date_value(block))
            case CheckboxBlock():
                checked = self.instance and bool(block.bind) and is_checked(resolve_value(block.bind, self.data))
                return CheckboxContent(label=label, checked=checked)
            case SelectBlock():
                return FieldContent(
                    label=label,
                    value=self._bound(block.bind),
                    prompt=SELECT_PROMPT,
                    options=list(block.options),
                )
            case TableBlock():
                return TableContent(label=label, columns=self._columns(block.columns), rows=max(0, block.rows))
            case RepeaterTableBlock():
                return TableContent(
                    label=label,
                    columns=self._columns(block.columns),
                    rows=repeater_row_count(block),
                    repeater=True,
                    max_rows=block.max_rows,
                )
            case GroupBlock():
                return GroupContent(title=block.title)
            case SignatureBlock():
                record = find_signature(self.signatures, block.id) if self.instance else None
                return SignatureContent(label=label or SIGNATURE_LABEL, role=block.role, record=record)
            case ImageBlock():
                return ImageContent(url=block.image_url, alt=block.alt_text)
            case DividerBlock():
                return DividerContent()
            case SpacerBlock():
                return SpacerContent()
            case DynamicTextBlock():
                return TextContent(text=self._text(block.expression))
            case PageBreakBlock():
                return PageBreakContent(show_marker=not self.instance)
            case _:
                assert_never(block)


def render_document(document: Document, data: Optional[Mapping[str, Any]] = None,
                    signatures: Optional[Iterable[SignatureRecord]] = None,
                    options: Optional[RenderOptions] = None) -> RenderedDocument:
    """Convenience wrapper around :class:`DocumentRenderer`."""
    return DocumentRenderer(document, options).render(data, signatures)
