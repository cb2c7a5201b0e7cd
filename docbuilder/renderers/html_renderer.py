"""Print-ready HTML output for a render tree."""

from __future__ import annotations

import logging
from html import escape
from pathlib import Path
from typing import List, Union, assert_never

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
    TableContent,
    TextContent,
)
from .render_utils import ALIGN_ITEMS, JUSTIFY_CONTENT, TEXT_ALIGN, pt, px
from .sanitizer import is_safe_url

logger = logging.getLogger(__name__)

HEADING_TAGS = {"h1", "h2", "h3"}

BASE_CSS = """
* { box-sizing: border-box; }
body { margin: 0; background: #f3f4f6; }
.page { position: relative; overflow: hidden; background: #fff; margin: 0 auto; break-after: page; page-break-after: always; }
.page:last-child { break-after: auto; page-break-after: auto; }
.block { position: absolute; display: flex; flex-direction: column; overflow: hidden; color: #000; line-height: 1.2; }
.band, .page-number { position: absolute; display: flex; color: #000; white-space: pre-wrap; line-height: 1.2; }
.text { white-space: pre-wrap; word-wrap: break-word; }
.field-label { font-size: 0.85em; color: #374151; }
.field-value { font-weight: 500; }
.field-blank { border-bottom: 1px solid #9ca3af; min-height: 1.2em; color: #9ca3af; }
.required { color: #dc2626; }
.checkbox { display: inline-block; margin-right: 0.4em; }
table { width: 100%; border-collapse: collapse; table-layout: fixed; }
th, td { border: 1px solid #999; padding: 2px 4px; text-align: left; height: 1.6em; }
.repeater-note, .signature-meta, .signature-hash { font-size: 0.75em; color: #4b5563; }
.signature-area { flex: 1; border-bottom: 1px solid #000; min-height: 1em; }
.signature-image { max-width: 100%; max-height: 70%; object-fit: contain; }
.image-placeholder, .page-break-marker { border: 1px dashed #9ca3af; color: #6b7280; text-align: center; }
.render-error { color: #b91c1c; font-size: 0.8em; }
.margin-guide { position: absolute; border: 2px dashed #93c5fd; pointer-events: none; z-index: 0; }
hr { width: 100%; border: 0; border-top: 1px solid #000; margin: auto 0; }
@media print { body { background: none; } .page { margin: 0; } }
"""


class HTMLRenderer:
    """Render a :class:`RenderedDocument` as a standalone HTML page.

    Every millimeter value is converted with ``mm * 3.78 * scale`` and every
    font size multiplied by ``scale``.
    """

    def __init__(self, rendered: RenderedDocument, scale: float = 1.0) -> None:
        self.rendered = rendered
        self.scale = scale

    def render(self) -> str:
        pages = "\n".join(self.render_page(page) for page in self.rendered.pages)
        page_rule = f"@page {{ size: A4 {self.rendered.orientation}; margin: 0; }}"
        return (
            "<!DOCTYPE html>\n"
            "<html><head><meta charset=\"utf-8\"><title>"
            f"{escape(self.rendered.title)}</title>"
            f"<style>{page_rule}{BASE_CSS}</style>"
            f"</head><body class=\"mode-{self.rendered.mode}\">\n"
            f"{pages}\n"
            "</body></html>"
        )

    def save_to_file(self, html: str, output_path: Union[str, Path]) -> bool:
        Path(output_path).write_text(html, encoding="utf-8")
        return True

    # ------------------------------------------------------------------
    def _px(self, mm: float) -> str:
        return px(mm, self.scale)

    def render_page(self, page: RenderedPage) -> str:
        styles = [f"width: {self._px(page.width_mm)}", f"height: {self._px(page.height_mm)}"]
        if page.grid_step_mm:
            step = self._px(page.grid_step_mm)
            styles.append(
                "background-image: linear-gradient(#e5e7eb 1px, transparent 1px), "
                "linear-gradient(90deg, #e5e7eb 1px, transparent 1px)"
            )
            styles.append(f"background-size: {step} {step}")
        parts: List[str] = [f'<section class="page" data-page-id="{escape(page.page_id)}" style="{"; ".join(styles)}">']
        if page.show_margins:
            parts.append(f'<div class="margin-guide" style="{"; ".join(self._frame_css(page.usable_frame))}"></div>')
        if page.header is not None:
            parts.append(self._band(page.header, "header"))
        for block in page.blocks:
            try:
                parts.append(self.render_block(block))
            except Exception as e:
                logger.warning(f"Failed to render block {block.block_id} on page {page.index + 1}: {e}")
                parts.append(self._error_block(block))
        if page.footer is not None:
            parts.append(self._band(page.footer, "footer"))
        if page.page_number is not None:
            parts.append(self._page_number(page.page_number))
        parts.append("</section>")
        return "\n".join(parts)

    def _frame_css(self, frame) -> List[str]:
        return [
            f"left: {self._px(frame.x)}",
            f"top: {self._px(frame.y)}",
            f"width: {self._px(frame.width)}",
            f"height: {self._px(frame.height)}",
        ]

    def _font_css(self, font) -> List[str]:
        return [
            f"font-family: {escape(font.family)}",
            f"font-size: {pt(font.size_pt, self.scale)}",
            f"font-weight: {'bold' if font.bold else 'normal'}",
            f"font-style: {'italic' if font.italic else 'normal'}",
        ]

    def _band(self, band: Band, which: str) -> str:
        styles = self._frame_css(band.frame) + self._font_css(band.font) + [
            f"text-align: {TEXT_ALIGN.get(band.align, 'left')}",
            f"justify-content: {JUSTIFY_CONTENT.get(band.align, 'flex-start')}",
            f"align-items: {ALIGN_ITEMS.get(band.vertical_align, 'center')}",
            f"padding: 0 {8 * self.scale:g}px",
        ]
        return f'<div class="band band-{which}" style="{"; ".join(styles)}">{escape(band.text)}</div>'

    def _page_number(self, stamp: PageNumberStamp) -> str:
        styles = self._frame_css(stamp.frame) + self._font_css(stamp.font) + [
            "justify-content: flex-end",
            "align-items: center",
            "text-align: right",
        ]
        return f'<div class="page-number" style="{"; ".join(styles)}">{escape(stamp.text)}</div>'

    def render_block(self, block: RenderedBlock) -> str:
        styles = self._frame_css(block.frame) + self._font_css(block.font) + [
            f"padding: {self._px(block.padding_mm)}",
            f"border: {block.border_css}",
            f"text-align: {TEXT_ALIGN.get(block.align, 'left')}",
            f"justify-content: {ALIGN_ITEMS.get(block.vertical_align, 'flex-start')}",
            f"z-index: {block.z}",
        ]
        return (
            f'<div class="block block-{escape(block.kind)}" data-block-id="{escape(block.block_id)}" '
            f'style="{"; ".join(styles)}">{self.render_content(block.content)}</div>'
        )

    def _error_block(self, block: RenderedBlock) -> str:
        return (f'<div class="block render-error" style="{"; ".join(self._frame_css(block.frame))}">'
                'Cannot render block</div>')

    def render_content(self, content: BlockContent) -> str:
        match content:
            case TextContent():
                logo = ""
                if content.logo_url and is_safe_url(content.logo_url, "img"):
                    logo = f'<img class="logo" src="{escape(content.logo_url)}" alt="" style="max-height: 100%">'
                return f'{logo}<div class="text">{escape(content.text)}</div>'
            case HeadingContent():
                tag = content.level if content.level in HEADING_TAGS else "h1"
                return (f'<{tag} style="margin: 0; font-size: inherit; font-weight: inherit">'
                        f'{escape(content.text)}</{tag}>')
            case RichTextContent():
                return f'<div class="rich-text">{content.html}</div>'
            case FieldContent():
                return self._field(content)
            case CheckboxContent():
                mark = "☑" if content.checked else "☐"
                checked = " checked" if content.checked else ""
                return (f'<div><span class="checkbox{checked}">{mark}</span>'
                        f'<span class="checkbox-label">{escape(content.label)}</span></div>')
            case TableContent():
                return self._table(content)
            case GroupContent():
                return f'<div class="group-title">{escape(content.title)}</div>'
            case SignatureContent():
                return self._signature(content)
            case ImageContent():
                if content.url and is_safe_url(content.url, "img"):
                    return (f'<img src="{escape(content.url)}" alt="{escape(content.alt)}" '
                            'style="max-width: 100%; max-height: 100%; object-fit: contain">')
                return f'<div class="image-placeholder">{escape(content.alt or "No image")}</div>'
            case DividerContent():
                return "<hr>"
            case SpacerContent():
                return ""
            case PageBreakContent():
                return '<div class="page-break-marker">Page break</div>' if content.show_marker else ""
            case ErrorContent():
                return f'<div class="render-error">{escape(content.message)}</div>'
            case _:
                assert_never(content)

    def _label(self, label: str, required: bool = False) -> str:
        if not label:
            return ""
        star = ' <span class="required">*</span>' if required else ""
        return f'<div class="field-label">{escape(label)}{star}</div>'

    def _field(self, content: FieldContent) -> str:
        if content.filled:
            return (f'{self._label(content.label)}'
                    f'<div class="field-value text">{escape(content.value or "")}</div>')
        blank_class = "field-blank multiline" if content.multiline else "field-blank"
        return f'{self._label(content.label, content.required)}<div class="{blank_class}">{escape(content.prompt or "")}</div>'

    def _table(self, content: TableContent) -> str:
        cols = "".join(f'<col style="width: {column.percent:.4g}%">' for column in content.columns)
        star = ' <span class="required">*</span>'
        headers = "".join(
            f"<th>{escape(column.header)}{star if column.required else ''}</th>" for column in content.columns
        )
        row = "<tr>" + "<td>&nbsp;</td>" * len(content.columns) + "</tr>"
        parts = [self._label(content.label)]
        parts.append(f"<table><colgroup>{cols}</colgroup><thead><tr>{headers}</tr></thead>"
                     f"<tbody>{row * content.rows}</tbody></table>")
        if content.repeater:
            limit = f"up to {content.max_rows}" if content.max_rows is not None else "as needed"
            parts.append(f'<div class="repeater-note">Rows repeat {limit}</div>')
        return "".join(parts)

    def _signature(self, content: SignatureContent) -> str:
        record = content.record
        if record is None:
            role = f'<div class="signature-role">{escape(content.role)}</div>' if content.role else ""
            return (f'<div class="signature-area"></div>'
                    f'<div class="signature-label">{escape(content.label)}</div>{role}')
        image = ""
        if is_safe_url(record.signature_png_url, "img"):
            image = f'<img class="signature-image" src="{escape(record.signature_png_url)}" alt="Signature">'
        return (
            f"{image}"
            f'<div class="signature-meta">Signed at {escape(record.signed_at_local)} ({escape(record.tz)})</div>'
            f'<div class="signature-hash">Hash: {escape(record.hash_preview)}…</div>'
        )


def render_html(rendered: RenderedDocument, scale: float = 1.0) -> str:
    return HTMLRenderer(rendered, scale).render()
