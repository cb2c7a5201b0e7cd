"""PDF output for a render tree, drawn with the ReportLab canvas."""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import Optional, Union, assert_never

from reportlab.lib.colors import HexColor, black
from reportlab.lib.pagesizes import A4, landscape, portrait
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas as pdf_canvas

from ..engine.geometry import Rect, mm_to_pt
from ..exceptions import RenderingError
from ..models.style import FontSpec
from .render_tree import (
    Band,
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
from .render_utils import load_image, pdf_border, pdf_font_name
from .sanitizer import html_to_text_lines

logger = logging.getLogger(__name__)

CanvasTarget = Union[str, Path, BytesIO]

LINE_HEIGHT = 1.2
MUTED = HexColor("#6b7280")
RULE = HexColor("#9ca3af")


class PdfRenderer:
    """Draw every rendered page onto an A4 ReportLab canvas."""

    def __init__(self, rendered: RenderedDocument) -> None:
        self.rendered = rendered
        self.page_size = landscape(A4) if rendered.orientation == "landscape" else portrait(A4)
        self.canvas: Optional[pdf_canvas.Canvas] = None
        self._page_height_mm = 0.0

    def render(self, output: Optional[CanvasTarget] = None) -> bytes:
        """Write the PDF to ``output`` (path or buffer) and return its bytes."""
        buffer = BytesIO()
        target = output if output is not None else buffer
        try:
            self.canvas = pdf_canvas.Canvas(target if hasattr(target, "write") else str(target),
                                            pagesize=self.page_size)
            self.canvas.setTitle(self.rendered.title)
            for page in self.rendered.pages:
                self.draw_page(page)
                self.canvas.showPage()
            self.canvas.save()
        except OSError as e:
            raise RenderingError("Cannot write PDF", str(e)) from e
        finally:
            self.canvas = None

        if output is None:
            return buffer.getvalue()
        if hasattr(output, "getvalue"):
            return output.getvalue()
        return Path(output).read_bytes()

    # ------------------------------------------------------------------
    # Coordinates: render tree is mm from the top-left, PDF is points from the bottom-left.
    # ------------------------------------------------------------------
    def _box(self, frame: Rect) -> tuple[float, float, float, float]:
        x = mm_to_pt(frame.x)
        y = mm_to_pt(self._page_height_mm - frame.y - frame.height)
        return x, y, mm_to_pt(frame.width), mm_to_pt(frame.height)

    def _set_font(self, font: FontSpec, size: Optional[float] = None) -> tuple[str, float]:
        name = pdf_font_name(font.family, bold=font.bold, italic=font.italic)
        size = size or font.size_pt
        self.canvas.setFont(name, size)
        return name, size

    def draw_page(self, page: RenderedPage) -> None:
        self._page_height_mm = page.height_mm
        if page.header is not None:
            self._draw_band(page.header)
        for block in page.blocks:
            try:
                self.draw_block(block)
            except Exception as e:
                logger.warning(f"Failed to draw block {block.block_id} on page {page.index + 1}: {e}")
        if page.footer is not None:
            self._draw_band(page.footer)
        if page.page_number is not None:
            self._draw_page_number(page.page_number)

    def _draw_band(self, band: Band) -> None:
        x, y, width, height = self._box(band.frame)
        self._draw_lines([band.text], band.font, Rect(x, y, width, height), band.align, band.vertical_align)

    def _draw_page_number(self, stamp: PageNumberStamp) -> None:
        x, y, width, height = self._box(stamp.frame)
        self._draw_lines([stamp.text], stamp.font, Rect(x, y, width, height), "right", "middle")

    def _draw_lines(self, lines, font: FontSpec, box: Rect, align: str = "left", vertical_align: str = "top",
                    size: Optional[float] = None) -> float:
        """Draw wrapped lines into ``box`` (points, bottom-left origin). Returns the used height."""
        name, size = self._set_font(font, size)
        leading = size * LINE_HEIGHT
        wrapped = []
        for line in lines:
            wrapped.extend(simpleSplit(line, name, size, max(box.width, 1.0)) or [""])
        used = leading * len(wrapped)
        if vertical_align == "middle":
            top = box.y + (box.height + used) / 2
        elif vertical_align == "bottom":
            top = box.y + used
        else:
            top = box.y + box.height
        baseline = top - size
        for line in wrapped:
            if baseline < box.y - leading:
                break
            if align == "center":
                self.canvas.drawCentredString(box.x + box.width / 2, baseline, line)
            elif align == "right":
                self.canvas.drawRightString(box.x + box.width, baseline, line)
            else:
                self.canvas.drawString(box.x, baseline, line)
            baseline -= leading
        return used

    def draw_block(self, block: RenderedBlock) -> None:
        c = self.canvas
        x, y, width, height = self._box(block.frame)
        border = pdf_border(block.border)
        if border is not None:
            c.saveState()
            c.setLineWidth(border[0])
            c.setStrokeColor(border[1])
            c.rect(x, y, width, height, stroke=1, fill=0)
            c.restoreState()

        pad = mm_to_pt(block.padding_mm)
        inner = Rect(x + pad, y + pad, max(0.0, width - 2 * pad), max(0.0, height - 2 * pad))
        c.setFillColor(black)
        content = block.content
        match content:
            case TextContent():
                if content.logo_url:
                    self._draw_image(content.logo_url, Rect(inner.x, inner.y, inner.height, inner.height))
                self._draw_lines(content.text.splitlines() or [""], block.font, inner, block.align, block.vertical_align)
            case HeadingContent():
                self._draw_lines([content.text], block.font, inner, block.align, block.vertical_align)
            case RichTextContent():
                self._draw_lines(html_to_text_lines(content.html), block.font, inner, block.align, block.vertical_align)
            case FieldContent():
                self._draw_field(content, block.font, inner)
            case CheckboxContent():
                side = min(inner.height, block.font.size_pt)
                c.rect(inner.x, inner.y + inner.height - side, side, side, stroke=1, fill=0)
                if content.checked:
                    c.line(inner.x, inner.y + inner.height - side, inner.x + side, inner.y + inner.height)
                    c.line(inner.x, inner.y + inner.height, inner.x + side, inner.y + inner.height - side)
                label_box = Rect(inner.x + side + 4, inner.y, max(0.0, inner.width - side - 4), inner.height)
                self._draw_lines([content.label], block.font, label_box)
            case TableContent():
                self._draw_table(content, block.font, inner)
            case GroupContent():
                c.setStrokeColor(RULE)
                c.rect(x, y, width, height, stroke=1, fill=0)
                self._draw_lines([content.title], block.font, inner)
            case SignatureContent():
                self._draw_signature(content, block.font, inner)
            case ImageContent():
                if not self._draw_image(content.url, inner):
                    c.setFillColor(MUTED)
                    self._draw_lines([content.alt or "No image"], block.font, inner, "center", "middle")
            case DividerContent():
                mid = y + height / 2
                c.line(x, mid, x + width, mid)
            case SpacerContent():
                pass
            case PageBreakContent():
                if content.show_marker:
                    c.setDash(3, 3)
                    c.setStrokeColor(RULE)
                    c.rect(x, y, width, height, stroke=1, fill=0)
                    c.setDash()
            case ErrorContent():
                c.setFillColor(HexColor("#b91c1c"))
                self._draw_lines([content.message], block.font, inner)
            case _:
                assert_never(content)
        c.setFillColor(black)
        c.setStrokeColor(black)

    def _draw_field(self, content: FieldContent, font: FontSpec, box: Rect) -> None:
        label = content.label + (" *" if content.required and not content.filled else "")
        label_size = font.size_pt * 0.85
        used = 0.0
        if label:
            self.canvas.setFillColor(MUTED)
            used = self._draw_lines([label], font, box, size=label_size)
            self.canvas.setFillColor(black)
        rest = Rect(box.x, box.y, box.width, max(0.0, box.height - used))
        if content.filled:
            self._draw_lines((content.value or "").splitlines() or [""], font, rest)
            return
        self.canvas.setStrokeColor(RULE)
        underline = rest.y + max(0.0, rest.height - font.size_pt * LINE_HEIGHT)
        self.canvas.line(rest.x, underline, rest.x + rest.width, underline)
        if content.prompt:
            self.canvas.setFillColor(MUTED)
            self._draw_lines([content.prompt], font, rest)

    def _draw_table(self, content: TableContent, font: FontSpec, box: Rect) -> None:
        c = self.canvas
        used = self._draw_lines([content.label], font, box) if content.label else 0.0
        row_count = content.rows + 1
        table_height = max(0.0, box.height - used)
        if row_count <= 0 or table_height <= 0 or not content.columns:
            return
        row_height = table_height / row_count
        top = box.y + table_height
        xs = [box.x]
        for column in content.columns:
            xs.append(xs[-1] + column.fraction * box.width)
        ys = [top - i * row_height for i in range(row_count + 1)]
        c.setStrokeColor(HexColor("#999999"))
        c.grid(xs, ys)
        header_font = FontSpec(font.family, font.size_pt, True, font.italic)
        for index, column in enumerate(content.columns):
            cell = Rect(xs[index] + 2, ys[1], xs[index + 1] - xs[index] - 4, row_height)
            header = column.header + (" *" if column.required else "")
            self._draw_lines([header], header_font, cell, vertical_align="middle")

    def _draw_signature(self, content: SignatureContent, font: FontSpec, box: Rect) -> None:
        c = self.canvas
        record = content.record
        small = font.size_pt * 0.75
        if record is None:
            c.setStrokeColor(black)
            line_y = box.y + small * LINE_HEIGHT * 2
            c.line(box.x, line_y, box.x + box.width, line_y)
            lines = [content.label] + ([content.role] if content.role else [])
            self._draw_lines(lines, font, Rect(box.x, box.y, box.width, line_y - box.y), size=small)
            return
        meta = [f"Signed at {record.signed_at_local} ({record.tz})", f"Hash: {record.hash_preview}…"]
        meta_height = small * LINE_HEIGHT * len(meta)
        self._draw_image(record.signature_png_url,
                         Rect(box.x, box.y + meta_height, box.width, max(0.0, box.height - meta_height)))
        c.setFillColor(MUTED)
        self._draw_lines(meta, font, Rect(box.x, box.y, box.width, meta_height), size=small)

    def _draw_image(self, url: Optional[str], box: Rect) -> bool:
        if box.width <= 0 or box.height <= 0:
            return False
        image = load_image(url)
        if image is None:
            return False
        self.canvas.drawImage(image, box.x, box.y, box.width, box.height,
                              preserveAspectRatio=True, anchor="sw", mask="auto")
        return True


def render_pdf(rendered: RenderedDocument, output: Optional[CanvasTarget] = None) -> bytes:
    return PdfRenderer(rendered).render(output)
