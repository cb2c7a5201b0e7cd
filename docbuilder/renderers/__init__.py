"""Document renderer and its HTML/PDF output surfaces."""

from .document_renderer import DocumentRenderer, render_document
from .html_renderer import HTMLRenderer, render_html
from .pdf_renderer import PdfRenderer, render_pdf
from .render_tree import (
    Band,
    PageNumberStamp,
    RenderedBlock,
    RenderedDocument,
    RenderedPage,
)
from .sanitizer import html_to_text_lines, sanitize_html

__all__ = [
    "Band",
    "DocumentRenderer",
    "HTMLRenderer",
    "PageNumberStamp",
    "PdfRenderer",
    "RenderedBlock",
    "RenderedDocument",
    "RenderedPage",
    "html_to_text_lines",
    "render_document",
    "render_html",
    "render_pdf",
    "sanitize_html",
]
