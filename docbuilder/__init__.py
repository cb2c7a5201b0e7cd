"""
docbuilder - design and render positioned document templates.

Blocks are placed on A4 pages in millimeters, edited through a layout canvas
and played back either as an empty template or as a data-filled, signed
instance (HTML or PDF).
"""

from .config import CanvasOptions, RenderOptions
from .exceptions import (
    DocBuilderError,
    DocumentFormatError,
    ExpressionError,
    LayoutError,
    RenderingError,
    SignatureError,
)
from .layout import HandleDirection, LayoutCanvas, PageManager, Selection
from .models import Document, Page, PageSettings, SignatureRecord, create_default_block
from .renderers import DocumentRenderer, HTMLRenderer, PdfRenderer
from .version import __version__

__all__ = [
    "CanvasOptions",
    "DocBuilderError",
    "Document",
    "DocumentFormatError",
    "DocumentRenderer",
    "ExpressionError",
    "HTMLRenderer",
    "HandleDirection",
    "LayoutCanvas",
    "LayoutError",
    "Page",
    "PageManager",
    "PageSettings",
    "PdfRenderer",
    "RenderOptions",
    "RenderingError",
    "Selection",
    "SignatureError",
    "SignatureRecord",
    "__version__",
    "create_default_block",
]
