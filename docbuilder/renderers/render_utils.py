"""Utility helpers shared across renderer components."""

from __future__ import annotations

import base64
import binascii
import io
import logging
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError
from reportlab.lib.colors import Color, HexColor
from reportlab.lib.utils import ImageReader

from ..engine.geometry import PX_PER_MM

logger = logging.getLogger(__name__)

# PDF base-14 families: (regular, bold, italic, bold-italic)
PDF_FONT_FAMILIES = {
    "Helvetica": ("Helvetica", "Helvetica-Bold", "Helvetica-Oblique", "Helvetica-BoldOblique"),
    "Times": ("Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic"),
    "Courier": ("Courier", "Courier-Bold", "Courier-Oblique", "Courier-BoldOblique"),
}

_FAMILY_ALIASES = {
    "arial": "Helvetica",
    "helvetica": "Helvetica",
    "verdana": "Helvetica",
    "calibri": "Helvetica",
    "sans-serif": "Helvetica",
    "times": "Times",
    "times new roman": "Times",
    "georgia": "Times",
    "serif": "Times",
    "courier": "Courier",
    "courier new": "Courier",
    "monospace": "Courier",
}

# (line width in pt, color) for the PDF surface.
PDF_BORDERS = {
    "thin": (0.75, "#cccccc"),
    "medium": (1.5, "#999999"),
}

TEXT_ALIGN = {"left": "left", "center": "center", "right": "right", "justify": "justify"}
JUSTIFY_CONTENT = {"left": "flex-start", "center": "center", "right": "flex-end", "justify": "flex-start"}
ALIGN_ITEMS = {"top": "flex-start", "middle": "center", "bottom": "flex-end"}


def pdf_font_name(family: Optional[str], *, bold: bool = False, italic: bool = False) -> str:
    """Map a CSS font family to a PDF base-14 font variant."""
    base = _FAMILY_ALIASES.get((family or "").strip().lower(), "Helvetica")
    regular, bold_name, italic_name, bold_italic = PDF_FONT_FAMILIES[base]
    if bold and italic:
        return bold_italic
    if bold:
        return bold_name
    if italic:
        return italic_name
    return regular


def to_color(value: object, fallback: str = "#000000") -> Color:
    if isinstance(value, Color):
        return value
    try:
        return HexColor(str(value))
    except (ValueError, TypeError):
        return HexColor(fallback)


def pdf_border(border: str) -> Optional[Tuple[float, Color]]:
    spec = PDF_BORDERS.get(border)
    if spec is None:
        return None
    width, color = spec
    return width, to_color(color)


def px(mm: float, scale: float = 1.0) -> str:
    """CSS pixel length for a millimeter value."""
    value = mm * PX_PER_MM * scale
    return f"{value:.2f}".rstrip("0").rstrip(".") + "px"


def pt(size: float, scale: float = 1.0) -> str:
    value = size * scale
    return f"{value:.2f}".rstrip("0").rstrip(".") + "pt"


def load_image(url: Optional[str]) -> Optional[ImageReader]:
    """Open a data URL or local file as a ReportLab image; remote URLs are not fetched."""
    if not url:
        return None
    try:
        if url.startswith("data:"):
            _, _, payload = url.partition(",")
            image = Image.open(io.BytesIO(base64.b64decode(payload)))
        elif "://" in url and not url.startswith("file://"):
            logger.debug(f"Not fetching remote image {url}")
            return None
        else:
            path = Path(url.removeprefix("file://"))
            if not path.is_file():
                logger.debug(f"Image not found: {path}")
                return None
            image = Image.open(path)
        image.load()
    except (binascii.Error, ValueError, OSError, UnidentifiedImageError) as e:
        logger.warning(f"Cannot load image: {e}")
        return None
    if image.mode not in ("RGB", "RGBA", "L"):
        image = image.convert("RGBA")
    return ImageReader(image)
