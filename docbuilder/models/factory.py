"""Default blocks for the palette's "create block" action."""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from ..utils.id_manager import IDManager, new_id
from .blocks import BLOCK_TYPES, Block
from .style import BlockStyle, TableColumn


def _column(header: str, mint: Callable[[str], str]) -> TableColumn:
    return TableColumn(id=mint("col"), header=header, width_fr=1.0, type="text", required=False)


def _defaults(kind: str, mint: Callable[[str], str]) -> Dict[str, Any]:
    match kind:
        case "header":
            return {"content": "Document header", "w_mm": 180.0, "h_mm": 10.0}
        case "title":
            return {"text": "Title", "level": "h1", "w_mm": 80.0, "h_mm": 15.0}
        case "paragraph":
            return {"html": "<p>Paragraph text...</p>", "w_mm": 80.0, "h_mm": 20.0}
        case "text":
            return {"label": "", "placeholder": "", "w_mm": 80.0, "h_mm": 10.0}
        case "number":
            return {"label": "", "w_mm": 40.0, "h_mm": 10.0}
        case "dateTime":
            return {"label": "", "mode": "date", "w_mm": 50.0, "h_mm": 10.0}
        case "checkbox":
            return {"label": "", "w_mm": 30.0, "h_mm": 8.0}
        case "select":
            return {"label": "", "options": ["Option 1", "Option 2"], "w_mm": 60.0, "h_mm": 10.0}
        case "table":
            return {
                "label": "",
                "columns": [_column("Column 1", mint), _column("Column 2", mint)],
                "rows": 3,
                "w_mm": 160.0,
                "h_mm": 25.0,
            }
        case "repeaterTable":
            return {
                "label": "",
                "columns": [_column("Column 1", mint)],
                "min_rows": 1,
                "max_rows": 10,
                "w_mm": 160.0,
                "h_mm": 25.0,
            }
        case "group":
            return {"title": "", "w_mm": 100.0, "h_mm": 50.0}
        case "signature":
            return {"label": "", "role": "", "w_mm": 60.0, "h_mm": 20.0}
        case "image":
            return {"alt_text": "Image", "w_mm": 80.0, "h_mm": 20.0}
        case "divider":
            return {"w_mm": 180.0, "h_mm": 2.0}
        case "spacer":
            return {"w_mm": 10.0, "h_mm": 10.0}
        case "dynamicText":
            return {"expression": "{{data.field}}", "w_mm": 80.0, "h_mm": 10.0}
        case "pageBreak":
            return {"w_mm": 180.0, "h_mm": 5.0}
    return {"w_mm": 80.0, "h_mm": 12.0}


def default_style(kind: str) -> BlockStyle:
    """Arial 10pt, top-left, no border; titles bold; padding varies per kind."""
    padding = 1.5
    if kind in ("title", "table", "repeaterTable"):
        padding = 1.0
    elif kind == "signature":
        padding = 2.5
    return BlockStyle(
        font_family="Arial",
        font_size=10.0,
        bold=kind == "title",
        italic=False,
        align="left",
        vertical_align="top",
        border="none",
        padding_mm=padding,
    )


def create_default_block(kind: str, x_mm: float, y_mm: float, z: int = 0,
                         ids: Optional[IDManager] = None) -> Block:
    """Create a block of ``kind`` at ``(x_mm, y_mm)`` with default size and content.

    Args:
        kind: Block type tag, e.g. ``"text"`` or ``"repeaterTable"``
        x_mm: Left edge in millimeters
        y_mm: Top edge in millimeters
        z: Stacking order, usually the current block count
        ids: Optional id registry so the new ids do not collide with a document's

    Raises:
        ValueError: for an unknown kind
    """
    cls = BLOCK_TYPES.get(kind)
    if cls is None:
        raise ValueError(f"Unknown block type: {kind!r}")
    mint = ids.generate_unique_id if ids is not None else new_id
    return cls(
        id=mint(kind),
        x_mm=x_mm,
        y_mm=y_mm,
        z=z,
        style=default_style(kind),
        **_defaults(kind, mint),
    )
