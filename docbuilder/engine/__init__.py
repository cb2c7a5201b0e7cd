"""Geometry and expression engines."""

from .geometry import (
    MIN_BLOCK_HEIGHT_MM,
    MIN_BLOCK_WIDTH_MM,
    PX_PER_MM,
    Margins,
    Rect,
    mm_to_px,
    page_size_mm,
    px_to_mm,
    snap_to_grid,
    usable_area,
)
from .expression_engine import (
    evaluate_condition,
    evaluate_expression,
    replace_expressions,
    resolve_path,
    resolve_value,
)

__all__ = [
    "MIN_BLOCK_HEIGHT_MM",
    "MIN_BLOCK_WIDTH_MM",
    "PX_PER_MM",
    "Margins",
    "Rect",
    "mm_to_px",
    "page_size_mm",
    "px_to_mm",
    "snap_to_grid",
    "usable_area",
    "evaluate_condition",
    "evaluate_expression",
    "replace_expressions",
    "resolve_path",
    "resolve_value",
]
