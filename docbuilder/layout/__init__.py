"""Editing layer: canvas interactions, resize math and page management."""

from .canvas import LayoutCanvas, MoveSession, ResizeSession, paint_order
from .page_manager import PageManager
from .resize import BlockGeometry, HandleDirection, compute_resize, finalize_move, finalize_resize
from .selection import DraftBuffer, Selection

__all__ = [
    "BlockGeometry",
    "DraftBuffer",
    "HandleDirection",
    "LayoutCanvas",
    "MoveSession",
    "PageManager",
    "ResizeSession",
    "Selection",
    "compute_resize",
    "finalize_move",
    "finalize_resize",
    "paint_order",
]
