"""Resize and move arithmetic for blocks on the layout canvas.

All values are millimeters. Four edge handles each change exactly one
dimension and keep the opposite edge where it was.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..engine.geometry import MIN_BLOCK_HEIGHT_MM, MIN_BLOCK_WIDTH_MM, Rect, clamp, snap_to_grid


class HandleDirection(Enum):
    """Edge being dragged."""

    NORTH = "n"
    SOUTH = "s"
    EAST = "e"
    WEST = "w"

    @property
    def horizontal(self) -> bool:
        return self in (HandleDirection.EAST, HandleDirection.WEST)


@dataclass(slots=True)
class BlockGeometry:
    x: float
    y: float
    w: float
    h: float

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h


def compute_resize(start: BlockGeometry, direction: HandleDirection, dx: float, dy: float) -> BlockGeometry:
    """Geometry while a handle is dragged by ``(dx, dy)`` from ``start``.

    Width never drops below 10mm and height below 8mm. For west/north handles
    the origin follows the stationary right/bottom edge.
    """
    x, y, w, h = start.x, start.y, start.w, start.h
    match direction:
        case HandleDirection.EAST:
            w = max(MIN_BLOCK_WIDTH_MM, start.w + dx)
        case HandleDirection.WEST:
            w = max(MIN_BLOCK_WIDTH_MM, start.w - dx)
            x = start.right - w
        case HandleDirection.SOUTH:
            h = max(MIN_BLOCK_HEIGHT_MM, start.h + dy)
        case HandleDirection.NORTH:
            h = max(MIN_BLOCK_HEIGHT_MM, start.h - dy)
            y = start.bottom - h
    return BlockGeometry(x, y, w, h)


def finalize_resize(geometry: BlockGeometry, direction: HandleDirection, area: Rect,
                    grid_step: Optional[float] = None) -> BlockGeometry:
    """Geometry committed when the handle is released.

    The changed dimension is snapped to ``grid_step`` (when given), kept above
    the minimum, and limited so the moving edge stays inside ``area``. The
    opposite edge does not move.
    """
    x, y, w, h = geometry.x, geometry.y, geometry.w, geometry.h
    if direction.horizontal:
        right = geometry.right
        if grid_step:
            w = max(MIN_BLOCK_WIDTH_MM, snap_to_grid(w, grid_step))
        if direction is HandleDirection.EAST:
            w = max(MIN_BLOCK_WIDTH_MM, min(w, area.right - x))
        else:
            w = max(MIN_BLOCK_WIDTH_MM, min(w, right - area.left))
            x = right - w
    else:
        bottom = geometry.bottom
        if grid_step:
            h = max(MIN_BLOCK_HEIGHT_MM, snap_to_grid(h, grid_step))
        if direction is HandleDirection.SOUTH:
            h = max(MIN_BLOCK_HEIGHT_MM, min(h, area.bottom - y))
        else:
            h = max(MIN_BLOCK_HEIGHT_MM, min(h, bottom - area.top))
            y = bottom - h
    return BlockGeometry(x, y, w, h)


def finalize_move(x: float, y: float, w: float, h: float, area: Rect,
                  grid_step: Optional[float] = None) -> tuple[float, float]:
    """Final position of a moved block: snapped, then clamped into ``area``."""
    if grid_step:
        x = snap_to_grid(x, grid_step)
        y = snap_to_grid(y, grid_step)
    return clamp(x, area.left, area.right - w), clamp(y, area.top, area.bottom - h)
