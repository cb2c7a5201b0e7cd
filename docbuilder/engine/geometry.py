"""Geometry primitives and unit helpers for the millimeter page model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Tuple


PX_PER_MM = 3.78  # ~96dpi / 25.4mm
PT_PER_MM = 72.0 / 25.4

A4_WIDTH_MM = 210.0
A4_HEIGHT_MM = 297.0

MIN_BLOCK_WIDTH_MM = 10.0
MIN_BLOCK_HEIGHT_MM = 8.0
DEFAULT_BLOCK_HEIGHT_MM = 10.0

Orientation = Literal["portrait", "landscape"]


@dataclass(slots=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    def __post_init__(self):
        """Ensure non-negative dimensions."""
        if self.width < 0:
            self.width = abs(self.width)
        if self.height < 0:
            self.height = abs(self.height)

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    # Page coordinates grow downwards.
    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom

    def scaled(self, factor: float) -> "Rect":
        return Rect(self.x * factor, self.y * factor, self.width * factor, self.height * factor)


@dataclass(slots=True)
class Margins:
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0

    @classmethod
    def uniform(cls, value: float) -> "Margins":
        return cls(value, value, value, value)


def mm_to_px(mm: float) -> float:
    """Convert millimeters to CSS pixels."""
    return mm * PX_PER_MM


def px_to_mm(px: float) -> float:
    """Convert CSS pixels to millimeters."""
    return px / PX_PER_MM


def mm_to_pt(mm: float) -> float:
    """Convert millimeters to PDF points."""
    return mm * PT_PER_MM


def snap_to_grid(value: float, step: float) -> float:
    """Round ``value`` to the nearest multiple of ``step``.

    A non-positive step disables snapping and returns the value unchanged.
    """
    if step <= 0:
        return value
    return round(value / step) * step


def page_size_mm(orientation: Orientation) -> Tuple[float, float]:
    """Return ``(width, height)`` of an A4 sheet in millimeters."""
    if orientation == "landscape":
        return A4_HEIGHT_MM, A4_WIDTH_MM
    return A4_WIDTH_MM, A4_HEIGHT_MM


def usable_area(orientation: Orientation, margins: Margins) -> Rect:
    """Return the page area inside the margins, in millimeters."""
    width, height = page_size_mm(orientation)
    return Rect(
        margins.left,
        margins.top,
        max(0.0, width - margins.left - margins.right),
        max(0.0, height - margins.top - margins.bottom),
    )


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp ``value`` into ``[lower, upper]``; ``lower`` wins when the range is empty."""
    return max(lower, min(value, upper))


__all__ = [
    "PX_PER_MM",
    "PT_PER_MM",
    "A4_WIDTH_MM",
    "A4_HEIGHT_MM",
    "MIN_BLOCK_WIDTH_MM",
    "MIN_BLOCK_HEIGHT_MM",
    "DEFAULT_BLOCK_HEIGHT_MM",
    "Orientation",
    "Rect",
    "Margins",
    "mm_to_px",
    "px_to_mm",
    "mm_to_pt",
    "snap_to_grid",
    "page_size_mm",
    "usable_area",
    "clamp",
]
