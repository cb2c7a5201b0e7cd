"""Runtime options for rendering and editing."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, Literal, Mapping, Optional

logger = logging.getLogger(__name__)

RenderMode = Literal["template", "instance"]
RENDER_MODES = ("template", "instance")


def _known_kwargs(cls: type, data: Optional[Mapping[str, Any]]) -> dict:
    if not data:
        return {}
    names = {f.name for f in fields(cls)}
    unknown = set(data) - names
    if unknown:
        logger.warning(f"Ignoring unknown {cls.__name__} keys: {', '.join(sorted(unknown))}")
    return {key: value for key, value in data.items() if key in names}


@dataclass(slots=True)
class RenderOptions:
    """How a document is played back.

    ``template`` shows empty structure; ``instance`` fills in data, evaluates
    conditions and overlays signatures. ``scale`` multiplies every pixel
    dimension, font size, padding and margin of the HTML surface.
    """

    mode: RenderMode = "template"
    scale: float = 1.0
    show_grid: bool = False
    page_number_prefix: str = ""
    default_font_family: str = "Arial"
    default_font_size: float = 12.0
    default_padding_mm: float = 2.0

    def __post_init__(self):
        if self.mode not in RENDER_MODES:
            raise ValueError(f"Invalid render mode: {self.mode!r}")
        if self.scale <= 0:
            raise ValueError(f"Scale must be positive, got {self.scale}")

    @property
    def instance(self) -> bool:
        return self.mode == "instance"

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "RenderOptions":
        return cls(**_known_kwargs(cls, data))


@dataclass(slots=True)
class CanvasOptions:
    """Layout canvas behavior: screen zoom and duplicate offset (mm)."""

    zoom: float = 1.0
    duplicate_offset_mm: float = 5.0

    def __post_init__(self):
        if self.zoom <= 0:
            raise ValueError(f"Zoom must be positive, got {self.zoom}")

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "CanvasOptions":
        return cls(**_known_kwargs(cls, data))
