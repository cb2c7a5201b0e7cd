"""Page and page settings models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Mapping, Optional, get_args

from ..engine.geometry import Margins, Orientation, Rect, page_size_mm, usable_area
from ..exceptions import DocumentFormatError
from .base import as_choice, as_flag, as_float, as_text, dump_fields, load_fields, require_mapping
from .blocks import Block, block_from_dict

BandAlign = Literal["left", "center", "right"]
BandVerticalAlign = Literal["top", "middle", "bottom"]

BAND_ALIGNS = get_args(BandAlign)
BAND_VERTICAL_ALIGNS = get_args(BandVerticalAlign)

DEFAULT_BAND_HEIGHT_MM = 5.0
DEFAULT_BAND_FONT_SIZE = 10.0


@dataclass(slots=True)
class GridSettings:
    show: bool = True
    snap: bool = True
    step_mm: float = 5.0

    def to_dict(self) -> Dict[str, Any]:
        return dump_fields(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GridSettings":
        kwargs = load_fields(cls, require_mapping(data, "grid settings"))
        if "step_mm" in kwargs:
            kwargs["step_mm"] = as_float(kwargs["step_mm"], 5.0)
        return cls(**kwargs)


@dataclass(slots=True)
class BandStyle:
    """Resolved look of the header or footer band."""

    content: str
    height_mm: float
    font_family: str
    font_size: float
    bold: bool
    italic: bool
    align: BandAlign
    vertical_align: BandVerticalAlign


@dataclass(slots=True)
class PageSettings:
    """Document-wide sheet settings: A4 orientation, margins (mm), header/footer bands and grid."""

    size: str = "A4"
    orientation: Orientation = "portrait"
    margin_top: float = 10.0
    margin_right: float = 10.0
    margin_bottom: float = 10.0
    margin_left: float = 10.0
    show_page_numbers: bool = True
    show_header: bool = False
    show_footer: bool = False
    header_height: Optional[float] = None
    footer_height: Optional[float] = None
    header_content: Optional[str] = None
    footer_content: Optional[str] = None
    header_font_family: Optional[str] = None
    header_font_size: Optional[float] = None
    header_bold: Optional[bool] = None
    header_italic: Optional[bool] = None
    header_align: Optional[BandAlign] = None
    header_vertical_align: Optional[BandVerticalAlign] = None
    footer_font_family: Optional[str] = None
    footer_font_size: Optional[float] = None
    footer_bold: Optional[bool] = None
    footer_italic: Optional[bool] = None
    footer_align: Optional[BandAlign] = None
    footer_vertical_align: Optional[BandVerticalAlign] = None
    grid: GridSettings = field(default_factory=GridSettings)

    @property
    def margins(self) -> Margins:
        return Margins(self.margin_top, self.margin_right, self.margin_bottom, self.margin_left)

    @property
    def page_size(self):
        return page_size_mm(self.orientation)

    def usable_area(self) -> Rect:
        return usable_area(self.orientation, self.margins)

    def band(self, which: Literal["header", "footer"]) -> BandStyle:
        def get(name: str):
            return getattr(self, f"{which}_{name}")

        return BandStyle(
            content=get("content") or "",
            height_mm=get("height") or DEFAULT_BAND_HEIGHT_MM,
            font_family=get("font_family") or "Arial",
            font_size=get("font_size") or DEFAULT_BAND_FONT_SIZE,
            bold=bool(get("bold")),
            italic=bool(get("italic")),
            align=get("align") or "left",
            vertical_align=get("vertical_align") or "middle",
        )

    def to_dict(self) -> Dict[str, Any]:
        return dump_fields(self)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "PageSettings":
        if data is None:
            return cls()
        kwargs = load_fields(cls, require_mapping(data, "page settings"), skip=("grid",))
        for key in ("margin_top", "margin_right", "margin_bottom", "margin_left"):
            if key in kwargs:
                kwargs[key] = as_float(kwargs[key], 10.0)
        for key in ("header_height", "footer_height", "header_font_size", "footer_font_size"):
            if key in kwargs:
                kwargs[key] = as_float(kwargs[key], None)
        for band in ("header", "footer"):
            for name in ("content", "font_family"):
                key = f"{band}_{name}"
                if key in kwargs:
                    kwargs[key] = as_text(kwargs[key])
            for name in ("bold", "italic"):
                key = f"{band}_{name}"
                if key in kwargs:
                    kwargs[key] = as_flag(kwargs[key], None)
            kwargs[f"{band}_align"] = as_choice(kwargs.get(f"{band}_align"), BAND_ALIGNS, None)
            kwargs[f"{band}_vertical_align"] = as_choice(
                kwargs.get(f"{band}_vertical_align"), BAND_VERTICAL_ALIGNS, None)
        for key in ("show_page_numbers", "show_header", "show_footer"):
            if key in kwargs:
                kwargs[key] = bool(kwargs[key])
        if kwargs.get("orientation") not in ("portrait", "landscape"):
            kwargs["orientation"] = "portrait"
        grid = data.get("grid")
        if grid is not None:
            kwargs["grid"] = GridSettings.from_dict(grid)
        return cls(**kwargs)


@dataclass(slots=True)
class Page:
    """One physical sheet; block array order is document order."""

    id: str
    blocks: List[Block] = field(default_factory=list)

    def find_block(self, block_id: str) -> Optional[Block]:
        for block in self.blocks:
            if block.id == block_id:
                return block
        return None

    def index_of(self, block_id: str) -> int:
        for index, block in enumerate(self.blocks):
            if block.id == block_id:
                return index
        return -1

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "blocks": [block.to_dict() for block in self.blocks]}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Page":
        data = require_mapping(data, "page")
        blocks = data.get("blocks") or []
        if not isinstance(blocks, list):
            raise DocumentFormatError("Invalid page", "'blocks' must be a list")
        return cls(id=str(data.get("id") or ""), blocks=[block_from_dict(item) for item in blocks])
