"""Block styling and table column models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal, Mapping, Optional, get_args

from .base import as_choice, as_flag, as_float, as_text, dump_fields, load_fields, require_mapping

Align = Literal["left", "center", "right", "justify"]
VerticalAlign = Literal["top", "middle", "bottom"]
BorderStyle = Literal["none", "thin", "medium"]
ColumnType = Literal["text", "number", "dateTime", "checkbox", "signature"]

ALIGNS = get_args(Align)
VERTICAL_ALIGNS = get_args(VerticalAlign)
BORDER_STYLES = get_args(BorderStyle)
COLUMN_TYPES = get_args(ColumnType)

DEFAULT_FONT_FAMILY = "Arial"
DEFAULT_FONT_SIZE = 12.0


@dataclass(slots=True)
class BlockStyle:
    """Per-block style overrides. ``None`` means "not set"."""

    font_family: Optional[str] = None
    font_size: Optional[float] = None
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    align: Optional[Align] = None
    vertical_align: Optional[VerticalAlign] = None
    border: Optional[BorderStyle] = None
    padding_mm: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return dump_fields(self, omit_none=True)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "BlockStyle":
        if data is None:
            return cls()
        kwargs = load_fields(cls, require_mapping(data, "block style"))
        for key in ("font_size", "padding_mm"):
            if key in kwargs:
                kwargs[key] = as_float(kwargs[key], None)
        for key in ("bold", "italic"):
            if key in kwargs:
                kwargs[key] = as_flag(kwargs[key], None)
        if "font_family" in kwargs:
            kwargs["font_family"] = as_text(kwargs["font_family"])
        kwargs["align"] = as_choice(kwargs.get("align"), ALIGNS, None)
        kwargs["vertical_align"] = as_choice(kwargs.get("vertical_align"), VERTICAL_ALIGNS, None)
        kwargs["border"] = as_choice(kwargs.get("border"), BORDER_STYLES, None)
        return cls(**kwargs)


@dataclass(slots=True)
class FontSpec:
    """Resolved font used by the renderers (sizes in points)."""

    family: str = DEFAULT_FONT_FAMILY
    size_pt: float = DEFAULT_FONT_SIZE
    bold: bool = False
    italic: bool = False


@dataclass(slots=True)
class TableColumn:
    id: str
    header: str = ""
    width_fr: float = 1.0
    type: ColumnType = "text"
    required: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return dump_fields(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TableColumn":
        kwargs = load_fields(cls, require_mapping(data, "table column"))
        kwargs["id"] = as_text(kwargs.get("id"), "")
        kwargs["header"] = as_text(kwargs.get("header"), "")
        kwargs["type"] = as_choice(kwargs.get("type"), COLUMN_TYPES, "text")
        kwargs["required"] = bool(kwargs.get("required", False))
        if "width_fr" in kwargs:
            kwargs["width_fr"] = as_float(kwargs["width_fr"], 1.0)
        return cls(**kwargs)
