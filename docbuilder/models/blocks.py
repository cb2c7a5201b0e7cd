"""Block models: the closed set of element kinds placed on a page.

Each kind is its own dataclass; :data:`Block` is their union. Code that needs
to treat kinds differently dispatches with ``match`` and ends with
``assert_never`` so that adding a kind is caught by the type checker.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Dict, List, Literal, Mapping, Optional, Union, get_args

from ..engine.geometry import DEFAULT_BLOCK_HEIGHT_MM, MIN_BLOCK_HEIGHT_MM, MIN_BLOCK_WIDTH_MM
from ..exceptions import DocumentFormatError
from .base import as_choice, as_float, as_int, as_text, dump_fields, load_fields, require_mapping
from .style import DEFAULT_FONT_FAMILY, DEFAULT_FONT_SIZE, BlockStyle, FontSpec, TableColumn

logger = logging.getLogger(__name__)

TitleLevel = Literal["h1", "h2", "h3"]
DateTimeMode = Literal["date", "time", "datetime"]

TITLE_FONT_SIZES: Dict[str, float] = {"h1": 24.0, "h2": 18.0, "h3": 14.0}
TITLE_LEVELS = get_args(TitleLevel)
DATE_TIME_MODES = get_args(DateTimeMode)

# Persisted string fields: optional ones load as None when absent or malformed.
OPTIONAL_TEXT_FIELDS = ("visible_if", "label", "placeholder", "bind", "logo_url", "image_url")
TEXT_FIELDS = ("content", "text", "html", "title", "role", "alt_text", "expression")
FLAG_FIELDS = ("locked", "multiline", "required")


@dataclass(slots=True, kw_only=True)
class BlockBase:
    """Fields shared by every block kind. Geometry is in millimeters."""

    kind: ClassVar[str] = ""

    id: str = ""
    x_mm: float = 0.0
    y_mm: float = 0.0
    w_mm: float = MIN_BLOCK_WIDTH_MM
    h_mm: Optional[float] = None
    z: int = 0
    locked: bool = False
    visible_if: Optional[str] = None
    style: BlockStyle = field(default_factory=BlockStyle)
    label: Optional[str] = None

    @property
    def height_mm(self) -> float:
        return self.h_mm if self.h_mm is not None else DEFAULT_BLOCK_HEIGHT_MM

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.kind}
        data.update(dump_fields(self))
        return data


@dataclass(slots=True, kw_only=True)
class HeaderBlock(BlockBase):
    kind: ClassVar[str] = "header"
    content: str = ""
    logo_url: Optional[str] = None


@dataclass(slots=True, kw_only=True)
class TitleBlock(BlockBase):
    kind: ClassVar[str] = "title"
    text: str = ""
    level: TitleLevel = "h1"


@dataclass(slots=True, kw_only=True)
class ParagraphBlock(BlockBase):
    kind: ClassVar[str] = "paragraph"
    html: str = ""


@dataclass(slots=True, kw_only=True)
class TextBlock(BlockBase):
    kind: ClassVar[str] = "text"
    multiline: bool = False
    required: bool = False
    placeholder: Optional[str] = None
    bind: Optional[str] = None


@dataclass(slots=True, kw_only=True)
class NumberBlock(BlockBase):
    kind: ClassVar[str] = "number"
    required: bool = False
    bind: Optional[str] = None


@dataclass(slots=True, kw_only=True)
class DateTimeBlock(BlockBase):
    kind: ClassVar[str] = "dateTime"
    mode: DateTimeMode = "date"
    bind: Optional[str] = None


@dataclass(slots=True, kw_only=True)
class CheckboxBlock(BlockBase):
    kind: ClassVar[str] = "checkbox"
    bind: Optional[str] = None


@dataclass(slots=True, kw_only=True)
class SelectBlock(BlockBase):
    kind: ClassVar[str] = "select"
    options: List[str] = field(default_factory=list)
    bind: Optional[str] = None


@dataclass(slots=True, kw_only=True)
class TableBlock(BlockBase):
    kind: ClassVar[str] = "table"
    columns: List[TableColumn] = field(default_factory=list)
    rows: int = 3


@dataclass(slots=True, kw_only=True)
class RepeaterTableBlock(BlockBase):
    kind: ClassVar[str] = "repeaterTable"
    columns: List[TableColumn] = field(default_factory=list)
    min_rows: int = 1
    max_rows: Optional[int] = None


@dataclass(slots=True, kw_only=True)
class GroupBlock(BlockBase):
    kind: ClassVar[str] = "group"
    title: str = ""


@dataclass(slots=True, kw_only=True)
class SignatureBlock(BlockBase):
    kind: ClassVar[str] = "signature"
    role: str = ""


@dataclass(slots=True, kw_only=True)
class ImageBlock(BlockBase):
    kind: ClassVar[str] = "image"
    image_url: Optional[str] = None
    alt_text: str = ""


@dataclass(slots=True, kw_only=True)
class DividerBlock(BlockBase):
    kind: ClassVar[str] = "divider"


@dataclass(slots=True, kw_only=True)
class SpacerBlock(BlockBase):
    kind: ClassVar[str] = "spacer"


@dataclass(slots=True, kw_only=True)
class DynamicTextBlock(BlockBase):
    kind: ClassVar[str] = "dynamicText"
    expression: str = ""


@dataclass(slots=True, kw_only=True)
class PageBreakBlock(BlockBase):
    kind: ClassVar[str] = "pageBreak"


Block = Union[
    HeaderBlock,
    TitleBlock,
    ParagraphBlock,
    TextBlock,
    NumberBlock,
    DateTimeBlock,
    CheckboxBlock,
    SelectBlock,
    TableBlock,
    RepeaterTableBlock,
    GroupBlock,
    SignatureBlock,
    ImageBlock,
    DividerBlock,
    SpacerBlock,
    DynamicTextBlock,
    PageBreakBlock,
]

BLOCK_TYPES: Dict[str, type] = {
    cls.kind: cls
    for cls in (
        HeaderBlock,
        TitleBlock,
        ParagraphBlock,
        TextBlock,
        NumberBlock,
        DateTimeBlock,
        CheckboxBlock,
        SelectBlock,
        TableBlock,
        RepeaterTableBlock,
        GroupBlock,
        SignatureBlock,
        ImageBlock,
        DividerBlock,
        SpacerBlock,
        DynamicTextBlock,
        PageBreakBlock,
    )
}

# Kinds whose value can come from the data context.
BOUND_BLOCK_TYPES = (TextBlock, NumberBlock, DateTimeBlock, CheckboxBlock, SelectBlock)


def block_from_dict(data: Mapping[str, Any]) -> Block:
    """Build a block from its serialized form.

    Raises:
        DocumentFormatError: if ``data`` is not an object or has an unknown ``type``.
    """
    data = require_mapping(data, "block")
    kind = data.get("type")
    cls = BLOCK_TYPES.get(kind) if isinstance(kind, str) else None
    if cls is None:
        raise DocumentFormatError("Unknown block type", repr(kind))

    kwargs = load_fields(cls, data, skip=("style", "columns"))
    kwargs["id"] = as_text(kwargs.get("id")) or ""
    kwargs["x_mm"] = as_float(kwargs.get("x_mm"), 0.0)
    kwargs["y_mm"] = as_float(kwargs.get("y_mm"), 0.0)
    kwargs["w_mm"] = max(MIN_BLOCK_WIDTH_MM, as_float(kwargs.get("w_mm"), MIN_BLOCK_WIDTH_MM))
    height = as_float(kwargs.get("h_mm"), None)
    kwargs["h_mm"] = None if height is None else max(MIN_BLOCK_HEIGHT_MM, height)
    kwargs["z"] = as_int(kwargs.get("z"), 0)
    kwargs["style"] = BlockStyle.from_dict(data.get("style"))

    field_names = {f.name for f in fields(cls)}
    if "columns" in field_names:
        kwargs["columns"] = [TableColumn.from_dict(column) for column in data.get("columns") or []]
    for key in ("rows", "min_rows"):
        if key in kwargs:
            kwargs[key] = as_int(kwargs[key], 1)
    if kwargs.get("max_rows") is not None:
        kwargs["max_rows"] = as_int(kwargs["max_rows"], 1)
    for key in OPTIONAL_TEXT_FIELDS:
        if key in kwargs:
            kwargs[key] = as_text(kwargs[key])
    for key in TEXT_FIELDS:
        if key in kwargs:
            kwargs[key] = as_text(kwargs[key], "")
    for key in FLAG_FIELDS:
        if key in kwargs:
            kwargs[key] = bool(kwargs[key])
    if "level" in kwargs:
        kwargs["level"] = as_choice(kwargs["level"], TITLE_LEVELS, "h1")
    if "mode" in kwargs:
        kwargs["mode"] = as_choice(kwargs["mode"], DATE_TIME_MODES, "date")
    if "options" in kwargs:
        kwargs["options"] = [
            as_text(option, "") for option in kwargs["options"]
        ] if isinstance(kwargs["options"], list) else []
    return cls(**kwargs)


def effective_font(block: Block, default_family: str = DEFAULT_FONT_FAMILY,
                   default_size: float = DEFAULT_FONT_SIZE) -> FontSpec:
    """Resolve the font a block is drawn with.

    Titles take their size from the level and are bold unless ``bold`` is
    explicitly ``False``; a manual font size on a title is ignored.
    """
    style = block.style
    family = style.font_family or default_family
    italic = bool(style.italic)
    if isinstance(block, TitleBlock):
        size = TITLE_FONT_SIZES.get(block.level, TITLE_FONT_SIZES["h1"])
        return FontSpec(family, size, style.bold is not False, italic)
    return FontSpec(family, style.font_size or default_size, bool(style.bold), italic)


def column_fractions(columns: List[TableColumn]) -> List[float]:
    """Width share of each column: ``widthFr / sum(widthFr)``.

    Falls back to an equal split when the weights do not add up to a positive total.
    """
    if not columns:
        return []
    weights = [max(0.0, column.width_fr or 0.0) for column in columns]
    total = sum(weights)
    if total <= 0:
        return [1.0 / len(columns)] * len(columns)
    return [weight / total for weight in weights]


def repeater_row_count(block: RepeaterTableBlock) -> int:
    """Rows shown for a repeater in preview: ``minRows`` (at least one), capped at ``maxRows``."""
    rows = max(1, block.min_rows)
    if block.max_rows is not None:
        rows = min(rows, max(1, block.max_rows))
    return rows
