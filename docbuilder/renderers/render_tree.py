"""Render tree produced by :class:`DocumentRenderer` and consumed by output surfaces.

Geometry is in millimeters and font sizes in points; surfaces convert to
their own units (and apply their own scale).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union

from ..engine.geometry import Margins, Rect
from ..models.signature import SignatureRecord
from ..models.style import FontSpec

BORDER_CSS = {
    "none": "none",
    "thin": "1px solid #ccc",
    "medium": "2px solid #999",
}


@dataclass(slots=True)
class TextContent:
    """header, dynamicText and fallback text."""

    text: str
    logo_url: Optional[str] = None


@dataclass(slots=True)
class HeadingContent:
    level: str
    text: str


@dataclass(slots=True)
class RichTextContent:
    """Already sanitized HTML."""

    html: str


@dataclass(slots=True)
class FieldContent:
    """text, number, dateTime and select fields.

    ``value`` is None when the field renders as a blank placeholder.
    """

    label: str
    value: Optional[str] = None
    required: bool = False
    multiline: bool = False
    prompt: Optional[str] = None
    options: List[str] = field(default_factory=list)

    @property
    def filled(self) -> bool:
        return self.value is not None


@dataclass(slots=True)
class CheckboxContent:
    label: str
    checked: bool = False


@dataclass(slots=True)
class TableColumnNode:
    header: str
    fraction: float
    required: bool = False

    @property
    def percent(self) -> float:
        return self.fraction * 100.0


@dataclass(slots=True)
class TableContent:
    label: str
    columns: List[TableColumnNode]
    rows: int
    repeater: bool = False
    max_rows: Optional[int] = None


@dataclass(slots=True)
class GroupContent:
    title: str


@dataclass(slots=True)
class SignatureContent:
    label: str
    role: str
    record: Optional[SignatureRecord] = None

    @property
    def signed(self) -> bool:
        return self.record is not None


@dataclass(slots=True)
class ImageContent:
    url: Optional[str]
    alt: str


@dataclass(slots=True)
class DividerContent:
    pass


@dataclass(slots=True)
class SpacerContent:
    pass


@dataclass(slots=True)
class PageBreakContent:
    """Marker only; content does not reflow."""

    show_marker: bool = False


@dataclass(slots=True)
class ErrorContent:
    """Shown in place of a block that failed to render."""

    message: str


BlockContent = Union[
    TextContent,
    HeadingContent,
    RichTextContent,
    FieldContent,
    CheckboxContent,
    TableContent,
    GroupContent,
    SignatureContent,
    ImageContent,
    DividerContent,
    SpacerContent,
    PageBreakContent,
    ErrorContent,
]


@dataclass(slots=True)
class RenderedBlock:
    block_id: str
    kind: str
    frame: Rect
    font: FontSpec
    align: str
    vertical_align: str
    padding_mm: float
    border: str
    z: int
    content: BlockContent

    @property
    def border_css(self) -> str:
        return BORDER_CSS.get(self.border, "none")


@dataclass(slots=True)
class Band:
    """Header or footer band, positioned in the page margins."""

    frame: Rect
    text: str
    font: FontSpec
    align: str
    vertical_align: str


@dataclass(slots=True)
class PageNumberStamp:
    """Computed at render time, never stored."""

    frame: Rect
    current: int
    total: int
    font: FontSpec
    prefix: str = ""

    @property
    def text(self) -> str:
        return f"{self.prefix}{self.current} / {self.total}"


@dataclass(slots=True)
class RenderedPage:
    index: int
    page_id: str
    width_mm: float
    height_mm: float
    margins: Margins
    blocks: List[RenderedBlock] = field(default_factory=list)
    header: Optional[Band] = None
    footer: Optional[Band] = None
    page_number: Optional[PageNumberStamp] = None
    grid_step_mm: Optional[float] = None
    show_margins: bool = False

    @property
    def usable_frame(self) -> Rect:
        """Page area inside the margins."""
        m = self.margins
        return Rect(m.left, m.top, max(0.0, self.width_mm - m.left - m.right),
                    max(0.0, self.height_mm - m.top - m.bottom))


@dataclass(slots=True)
class RenderedDocument:
    title: str
    orientation: str
    mode: str
    pages: List[RenderedPage] = field(default_factory=list)

    def find_block(self, block_id: str) -> Optional[RenderedBlock]:
        for page in self.pages:
            for block in page.blocks:
                if block.block_id == block_id:
                    return block
        return None
