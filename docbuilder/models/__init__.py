"""Document data model: blocks, pages, settings and signatures."""

from .blocks import (
    BLOCK_TYPES,
    BOUND_BLOCK_TYPES,
    Block,
    BlockBase,
    CheckboxBlock,
    DateTimeBlock,
    DividerBlock,
    DynamicTextBlock,
    GroupBlock,
    HeaderBlock,
    ImageBlock,
    NumberBlock,
    PageBreakBlock,
    ParagraphBlock,
    RepeaterTableBlock,
    SelectBlock,
    SignatureBlock,
    SpacerBlock,
    TableBlock,
    TextBlock,
    TitleBlock,
    block_from_dict,
    column_fractions,
    effective_font,
    repeater_row_count,
)
from .document import Document
from .factory import create_default_block
from .page import BandStyle, GridSettings, Page, PageSettings
from .signature import SignatureRecord, find_signature, is_fully_signed, sign_block
from .style import BlockStyle, FontSpec, TableColumn

__all__ = [
    "BLOCK_TYPES",
    "BOUND_BLOCK_TYPES",
    "Block",
    "BlockBase",
    "BlockStyle",
    "BandStyle",
    "CheckboxBlock",
    "DateTimeBlock",
    "DividerBlock",
    "Document",
    "DynamicTextBlock",
    "FontSpec",
    "GridSettings",
    "GroupBlock",
    "HeaderBlock",
    "ImageBlock",
    "NumberBlock",
    "Page",
    "PageBreakBlock",
    "PageSettings",
    "ParagraphBlock",
    "RepeaterTableBlock",
    "SelectBlock",
    "SignatureBlock",
    "SignatureRecord",
    "SpacerBlock",
    "TableBlock",
    "TableColumn",
    "TextBlock",
    "TitleBlock",
    "block_from_dict",
    "column_fractions",
    "create_default_block",
    "effective_font",
    "find_signature",
    "is_fully_signed",
    "repeater_row_count",
    "sign_block",
]
