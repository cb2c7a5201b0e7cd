"""Document model and its JSON (de)serialization."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from ..exceptions import DocumentFormatError
from ..utils.id_manager import IDManager
from .base import require_mapping
from .blocks import Block
from .page import Page, PageSettings

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "New template"


@dataclass(slots=True)
class Document:
    """A template: page settings plus an ordered list of pages (always at least one)."""

    title: str = DEFAULT_TITLE
    page_settings: PageSettings = field(default_factory=PageSettings)
    pages: List[Page] = field(default_factory=list)

    def __post_init__(self):
        if not self.pages:
            self.pages.append(Page(id=IDManager(self.block_ids()).generate_unique_id("page")))

    @classmethod
    def new(cls, title: str = DEFAULT_TITLE) -> "Document":
        """Empty portrait document with 10mm margins, page numbers and a snapping 5mm grid."""
        return cls(title=title)

    # ------------------------------------------------------------------
    def iter_blocks(self) -> Iterator[Tuple[Page, Block]]:
        for page in self.pages:
            for block in page.blocks:
                yield page, block

    def block_ids(self) -> List[str]:
        return [block.id for _, block in self.iter_blocks()]

    def find_block(self, block_id: str) -> Optional[Tuple[Page, Block]]:
        for page, block in self.iter_blocks():
            if block.id == block_id:
                return page, block
        return None

    def id_manager(self) -> IDManager:
        """IDManager seeded with every block and page id of this document."""
        return IDManager([*self.block_ids(), *(page.id for page in self.pages)])

    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "pageSettings": self.page_settings.to_dict(),
            "pages": [page.to_dict() for page in self.pages],
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Document":
        """Parse a serialized document.

        Missing or duplicate block/page ids are replaced by freshly minted ones.

        Raises:
            DocumentFormatError: when the structure is not a valid document.
        """
        data = require_mapping(data, "document")
        pages_data = data.get("pages") or []
        if not isinstance(pages_data, list):
            raise DocumentFormatError("Invalid document", "'pages' must be a list")

        pages = [Page.from_dict(item) for item in pages_data]
        ids = IDManager()
        for page in pages:
            page.id = ids.claim(page.id, "page")
            for block in page.blocks:
                block.id = ids.claim(block.id, block.kind)

        if not pages:
            logger.warning("Document has no pages; adding an empty one")

        title = data.get("title")
        return cls(
            title=DEFAULT_TITLE if title is None else str(title),
            page_settings=PageSettings.from_dict(data.get("pageSettings")),
            pages=pages,
        )

    @classmethod
    def from_json(cls, text: str) -> "Document":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise DocumentFormatError("Document is not valid JSON", str(e)) from e
        return cls.from_dict(data)
