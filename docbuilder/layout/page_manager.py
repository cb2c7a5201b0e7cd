"""Page list operations: add, duplicate, delete, reorder and select."""

from __future__ import annotations

import copy
import logging
from typing import Optional

from ..models.document import Document
from ..models.page import Page
from .selection import Selection

logger = logging.getLogger(__name__)


class PageManager:
    """Edits ``document.pages`` and keeps ``selection.page_index`` valid.

    A document never drops below one page; deleting the last page is a no-op.
    """

    def __init__(self, document: Document, selection: Optional[Selection] = None):
        self.document = document
        self.selection = selection or Selection()
        self._clamp()

    @property
    def page_count(self) -> int:
        return len(self.document.pages)

    @property
    def active_index(self) -> int:
        return self.selection.page_index

    @property
    def active_page(self) -> Page:
        return self.document.pages[self._clamp()]

    def _clamp(self, index: Optional[int] = None) -> int:
        return self.selection.select_page(self.selection.page_index if index is None else index, self.page_count)

    def _valid(self, index: int) -> bool:
        return 0 <= index < self.page_count

    # ------------------------------------------------------------------
    def add_page(self) -> Page:
        """Append an empty page and make it active."""
        page = Page(id=self.document.id_manager().generate_unique_id("page"))
        self.document.pages.append(page)
        self._clamp(self.page_count - 1)
        return page

    def duplicate_page(self, index: int) -> Optional[Page]:
        """Insert a deep copy of page ``index`` right after it, with fresh ids, and select it."""
        if not self._valid(index):
            logger.debug(f"duplicate_page: index {index} out of range")
            return None
        ids = self.document.id_manager()
        clone = copy.deepcopy(self.document.pages[index])
        clone.id = ids.generate_unique_id("page")
        for block in clone.blocks:
            block.id = ids.generate_unique_id(block.kind)
            for column in getattr(block, "columns", ()):
                column.id = ids.generate_unique_id("col")
        self.document.pages.insert(index + 1, clone)
        self._clamp(index + 1)
        return clone

    def delete_page(self, index: int) -> bool:
        """Delete page ``index``. Returns False (and changes nothing) at one page."""
        if self.page_count <= 1:
            logger.debug("Refusing to delete the only page")
            return False
        if not self._valid(index):
            return False
        del self.document.pages[index]
        active = self.selection.page_index
        if index < active:
            active -= 1
        self.selection.block_id = None
        self._clamp(active)
        return True

    def move_page(self, from_index: int, to_index: int) -> bool:
        """Swap page ``from_index`` with its neighbour ``to_index``; the moved page stays selected."""
        if not (self._valid(from_index) and self._valid(to_index)) or abs(from_index - to_index) != 1:
            logger.debug(f"move_page: invalid move {from_index} -> {to_index}")
            return False
        pages = self.document.pages
        pages[from_index], pages[to_index] = pages[to_index], pages[from_index]
        self._clamp(to_index)
        return True

    def move_page_up(self, index: int) -> bool:
        return self.move_page(index, index - 1)

    def move_page_down(self, index: int) -> bool:
        return self.move_page(index, index + 1)

    def select_page(self, index: int) -> Page:
        """Make page ``index`` active (clamped into range)."""
        return self.document.pages[self._clamp(index)]
