"""Editor state shared by the canvas and the page manager."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Selection:
    """Active page index and selected block id.

    Passed explicitly to the editing components; rendering never reads it.
    """

    page_index: int = 0
    block_id: Optional[str] = None

    def select_block(self, block_id: Optional[str]) -> None:
        self.block_id = block_id

    def clear_block(self) -> None:
        self.block_id = None

    def select_page(self, index: int, page_count: int) -> int:
        """Select page ``index`` clamped into ``[0, page_count - 1]``; clears the block selection."""
        clamped = max(0, min(index, page_count - 1))
        if clamped != self.page_index:
            self.block_id = None
        self.page_index = clamped
        return clamped


@dataclass(slots=True)
class DraftBuffer:
    """Uncommitted edits to block fields (e.g. rich text being typed).

    Drafts live here until :meth:`commit` writes them onto the block, so the
    document only changes once per editing session.
    """

    _drafts: Dict[Tuple[str, str], Any] = field(default_factory=dict)

    def set(self, block_id: str, attribute: str, value: Any) -> None:
        self._drafts[(block_id, attribute)] = value

    def get(self, block_id: str, attribute: str, default: Any = None) -> Any:
        return self._drafts.get((block_id, attribute), default)

    def has_draft(self, block_id: str, attribute: Optional[str] = None) -> bool:
        return any(key[0] == block_id and (attribute is None or key[1] == attribute) for key in self._drafts)

    def discard(self, block_id: str) -> None:
        for key in [key for key in self._drafts if key[0] == block_id]:
            del self._drafts[key]

    def commit(self, block) -> bool:
        """Write all drafts for ``block`` onto it. Returns True if anything changed."""
        changed = False
        for (block_id, attribute), value in list(self._drafts.items()):
            if block_id != block.id:
                continue
            if not hasattr(block, attribute):
                logger.warning(f"Block {block.id} has no field {attribute!r}; dropping draft")
            elif getattr(block, attribute) != value:
                setattr(block, attribute, value)
                changed = True
            del self._drafts[(block_id, attribute)]
        return changed
