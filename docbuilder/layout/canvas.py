"""
Layout canvas: positioning, resizing and stacking blocks on the active page.

Drags and resizes are interactions. While one is in progress the block keeps
its committed geometry and the interaction holds a transient copy; releasing
commits once, cancelling discards. Only one interaction runs at a time.
"""

from __future__ import annotations

import copy
import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from ..config import CanvasOptions
from ..engine.geometry import MIN_BLOCK_HEIGHT_MM, MIN_BLOCK_WIDTH_MM, Rect, px_to_mm
from ..exceptions import LayoutError
from ..models.blocks import Block
from ..models.document import Document
from ..models.factory import create_default_block
from ..models.page import Page
from .resize import BlockGeometry, HandleDirection, compute_resize, finalize_move, finalize_resize
from .selection import Selection

logger = logging.getLogger(__name__)

_READONLY_FIELDS = frozenset({"id", "kind"})


def paint_order(blocks: List[Block]) -> List[Block]:
    """Blocks sorted by z; equal z keeps array order."""
    return sorted(blocks, key=lambda block: block.z)


class _Interaction(ABC):
    """Base for move and resize sessions."""

    def __init__(self, canvas: "LayoutCanvas", block: Block, on_finish: Callable[["_Interaction"], None]):
        self.canvas = canvas
        self.block = block
        self.start = BlockGeometry(block.x_mm, block.y_mm, block.w_mm, block.height_mm)
        self.current = BlockGeometry(self.start.x, self.start.y, self.start.w, self.start.h)
        self.active = True
        self._on_finish = on_finish

    def update(self, dx_px: float, dy_px: float) -> BlockGeometry:
        """Pointer moved by ``(dx_px, dy_px)`` screen pixels since the interaction began."""
        zoom = self.canvas.options.zoom
        return self.update_mm(px_to_mm(dx_px / zoom), px_to_mm(dy_px / zoom))

    @abstractmethod
    def update_mm(self, dx: float, dy: float) -> BlockGeometry:
        """Pointer moved by ``(dx, dy)`` millimeters since the interaction began."""

    @abstractmethod
    def commit(self) -> Block:
        """Write the final geometry to the block once and end the interaction."""

    def cancel(self) -> None:
        """Abandon the interaction; the block keeps its committed geometry."""
        if self.active:
            logger.debug(f"Discarding {type(self).__name__} on block {self.block.id}")
        self._finish()

    def _finish(self) -> None:
        if self.active:
            self.active = False
            self._on_finish(self)

    def _ensure_active(self) -> None:
        if not self.active:
            raise LayoutError("Interaction already finished", self.block.id)


class MoveSession(_Interaction):
    """Drag of a whole block."""

    def update_mm(self, dx: float, dy: float) -> BlockGeometry:
        self._ensure_active()
        self.current = BlockGeometry(self.start.x + dx, self.start.y + dy, self.start.w, self.start.h)
        return self.current

    def commit(self) -> Block:
        self._ensure_active()
        x, y = finalize_move(
            self.current.x, self.current.y, self.current.w, self.current.h,
            self.canvas.usable_area(), self.canvas.grid_step(),
        )
        self.block.x_mm, self.block.y_mm = x, y
        self._finish()
        return self.block


class ResizeSession(_Interaction):
    """Drag of one edge handle."""

    def __init__(self, canvas: "LayoutCanvas", block: Block, direction: HandleDirection,
                 on_finish: Callable[[_Interaction], None]):
        super().__init__(canvas, block, on_finish)
        self.direction = direction

    def update_mm(self, dx: float, dy: float) -> BlockGeometry:
        self._ensure_active()
        self.current = compute_resize(self.start, self.direction, dx, dy)
        return self.current

    def commit(self) -> Block:
        self._ensure_active()
        final = finalize_resize(self.current, self.direction, self.canvas.usable_area(), self.canvas.grid_step())
        block = self.block
        if self.direction.horizontal:
            block.x_mm, block.w_mm = final.x, final.w
        else:
            block.y_mm, block.h_mm = final.y, final.h
        self._finish()
        return block


class LayoutCanvas:
    """Editing operations on the page selected in ``selection``."""

    def __init__(self, document: Document, selection: Optional[Selection] = None,
                 options: Optional[CanvasOptions] = None):
        self.document = document
        self.selection = selection or Selection()
        self.options = options or CanvasOptions()
        self._interaction: Optional[_Interaction] = None

    # ------------------------------------------------------------------
    @property
    def page(self) -> Page:
        index = self.selection.select_page(self.selection.page_index, len(self.document.pages))
        return self.document.pages[index]

    @property
    def interaction(self) -> Optional[_Interaction]:
        return self._interaction

    def usable_area(self) -> Rect:
        return self.document.page_settings.usable_area()

    def grid_step(self) -> Optional[float]:
        """Snapping step in mm, or None when snapping is off."""
        grid = self.document.page_settings.grid
        if grid.snap and grid.step_mm > 0:
            return grid.step_mm
        return None

    def paint_order(self) -> List[Block]:
        return paint_order(self.page.blocks)

    def block_at(self, x_mm: float, y_mm: float) -> Optional[Block]:
        """Topmost block containing the point."""
        for block in reversed(self.paint_order()):
            if Rect(block.x_mm, block.y_mm, block.w_mm, block.height_mm).contains(x_mm, y_mm):
                return block
        return None

    def get_block(self, block_id: str) -> Optional[Block]:
        return self.page.find_block(block_id)

    # ------------------------------------------------------------------
    def add_block(self, block: Block) -> Block:
        """Place ``block`` on the page, inside the usable area, and select it."""
        block.id = self.document.id_manager().claim(block.id, block.kind)
        block.w_mm = max(MIN_BLOCK_WIDTH_MM, block.w_mm)
        if block.h_mm is not None:
            block.h_mm = max(MIN_BLOCK_HEIGHT_MM, block.h_mm)
        block.x_mm, block.y_mm = finalize_move(
            block.x_mm, block.y_mm, block.w_mm, block.height_mm, self.usable_area(), self.grid_step()
        )
        self.page.blocks.append(block)
        self.selection.select_block(block.id)
        logger.debug(f"Added {block.kind} block {block.id} at ({block.x_mm}, {block.y_mm})")
        return block

    def create_block(self, kind: str, x_mm: float, y_mm: float) -> Block:
        """Create a default block of ``kind`` dropped at ``(x_mm, y_mm)``."""
        block = create_default_block(kind, x_mm, y_mm, z=len(self.page.blocks), ids=self.document.id_manager())
        return self.add_block(block)

    def update_block(self, block_id: str, **changes) -> Optional[Block]:
        """Apply property edits to a block; size minimums are re-applied."""
        block = self.get_block(block_id)
        if block is None:
            logger.debug(f"update_block: no block {block_id}")
            return None
        for name, value in changes.items():
            if name in _READONLY_FIELDS or not hasattr(block, name):
                raise LayoutError(f"Cannot set {name!r} on {block.kind} block", block_id)
            setattr(block, name, value)
        block.w_mm = max(MIN_BLOCK_WIDTH_MM, block.w_mm)
        if block.h_mm is not None:
            block.h_mm = max(MIN_BLOCK_HEIGHT_MM, block.h_mm)
        return block

    def delete_block(self, block_id: str) -> bool:
        """Remove a block. Locked blocks are kept."""
        index = self.page.index_of(block_id)
        if index < 0:
            return False
        block = self.page.blocks[index]
        if block.locked:
            logger.debug(f"Block {block_id} is locked; not deleting")
            return False
        if self._interaction is not None and self._interaction.block is block:
            self._interaction.cancel()
        del self.page.blocks[index]
        if self.selection.block_id == block_id:
            self.selection.clear_block()
        return True

    def duplicate_block(self, block_id: str) -> Optional[Block]:
        """Copy a block with a fresh id, offset down-right, on top of the stack."""
        block = self.get_block(block_id)
        if block is None:
            return None
        ids = self.document.id_manager()
        clone = copy.deepcopy(block)
        clone.id = ids.generate_unique_id(block.kind)
        for column in getattr(clone, "columns", ()):
            column.id = ids.generate_unique_id("col")
        offset = self.options.duplicate_offset_mm
        clone.x_mm += offset
        clone.y_mm += offset
        clone.z = len(self.page.blocks)
        self.page.blocks.append(clone)
        self.selection.select_block(clone.id)
        return clone

    def toggle_lock(self, block_id: str) -> Optional[bool]:
        block = self.get_block(block_id)
        if block is None:
            return None
        block.locked = not block.locked
        return block.locked

    def bring_to_front(self, block_id: str) -> Optional[Block]:
        block = self.get_block(block_id)
        if block is None:
            return None
        block.z = max(other.z for other in self.page.blocks) + 1
        return block

    def send_to_back(self, block_id: str) -> Optional[Block]:
        block = self.get_block(block_id)
        if block is None:
            return None
        block.z = min(other.z for other in self.page.blocks) - 1
        return block

    # ------------------------------------------------------------------
    def begin_move(self, block_id: str) -> Optional[MoveSession]:
        """Start dragging a block; None if it is locked or another interaction is running."""
        block = self._interactive_block(block_id)
        if block is None:
            return None
        self._interaction = MoveSession(self, block, self._end_interaction)
        self.selection.select_block(block.id)
        return self._interaction

    def begin_resize(self, block_id: str, direction: HandleDirection) -> Optional[ResizeSession]:
        """Start dragging an edge handle; None if the block is locked or busy."""
        block = self._interactive_block(block_id)
        if block is None:
            return None
        self._interaction = ResizeSession(self, block, HandleDirection(direction), self._end_interaction)
        self.selection.select_block(block.id)
        return self._interaction

    def teardown(self) -> None:
        """Drop any in-progress interaction without committing it."""
        if self._interaction is not None:
            self._interaction.cancel()

    def _interactive_block(self, block_id: str) -> Optional[Block]:
        if self._interaction is not None:
            logger.debug(f"Interaction already in progress on {self._interaction.block.id}")
            return None
        block = self.get_block(block_id)
        if block is None or block.locked:
            return None
        return block

    def _end_interaction(self, interaction: _Interaction) -> None:
        if self._interaction is interaction:
            self._interaction = None
