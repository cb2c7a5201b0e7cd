"""Validation helpers for document templates."""

from __future__ import annotations

from collections import Counter
from typing import Any, Dict, List, Optional

from ..engine.expression_engine import CONDITION_OPERATOR
from ..engine.geometry import MIN_BLOCK_HEIGHT_MM, MIN_BLOCK_WIDTH_MM
from ..models.blocks import RepeaterTableBlock, TableBlock
from ..models.document import Document


class DocumentValidators:
    """Run a suite of lightweight checks over a document.

    ``errors`` break invariants the editor relies on; ``warnings`` flag
    content that renders but probably not as intended.
    """

    def __init__(self) -> None:
        self._errors: Dict[str, List[Dict[str, Any]]] = {"errors": [], "warnings": []}

    # ------------------------------------------------------------------
    def _add(self, section: str, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        entry: Dict[str, Any] = {"message": message}
        if context:
            entry["context"] = context
        self._errors[section].append(entry)

    @property
    def errors(self) -> List[Dict[str, Any]]:
        return list(self._errors["errors"])

    @property
    def warnings(self) -> List[Dict[str, Any]]:
        return list(self._errors["warnings"])

    # ------------------------------------------------------------------
    def validate(self, document: Document) -> bool:
        """Run every check. Returns True when there are no errors."""
        for section in self._errors.values():
            section.clear()
        self.validate_structure(document)
        self.validate_blocks(document)
        return not self._errors["errors"]

    def validate_structure(self, document: Document) -> None:
        if not document.pages:
            self._add("errors", "Document has no pages")
        duplicates = [block_id for block_id, count in Counter(document.block_ids()).items() if count > 1]
        for block_id in duplicates:
            self._add("errors", "Duplicate block id", {"id": block_id})
        page_ids = Counter(page.id for page in document.pages)
        for page_id, count in page_ids.items():
            if count > 1:
                self._add("errors", "Duplicate page id", {"id": page_id})

    def validate_blocks(self, document: Document) -> None:
        area = document.page_settings.usable_area()
        for page_index, page in enumerate(document.pages):
            for block in page.blocks:
                context = {"page": page_index + 1, "id": block.id, "type": block.kind}
                if block.w_mm < MIN_BLOCK_WIDTH_MM:
                    self._add("errors", f"Block narrower than {MIN_BLOCK_WIDTH_MM:g}mm", context)
                if block.h_mm is not None and block.h_mm < MIN_BLOCK_HEIGHT_MM:
                    self._add("errors", f"Block shorter than {MIN_BLOCK_HEIGHT_MM:g}mm", context)
                if (block.x_mm < area.left or block.y_mm < area.top
                        or block.x_mm + block.w_mm > area.right + 1e-6
                        or block.y_mm + block.height_mm > area.bottom + 1e-6):
                    self._add("warnings", "Block extends outside the printable area", context)
                if block.visible_if and (not isinstance(block.visible_if, str)
                                         or CONDITION_OPERATOR not in block.visible_if):
                    self._add("warnings", "Unsupported visibleIf condition; block is always shown",
                              {**context, "visibleIf": block.visible_if})
                if isinstance(block, (TableBlock, RepeaterTableBlock)) and not block.columns:
                    self._add("warnings", "Table has no columns", context)
                if isinstance(block, RepeaterTableBlock) and block.max_rows is not None \
                        and block.max_rows < block.min_rows:
                    self._add("warnings", "Repeater maxRows is below minRows", context)


def validate_document(document: Document) -> DocumentValidators:
    validators = DocumentValidators()
    validators.validate(document)
    return validators
