"""
ID manager for document templates.

Mints block, page and column identifiers and tracks which ones are already
taken inside a document.
"""

from typing import Dict, Iterable, Optional, Set
import uuid
import logging

logger = logging.getLogger(__name__)


def new_id(prefix: str = "") -> str:
    """Mint a fresh random identifier, optionally prefixed (``"text-1a2b3c4d5e6f"``)."""
    token = uuid.uuid4().hex[:12]
    return f"{prefix}-{token}" if prefix else token


class IDManager:
    """
    Tracks identifiers in use and mints non-colliding ones.

    Used when loading documents, adding blocks to a page and duplicating
    pages, where block ids must stay unique across the whole document.
    """

    def __init__(self, existing: Optional[Iterable[str]] = None):
        self.registered_ids: Set[str] = set()
        self.id_to_type: Dict[str, str] = {}
        for element_id in existing or ():
            self.registered_ids.add(element_id)

    def generate_unique_id(self, prefix: str = "") -> str:
        """
        Generate an id not yet registered and register it.

        Args:
            prefix: Optional prefix, usually the block kind

        Returns:
            Unique ID string
        """
        element_id = new_id(prefix)
        while element_id in self.registered_ids:
            element_id = new_id(prefix)
        self.register_id(element_id, prefix or "element")
        return element_id

    def register_id(self, element_id: str, element_type: str = "element") -> bool:
        """
        Register an element ID.

        Returns:
            True if registration successful, False if ID already exists
        """
        if element_id in self.registered_ids:
            logger.debug(f"ID {element_id} already registered")
            return False
        self.registered_ids.add(element_id)
        self.id_to_type[element_id] = element_type
        return True

    def claim(self, element_id: Optional[str], element_type: str = "element") -> str:
        """Register ``element_id`` or, if it is empty or taken, a freshly minted one."""
        if element_id and self.register_id(element_id, element_type):
            return element_id
        if element_id:
            logger.warning(f"Duplicate {element_type} id {element_id!r}; minting a new one")
        return self.generate_unique_id(element_type)

