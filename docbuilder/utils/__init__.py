"""Utility helpers: logging, id minting and validation."""

from .id_manager import IDManager, new_id
from .logger import add_file_handler, configure_logging

__all__ = ["IDManager", "new_id", "add_file_handler", "configure_logging"]
