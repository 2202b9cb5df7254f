"""I/O layer - Data access for persistence."""

from .database_manager import DatabaseManager
from .entity_store import EntityStore
from .library_repository import LibraryRepository

__all__ = ["DatabaseManager", "EntityStore", "LibraryRepository"]
