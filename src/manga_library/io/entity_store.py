"""Entity store abstraction - persistence interface consumed by the library engine."""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Sequence, Tuple

from manga_library.core import Category, LibraryEntry, Track


class EntityStore(ABC):
    """
    Abstract interface for reading and writing library state.

    Implementations raise RuntimeError when the underlying storage fails.
    The library pipeline treats read failures as empty results.
    """

    @abstractmethod
    def list_favorite_entries(self) -> List[LibraryEntry]:
        """
        Return one entry per (favorite entry, category) pairing.

        Entries without any category row are returned under category 0.
        """

    @abstractmethod
    def list_categories(self) -> List[Category]:
        """Return user categories ordered by display order."""

    @abstractmethod
    def list_category_membership(self, entry_id: int) -> List[int]:
        """Return the ids of the user categories an entry belongs to."""

    @abstractmethod
    def chapter_count_for(self, entry_id: int) -> int:
        """Return the total number of chapters stored for an entry."""

    @abstractmethod
    def persist_category(self, category: Category) -> None:
        """Insert or update a user category, including its ordering policy."""

    @abstractmethod
    def persist_membership(
        self, mappings: Sequence[Tuple[int, int]], entry_ids: Iterable[int]
    ) -> None:
        """
        Replace the category membership of ``entry_ids``.

        Args:
            mappings: (entry_id, category_id) rows to write.
            entry_ids: Entries whose existing rows are removed first.
        """

    @abstractmethod
    def persist_entries(self, entries: Sequence[LibraryEntry]) -> None:
        """Write the favorite flag of the given entries."""

    @abstractmethod
    def last_read_order(self) -> List[int]:
        """Return entry ids ordered from most to least recently read."""

    @abstractmethod
    def get_entry(self, entry_id: int) -> Optional[LibraryEntry]:
        """Return a single entry (category 0) or None when missing."""

    @abstractmethod
    def tracks_for(self, entry_id: int) -> List[Track]:
        """Return the tracking records bound to an entry."""

    @abstractmethod
    def persist_track(self, track: Track) -> Track:
        """Insert or update a tracking record and return the stored version."""

    @abstractmethod
    def downloaded_chapter_count(self, entry_id: int) -> int:
        """Return how many chapters of an entry are downloaded."""
