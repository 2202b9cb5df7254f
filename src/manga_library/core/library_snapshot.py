"""Derived library view produced by one recompute cycle."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .category import ALL_CATEGORY_ID, Category
from .library_entry import LibraryEntry


@dataclass(frozen=True)
class LibrarySnapshot:
    """Complete output of one pipeline run.

    Attributes:
        entries: Filtered and sorted entries of every section, in display order.
        categories: Categories shown by the view.
        partition: Entries grouped by category id.
        current_category_id: Section currently displayed when paging by category.
        show_all_categories: Whether every section is shown at once.
        generation: Increasing counter used to discard stale publications.
    """

    entries: List[LibraryEntry]
    categories: List[Category]
    partition: Dict[int, List[LibraryEntry]]
    current_category_id: int = ALL_CATEGORY_ID
    show_all_categories: bool = True
    generation: int = 0

    @property
    def current_category(self) -> Optional[Category]:
        return next(
            (c for c in self.categories if c.id == self.current_category_id), None
        )

    @property
    def visible_entries(self) -> List[LibraryEntry]:
        """Entries the view should render right now."""
        if self.show_all_categories or len(self.partition) <= 1:
            return self.entries
        return self.partition.get(self.current_category_id, [])


@dataclass
class LibrarySession:
    """Caller-owned slot retaining the last snapshot across view teardown.

    Holds at most one snapshot; ``consume`` hands it out once.
    """

    _retained: Optional[LibrarySnapshot] = field(default=None, repr=False)

    def save(self, snapshot: Optional[LibrarySnapshot]) -> None:
        self._retained = snapshot

    def consume(self) -> Optional[LibrarySnapshot]:
        snapshot, self._retained = self._retained, None
        return snapshot

    @property
    def has_snapshot(self) -> bool:
        return self._retained is not None
