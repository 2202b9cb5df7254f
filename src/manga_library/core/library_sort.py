"""Sort modes and the persisted sort-key encoding used by categories."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class LibrarySort(IntEnum):
    """Ordering rules available to the library and to each category."""

    ALPHA = 0
    LAST_READ = 1
    LATEST_CHAPTER = 2
    UNREAD = 3
    TOTAL_CHAPTERS = 4
    DATE_ADDED = 5
    DRAG_AND_DROP = 6


# Letter pairs (ascending, descending) persisted for each rule-based mode.
_SORT_LETTERS = {
    LibrarySort.ALPHA: ("a", "b"),
    LibrarySort.LATEST_CHAPTER: ("c", "d"),
    LibrarySort.UNREAD: ("e", "f"),
    LibrarySort.LAST_READ: ("g", "h"),
    LibrarySort.TOTAL_CHAPTERS: ("i", "j"),
    LibrarySort.DATE_ADDED: ("k", "l"),
}


@dataclass(frozen=True)
class SortKey:
    """A rule-based ordering: a sort mode plus its direction.

    Attributes:
        mode: The rule used to compare entries.
        ascending: Direction of the rule. Descending inverts the comparator.
    """

    mode: LibrarySort
    ascending: bool = True

    def to_letter(self) -> str:
        """Encode this key as the single letter stored for a category.

        DRAG_AND_DROP has no letter of its own and is stored as ALPHA.
        """
        ascending_letter, descending_letter = _SORT_LETTERS.get(
            self.mode, _SORT_LETTERS[LibrarySort.ALPHA]
        )
        return ascending_letter if self.ascending else descending_letter

    @classmethod
    def from_letter(cls, letter: str) -> Optional["SortKey"]:
        """Decode a persisted letter; returns None for anything unknown."""
        for mode, (ascending_letter, descending_letter) in _SORT_LETTERS.items():
            if letter == ascending_letter:
                return cls(mode, True)
            if letter == descending_letter:
                return cls(mode, False)
        return None
