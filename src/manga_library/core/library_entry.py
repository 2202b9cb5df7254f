"""Domain entity for a favorited entry shown in the library."""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional

LOCAL_SOURCE_ID = 0
UNKNOWN_COUNT = -1


class EntryType(IntEnum):
    MANGA = 1
    MANHWA = 2
    WEBTOON = 3
    OTHER = 4


class PlaceholderKind(Enum):
    """Why a synthetic entry stands in for a category section."""

    EMPTY = "empty"
    HIDDEN = "hidden"


@dataclass
class LibraryEntry:
    """A catalog item placed in one category of the library.

    The same catalog item appears once per category it belongs to, so
    ``(id, category_id)`` identifies a row of the library while ``id`` alone
    identifies the catalog item.

    Attributes:
        id: Catalog identifier. Must not be None.
        category_id: Category this row is shown under (0 is the default category).
        title: Display title.
        author: Author name (may be empty).
        unread_count: Number of unread chapters.
        last_update: Unix timestamp of the latest chapter upload.
        date_added: Unix timestamp when the entry was favorited.
        source_id: Identifier of the catalog source (0 is the local source).
        entry_type: Publication format.
        completed: Whether the source reports the series as completed.
        favorite: Whether the entry is still in the library.
        download_count: Downloaded chapter count, or -1 when unknown.
        total_chapter_count: Total chapters, resolved lazily per cycle (-1 until then).
        placeholder: Set only on synthetic section markers.
    """

    id: int
    category_id: int
    title: str
    author: str = ""
    unread_count: int = 0
    last_update: int = 0
    date_added: int = 0
    source_id: int = 1
    entry_type: EntryType = EntryType.MANGA
    completed: bool = False
    favorite: bool = True
    download_count: int = UNKNOWN_COUNT
    total_chapter_count: int = UNKNOWN_COUNT
    placeholder: Optional[PlaceholderKind] = None

    def __post_init__(self) -> None:
        if self.id is None:
            raise ValueError("LibraryEntry id must not be None")
        if self.unread_count < 0:
            raise ValueError(f"Unread count cannot be negative: {self.unread_count}")

    @property
    def is_local(self) -> bool:
        return self.source_id == LOCAL_SOURCE_ID

    @property
    def is_placeholder(self) -> bool:
        return self.placeholder is not None

    @classmethod
    def create_empty(cls, category_id: int) -> "LibraryEntry":
        """Create the marker shown for a category without entries."""
        return cls(
            id=placeholder_id(category_id),
            category_id=category_id,
            title="",
            placeholder=PlaceholderKind.EMPTY,
        )

    @classmethod
    def create_hidden(cls, category_id: int, merged_title: str) -> "LibraryEntry":
        """Create the marker that replaces every entry of a collapsed category."""
        return cls(
            id=placeholder_id(category_id),
            category_id=category_id,
            title=merged_title,
            placeholder=PlaceholderKind.HIDDEN,
        )


def placeholder_id(category_id: int) -> int:
    """Synthetic id for a category's placeholder; never collides with catalog ids."""
    return -(category_id + 1)


def require_entry_id(entry: LibraryEntry) -> int:
    """Return the entry id or fail fast when it is missing."""
    if entry is None or entry.id is None:
        raise ValueError("Library entry must have an id")
    return entry.id
