"""Domain layer - Pure entities representing the library."""

from .category import (
    ALL_CATEGORY_ID,
    DEFAULT_CATEGORY_ID,
    RESERVED_DISPLAY_ORDER,
    Category,
    decode_manga_order,
    encode_manga_order,
)
from .library_entry import (
    LOCAL_SOURCE_ID,
    UNKNOWN_COUNT,
    EntryType,
    LibraryEntry,
    PlaceholderKind,
    placeholder_id,
    require_entry_id,
)
from .library_filter import FilterState, TriState, TypeFilter, UnreadFilter
from .library_snapshot import LibrarySession, LibrarySnapshot
from .library_sort import LibrarySort, SortKey
from .track import Track

__all__ = [
    "ALL_CATEGORY_ID",
    "DEFAULT_CATEGORY_ID",
    "LOCAL_SOURCE_ID",
    "RESERVED_DISPLAY_ORDER",
    "UNKNOWN_COUNT",
    "Category",
    "EntryType",
    "FilterState",
    "LibraryEntry",
    "LibrarySession",
    "LibrarySnapshot",
    "LibrarySort",
    "PlaceholderKind",
    "SortKey",
    "Track",
    "TriState",
    "TypeFilter",
    "UnreadFilter",
    "decode_manga_order",
    "encode_manga_order",
    "placeholder_id",
    "require_entry_id",
]
