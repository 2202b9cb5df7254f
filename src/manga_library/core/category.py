"""Domain entity for library categories and their ordering policy."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .library_sort import SortKey

DEFAULT_CATEGORY_ID = 0
ALL_CATEGORY_ID = -1
# Display order shared by the default and the virtual "all" category.
RESERVED_DISPLAY_ORDER = -1


@dataclass
class Category:
    """A user-defined or reserved grouping of library entries.

    Attributes:
        id: 0 for the default category, -1 for the virtual "all" category,
            positive for user categories.
        name: Display name.
        display_order: Position among categories.
        sort_key: Rule-based ordering, or None to inherit the global sort.
        explicit_order: Manual placement as a list of entry ids, or None.
        hidden: Collapsed into a single summary row (only with "show all").
        is_first: Lowest display order of the loaded categories.
        is_last: Last of the loaded categories.
    """

    id: int
    name: str
    display_order: int = 0
    sort_key: Optional[SortKey] = None
    explicit_order: Optional[List[int]] = None
    hidden: bool = False
    is_first: Optional[bool] = field(default=None, compare=False)
    is_last: Optional[bool] = field(default=None, compare=False)

    def set_sort_key(self, sort_key: SortKey) -> None:
        self.sort_key = sort_key
        self.explicit_order = None

    def set_explicit_order(self, entry_ids: List[int]) -> None:
        self.explicit_order = list(entry_ids)
        self.sort_key = None

    @property
    def has_ordering(self) -> bool:
        return self.sort_key is not None or bool(self.explicit_order)

    @property
    def is_user_category(self) -> bool:
        return self.id > DEFAULT_CATEGORY_ID

    @classmethod
    def create_default(cls, manga_order: str = "") -> "Category":
        category = cls(
            id=DEFAULT_CATEGORY_ID,
            name="Default",
            display_order=RESERVED_DISPLAY_ORDER,
        )
        category.sort_key, category.explicit_order = decode_manga_order(manga_order)
        return category

    @classmethod
    def create_all(cls, sort_key: SortKey) -> "Category":
        return cls(
            id=ALL_CATEGORY_ID,
            name="All",
            display_order=RESERVED_DISPLAY_ORDER,
            sort_key=sort_key,
        )


def encode_manga_order(category: Category) -> str:
    """Serialize a category's ordering policy to its persisted text form.

    A sort key is stored as a single letter; a manual order as ids joined by '/'.
    """
    if category.sort_key is not None:
        return category.sort_key.to_letter()
    if category.explicit_order:
        return "/".join(str(entry_id) for entry_id in category.explicit_order)
    return ""


def decode_manga_order(value: Optional[str]) -> Tuple[Optional[SortKey], Optional[List[int]]]:
    """Parse the persisted text form into ``(sort_key, explicit_order)``."""
    if not value:
        return None, None
    if value[0].isalpha():
        return SortKey.from_letter(value[0]), None
    entry_ids = []
    for part in value.split("/"):
        try:
            entry_ids.append(int(part))
        except ValueError:
            continue
    return None, entry_ids or None
