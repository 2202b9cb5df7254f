"""Category order store - resolves and persists each category's ordering policy."""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Union

from manga_library.core import (
    ALL_CATEGORY_ID,
    DEFAULT_CATEGORY_ID,
    Category,
    LibrarySort,
    SortKey,
    encode_manga_order,
)
from manga_library.io import EntityStore
from manga_library.services.preferences import LibraryPreferences

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ManualOrder:
    """Entries placed by drag and drop, as an ordered list of entry ids."""

    entry_ids: List[int]


@dataclass(frozen=True)
class SortKeyOrder:
    """Entries ordered by a rule."""

    mode: LibrarySort
    ascending: bool = True


EffectiveOrder = Union[ManualOrder, SortKeyOrder]


class CategoryOrderStore:
    """Owns reads and writes of a category's explicit order or sort key.

    The default category has no table row, so its policy lives in the
    preferences. The virtual "all" category mirrors the global sort.
    """

    def __init__(self, store: EntityStore, preferences: LibraryPreferences) -> None:
        if store is None:
            raise ValueError("EntityStore must not be None")
        if preferences is None:
            raise ValueError("LibraryPreferences must not be None")
        self._store = store
        self._preferences = preferences

    def resolve(self, category: Category, global_sort: SortKey) -> EffectiveOrder:
        """Return the category's effective order, materializing the global sort.

        A category without an explicit order or sort key takes the global
        sort key, which is persisted right away so later reads are stable.
        """
        if not category.has_ordering:
            category.set_sort_key(self._materializable(global_sort))
            try:
                self.persist(category)
            except RuntimeError as e:
                logger.warning("Could not persist sort of category %s: %s", category.id, e)

        if category.sort_key is not None:
            return SortKeyOrder(category.sort_key.mode, category.sort_key.ascending)
        return ManualOrder(list(category.explicit_order))

    def resolve_and_persist(
        self, categories: Iterable[Category], global_sort: SortKey
    ) -> dict[int, EffectiveOrder]:
        """Resolve every category once at the start of a sort cycle."""
        return {category.id: self.resolve(category, global_sort) for category in categories}

    def set_manual_order(self, category: Category, entry_ids: List[int]) -> None:
        category.set_explicit_order(entry_ids)
        self.persist(category)

    def set_sort_key(self, category: Category, sort_key: SortKey) -> None:
        category.set_sort_key(sort_key)
        if category.id == ALL_CATEGORY_ID:
            self._preferences.set_library_sorting_mode(sort_key.mode)
            self._preferences.set_library_sorting_ascending(sort_key.ascending)
            return
        self.persist(category)

    def persist(self, category: Category) -> None:
        """Write the category's policy where that category keeps it."""
        if category.id == DEFAULT_CATEGORY_ID:
            self._preferences.set_default_manga_order(encode_manga_order(category))
        elif category.is_user_category:
            self._store.persist_category(category)
        else:
            logger.debug("Category %s ordering is not persisted", category.id)

    @staticmethod
    def _materializable(global_sort: SortKey) -> SortKey:
        # Drag and drop has no rule of its own to copy into a category.
        if global_sort.mode == LibrarySort.DRAG_AND_DROP:
            return SortKey(LibrarySort.ALPHA, global_sort.ascending)
        return global_sort
