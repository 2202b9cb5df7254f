"""Entry catalog builder - turns stored rows into the library entry set."""

import logging
from dataclasses import dataclass, field, replace
from typing import List, Sequence, Set

from manga_library.core import (
    ALL_CATEGORY_ID,
    DEFAULT_CATEGORY_ID,
    Category,
    LibraryEntry,
    LibrarySort,
    SortKey,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogConfig:
    """Display settings that shape the catalog.

    Attributes:
        hide_categories: Show every entry once, under the virtual "all" category.
        show_all_categories: Show every category at once (enables collapsing).
        collapsed_categories: Ids of categories collapsed into one summary row.
        default_manga_order: Persisted ordering policy of the default category.
        global_sort: Library-wide sort key, given to the virtual "all" category.
    """

    hide_categories: bool = False
    show_all_categories: bool = True
    collapsed_categories: Set[int] = field(default_factory=set)
    default_manga_order: str = ""
    global_sort: SortKey = field(default_factory=lambda: SortKey(LibrarySort.ALPHA))


@dataclass
class CatalogBuild:
    """Result of one build.

    Attributes:
        entries: One entry per (entry, category) pairing plus placeholders.
        categories: Categories the view displays.
        all_categories: Every loaded category, used for per-category ordering.
    """

    entries: List[LibraryEntry]
    categories: List[Category]
    all_categories: List[Category]


class EntryCatalogBuilder:
    """Builds library entries and categories for one recompute cycle."""

    def build(
        self,
        raw_entries: Sequence[LibraryEntry],
        raw_categories: Sequence[Category],
        config: CatalogConfig,
    ) -> CatalogBuild:
        categories = [replace(category) for category in raw_categories]
        known_ids = {category.id for category in categories}
        known_ids.add(DEFAULT_CATEGORY_ID)

        entries: List[LibraryEntry] = []
        for raw in raw_entries:
            entry = replace(raw)
            if entry.category_id not in known_ids:
                logger.info(
                    "Entry %s references unknown category %s; using default",
                    entry.id,
                    entry.category_id,
                )
                entry.category_id = DEFAULT_CATEGORY_ID
            entries.append(entry)

        used_categories = {entry.category_id for entry in entries}
        if DEFAULT_CATEGORY_ID in used_categories:
            categories.insert(0, Category.create_default(config.default_manga_order))

        show_categories = not config.hide_categories
        show_all = config.show_all_categories
        collapsed = config.collapsed_categories

        if not show_categories:
            entries = self._merge_into_all(entries)
        else:
            for category in categories:
                if (
                    category.is_user_category
                    and category.id not in used_categories
                    and (category.id not in collapsed or not show_all)
                ):
                    entries.append(LibraryEntry.create_empty(category.id))
                elif category.id in collapsed and show_all:
                    entries = self._collapse(entries, category.id)

        for category in categories:
            category.hidden = category.id in collapsed and show_all
        self._mark_bounds(categories)

        if not show_categories:
            category_all = Category.create_all(config.global_sort)
            self._mark_bounds([category_all])
            view_categories = [category_all]
        else:
            view_categories = categories

        return CatalogBuild(
            entries=entries,
            categories=view_categories,
            all_categories=categories,
        )

    @staticmethod
    def _merge_into_all(entries: List[LibraryEntry]) -> List[LibraryEntry]:
        seen: Set[int] = set()
        merged = []
        for entry in entries:
            if entry.id in seen:
                continue
            seen.add(entry.id)
            entry.category_id = ALL_CATEGORY_ID
            merged.append(entry)
        return merged

    @staticmethod
    def _collapse(entries: List[LibraryEntry], category_id: int) -> List[LibraryEntry]:
        removed = [entry for entry in entries if entry.category_id == category_id]
        kept = [entry for entry in entries if entry.category_id != category_id]
        merged_title = " - ".join(f"{entry.title} - {entry.author}" for entry in removed)
        kept.append(LibraryEntry.create_hidden(category_id, merged_title))
        return kept

    @staticmethod
    def _mark_bounds(categories: List[Category]) -> None:
        if not categories:
            return
        first_id = min(categories, key=lambda c: c.display_order).id
        last_id = categories[-1].id
        for category in categories:
            category.is_first = category.id == first_id
            category.is_last = category.id == last_id
