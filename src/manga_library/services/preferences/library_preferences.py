"""Typed access to every preference the library engine reads or writes."""

from typing import List, Set

from manga_library.core import (
    FilterState,
    LibrarySort,
    SortKey,
    TriState,
    TypeFilter,
    UnreadFilter,
)
from manga_library.services.preferences.preference_store import PreferenceStore


class Keys:
    filter_downloaded = "pref_filter_downloaded_key"
    filter_unread = "pref_filter_unread_key"
    filter_completed = "pref_filter_completed_key"
    filter_tracked = "pref_filter_tracked_key"
    filter_manga_type = "pref_filter_manga_type_key"
    filter_tracker = "pref_filter_tracker_key"
    library_sorting_mode = "library_sorting_mode"
    library_sorting_ascending = "library_sorting_ascending"
    hide_categories = "hide_categories"
    show_all_categories = "show_all_categories"
    remove_articles = "remove_articles"
    default_manga_order = "default_manga_order"
    last_used_category = "last_used_category"
    collapsed_categories = "collapsed_categories"
    download_badge = "display_download_badge"


def _enum_or_default(enum_type, value, default):
    try:
        return enum_type(value)
    except (TypeError, ValueError):
        return default


class LibraryPreferences:
    """Config store for the library: filter axes, sorting and category display."""

    def __init__(self, store: PreferenceStore) -> None:
        if store is None:
            raise ValueError("PreferenceStore must not be None")
        self._store = store

    # Filters

    def filter_downloaded(self) -> TriState:
        return _enum_or_default(TriState, self._store.get(Keys.filter_downloaded, 0), TriState.IGNORE)

    def set_filter_downloaded(self, state: TriState) -> None:
        self._store.set(Keys.filter_downloaded, int(state))

    def filter_unread(self) -> UnreadFilter:
        return _enum_or_default(
            UnreadFilter, self._store.get(Keys.filter_unread, 0), UnreadFilter.IGNORE
        )

    def set_filter_unread(self, state: UnreadFilter) -> None:
        self._store.set(Keys.filter_unread, int(state))

    def filter_completed(self) -> TriState:
        return _enum_or_default(TriState, self._store.get(Keys.filter_completed, 0), TriState.IGNORE)

    def set_filter_completed(self, state: TriState) -> None:
        self._store.set(Keys.filter_completed, int(state))

    def filter_tracked(self) -> TriState:
        return _enum_or_default(TriState, self._store.get(Keys.filter_tracked, 0), TriState.IGNORE)

    def set_filter_tracked(self, state: TriState) -> None:
        self._store.set(Keys.filter_tracked, int(state))

    def filter_manga_type(self) -> TypeFilter:
        return _enum_or_default(
            TypeFilter, self._store.get(Keys.filter_manga_type, 0), TypeFilter.IGNORE
        )

    def set_filter_manga_type(self, state: TypeFilter) -> None:
        self._store.set(Keys.filter_manga_type, int(state))

    def filter_tracker(self) -> str:
        return self._store.get(Keys.filter_tracker, "") or ""

    def set_filter_tracker(self, name: str) -> None:
        self._store.set(Keys.filter_tracker, name or "")

    def filter_state(self) -> FilterState:
        """Read every filter axis at once."""
        return FilterState(
            downloaded=self.filter_downloaded(),
            unread=self.filter_unread(),
            completed=self.filter_completed(),
            tracked=self.filter_tracked(),
            entry_type=self.filter_manga_type(),
            tracker_name=self.filter_tracker(),
        )

    # Sorting

    def library_sorting_mode(self) -> LibrarySort:
        return _enum_or_default(
            LibrarySort, self._store.get(Keys.library_sorting_mode, 0), LibrarySort.ALPHA
        )

    def set_library_sorting_mode(self, mode: LibrarySort) -> None:
        self._store.set(Keys.library_sorting_mode, int(mode))

    def library_sorting_ascending(self) -> bool:
        return bool(self._store.get(Keys.library_sorting_ascending, True))

    def set_library_sorting_ascending(self, ascending: bool) -> None:
        self._store.set(Keys.library_sorting_ascending, bool(ascending))

    def global_sort_key(self) -> SortKey:
        return SortKey(self.library_sorting_mode(), self.library_sorting_ascending())

    def remove_articles(self) -> bool:
        return bool(self._store.get(Keys.remove_articles, False))

    def set_remove_articles(self, enabled: bool) -> None:
        self._store.set(Keys.remove_articles, bool(enabled))

    def default_manga_order(self) -> str:
        """Ordering policy of the default category, which has no table row."""
        return self._store.get(Keys.default_manga_order, "") or ""

    def set_default_manga_order(self, value: str) -> None:
        self._store.set(Keys.default_manga_order, value)

    # Categories

    def hide_categories(self) -> bool:
        return bool(self._store.get(Keys.hide_categories, False))

    def set_hide_categories(self, hidden: bool) -> None:
        self._store.set(Keys.hide_categories, bool(hidden))

    def show_all_categories(self) -> bool:
        return bool(self._store.get(Keys.show_all_categories, True))

    def set_show_all_categories(self, show: bool) -> None:
        self._store.set(Keys.show_all_categories, bool(show))

    def last_used_category(self) -> int:
        return int(self._store.get(Keys.last_used_category, 0))

    def set_last_used_category(self, order: int) -> None:
        self._store.set(Keys.last_used_category, int(order))

    def collapsed_categories(self) -> Set[int]:
        values: List[str] = self._store.get(Keys.collapsed_categories, []) or []
        collapsed = set()
        for value in values:
            try:
                collapsed.add(int(value))
            except (TypeError, ValueError):
                continue
        return collapsed

    def set_collapsed_categories(self, category_ids: Set[int]) -> None:
        self._store.set(
            Keys.collapsed_categories, sorted(str(category_id) for category_id in category_ids)
        )

    # Badges

    def download_badge(self) -> bool:
        return bool(self._store.get(Keys.download_badge, False))

    def set_download_badge(self, enabled: bool) -> None:
        self._store.set(Keys.download_badge, bool(enabled))
