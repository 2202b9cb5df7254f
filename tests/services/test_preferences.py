"""Tests for preference stores and typed library preferences."""

import json

import pytest

from manga_library.core import LibrarySort, SortKey, TriState, TypeFilter, UnreadFilter
from manga_library.services import (
    FilePreferenceStore,
    InMemoryPreferenceStore,
    Keys,
    LibraryPreferences,
)


@pytest.fixture
def prefs():
    return LibraryPreferences(InMemoryPreferenceStore())


class TestInMemoryPreferenceStore:
    def test_get_returns_default_for_missing_key(self):
        assert InMemoryPreferenceStore().get("missing", 7) == 7

    def test_values_are_copied(self):
        store = InMemoryPreferenceStore()
        values = ["1"]
        store.set("list", values)
        values.append("2")
        assert store.get("list") == ["1"]

    def test_remove(self):
        store = InMemoryPreferenceStore({"a": 1})
        store.remove("a")
        store.remove("a")
        assert store.keys() == []


class TestFilePreferenceStore:
    def test_writes_through_to_disk(self, tmp_path):
        path = tmp_path / "prefs" / "preferences.json"
        FilePreferenceStore(path).set("hide_categories", True)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["version"] == FilePreferenceStore.STORE_VERSION
        assert data["values"] == {"hide_categories": True}

    def test_reloads_saved_values(self, tmp_path):
        path = tmp_path / "preferences.json"
        FilePreferenceStore(path).set("last_used_category", 3)
        assert FilePreferenceStore(path).get("last_used_category") == 3

    def test_corrupt_file_is_treated_as_empty(self, tmp_path):
        path = tmp_path / "preferences.json"
        path.write_text("{not json", encoding="utf-8")

        store = FilePreferenceStore(path)
        assert store.keys() == []
        store.set("a", 1)
        assert FilePreferenceStore(path).get("a") == 1


class TestLibraryPreferences:
    def test_fails_fast_on_none_store(self):
        with pytest.raises(ValueError, match="PreferenceStore must not be None"):
            LibraryPreferences(None)

    def test_defaults(self, prefs):
        assert not prefs.filter_state().is_active
        assert prefs.global_sort_key() == SortKey(LibrarySort.ALPHA, True)
        assert prefs.show_all_categories() is True
        assert prefs.hide_categories() is False
        assert prefs.collapsed_categories() == set()
        assert prefs.default_manga_order() == ""

    def test_filter_state_collects_every_axis(self, prefs):
        prefs.set_filter_downloaded(TriState.INCLUDE)
        prefs.set_filter_unread(UnreadFilter.IN_PROGRESS)
        prefs.set_filter_completed(TriState.EXCLUDE)
        prefs.set_filter_tracked(TriState.INCLUDE)
        prefs.set_filter_manga_type(TypeFilter.MANHWA)
        prefs.set_filter_tracker("Local")

        state = prefs.filter_state()
        assert state.downloaded == TriState.INCLUDE
        assert state.unread == UnreadFilter.IN_PROGRESS
        assert state.completed == TriState.EXCLUDE
        assert state.tracked == TriState.INCLUDE
        assert state.entry_type == TypeFilter.MANHWA
        assert state.tracker_name == "Local"

    def test_unknown_enum_values_fall_back(self):
        prefs = LibraryPreferences(
            InMemoryPreferenceStore({Keys.library_sorting_mode: 99, Keys.filter_unread: "x"})
        )
        assert prefs.library_sorting_mode() == LibrarySort.ALPHA
        assert prefs.filter_unread() == UnreadFilter.IGNORE

    def test_collapsed_categories_are_stored_as_strings(self, prefs):
        prefs.set_collapsed_categories({5, 3})
        assert prefs._store.get(Keys.collapsed_categories) == ["3", "5"]
        assert prefs.collapsed_categories() == {3, 5}

    def test_global_sort_key(self, prefs):
        prefs.set_library_sorting_mode(LibrarySort.UNREAD)
        prefs.set_library_sorting_ascending(False)
        assert prefs.global_sort_key() == SortKey(LibrarySort.UNREAD, False)
