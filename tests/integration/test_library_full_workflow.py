#!/usr/bin/env python3
"""
Integration tests for the library - full workflow validation.

Tests the complete journey through library organization on a file database:
1. Build a library with categories → see sections
2. Collapse a category, page through sections, show all again → same grouping
3. Reorder by hand → order survives a restart
4. Hide categories → one merged section with the global sort
"""

import pytest
from PySide6.QtCore import QCoreApplication

from manga_library.coordinators import LibraryCoordinator
from manga_library.core import ALL_CATEGORY_ID, LibrarySession, LibrarySort, UnreadFilter
from manga_library.io import DatabaseManager, LibraryRepository
from manga_library.services import (
    ChapterDownloadStatus,
    FilePreferenceStore,
    LibraryPreferences,
    LocalTrackService,
    TrackingRegistry,
)


def ensure_qt_app():
    if QCoreApplication.instance() is None:
        QCoreApplication([])


class LibraryApp:
    """Composition of the real stack over files in a temporary directory."""

    def __init__(self, root):
        ensure_qt_app()
        self.database = DatabaseManager(root / "library.db")
        self.database.ensure_schema()
        self.repo = LibraryRepository(self.database.connection)
        self.prefs = LibraryPreferences(FilePreferenceStore(root / "preferences.json"))
        self.coordinator = LibraryCoordinator(
            store=self.repo,
            preferences=self.prefs,
            download_status=ChapterDownloadStatus(self.repo),
            tracking=TrackingRegistry(self.repo, [LocalTrackService(self.repo)]),
            session=LibrarySession(),
        )

    def run(self, request, *args):
        request(*args)
        assert self.coordinator.wait_for_idle(5000)
        return self.coordinator.snapshot

    def close(self):
        self.database.close()


@pytest.fixture
def app(tmp_path):
    library_app = LibraryApp(tmp_path)
    repo = library_app.repo
    shonen = repo.add_category("Shonen", 0)
    seinen = repo.add_category("Seinen", 1)
    repo.add_category("Wishlist", 2)

    titles = {
        "Naruto": [shonen.id],
        "One Piece": [shonen.id],
        "Berserk": [seinen.id],
        "Vagabond": [seinen.id, shonen.id],
        "Akira": [],
    }
    for title, category_ids in titles.items():
        entry = repo.add_entry(title, author=f"{title} author")
        repo.persist_membership([(entry.id, c) for c in category_ids], [entry.id])
        repo.add_chapter(entry.id, read=title == "Berserk")

    library_app.ids = {entry.title: entry.id for entry in repo.list_favorite_entries()}
    library_app.categories = {c.name: c.id for c in repo.list_categories()}
    yield library_app
    library_app.close()


def grouping(snapshot):
    return {
        category_id: [(entry.id, entry.title, entry.placeholder) for entry in section]
        for category_id, section in snapshot.partition.items()
    }


def test_show_all_toggle_restores_identical_grouping(app):
    seinen = app.categories["Seinen"]
    app.run(app.coordinator.refresh)
    before = app.run(app.coordinator.toggle_category_visibility, seinen)
    assert len(before.partition[seinen]) == 1

    app.prefs.set_show_all_categories(False)
    paged = app.run(app.coordinator.refresh)
    assert [e.title for e in paged.partition[seinen]] == ["Berserk", "Vagabond"]

    app.prefs.set_show_all_categories(True)
    after = app.run(app.coordinator.refresh)

    assert after.partition == before.partition
    assert grouping(after) == grouping(before)


def test_entry_in_two_categories_appears_in_both(app):
    snapshot = app.run(app.coordinator.refresh)
    vagabond = app.ids["Vagabond"]

    sections = [
        category_id
        for category_id, section in snapshot.partition.items()
        if any(entry.id == vagabond for entry in section)
    ]
    assert sorted(sections) == sorted([app.categories["Shonen"], app.categories["Seinen"]])
    assert [e.title for e in snapshot.partition[app.categories["Wishlist"]]] == [""]


def test_manual_order_survives_restart(app, tmp_path):
    shonen = app.categories["Shonen"]
    app.run(app.coordinator.refresh)
    order = [app.ids["Vagabond"], app.ids["One Piece"], app.ids["Naruto"]]
    app.run(app.coordinator.reorder_category, shonen, order)
    app.close()

    restarted = LibraryApp(tmp_path)
    try:
        snapshot = restarted.run(restarted.coordinator.refresh)
        assert [e.id for e in snapshot.partition[shonen]] == order
    finally:
        restarted.close()


def test_hidden_categories_merge_into_global_sort(app):
    app.prefs.set_hide_categories(True)
    app.prefs.set_library_sorting_mode(LibrarySort.UNREAD)

    snapshot = app.run(app.coordinator.refresh)
    titles = [e.title for e in snapshot.partition[ALL_CATEGORY_ID]]
    assert titles == ["Akira", "Naruto", "One Piece", "Vagabond", "Berserk"]


def test_filters_then_clear(app):
    app.run(app.coordinator.refresh)
    app.prefs.set_filter_unread(UnreadFilter.READ)
    filtered = app.run(app.coordinator.request_filter_update)
    assert [e.title for e in filtered.entries] == ["Berserk"]

    app.prefs.set_filter_unread(UnreadFilter.IGNORE)
    cleared = app.run(app.coordinator.request_filter_update)
    assert len([e for e in cleared.entries if not e.is_placeholder]) == 6
