"""Tests for FilterEngine."""

from unittest.mock import MagicMock

import pytest

from manga_library.core import (
    EntryType,
    FilterState,
    LibraryEntry,
    Track,
    TriState,
    TypeFilter,
    UnreadFilter,
)
from manga_library.services import FilterEngine, TrackingRegistry, apply_download_counts


class FakeDownloads:
    def __init__(self, counts=None):
        self.counts = counts or {}
        self.calls = []

    def download_count_for(self, entry_id):
        self.calls.append(entry_id)
        return self.counts.get(entry_id, 0)


def _service(service_id, name, logged=True):
    service = MagicMock()
    service.id = service_id
    service.name = name
    service.is_logged = logged
    return service


def _entry(entry_id, **kwargs):
    kwargs.setdefault("title", f"Entry {entry_id}")
    kwargs.setdefault("category_id", 0)
    return LibraryEntry(id=entry_id, **kwargs)


@pytest.fixture
def store():
    store = MagicMock()
    store.tracks_for.return_value = []
    return store


@pytest.fixture
def downloads():
    return FakeDownloads()


@pytest.fixture
def engine_factory(store, downloads):
    def make(chapter_counts=None, services=()):
        counts = chapter_counts or {}
        return FilterEngine(
            lambda entry_id: counts.get(entry_id, 0),
            downloads,
            TrackingRegistry(store, services),
        )

    return make


def _ids(entries):
    return [entry.id for entry in entries]


def test_fails_fast_on_missing_collaborators(downloads, store):
    with pytest.raises(ValueError, match="chapter_count_for must not be None"):
        FilterEngine(None, downloads, TrackingRegistry(store))
    with pytest.raises(ValueError, match="DownloadStatusProvider must not be None"):
        FilterEngine(lambda i: 0, None, TrackingRegistry(store))


def test_inactive_state_keeps_everything_in_order(engine_factory):
    entries = [_entry(3), LibraryEntry.create_empty(2), _entry(1)]
    assert engine_factory().filter(entries, FilterState()) == entries


def test_active_state_drops_placeholders(engine_factory):
    entries = [_entry(1, unread_count=2), LibraryEntry.create_empty(2)]
    result = engine_factory().filter(entries, FilterState(unread=UnreadFilter.UNREAD))
    assert _ids(result) == [1]


class TestUnreadAxis:
    def test_unread_and_read(self, engine_factory):
        entries = [_entry(1, unread_count=3), _entry(2, unread_count=0)]
        engine = engine_factory()
        assert _ids(engine.filter(entries, FilterState(unread=UnreadFilter.UNREAD))) == [1]
        assert _ids(engine.filter(entries, FilterState(unread=UnreadFilter.READ))) == [2]

    def test_not_started_compares_with_chapter_count(self, engine_factory):
        entries = [_entry(1, unread_count=5), _entry(2, unread_count=5)]
        engine = engine_factory(chapter_counts={1: 5, 2: 8})

        result = engine.filter(entries, FilterState(unread=UnreadFilter.NOT_STARTED))
        assert _ids(result) == [1]

    def test_in_progress_is_the_complement_among_unread(self, engine_factory):
        entries = [_entry(1, unread_count=5), _entry(2, unread_count=5), _entry(3)]
        engine = engine_factory(chapter_counts={1: 5, 2: 8, 3: 4})

        result = engine.filter(entries, FilterState(unread=UnreadFilter.IN_PROGRESS))
        assert _ids(result) == [2]


class TestTypeAndCompletedAxes:
    def test_manhwa_filter_admits_webtoons(self, engine_factory):
        entries = [
            _entry(1, entry_type=EntryType.MANGA),
            _entry(2, entry_type=EntryType.MANHWA),
            _entry(3, entry_type=EntryType.WEBTOON),
        ]
        engine = engine_factory()
        assert _ids(engine.filter(entries, FilterState(entry_type=TypeFilter.MANHWA))) == [2, 3]
        assert _ids(engine.filter(entries, FilterState(entry_type=TypeFilter.WEBTOON))) == [3]

    def test_completed_include_and_exclude(self, engine_factory):
        entries = [_entry(1, completed=True), _entry(2)]
        engine = engine_factory()
        assert _ids(engine.filter(entries, FilterState(completed=TriState.INCLUDE))) == [1]
        assert _ids(engine.filter(entries, FilterState(completed=TriState.EXCLUDE))) == [2]


class TestDownloadedAxis:
    def test_local_entries_count_as_downloaded(self, engine_factory, downloads):
        entries = [_entry(1, source_id=0), _entry(2)]
        result = engine_factory().filter(entries, FilterState(downloaded=TriState.INCLUDE))
        assert _ids(result) == [1]
        assert downloads.calls == [2]

    def test_cached_count_skips_provider(self, engine_factory, downloads):
        entries = [_entry(1, download_count=4), _entry(2, download_count=0)]
        result = engine_factory().filter(entries, FilterState(downloaded=TriState.EXCLUDE))
        assert _ids(result) == [2]
        assert downloads.calls == []

    def test_apply_download_counts(self, downloads):
        downloads.counts = {1: 3}
        entries = [_entry(1), LibraryEntry.create_empty(4)]

        apply_download_counts(entries, downloads)
        assert [e.download_count for e in entries] == [3, -1]

        apply_download_counts(entries, None)
        assert [e.download_count for e in entries] == [-1, -1]


class TestTrackedAxis:
    def test_include_requires_a_logged_service_track(self, engine_factory, store):
        store.tracks_for.side_effect = lambda entry_id: (
            [Track(id=1, entry_id=1, service_id=7)] if entry_id == 1 else []
        )
        engine = engine_factory(services=[_service(7, "Anilist")])
        entries = [_entry(1), _entry(2)]

        assert _ids(engine.filter(entries, FilterState(tracked=TriState.INCLUDE))) == [1]
        assert _ids(engine.filter(entries, FilterState(tracked=TriState.EXCLUDE))) == [2]

    def test_logged_out_service_does_not_count(self, engine_factory, store):
        store.tracks_for.return_value = [Track(id=1, entry_id=1, service_id=7)]
        engine = engine_factory(services=[_service(7, "Anilist", logged=False)])

        result = engine.filter([_entry(1)], FilterState(tracked=TriState.EXCLUDE))
        assert _ids(result) == [1]

    def test_selected_tracker_narrows_the_axis(self, engine_factory, store):
        tracks = {
            1: [Track(id=1, entry_id=1, service_id=7)],
            2: [Track(id=2, entry_id=2, service_id=8)],
        }
        store.tracks_for.side_effect = lambda entry_id: tracks.get(entry_id, [])
        engine = engine_factory(services=[_service(7, "Anilist"), _service(8, "Kitsu")])
        entries = [_entry(1), _entry(2), _entry(3)]

        include = FilterState(tracked=TriState.INCLUDE, tracker_name="Kitsu")
        exclude = FilterState(tracked=TriState.EXCLUDE, tracker_name="Kitsu")
        assert _ids(engine.filter(entries, include)) == [2]
        assert _ids(engine.filter(entries, exclude)) == [1, 3]


def test_filter_is_idempotent_and_does_not_mutate(engine_factory):
    entries = [_entry(1, unread_count=3, completed=True), _entry(2), _entry(3, unread_count=1)]
    state = FilterState(unread=UnreadFilter.UNREAD, completed=TriState.EXCLUDE)
    engine = engine_factory()

    once = engine.filter(entries, state)
    twice = engine.filter(once, state)
    assert _ids(once) == _ids(twice) == [3]
    assert len(entries) == 3


class TestStoreFailures:
    def test_unknown_chapter_count_matches_neither_state(self, downloads, store):
        def failing_count(entry_id):
            raise RuntimeError("disk I/O error")

        engine = FilterEngine(failing_count, downloads, TrackingRegistry(store))
        entries = [_entry(1, unread_count=5)]

        assert engine.filter(entries, FilterState(unread=UnreadFilter.NOT_STARTED)) == []
        assert engine.filter(entries, FilterState(unread=UnreadFilter.IN_PROGRESS)) == []

    def test_tracking_failure_counts_as_untracked(self, engine_factory, store):
        store.tracks_for.side_effect = RuntimeError("disk I/O error")
        engine = engine_factory(services=[_service(7, "Anilist")])
        entries = [_entry(1)]

        assert engine.filter(entries, FilterState(tracked=TriState.INCLUDE)) == []
        assert _ids(engine.filter(entries, FilterState(tracked=TriState.EXCLUDE))) == [1]

    def test_download_failure_counts_as_not_downloaded(self, store):
        downloads = MagicMock()
        downloads.download_count_for.side_effect = RuntimeError("disk I/O error")
        engine = FilterEngine(lambda entry_id: 0, downloads, TrackingRegistry(store))
        entries = [_entry(1), _entry(2, source_id=0)]

        assert _ids(engine.filter(entries, FilterState(downloaded=TriState.INCLUDE))) == [2]
        assert _ids(engine.filter(entries, FilterState(downloaded=TriState.EXCLUDE))) == [1]
