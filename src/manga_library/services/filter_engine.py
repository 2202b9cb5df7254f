"""Filter engine - applies the library filter axes to a list of entries."""

import logging
from typing import Callable, List, Optional, Sequence, TypeVar

from manga_library.core import (
    UNKNOWN_COUNT,
    EntryType,
    FilterState,
    LibraryEntry,
    TriState,
    TypeFilter,
    UnreadFilter,
)
from manga_library.services.download_status import DownloadStatusProvider
from manga_library.services.tracking import TrackingRegistry

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Entry types admitted by each type filter; manhwa also covers webtoons.
_ADMITTED_TYPES = {
    TypeFilter.MANGA: {EntryType.MANGA},
    TypeFilter.MANHWA: {EntryType.MANHWA, EntryType.WEBTOON},
    TypeFilter.WEBTOON: {EntryType.WEBTOON},
    TypeFilter.OTHER: {EntryType.OTHER},
}


class FilterEngine:
    """Keeps the entries that satisfy every active filter axis.

    Filtering is order-preserving and does not mutate entries. The
    not-started and in-progress unread states compare against a chapter
    count read fresh through ``chapter_count_for`` rather than the per-cycle
    total chapter cache.

    A failed store read only affects the entry being checked: an unknown
    chapter count matches neither state, a tracking failure counts as no
    tracks and a download failure as no downloads.
    """

    def __init__(
        self,
        chapter_count_for: Callable[[int], int],
        download_status: DownloadStatusProvider,
        tracking: TrackingRegistry,
    ) -> None:
        if chapter_count_for is None:
            raise ValueError("chapter_count_for must not be None")
        if download_status is None:
            raise ValueError("DownloadStatusProvider must not be None")
        if tracking is None:
            raise ValueError("TrackingRegistry must not be None")
        self._chapter_count_for = chapter_count_for
        self._download_status = download_status
        self._tracking = tracking

    def filter(self, entries: Sequence[LibraryEntry], state: FilterState) -> List[LibraryEntry]:
        if not state.is_active:
            return list(entries)
        return [entry for entry in entries if self.matches(entry, state)]

    def matches(self, entry: LibraryEntry, state: FilterState) -> bool:
        """Return True if a single entry passes every axis of ``state``."""
        if entry.is_placeholder:
            return not state.is_active

        return (
            self._matches_unread(entry, state.unread)
            and self._matches_type(entry, state.entry_type)
            and self._matches_completed(entry, state.completed)
            and self._matches_tracked(entry, state.tracked, state.tracker_name)
            and self._matches_downloaded(entry, state.downloaded)
        )

    def _matches_unread(self, entry: LibraryEntry, unread: UnreadFilter) -> bool:
        if unread == UnreadFilter.IGNORE:
            return True
        if unread == UnreadFilter.UNREAD:
            return entry.unread_count > 0
        if unread == UnreadFilter.READ:
            return entry.unread_count == 0
        if entry.unread_count == 0:
            return False
        total = self._read("chapter count", entry, self._chapter_count_for, UNKNOWN_COUNT)
        if total == UNKNOWN_COUNT:
            return False
        not_started = total == entry.unread_count
        if unread == UnreadFilter.NOT_STARTED:
            return not_started
        return not not_started

    @staticmethod
    def _matches_type(entry: LibraryEntry, entry_type: TypeFilter) -> bool:
        if entry_type == TypeFilter.IGNORE:
            return True
        return entry.entry_type in _ADMITTED_TYPES[entry_type]

    @staticmethod
    def _matches_completed(entry: LibraryEntry, completed: TriState) -> bool:
        if completed == TriState.INCLUDE:
            return entry.completed
        if completed == TriState.EXCLUDE:
            return not entry.completed
        return True

    def _matches_tracked(self, entry: LibraryEntry, tracked: TriState, tracker_name: str) -> bool:
        if tracked == TriState.IGNORE:
            return True

        logged_services = self._tracking.list_logged_services()
        tracks = self._read("tracks", entry, self._tracking.tracks_for, [])
        tracked_service_ids = {track.service_id for track in tracks}
        has_track = any(service.id in tracked_service_ids for service in logged_services)

        selected = self._tracking.find_service(tracker_name) if tracker_name else None
        has_selected_track = selected is not None and selected.id in tracked_service_ids

        if tracked == TriState.INCLUDE:
            if not has_track:
                return False
            return selected is None or has_selected_track

        if not tracker_name:
            return not has_track
        return not has_selected_track

    def _matches_downloaded(self, entry: LibraryEntry, downloaded: TriState) -> bool:
        if downloaded == TriState.IGNORE:
            return True
        is_downloaded = self._is_downloaded(entry)
        return is_downloaded if downloaded == TriState.INCLUDE else not is_downloaded

    def _is_downloaded(self, entry: LibraryEntry) -> bool:
        if entry.is_local:
            return True
        if entry.download_count != UNKNOWN_COUNT:
            return entry.download_count > 0
        count = self._read("download count", entry, self._download_status.download_count_for, 0)
        return count > 0

    @staticmethod
    def _read(what: str, entry: LibraryEntry, load: Callable[[int], T], fallback: T) -> T:
        try:
            return load(entry.id)
        except RuntimeError as e:
            logger.warning("Could not read %s of entry %s: %s", what, entry.id, e)
            return fallback


def apply_download_counts(
    entries: Sequence[LibraryEntry],
    download_status: Optional[DownloadStatusProvider],
) -> None:
    """Cache download counts on entries, or reset them to unknown when disabled."""
    for entry in entries:
        if download_status is None or entry.is_placeholder:
            entry.download_count = UNKNOWN_COUNT
        else:
            entry.download_count = download_status.download_count_for(entry.id)
