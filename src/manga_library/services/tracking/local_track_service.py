"""Offline tracker keeping reading progress in the local entity store."""

from typing import List

from manga_library.core import Track
from manga_library.io import EntityStore
from manga_library.services.text_processing import sort_title
from manga_library.services.tracking.track_service import TrackService

READING = 1
COMPLETED = 2
ON_HOLD = 3
DROPPED = 4
PLAN_TO_READ = 5


class LocalTrackService(TrackService):
    """Tracker without a remote side: records live in the ``tracks`` table.

    Remote ids are the library entry ids, so searching matches library titles.
    """

    id = 100
    name = "Local"

    def __init__(self, store: EntityStore, logged: bool = True) -> None:
        if store is None:
            raise ValueError("EntityStore must not be None")
        self._store = store
        self._logged = logged

    @property
    def is_logged(self) -> bool:
        return self._logged

    def login(self) -> None:
        self._logged = True

    def logout(self) -> None:
        self._logged = False

    def search(self, query: str) -> List[Track]:
        needle = sort_title(query)
        if not needle:
            return []
        return [
            Track(
                id=None,
                entry_id=entry.id,
                service_id=self.id,
                remote_id=entry.id,
                title=entry.title,
            )
            for entry in self._store.list_favorite_entries()
            if needle in sort_title(entry.title)
        ]

    def bind(self, track: Track) -> Track:
        track.service_id = self.id
        if track.status == 0:
            track.status = READING
        if not track.total_chapters:
            track.total_chapters = self._store.chapter_count_for(track.entry_id)
        return self._store.persist_track(track)

    def update(self, track: Track) -> Track:
        if track.total_chapters and track.last_chapter_read >= track.total_chapters:
            track.status = COMPLETED
        return self._store.persist_track(track)

    def refresh(self, track: Track) -> Track:
        stored = next(
            (t for t in self._store.tracks_for(track.entry_id) if t.service_id == self.id),
            None,
        )
        if stored is None:
            raise RuntimeError(f"No local track for entry {track.entry_id}")
        stored.total_chapters = self._store.chapter_count_for(track.entry_id)
        return stored

    def status_list(self) -> List[int]:
        return [READING, COMPLETED, ON_HOLD, DROPPED, PLAN_TO_READ]

    def is_completed_status(self, index: int) -> bool:
        statuses = self.status_list()
        return 0 <= index < len(statuses) and statuses[index] == COMPLETED

    def index_to_score(self, index: int) -> float:
        # Picker offers 0..10 in whole points
        return float(max(0, min(index, 10)))
