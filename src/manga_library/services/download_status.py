"""Download status provider - reports downloaded chapter counts per entry."""

from abc import ABC, abstractmethod

from manga_library.io import EntityStore


class DownloadStatusProvider(ABC):
    """Abstract source of downloaded-chapter counts."""

    @abstractmethod
    def download_count_for(self, entry_id: int) -> int:
        """Return the number of downloaded chapters of an entry."""


class ChapterDownloadStatus(DownloadStatusProvider):
    """Counts chapters flagged as downloaded in the entity store."""

    def __init__(self, store: EntityStore) -> None:
        if store is None:
            raise ValueError("EntityStore must not be None")
        self._store = store

    def download_count_for(self, entry_id: int) -> int:
        return self._store.downloaded_chapter_count(entry_id)
