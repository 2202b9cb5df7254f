"""Tracking service abstraction - capability set shared by every tracker."""

from abc import ABC, abstractmethod
from typing import List

from manga_library.core import Track


class TrackService(ABC):
    """
    Abstract interface for a tracking provider.

    Concrete providers are selected by ``id``; the library only needs
    ``id``, ``name`` and ``is_logged`` to filter entries, the remaining
    operations serve tracking screens.
    """

    id: int
    name: str

    @property
    @abstractmethod
    def is_logged(self) -> bool:
        """Whether the user is signed in to this service."""

    @abstractmethod
    def search(self, query: str) -> List[Track]:
        """Return candidate remote records matching a title query."""

    @abstractmethod
    def bind(self, track: Track) -> Track:
        """Attach a remote record to a library entry and return the stored track."""

    @abstractmethod
    def update(self, track: Track) -> Track:
        """Push local progress to the service."""

    @abstractmethod
    def refresh(self, track: Track) -> Track:
        """Pull the latest remote state of a track."""

    @abstractmethod
    def status_list(self) -> List[int]:
        """Return the status codes this service supports, in display order."""

    @abstractmethod
    def is_completed_status(self, index: int) -> bool:
        """Whether the status at ``index`` of ``status_list()`` means completed."""

    @abstractmethod
    def index_to_score(self, index: int) -> float:
        """Convert a score picker index to the service's score value."""
