"""Filter axis states applied to the library."""

from dataclasses import dataclass
from enum import IntEnum


class TriState(IntEnum):
    IGNORE = 0
    INCLUDE = 1
    EXCLUDE = 2


class UnreadFilter(IntEnum):
    """States of the unread axis.

    NOT_STARTED keeps entries where no chapter was opened yet, IN_PROGRESS
    keeps entries that were started but still have unread chapters.
    """

    IGNORE = 0
    UNREAD = 1
    READ = 2
    NOT_STARTED = 3
    IN_PROGRESS = 4


class TypeFilter(IntEnum):
    IGNORE = 0
    MANGA = 1
    MANHWA = 2
    WEBTOON = 3
    OTHER = 4


@dataclass(frozen=True)
class FilterState:
    """Snapshot of every filter axis at the time a cycle runs.

    Attributes:
        downloaded: Downloaded chapters axis.
        unread: Unread chapters axis.
        completed: Publication status axis.
        tracked: Tracking axis.
        entry_type: Publication format axis.
        tracker_name: Name of the tracker the tracked axis is limited to,
            empty for any logged tracker.
    """

    downloaded: TriState = TriState.IGNORE
    unread: UnreadFilter = UnreadFilter.IGNORE
    completed: TriState = TriState.IGNORE
    tracked: TriState = TriState.IGNORE
    entry_type: TypeFilter = TypeFilter.IGNORE
    tracker_name: str = ""

    @property
    def is_active(self) -> bool:
        """True when at least one axis is not IGNORE."""
        return any(
            axis != 0
            for axis in (
                self.downloaded,
                self.unread,
                self.completed,
                self.tracked,
                self.entry_type,
            )
        )
