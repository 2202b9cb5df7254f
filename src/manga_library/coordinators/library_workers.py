"""Background tasks for the library pipeline using Qt threading."""

from typing import Callable, Optional

from PySide6.QtCore import QObject, QRunnable, Signal, Slot

from manga_library.core import LibrarySnapshot

LibraryWork = Callable[[], Optional[LibrarySnapshot]]


class LibraryTaskSignals(QObject):
    """
    Signals for communicating results from the library queue.

    QRunnable doesn't inherit from QObject, so we need a separate
    QObject to hold the signals.
    """
    finished = Signal()
    error = Signal(str)
    snapshot_ready = Signal(object)  # LibrarySnapshot


class LibraryTask(QRunnable):
    """
    One request executed on the serialized library queue.

    The work callable returns the snapshot to publish, or None when the
    request changed nothing visible.
    """

    def __init__(self, name: str, work: LibraryWork):
        super().__init__()
        self.name = name
        self.work = work
        self.signals = LibraryTaskSignals()
        self.setAutoDelete(True)

    @Slot()
    def run(self):
        """Execute the request in the queue's thread."""
        try:
            snapshot = self.work()
            if snapshot is not None:
                self.signals.snapshot_ready.emit(snapshot)
        except Exception as e:
            # Keep the queue alive; the coordinator reports the failure
            self.signals.error.emit(f"Library task '{self.name}' failed: {e}")
        finally:
            self.signals.finished.emit()
