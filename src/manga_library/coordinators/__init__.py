"""Coordinators - Orchestration layer connecting views with the library pipeline."""

from .library_coordinator import LibraryCoordinator
from .library_workers import LibraryTask, LibraryTaskSignals

__all__ = [
    "LibraryCoordinator",
    "LibraryTask",
    "LibraryTaskSignals",
]
