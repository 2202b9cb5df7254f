"""Main entry point for the manga library engine."""

import logging
import sys

from PySide6.QtCore import QCoreApplication

from manga_library.core import LibrarySession, LibrarySnapshot
from manga_library.io import DatabaseManager, LibraryRepository
from manga_library.services import (
    ChapterDownloadStatus,
    FilePreferenceStore,
    LibraryPreferences,
    LocalTrackService,
    SettingsManager,
    TrackingRegistry,
)
from manga_library.coordinators import LibraryCoordinator


def print_library(snapshot: LibrarySnapshot) -> None:
    titles = {category.id: category.name for category in snapshot.categories}
    for category_id, entries in snapshot.partition.items():
        print(f"[{titles.get(category_id, category_id)}] ({len(entries)})")
        for entry in entries:
            print(f"  {entry.title}")


def main():
    """
    Bootstrap the engine following the Composition Root pattern.
    This is the only place that knows how to instantiate and wire all components.
    """
    # 1. Initialize Application and configuration
    app = QCoreApplication(sys.argv)
    app.setApplicationName("Manga Library")
    app.setOrganizationName("MangaReader")

    settings = SettingsManager()
    logging.basicConfig(
        level=settings.get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # 2. Initialize Infrastructure
    database = DatabaseManager(settings.get_database_path())
    database.ensure_schema()
    repository = LibraryRepository(database.connection)
    preferences = LibraryPreferences(FilePreferenceStore(settings.get_preferences_path()))
    tracking = TrackingRegistry(repository, [LocalTrackService(repository)])

    # 3. Instantiate Coordinator (Dependency Injection)
    coordinator = LibraryCoordinator(
        store=repository,
        preferences=preferences,
        download_status=ChapterDownloadStatus(repository),
        tracking=tracking,
        session=LibrarySession(),
    )

    # 4. Signal Wiring
    coordinator.library_updated.connect(print_library)
    coordinator.library_error.connect(lambda message: print(message, file=sys.stderr))

    # 5. Run one refresh and wait for its publication
    coordinator.refresh()
    coordinator.wait_for_idle()

    database.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
