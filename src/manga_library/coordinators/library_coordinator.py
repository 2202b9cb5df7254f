"""Library Coordinator - Orchestrates the library recompute pipeline."""

import logging
from collections import deque
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Sequence

from PySide6.QtCore import QCoreApplication, QObject, QThreadPool, Signal, Slot

from manga_library.core import (
    ALL_CATEGORY_ID,
    DEFAULT_CATEGORY_ID,
    UNKNOWN_COUNT,
    Category,
    LibraryEntry,
    LibrarySession,
    LibrarySnapshot,
    LibrarySort,
    SortKey,
    require_entry_id,
)
from manga_library.io import EntityStore
from manga_library.services import (
    CatalogConfig,
    CategoryOrderStore,
    DownloadStatusProvider,
    EntryCatalogBuilder,
    FilterEngine,
    LibraryPreferences,
    SectionConfig,
    Sectioner,
    SortContext,
    SortEngine,
    TrackingRegistry,
    apply_download_counts,
)

from .library_workers import LibraryTask, LibraryWork

logger = logging.getLogger(__name__)


class LibraryCoordinator(QObject):
    """Runs the Builder -> Filter -> Sort -> Sectioner pipeline and its mutations.

    Responsibilities:
    - Reload the library from the store and publish snapshots
    - Re-filter and re-sort the loaded entries without querying the store
    - Apply category moves, manual ordering and visibility changes
    - Keep the last snapshot in a caller-owned session across view teardown

    Every request runs on a private single-thread pool, so requests execute
    one at a time in submission order and only complete snapshots leave the
    queue. Snapshots are published on the thread owning the coordinator;
    an older snapshot never replaces a newer one.
    """

    library_updated = Signal(object)  # LibrarySnapshot
    section_changed = Signal(int)
    library_error = Signal(str)

    def __init__(
        self,
        store: EntityStore,
        preferences: LibraryPreferences,
        download_status: DownloadStatusProvider,
        tracking: TrackingRegistry,
        session: LibrarySession,
        thread_pool: Optional[QThreadPool] = None,
    ):
        super().__init__()

        if store is None:
            raise ValueError("EntityStore must not be None")
        if preferences is None:
            raise ValueError("LibraryPreferences must not be None")
        if download_status is None:
            raise ValueError("DownloadStatusProvider must not be None")
        if tracking is None:
            raise ValueError("TrackingRegistry must not be None")
        if session is None:
            raise ValueError("LibrarySession must not be None")

        self.store = store
        self.preferences = preferences
        self.download_status = download_status
        self.session = session

        self._builder = EntryCatalogBuilder()
        self._filter = FilterEngine(store.chapter_count_for, download_status, tracking)
        self._orders = CategoryOrderStore(store, preferences)
        self._sorter = SortEngine()
        self._sectioner = Sectioner()

        if thread_pool is None:
            thread_pool = QThreadPool(self)
        thread_pool.setMaxThreadCount(1)
        self._thread_pool = thread_pool
        # Keep tasks referenced until they report back
        self._pending_tasks: deque = deque()

        # Pipeline state, only touched from queued tasks
        self._all_entries: List[LibraryEntry] = []
        self._library_entries: List[LibraryEntry] = []
        self._categories: List[Category] = []
        self._all_categories: List[Category] = []
        self._partition: Dict[int, List[LibraryEntry]] = {}
        self._current_category_id: Optional[int] = None
        self._total_chapters: Optional[Dict[int, int]] = None
        self._last_snapshot: Optional[LibrarySnapshot] = None
        self._generation = 0

        # Publication state, only touched on the coordinator's thread
        self._published: Optional[LibrarySnapshot] = None

    # Queries

    @property
    def snapshot(self) -> Optional[LibrarySnapshot]:
        """Most recently published snapshot."""
        return self._published

    @property
    def current_category(self) -> Optional[Category]:
        return self._published.current_category if self._published else None

    def common_categories(self, entries: Sequence[LibraryEntry]) -> List[Category]:
        """Return the user categories every given entry belongs to.

        Reads the store directly on the caller's thread, so the result may
        not yet reflect requests still waiting in the queue.
        """
        entry_ids = self._distinct_ids(entries)
        if not entry_ids:
            return []
        memberships = [set(self.store.list_category_membership(i)) for i in entry_ids]
        common = set.intersection(*memberships)
        if not common:
            return []
        return [c for c in self.store.list_categories() if c.id in common]

    def entry_is_in_category(self, entry: LibraryEntry, category_id: int) -> bool:
        entry_id = require_entry_id(entry)
        return category_id in self.store.list_category_membership(entry_id)

    # Pipeline requests

    def refresh(self) -> None:
        """Reload entries and categories from the store and republish."""
        self._submit("refresh", self._refresh)

    def request_filter_update(self) -> None:
        """Re-filter and re-sort the loaded entries."""
        self._submit("filter", self._filter_and_sort)

    def request_sort_update(self) -> None:
        """Re-sort the currently displayed entries."""
        self._submit("sort", self._sort_only)

    def request_download_badges_update(self) -> None:
        """Recompute cached download counts, or clear them when badges are off."""

        def work() -> LibrarySnapshot:
            self._apply_download_badges(self._all_entries)
            return self._section(self._library_entries)

        self._submit("download badges", work)

    def switch_section(self, order: int) -> None:
        """Display the category with the given display order."""

        def work() -> Optional[LibrarySnapshot]:
            self.preferences.set_last_used_category(order)
            category = next((c for c in self._categories if c.display_order == order), None)
            if category is None:
                logger.info("No category with display order %s", order)
                return None
            self._current_category_id = category.id
            return self._build_snapshot()

        self._submit("switch section", work)

    # Mutations

    def move_entries_to_categories(
        self, entries: Sequence[LibraryEntry], categories: Sequence[Category]
    ) -> None:
        """Replace the category membership of entries; an empty list means default."""
        entry_ids = self._distinct_ids(entries)
        category_ids = [category.id for category in categories]

        def work() -> Optional[LibrarySnapshot]:
            known = {c.id for c in self._all_categories} | {DEFAULT_CATEGORY_ID}
            missing = [i for i in category_ids if i not in known]
            if missing:
                logger.warning("Cannot move entries to unknown categories %s", missing)
                return None
            mappings = [
                (entry_id, category_id)
                for entry_id in entry_ids
                for category_id in category_ids
                if category_id > DEFAULT_CATEGORY_ID
            ]
            self.store.persist_membership(mappings, entry_ids)
            return self._refresh()

        self._submit("move entries", work)

    def reorder_category(self, category_id: int, ordered_ids: Sequence[int]) -> None:
        """Give a category a manual order and re-sort."""
        ordered = list(ordered_ids)

        def work() -> Optional[LibrarySnapshot]:
            category = self._find_category(category_id)
            if category is None:
                return None
            self._orders.set_manual_order(category, ordered)
            return self._sort_only()

        self._submit("reorder category", work)

    def sort_category(self, category_id: int, sort_key: SortKey) -> None:
        """Give a category a rule-based order; -1 changes the global sort."""

        def work() -> Optional[LibrarySnapshot]:
            category = self._find_category(category_id)
            if category is None:
                return None
            key = sort_key
            if key.mode == LibrarySort.DRAG_AND_DROP and category_id != ALL_CATEGORY_ID:
                key = SortKey(LibrarySort.ALPHA, key.ascending)
            self._orders.set_sort_key(category, key)
            return self._sort_only()

        self._submit("sort category", work)

    def drag_move_entry(
        self,
        entry: LibraryEntry,
        category_id: int,
        neighbor_ordered_ids: Sequence[int],
    ) -> None:
        """Move one entry into a category at the position given by its new neighbors.

        Args:
            entry: Entry being dragged, carrying the category it was dragged from.
            category_id: Target category.
            neighbor_ordered_ids: Ids of the target section in their new order.
        """
        entry_id = require_entry_id(entry)
        previous_category_id = entry.category_id
        neighbors = list(neighbor_ordered_ids)

        def work() -> Optional[LibrarySnapshot]:
            category = self._find_category(category_id)
            if category is None:
                return None

            if category_id == DEFAULT_CATEGORY_ID:
                memberships: List[int] = []
            else:
                memberships = [
                    i
                    for i in self.store.list_category_membership(entry_id)
                    if i not in (previous_category_id, category_id)
                ]
                memberships.append(category_id)
            self.store.persist_membership(
                [(entry_id, i) for i in memberships], [entry_id]
            )

            if category.sort_key is None:
                ordered = neighbors or list(category.explicit_order or [])
                if entry_id not in ordered:
                    ordered.append(entry_id)
                self._orders.set_manual_order(category, ordered)
            return self._refresh()

        self._submit("drag move entry", work)

    def toggle_category_visibility(self, category_id: int) -> None:
        """Collapse or expand a category when all categories are shown."""
        if category_id <= ALL_CATEGORY_ID:
            logger.debug("Category %s cannot be collapsed", category_id)
            return

        def work() -> Optional[LibrarySnapshot]:
            if not any(c.id == category_id for c in self._all_categories):
                logger.warning("Cannot toggle unknown category %s", category_id)
                return None
            collapsed = self.preferences.collapsed_categories()
            collapsed ^= {category_id}
            self.preferences.set_collapsed_categories(collapsed)
            return self._refresh()

        self._submit("toggle category", work)

    def remove_from_library(self, entries: Sequence[LibraryEntry]) -> None:
        self._set_favorite(entries, False)

    def restore_removed(self, entries: Sequence[LibraryEntry]) -> None:
        """Undo a removal by favoriting the entries again."""
        self._set_favorite(entries, True)

    def update_entry(self, entry_id: int) -> None:
        """Pick up new chapters or read progress of one entry after an external update."""
        if entry_id is None:
            raise ValueError("Library entry must have an id")

        def work() -> Optional[LibrarySnapshot]:
            fresh = self.store.get_entry(entry_id)
            if fresh is None:
                logger.info("Entry %s no longer exists", entry_id)
                return self._refresh()
            for item in self._all_entries:
                if item.id == entry_id:
                    item.last_update = fresh.last_update
                    item.unread_count = fresh.unread_count
            self._total_chapters = None
            return self._filter_and_sort()

        self._submit("update entry", work)

    # Teardown cache

    def save_snapshot_for_teardown(self) -> None:
        """Keep the latest snapshot in the session for instant re-entry."""

        def work() -> None:
            self.session.save(self._last_snapshot)

        self._submit("save snapshot", work)

    def restore_snapshot(self) -> None:
        """Publish the retained snapshot, if any, without recomputing it.

        Entries and categories are reloaded from the store behind the
        published view so later requests operate on the current library.
        """

        def work() -> Optional[LibrarySnapshot]:
            retained = self.session.consume()
            if retained is None:
                return None
            self._load_catalog()
            self._library_entries = list(retained.entries)
            self._partition = {k: list(v) for k, v in retained.partition.items()}
            self._current_category_id = retained.current_category_id
            self._generation += 1
            self._last_snapshot = replace(retained, generation=self._generation)
            return self._last_snapshot

        self._submit("restore snapshot", work)

    def wait_for_idle(self, msecs: int = -1) -> bool:
        """Block until queued requests finish and deliver their publications."""
        done = self._thread_pool.waitForDone(msecs)
        QCoreApplication.sendPostedEvents()
        QCoreApplication.processEvents()
        return done

    # Queue plumbing

    def _submit(self, name: str, work: LibraryWork) -> None:
        task = LibraryTask(name, work)
        task.signals.snapshot_ready.connect(self._on_snapshot_ready)
        task.signals.error.connect(self._on_task_error)
        task.signals.finished.connect(self._on_task_finished)
        self._pending_tasks.append(task)
        self._thread_pool.start(task)

    @Slot(object)
    def _on_snapshot_ready(self, snapshot: LibrarySnapshot) -> None:
        previous = self._published
        if previous is not None and snapshot.generation <= previous.generation:
            logger.debug(
                "Ignoring stale snapshot %s (published %s)",
                snapshot.generation,
                previous.generation,
            )
            return
        self._published = snapshot
        if previous is None or previous.current_category_id != snapshot.current_category_id:
            self.section_changed.emit(snapshot.current_category_id)
        self.library_updated.emit(snapshot)

    @Slot(str)
    def _on_task_error(self, message: str) -> None:
        logger.error(message)
        self.library_error.emit(message)

    @Slot()
    def _on_task_finished(self) -> None:
        if self._pending_tasks:
            self._pending_tasks.popleft()

    # Pipeline stages, run inside queued tasks

    def _refresh(self) -> LibrarySnapshot:
        self._load_catalog()
        return self._filter_and_sort()

    def _load_catalog(self) -> None:
        """Rebuild entries and categories from the store."""
        self._total_chapters = None
        build = self._builder.build(
            self._load_or_empty("entries", self.store.list_favorite_entries),
            self._load_or_empty("categories", self.store.list_categories),
            CatalogConfig(
                hide_categories=self.preferences.hide_categories(),
                show_all_categories=self.preferences.show_all_categories(),
                collapsed_categories=self.preferences.collapsed_categories(),
                default_manga_order=self.preferences.default_manga_order(),
                global_sort=self.preferences.global_sort_key(),
            ),
        )
        self._apply_download_badges(build.entries)
        self._all_entries = build.entries
        self._categories = build.categories
        self._all_categories = build.all_categories

    def _filter_and_sort(self) -> LibrarySnapshot:
        filtered = self._filter.filter(self._all_entries, self.preferences.filter_state())
        return self._section(self._sort(filtered))

    def _sort_only(self) -> LibrarySnapshot:
        return self._section(self._sort(self._library_entries))

    def _sort(self, entries: List[LibraryEntry]) -> List[LibraryEntry]:
        use_categories = not self.preferences.hide_categories()
        global_sort = self.preferences.global_sort_key()
        context = SortContext(
            global_sort=global_sort,
            use_categories=use_categories,
            display_orders={c.id: c.display_order for c in self._all_categories},
            strip_articles=self.preferences.remove_articles(),
        )
        if use_categories:
            context.orders = self._orders.resolve_and_persist(self._all_categories, global_sort)

        if context.uses_mode(LibrarySort.LAST_READ):
            order = self._load_or_empty("reading history", self.store.last_read_order)
            context.last_read_index = {entry_id: index for index, entry_id in enumerate(order)}

        if context.uses_mode(LibrarySort.TOTAL_CHAPTERS):
            context.total_chapters = self._ensure_total_chapters()
            for entry in entries:
                if not entry.is_placeholder:
                    entry.total_chapter_count = context.total_chapters.get(entry.id, 0)
        else:
            for entry in entries:
                entry.total_chapter_count = UNKNOWN_COUNT

        return self._sorter.sort(entries, context)

    def _section(self, entries: List[LibraryEntry]) -> LibrarySnapshot:
        self._library_entries = entries
        sections = self._sectioner.section(
            entries,
            self._categories,
            SectionConfig(
                sectioning_enabled=not self.preferences.hide_categories(),
                last_used_category=self.preferences.last_used_category(),
            ),
            self._current_category_id,
        )
        self._partition = sections.partition
        self._current_category_id = sections.current_category_id
        return self._build_snapshot()

    def _build_snapshot(self) -> LibrarySnapshot:
        copies = {id(entry): replace(entry) for entry in self._library_entries}

        def copied(entry: LibraryEntry) -> LibraryEntry:
            return copies.get(id(entry)) or replace(entry)

        self._generation += 1
        self._last_snapshot = LibrarySnapshot(
            entries=[copied(entry) for entry in self._library_entries],
            categories=[replace(category) for category in self._categories],
            partition={
                category_id: [copied(entry) for entry in section]
                for category_id, section in self._partition.items()
            },
            current_category_id=(
                self._current_category_id
                if self._current_category_id is not None
                else ALL_CATEGORY_ID
            ),
            show_all_categories=(
                self.preferences.show_all_categories()
                or self.preferences.hide_categories()
            ),
            generation=self._generation,
        )
        return self._last_snapshot

    def _ensure_total_chapters(self) -> Dict[int, int]:
        """Count chapters of every loaded entry once per cycle."""
        if self._total_chapters is None:
            totals: Dict[int, int] = {}
            for entry in self._all_entries:
                if entry.is_placeholder or entry.id in totals:
                    continue
                try:
                    totals[entry.id] = self.store.chapter_count_for(entry.id)
                except RuntimeError as e:
                    logger.warning("Chapter count unavailable for %s: %s", entry.id, e)
            self._total_chapters = totals
        return self._total_chapters

    def _apply_download_badges(self, entries: List[LibraryEntry]) -> None:
        provider = self.download_status if self.preferences.download_badge() else None
        try:
            apply_download_counts(entries, provider)
        except RuntimeError as e:
            logger.warning("Download counts unavailable: %s", e)
            apply_download_counts(entries, None)

    def _find_category(self, category_id: int) -> Optional[Category]:
        category = next((c for c in self._categories if c.id == category_id), None)
        if category is None:
            logger.warning("Category %s not found; request ignored", category_id)
        return category

    def _set_favorite(self, entries: Sequence[LibraryEntry], favorite: bool) -> None:
        distinct: Dict[int, LibraryEntry] = {}
        for entry in entries:
            entry_id = require_entry_id(entry)
            if not entry.is_placeholder:
                distinct.setdefault(entry_id, replace(entry, favorite=favorite))
        changed = list(distinct.values())

        def work() -> LibrarySnapshot:
            self.store.persist_entries(changed)
            return self._refresh()

        self._submit("remove entries" if not favorite else "restore entries", work)

    @staticmethod
    def _load_or_empty(what: str, load):
        try:
            return load()
        except RuntimeError as e:
            logger.error("Could not load %s: %s", what, e)
            return []

    @staticmethod
    def _distinct_ids(entries: Iterable[LibraryEntry]) -> List[int]:
        entry_ids: List[int] = []
        for entry in entries:
            entry_id = require_entry_id(entry)
            if entry_id not in entry_ids:
                entry_ids.append(entry_id)
        return entry_ids
