"""Sort engine - orders library entries globally or per category."""

from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Callable, Dict, List, Mapping, Sequence

from manga_library.core import RESERVED_DISPLAY_ORDER, LibraryEntry, LibrarySort, SortKey
from manga_library.services.category_order_store import (
    EffectiveOrder,
    ManualOrder,
    SortKeyOrder,
)
from manga_library.services.text_processing import sort_title

Comparator = Callable[[LibraryEntry, LibraryEntry], int]


def _compare(left, right) -> int:
    return (left > right) - (left < right)


@dataclass
class SortContext:
    """Everything a sort needs besides the entries themselves.

    Attributes:
        global_sort: Library-wide sort key, used when categories are hidden.
        use_categories: Order by category first, then by each category's policy.
        orders: Resolved effective order per category id.
        display_orders: Display order per category id.
        last_read_index: Entry id -> recency rank (0 is the most recently read).
        total_chapters: Entry id -> total chapters, built once per cycle.
        strip_articles: Ignore leading articles when comparing titles.
    """

    global_sort: SortKey
    use_categories: bool = True
    orders: Dict[int, EffectiveOrder] = field(default_factory=dict)
    display_orders: Dict[int, int] = field(default_factory=dict)
    last_read_index: Mapping[int, int] = field(default_factory=dict)
    total_chapters: Mapping[int, int] = field(default_factory=dict)
    strip_articles: bool = False

    def uses_mode(self, mode: LibrarySort) -> bool:
        """Whether any comparator built from this context needs ``mode``."""
        if not self.use_categories:
            return self.global_sort.mode == mode
        return any(
            isinstance(order, SortKeyOrder) and order.mode == mode
            for order in self.orders.values()
        )


class SortEngine:
    """Produces a deterministic, stable order over library entries.

    With categories shown, entries of different categories are ordered by
    category display order (an unknown category counts as -1) and entries of
    the same category follow that category's effective order. With categories
    hidden the global sort key applies to every entry.

    Rule-based comparisons fall back to the title when the rule ties, and the
    whole comparison is inverted for descending keys, except that the
    latest-chapter rule always puts the newest update first and only its
    title tie-break follows the direction.
    """

    def sort(self, entries: Sequence[LibraryEntry], context: SortContext) -> List[LibraryEntry]:
        return sorted(entries, key=cmp_to_key(self.comparator(context)))

    def comparator(self, context: SortContext) -> Comparator:
        if not context.use_categories:
            return self._rule_comparator(
                context.global_sort.mode, context.global_sort.ascending, context
            )

        per_category: Dict[int, Comparator] = {
            category_id: self._order_comparator(order, context)
            for category_id, order in context.orders.items()
        }
        fallback = self._rule_comparator(LibrarySort.ALPHA, True, context)

        def compare(left: LibraryEntry, right: LibraryEntry) -> int:
            if left.category_id != right.category_id:
                return _compare(
                    context.display_orders.get(left.category_id, RESERVED_DISPLAY_ORDER),
                    context.display_orders.get(right.category_id, RESERVED_DISPLAY_ORDER),
                )
            return per_category.get(left.category_id, fallback)(left, right)

        return compare

    def _order_comparator(self, order: EffectiveOrder, context: SortContext) -> Comparator:
        if isinstance(order, ManualOrder):
            return self._manual_comparator(order.entry_ids)
        return self._rule_comparator(order.mode, order.ascending, context)

    @staticmethod
    def _manual_comparator(entry_ids: Sequence[int]) -> Comparator:
        positions: Dict[int, int] = {}
        for index, entry_id in enumerate(entry_ids):
            positions.setdefault(entry_id, index)

        def compare(left: LibraryEntry, right: LibraryEntry) -> int:
            left_index = positions.get(left.id)
            right_index = positions.get(right.id)
            # Unplaced entries go last and keep their incoming order.
            if left_index is None and right_index is None:
                return 0
            if left_index is None:
                return 1
            if right_index is None:
                return -1
            return _compare(left_index, right_index)

        return compare

    def _rule_comparator(
        self, mode: LibrarySort, ascending: bool, context: SortContext
    ) -> Comparator:
        strip_articles = context.strip_articles

        def titles(left: LibraryEntry, right: LibraryEntry) -> int:
            return _compare(
                sort_title(left.title, strip_articles),
                sort_title(right.title, strip_articles),
            )

        primary = self._primary_comparator(mode, ascending, context)

        def compare(left: LibraryEntry, right: LibraryEntry) -> int:
            result = primary(left, right)
            if result != 0 and mode == LibrarySort.LATEST_CHAPTER:
                return result
            if result == 0:
                result = titles(left, right)
            return result if ascending else -result

        return compare

    @staticmethod
    def _primary_comparator(
        mode: LibrarySort, ascending: bool, context: SortContext
    ) -> Comparator:
        if mode == LibrarySort.ALPHA:
            # Titles are the tie-break of every rule.
            return lambda left, right: 0

        if mode == LibrarySort.LAST_READ:
            index = context.last_read_index
            unread_rank = len(index)
            return lambda left, right: _compare(
                index.get(left.id, unread_rank), index.get(right.id, unread_rank)
            )

        if mode == LibrarySort.LATEST_CHAPTER:
            return lambda left, right: _compare(right.last_update, left.last_update)

        if mode == LibrarySort.UNREAD:

            def unread(left: LibraryEntry, right: LibraryEntry) -> int:
                if left.unread_count == right.unread_count:
                    return 0
                # Fully read entries stay at the far end for either direction.
                if left.unread_count == 0:
                    return 1 if ascending else -1
                if right.unread_count == 0:
                    return -1 if ascending else 1
                return _compare(left.unread_count, right.unread_count)

            return unread

        if mode == LibrarySort.TOTAL_CHAPTERS:
            totals = context.total_chapters
            return lambda left, right: _compare(totals.get(left.id, 0), totals.get(right.id, 0))

        if mode == LibrarySort.DATE_ADDED:
            return lambda left, right: _compare(right.date_added, left.date_added)

        return lambda left, right: 0
