"""Sectioner - partitions sorted entries into per-category sections."""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from manga_library.core import ALL_CATEGORY_ID, Category, LibraryEntry


@dataclass(frozen=True)
class SectionConfig:
    """
    Attributes:
        sectioning_enabled: False when categories are hidden.
        last_used_category: Display order of the category last shown.
    """

    sectioning_enabled: bool = True
    last_used_category: int = 0


@dataclass(frozen=True)
class Sections:
    partition: Dict[int, List[LibraryEntry]]
    current_category_id: int


class Sectioner:
    """Groups already filtered and sorted entries by category."""

    def section(
        self,
        entries: Sequence[LibraryEntry],
        categories: Sequence[Category],
        config: SectionConfig,
        previous_category_id: Optional[int] = None,
    ) -> Sections:
        if not config.sectioning_enabled:
            return Sections(
                partition={ALL_CATEGORY_ID: list(entries)},
                current_category_id=ALL_CATEGORY_ID,
            )

        partition: Dict[int, List[LibraryEntry]] = {
            category.id: [] for category in categories
        }
        for entry in entries:
            partition.setdefault(entry.category_id, []).append(entry)

        return Sections(
            partition=partition,
            current_category_id=self.resolve_current(
                categories, previous_category_id, config.last_used_category
            ),
        )

    @staticmethod
    def resolve_current(
        categories: Sequence[Category],
        previous_category_id: Optional[int],
        last_used_order: int,
    ) -> int:
        """Pick the section to display.

        The previous selection wins while it still exists, then the category
        matching the last used display order, then the first category.
        """
        if previous_category_id is not None and any(
            c.id == previous_category_id for c in categories
        ):
            return previous_category_id
        match = next((c for c in categories if c.display_order == last_used_order), None)
        if match is not None:
            return match.id
        if categories:
            return min(categories, key=lambda c: c.display_order).id
        return ALL_CATEGORY_ID
