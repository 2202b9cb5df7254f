"""Tests for EntryCatalogBuilder."""

import pytest

from manga_library.core import (
    ALL_CATEGORY_ID,
    Category,
    LibraryEntry,
    LibrarySort,
    PlaceholderKind,
    SortKey,
)
from manga_library.services import CatalogConfig, EntryCatalogBuilder


@pytest.fixture
def builder():
    return EntryCatalogBuilder()


@pytest.fixture
def categories():
    return [
        Category(id=1, name="Action", display_order=0),
        Category(id=2, name="Drama", display_order=1),
        Category(id=3, name="Empty", display_order=2),
    ]


@pytest.fixture
def rows():
    return [
        LibraryEntry(id=10, category_id=1, title="Berserk", author="Miura"),
        LibraryEntry(id=10, category_id=2, title="Berserk", author="Miura"),
        LibraryEntry(id=11, category_id=2, title="Monster", author="Urasawa"),
        LibraryEntry(id=12, category_id=0, title="Akira", author="Otomo"),
    ]


def _pairs(entries):
    return [(entry.id, entry.category_id) for entry in entries]


def test_adds_default_category_when_used(builder, rows, categories):
    build = builder.build(rows, categories, CatalogConfig())
    assert [c.id for c in build.categories] == [0, 1, 2, 3]
    assert build.categories[0].display_order == -1


def test_default_category_omitted_when_unused(builder, categories):
    rows = [LibraryEntry(id=1, category_id=1, title="Berserk")]
    build = builder.build(rows, categories, CatalogConfig())
    assert 0 not in [c.id for c in build.categories]


def test_default_category_reads_its_order_preference(builder, rows, categories):
    build = builder.build(rows, categories, CatalogConfig(default_manga_order="d"))
    assert build.categories[0].sort_key == SortKey(LibrarySort.LATEST_CHAPTER, False)


def test_empty_user_category_gets_placeholder(builder, rows, categories):
    build = builder.build(rows, categories, CatalogConfig())
    placeholders = [e for e in build.entries if e.is_placeholder]
    assert _pairs(placeholders) == [(-4, 3)]
    assert placeholders[0].placeholder == PlaceholderKind.EMPTY


def test_unknown_category_is_reassigned_to_default(builder, categories):
    rows = [LibraryEntry(id=1, category_id=42, title="Orphan")]
    build = builder.build(rows, categories, CatalogConfig())
    assert build.entries[0].category_id == 0
    assert rows[0].category_id == 42


def test_hidden_categories_merge_every_entry_once(builder, rows, categories):
    config = CatalogConfig(
        hide_categories=True, global_sort=SortKey(LibrarySort.UNREAD, False)
    )
    build = builder.build(rows, categories, config)

    assert _pairs(build.entries) == [(10, -1), (11, -1), (12, -1)]
    assert [c.id for c in build.categories] == [ALL_CATEGORY_ID]
    assert build.categories[0].sort_key == SortKey(LibrarySort.UNREAD, False)
    assert [c.id for c in build.all_categories] == [0, 1, 2, 3]


def test_collapsed_category_becomes_one_summary_row(builder, rows, categories):
    config = CatalogConfig(collapsed_categories={2})
    build = builder.build(rows, categories, config)

    drama = [e for e in build.entries if e.category_id == 2]
    assert len(drama) == 1
    assert drama[0].placeholder == PlaceholderKind.HIDDEN
    assert drama[0].title == "Berserk - Miura - Monster - Urasawa"
    assert next(c for c in build.categories if c.id == 2).hidden


def test_collapse_needs_show_all(builder, rows, categories):
    config = CatalogConfig(collapsed_categories={2}, show_all_categories=False)
    build = builder.build(rows, categories, config)

    assert _pairs(e for e in build.entries if e.category_id == 2) == [(10, 2), (11, 2)]
    assert not any(c.hidden for c in build.categories)


def test_collapsed_empty_category_is_summarized(builder, rows, categories):
    build = builder.build(rows, categories, CatalogConfig(collapsed_categories={3}))
    empty = [e for e in build.entries if e.category_id == 3]
    assert len(empty) == 1
    assert empty[0].placeholder == PlaceholderKind.HIDDEN
    assert empty[0].title == ""


def test_bounds_are_marked(builder, rows, categories):
    build = builder.build(rows, categories, CatalogConfig())
    firsts = [c.id for c in build.categories if c.is_first]
    lasts = [c.id for c in build.categories if c.is_last]
    assert firsts == [0]
    assert lasts == [3]


def test_inputs_are_not_mutated(builder, rows, categories):
    builder.build(rows, categories, CatalogConfig(hide_categories=True))
    assert _pairs(rows)[0] == (10, 1)
    assert categories[0].is_first is None
