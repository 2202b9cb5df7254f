"""Data access layer for library entries, categories and tracking records."""

import sqlite3
import time
from typing import Iterable, List, Optional, Sequence, Tuple

from manga_library.core import (
    Category,
    EntryType,
    LibraryEntry,
    Track,
    decode_manga_order,
    encode_manga_order,
)

from .entity_store import EntityStore

_ENTRY_COLUMNS = """
    m.id, m.source, m.title, m.author, m.manga_type, m.completed,
    m.favorite, m.last_update, m.date_added,
    (SELECT COUNT(*) FROM chapters c WHERE c.manga_id = m.id AND c.read = 0) AS unread
"""


class LibraryRepository(EntityStore):
    """Manages persistence of the library in the database.

    This repository follows the failing-fast philosophy: every storage error
    is raised as RuntimeError with the sqlite3 error chained.
    """

    def __init__(self, connection: sqlite3.Connection) -> None:
        """Initialize repository with database connection.

        Args:
            connection: SQLite connection with the schema created.

        Raises:
            RuntimeError: If connection is None.
        """
        if connection is None:
            raise RuntimeError("Database connection required")
        self.connection = connection
        self.connection.row_factory = sqlite3.Row

    # Catalog writes

    def add_entry(
        self,
        title: str,
        author: str = "",
        source_id: int = 1,
        entry_type: EntryType = EntryType.MANGA,
        completed: bool = False,
        last_update: int = 0,
        date_added: Optional[int] = None,
        favorite: bool = True,
    ) -> LibraryEntry:
        """Insert a catalog entry and return it under the default category.

        Raises:
            RuntimeError: If title is empty or database write fails.
        """
        if not title or not title.strip():
            raise RuntimeError("Entry title cannot be empty")
        added = int(time.time()) if date_added is None else date_added

        try:
            cur = self.connection.cursor()
            cur.execute(
                """
                INSERT INTO mangas (
                    source, title, author, manga_type, completed,
                    favorite, last_update, date_added
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    source_id,
                    title.strip(),
                    author,
                    int(entry_type),
                    int(completed),
                    int(favorite),
                    last_update,
                    added,
                ),
            )
            self.connection.commit()
            entry_id = cur.lastrowid
        except sqlite3.Error as e:
            raise RuntimeError(f"Failed to add entry to library: {e}") from e

        entry = self.get_entry(entry_id)
        if entry is None:
            raise RuntimeError(f"Entry not found after insert: {entry_id}")
        return entry

    def add_category(self, name: str, display_order: int) -> Category:
        """Create a user category.

        Raises:
            RuntimeError: If name is empty or database write fails.
        """
        if not name or not name.strip():
            raise RuntimeError("Category name cannot be empty")
        try:
            cur = self.connection.cursor()
            cur.execute(
                "INSERT INTO categories (name, sort_order) VALUES (?, ?)",
                (name.strip(), display_order),
            )
            self.connection.commit()
            return Category(id=cur.lastrowid, name=name.strip(), display_order=display_order)
        except sqlite3.Error as e:
            raise RuntimeError(f"Failed to add category: {e}") from e

    def add_chapter(
        self,
        entry_id: int,
        name: str = "",
        read: bool = False,
        downloaded: bool = False,
        source_order: int = 0,
        last_read: int = 0,
    ) -> int:
        """Insert a chapter row for an entry and return its id."""
        try:
            cur = self.connection.cursor()
            cur.execute(
                """
                INSERT INTO chapters (
                    manga_id, name, read, downloaded, source_order, last_read
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (entry_id, name, int(read), int(downloaded), source_order, last_read),
            )
            self.connection.commit()
            return cur.lastrowid
        except sqlite3.Error as e:
            raise RuntimeError(f"Failed to add chapter: {e}") from e

    # EntityStore

    def list_favorite_entries(self) -> List[LibraryEntry]:
        try:
            cur = self.connection.cursor()
            cur.execute(
                f"""
                SELECT {_ENTRY_COLUMNS},
                    COALESCE(mc.mc_category_id, 0) AS category
                FROM mangas m
                LEFT JOIN mangas_categories mc ON mc.mc_manga_id = m.id
                WHERE m.favorite = 1
                ORDER BY m.title COLLATE NOCASE ASC, m.id ASC
                """
            )
            return [self._row_to_entry(row, row["category"]) for row in cur.fetchall()]
        except sqlite3.Error as e:
            raise RuntimeError(f"Failed to retrieve library entries: {e}") from e

    def list_categories(self) -> List[Category]:
        try:
            cur = self.connection.cursor()
            cur.execute(
                """
                SELECT id, name, sort_order, manga_order
                FROM categories
                ORDER BY sort_order ASC, id ASC
                """
            )
            return [self._row_to_category(row) for row in cur.fetchall()]
        except sqlite3.Error as e:
            raise RuntimeError(f"Failed to retrieve categories: {e}") from e

    def list_category_membership(self, entry_id: int) -> List[int]:
        try:
            cur = self.connection.cursor()
            cur.execute(
                """
                SELECT mc_category_id FROM mangas_categories
                WHERE mc_manga_id = ?
                ORDER BY mc_category_id ASC
                """,
                (entry_id,),
            )
            return [row["mc_category_id"] for row in cur.fetchall()]
        except sqlite3.Error as e:
            raise RuntimeError(f"Failed to retrieve categories of entry {entry_id}: {e}") from e

    def chapter_count_for(self, entry_id: int) -> int:
        return self._count_chapters(entry_id, "")

    def downloaded_chapter_count(self, entry_id: int) -> int:
        return self._count_chapters(entry_id, "AND downloaded = 1")

    def persist_category(self, category: Category) -> None:
        if not category.is_user_category:
            raise RuntimeError(f"Category {category.id} has no table row")
        try:
            cur = self.connection.cursor()
            cur.execute(
                """
                INSERT INTO categories (id, name, sort_order, manga_order)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name = excluded.name,
                    sort_order = excluded.sort_order,
                    manga_order = excluded.manga_order
                """,
                (
                    category.id,
                    category.name,
                    category.display_order,
                    encode_manga_order(category),
                ),
            )
            self.connection.commit()
        except sqlite3.Error as e:
            raise RuntimeError(f"Failed to save category {category.id}: {e}") from e

    def persist_membership(
        self, mappings: Sequence[Tuple[int, int]], entry_ids: Iterable[int]
    ) -> None:
        try:
            cur = self.connection.cursor()
            cur.executemany(
                "DELETE FROM mangas_categories WHERE mc_manga_id = ?",
                [(entry_id,) for entry_id in entry_ids],
            )
            cur.executemany(
                """
                INSERT OR IGNORE INTO mangas_categories (mc_manga_id, mc_category_id)
                VALUES (?, ?)
                """,
                list(mappings),
            )
            self.connection.commit()
        except sqlite3.Error as e:
            self.connection.rollback()
            raise RuntimeError(f"Failed to update category membership: {e}") from e

    def persist_entries(self, entries: Sequence[LibraryEntry]) -> None:
        try:
            cur = self.connection.cursor()
            cur.executemany(
                "UPDATE mangas SET favorite = ? WHERE id = ?",
                [(int(entry.favorite), entry.id) for entry in entries],
            )
            self.connection.commit()
        except sqlite3.Error as e:
            self.connection.rollback()
            raise RuntimeError(f"Failed to update entries: {e}") from e

    def last_read_order(self) -> List[int]:
        try:
            cur = self.connection.cursor()
            cur.execute(
                """
                SELECT c.manga_id, MAX(c.last_read) AS latest
                FROM chapters c
                JOIN mangas m ON m.id = c.manga_id
                WHERE m.favorite = 1 AND c.last_read > 0
                GROUP BY c.manga_id
                ORDER BY latest DESC, c.manga_id ASC
                """
            )
            return [row["manga_id"] for row in cur.fetchall()]
        except sqlite3.Error as e:
            raise RuntimeError(f"Failed to retrieve reading history: {e}") from e

    def get_entry(self, entry_id: int) -> Optional[LibraryEntry]:
        try:
            cur = self.connection.cursor()
            cur.execute(
                f"SELECT {_ENTRY_COLUMNS} FROM mangas m WHERE m.id = ?",
                (entry_id,),
            )
            row = cur.fetchone()
            return self._row_to_entry(row, 0) if row else None
        except sqlite3.Error as e:
            raise RuntimeError(f"Failed to retrieve entry {entry_id}: {e}") from e

    def tracks_for(self, entry_id: int) -> List[Track]:
        try:
            cur = self.connection.cursor()
            cur.execute(
                """
                SELECT id, manga_id, sync_id, remote_id, title, status, score,
                    last_chapter_read, total_chapters
                FROM tracks
                WHERE manga_id = ?
                ORDER BY sync_id ASC
                """,
                (entry_id,),
            )
            return [self._row_to_track(row) for row in cur.fetchall()]
        except sqlite3.Error as e:
            raise RuntimeError(f"Failed to retrieve tracks of entry {entry_id}: {e}") from e

    def persist_track(self, track: Track) -> Track:
        try:
            cur = self.connection.cursor()
            cur.execute(
                """
                INSERT INTO tracks (
                    manga_id, sync_id, remote_id, title, status, score,
                    last_chapter_read, total_chapters
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(manga_id, sync_id) DO UPDATE SET
                    remote_id = excluded.remote_id,
                    title = excluded.title,
                    status = excluded.status,
                    score = excluded.score,
                    last_chapter_read = excluded.last_chapter_read,
                    total_chapters = excluded.total_chapters
                """,
                (
                    track.entry_id,
                    track.service_id,
                    track.remote_id,
                    track.title,
                    track.status,
                    track.score,
                    track.last_chapter_read,
                    track.total_chapters,
                ),
            )
            self.connection.commit()
        except sqlite3.Error as e:
            raise RuntimeError(f"Failed to save track: {e}") from e

        stored = next(
            (t for t in self.tracks_for(track.entry_id) if t.service_id == track.service_id),
            None,
        )
        if stored is None:
            raise RuntimeError(f"Track not found after save: {track.entry_id}")
        return stored

    def _count_chapters(self, entry_id: int, condition: str) -> int:
        try:
            cur = self.connection.cursor()
            cur.execute(
                f"SELECT COUNT(*) AS total FROM chapters WHERE manga_id = ? {condition}",
                (entry_id,),
            )
            return cur.fetchone()["total"]
        except sqlite3.Error as e:
            raise RuntimeError(f"Failed to count chapters of entry {entry_id}: {e}") from e

    @staticmethod
    def _row_to_entry(row: sqlite3.Row, category_id: int) -> LibraryEntry:
        """Convert database row to LibraryEntry entity."""
        try:
            entry_type = EntryType(row["manga_type"])
        except ValueError:
            entry_type = EntryType.OTHER
        return LibraryEntry(
            id=row["id"],
            category_id=category_id,
            title=row["title"],
            author=row["author"],
            unread_count=row["unread"],
            last_update=row["last_update"],
            date_added=row["date_added"],
            source_id=row["source"],
            entry_type=entry_type,
            completed=bool(row["completed"]),
            favorite=bool(row["favorite"]),
        )

    @staticmethod
    def _row_to_category(row: sqlite3.Row) -> Category:
        sort_key, explicit_order = decode_manga_order(row["manga_order"])
        return Category(
            id=row["id"],
            name=row["name"],
            display_order=row["sort_order"],
            sort_key=sort_key,
            explicit_order=explicit_order,
        )

    @staticmethod
    def _row_to_track(row: sqlite3.Row) -> Track:
        return Track(
            id=row["id"],
            entry_id=row["manga_id"],
            service_id=row["sync_id"],
            remote_id=row["remote_id"],
            title=row["title"],
            status=row["status"],
            score=row["score"],
            last_chapter_read=row["last_chapter_read"],
            total_chapters=row["total_chapters"],
        )
