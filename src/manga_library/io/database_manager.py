"""SQLite connection and schema ownership for the library database."""

import sqlite3
from pathlib import Path


class DatabaseManager:
    """Owns the SQLite connection and the library schema."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)
        if str(self.db_path) != ":memory:":
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.connection = sqlite3.connect(self.db_path, check_same_thread=False)
        self.connection.row_factory = sqlite3.Row
        self.connection.execute("PRAGMA foreign_keys = ON;")

    def ensure_schema(self) -> None:
        """Create tables and indexes if they do not exist."""
        cur = self.connection.cursor()
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS mangas (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                source INTEGER NOT NULL DEFAULT 1,
                title TEXT NOT NULL,
                author TEXT NOT NULL DEFAULT '',
                manga_type INTEGER NOT NULL DEFAULT 1,
                completed INTEGER NOT NULL DEFAULT 0,
                favorite INTEGER NOT NULL DEFAULT 1,
                last_update INTEGER NOT NULL DEFAULT 0,
                date_added INTEGER NOT NULL DEFAULT 0
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS categories (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                sort_order INTEGER NOT NULL DEFAULT 0,
                manga_order TEXT NOT NULL DEFAULT ''
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS mangas_categories (
                mc_id INTEGER PRIMARY KEY AUTOINCREMENT,
                mc_manga_id INTEGER NOT NULL,
                mc_category_id INTEGER NOT NULL,

                FOREIGN KEY(mc_manga_id) REFERENCES mangas(id) ON DELETE CASCADE,
                FOREIGN KEY(mc_category_id) REFERENCES categories(id) ON DELETE CASCADE,
                UNIQUE(mc_manga_id, mc_category_id)
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS chapters (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                manga_id INTEGER NOT NULL,
                name TEXT NOT NULL DEFAULT '',
                read INTEGER NOT NULL DEFAULT 0,
                downloaded INTEGER NOT NULL DEFAULT 0,
                source_order INTEGER NOT NULL DEFAULT 0,
                last_read INTEGER NOT NULL DEFAULT 0,

                FOREIGN KEY(manga_id) REFERENCES mangas(id) ON DELETE CASCADE
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS tracks (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                manga_id INTEGER NOT NULL,
                sync_id INTEGER NOT NULL,
                remote_id INTEGER NOT NULL DEFAULT 0,
                title TEXT NOT NULL DEFAULT '',
                status INTEGER NOT NULL DEFAULT 0,
                score REAL NOT NULL DEFAULT 0,
                last_chapter_read INTEGER NOT NULL DEFAULT 0,
                total_chapters INTEGER NOT NULL DEFAULT 0,

                FOREIGN KEY(manga_id) REFERENCES mangas(id) ON DELETE CASCADE,
                UNIQUE(manga_id, sync_id)
            );
            """
        )
        cur.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_chapters_manga
            ON chapters(manga_id);
            """
        )
        cur.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_mangas_categories_manga
            ON mangas_categories(mc_manga_id);
            """
        )
        self.connection.commit()

    def close(self) -> None:
        self.connection.close()
