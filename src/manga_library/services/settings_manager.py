"""Settings Manager - Handles storage locations and runtime configuration."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_DATA_DIR = ".manga_library"


class SettingsManager:
    """
    Manages runtime settings.

    Reads overrides from a .env file in the project root:
    MANGA_LIBRARY_DB, MANGA_LIBRARY_PREFS and MANGA_LIBRARY_LOG_LEVEL.
    """

    def __init__(self, project_root: Optional[Path] = None):
        """
        Initialize settings manager.

        Args:
            project_root: Path to project root where .env is located.
                         If None, searches upward from current file.
        """
        if project_root is None:
            current = Path(__file__).resolve()
            project_root = current.parent.parent.parent.parent

        env_path = project_root / ".env"
        load_dotenv(dotenv_path=env_path)

        self._project_root = project_root

    def get_database_path(self) -> Path:
        """Location of the SQLite library database."""
        return self._path_from_env("MANGA_LIBRARY_DB", "library.db")

    def get_preferences_path(self) -> Path:
        """Location of the JSON preferences file."""
        return self._path_from_env("MANGA_LIBRARY_PREFS", "preferences.json")

    def get_log_level(self) -> str:
        level = os.getenv("MANGA_LIBRARY_LOG_LEVEL")
        return level.strip().upper() if level and level.strip() else "WARNING"

    def reload_env(self) -> None:
        """Reload environment variables from .env file."""
        env_path = self._project_root / ".env"
        load_dotenv(dotenv_path=env_path, override=True)

    def _path_from_env(self, name: str, default_file: str) -> Path:
        value = os.getenv(name)
        if value and value.strip():
            path = Path(value.strip()).expanduser()
            return path if path.is_absolute() else self._project_root / path
        return self._project_root / DEFAULT_DATA_DIR / default_file
