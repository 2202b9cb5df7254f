"""File-based preference store persisting settings as JSON."""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from manga_library.services.preferences.preference_store import PreferenceStore

logger = logging.getLogger(__name__)


class FilePreferenceStore(PreferenceStore):
    """
    JSON file store, written through on every change.

    Format:
    {
        "version": 1,
        "values": {
            "library_sorting_mode": 0,
            "collapsed_categories": ["3", "5"]
        }
    }

    An unreadable or corrupt file is treated as empty so the library still
    loads with default settings.
    """

    STORE_VERSION = 1

    def __init__(self, path: Path):
        self._path = Path(path)
        self._values: dict[str, Any] = self._load()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value
        self._write()

    def remove(self, key: str) -> None:
        if self._values.pop(key, None) is not None:
            self._write()

    def keys(self) -> list[str]:
        return list(self._values.keys())

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            values = data.get("values", {})
            return values if isinstance(values, dict) else {}
        except (json.JSONDecodeError, OSError, AttributeError) as e:
            logger.warning("Error reading preferences file %s: %s", self._path, e)
            return {}

    def _write(self) -> None:
        data = {"version": self.STORE_VERSION, "values": self._values}
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                json.dumps(data, indent=2, ensure_ascii=False, sort_keys=True),
                encoding="utf-8",
            )
        except OSError as e:
            logger.error("Error writing preferences file %s: %s", self._path, e)
