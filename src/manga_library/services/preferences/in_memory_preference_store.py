"""In-memory preference store for testing and ephemeral sessions."""

import copy
from typing import Any, Optional

from manga_library.services.preferences.preference_store import PreferenceStore


class InMemoryPreferenceStore(PreferenceStore):
    """
    Simple dictionary-backed store.

    Used for testing and for sessions that should not touch disk.
    """

    def __init__(self, initial: Optional[dict[str, Any]] = None):
        self._values: dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        if key not in self._values:
            return default
        return copy.deepcopy(self._values[key])

    def set(self, key: str, value: Any) -> None:
        self._values[key] = copy.deepcopy(value)

    def remove(self, key: str) -> None:
        self._values.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._values.keys())
