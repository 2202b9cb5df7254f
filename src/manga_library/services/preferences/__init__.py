"""Preference services - abstract store, concrete stores and typed library settings."""

from manga_library.services.preferences.preference_store import PreferenceStore
from manga_library.services.preferences.in_memory_preference_store import InMemoryPreferenceStore
from manga_library.services.preferences.file_preference_store import FilePreferenceStore
from manga_library.services.preferences.library_preferences import Keys, LibraryPreferences

__all__ = [
    "PreferenceStore",
    "InMemoryPreferenceStore",
    "FilePreferenceStore",
    "Keys",
    "LibraryPreferences",
]
