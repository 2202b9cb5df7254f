"""Preference store abstraction - plugin interface for key/value settings."""

from abc import ABC, abstractmethod
from typing import Any, Optional


class PreferenceStore(ABC):
    """
    Abstract interface for persisting user preferences.

    Values are JSON-compatible (bool, int, str, lists of those).
    Implementations (InMemoryPreferenceStore, FilePreferenceStore) handle storage details.
    """

    @abstractmethod
    def get(self, key: str, default: Optional[Any] = None) -> Any:
        """
        Retrieve a stored value.

        Args:
            key: Preference name.
            default: Returned when the key was never written.
        """
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store or overwrite a value."""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Forget a value so the default applies again."""
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """List every stored key. Useful for diagnostics and testing."""
        pass
