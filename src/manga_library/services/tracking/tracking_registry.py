"""Tracking registry - resolves tracking services and an entry's tracks."""

from typing import Iterable, List, Optional

from manga_library.core import Track
from manga_library.io import EntityStore
from manga_library.services.tracking.track_service import TrackService


class TrackingRegistry:
    """Holds every known tracking service, selected by id or name."""

    def __init__(self, store: EntityStore, services: Iterable[TrackService] = ()) -> None:
        if store is None:
            raise ValueError("EntityStore must not be None")
        self._store = store
        self._services: List[TrackService] = list(services)

    def register(self, service: TrackService) -> None:
        if any(existing.id == service.id for existing in self._services):
            raise ValueError(f"Tracking service {service.id} already registered")
        self._services.append(service)

    def get(self, service_id: int) -> Optional[TrackService]:
        return next((s for s in self._services if s.id == service_id), None)

    def list_logged_services(self) -> List[TrackService]:
        return [service for service in self._services if service.is_logged]

    def find_service(self, name: str) -> Optional[TrackService]:
        """Return the logged service with the given name, if any."""
        return next((s for s in self.list_logged_services() if s.name == name), None)

    def tracks_for(self, entry_id: int) -> List[Track]:
        return self._store.tracks_for(entry_id)
