"""Tracking services - abstract tracker, offline tracker and registry."""

from manga_library.services.tracking.track_service import TrackService
from manga_library.services.tracking.local_track_service import LocalTrackService
from manga_library.services.tracking.tracking_registry import TrackingRegistry

__all__ = ["TrackService", "LocalTrackService", "TrackingRegistry"]
