"""Services layer - library pipeline stages and external collaborators."""

from manga_library.services.settings_manager import SettingsManager

# Preference services
from manga_library.services.preferences import (
	FilePreferenceStore,
	InMemoryPreferenceStore,
	Keys,
	LibraryPreferences,
	PreferenceStore,
)

# Text processing services
from manga_library.services.text_processing import remove_articles, sort_title

# Collaborators
from manga_library.services.download_status import ChapterDownloadStatus, DownloadStatusProvider
from manga_library.services.tracking import LocalTrackService, TrackingRegistry, TrackService

# Library pipeline
from manga_library.services.catalog_builder import CatalogBuild, CatalogConfig, EntryCatalogBuilder
from manga_library.services.filter_engine import FilterEngine, apply_download_counts
from manga_library.services.category_order_store import (
	CategoryOrderStore,
	EffectiveOrder,
	ManualOrder,
	SortKeyOrder,
)
from manga_library.services.sort_engine import SortContext, SortEngine
from manga_library.services.sectioner import SectionConfig, Sectioner, Sections

__all__ = [
	"SettingsManager",
	"PreferenceStore",
	"InMemoryPreferenceStore",
	"FilePreferenceStore",
	"Keys",
	"LibraryPreferences",
	"remove_articles",
	"sort_title",
	"DownloadStatusProvider",
	"ChapterDownloadStatus",
	"TrackService",
	"LocalTrackService",
	"TrackingRegistry",
	"EntryCatalogBuilder",
	"CatalogBuild",
	"CatalogConfig",
	"FilterEngine",
	"apply_download_counts",
	"CategoryOrderStore",
	"EffectiveOrder",
	"ManualOrder",
	"SortKeyOrder",
	"SortContext",
	"SortEngine",
	"Sectioner",
	"SectionConfig",
	"Sections",
]
