"""
Manga Library - Library organization engine for a manga collection.

This package turns a stored collection into the library view:
- Category membership, placeholders and collapsed categories
- Filtering by read progress, downloads, completion, tracking and type
- Global and per-category sorting, including manual drag-and-drop order
- Sections per category, published as immutable snapshots
"""

__version__ = "0.1.0"
__author__ = "Pablo-mercado"

# Make key components available at package level
from manga_library.core import Category, LibraryEntry, LibrarySnapshot, SortKey
from manga_library.coordinators import LibraryCoordinator

__all__ = [
    "Category",
    "LibraryEntry",
    "LibrarySnapshot",
    "SortKey",
    "LibraryCoordinator",
]
