"""Text processing services."""

from manga_library.services.text_processing.text_normalization import remove_articles, sort_title

__all__ = ["remove_articles", "sort_title"]
