"""Title normalization utilities for alphabetical ordering."""

import re

_LEADING_ARTICLE = re.compile(r"^(?:the|an|a)\s+", re.IGNORECASE)


def remove_articles(title: str) -> str:
    """
    Strip one leading English article from a title.

    "The Promised Neverland" -> "Promised Neverland"; "Another" is left as-is
    because the article must be followed by whitespace.
    """
    return _LEADING_ARTICLE.sub("", title.strip(), count=1)


def sort_title(title: str, strip_articles: bool = False) -> str:
    """
    Normalize a title into its case-insensitive comparison key.

    Rules:
    - Trim leading and trailing whitespace
    - Optionally drop a leading article (a, an, the)
    - Case-fold for locale-independent case-insensitive comparison

    Args:
        title: Display title.
        strip_articles: Whether the leading article is ignored.

    Returns:
        Comparison key.
    """
    text = title or ""
    text = remove_articles(text) if strip_articles else text.strip()
    return text.casefold()
