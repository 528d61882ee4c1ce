"""
Canonical query assembly.

Turns the current search text, filter and page into the single immutable
value handed to the backend.
"""

from dataclasses import dataclass
from typing import Any

from .models import DEFAULT_MIN_DURATION, SearchFilter

MAX_SEARCH_LENGTH = 32


@dataclass(frozen=True, slots=True)
class Query:
    """
    Request sent to load_encounters_preview.

    Frozen and built from frozensets, so two queries assembled from the same
    inputs compare and hash equal.
    """

    page: int
    page_size: int
    search: str
    min_duration: int
    bosses: frozenset[str]
    classes: frozenset[int]
    cleared: bool
    favorites: bool

    def to_request(self) -> dict[str, Any]:
        """Render the backend call arguments."""
        return {
            "page": self.page,
            "page_size": self.page_size,
            "search": self.search,
            "filter": {
                "min_duration": self.min_duration,
                "bosses": sorted(self.bosses),
                "classes": sorted(self.classes),
                "cleared": self.cleared,
                "favorites": self.favorites,
            },
        }


def truncate_search(text: str) -> str:
    return text[:MAX_SEARCH_LENGTH]


def assemble(
    search_text: str,
    search_filter: SearchFilter,
    page: int,
    page_size: int,
    default_min_duration: int,
) -> Query:
    """
    Build the canonical query.

    Args:
        search_text: Free-text search, truncated to MAX_SEARCH_LENGTH
        search_filter: Live filter; its sets are copied, never referenced
        page: 1-based page number
        page_size: Rows per page
        default_min_duration: Used when the filter holds the sentinel

    Returns:
        Immutable Query
    """
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")

    min_duration = search_filter.min_duration
    if min_duration == DEFAULT_MIN_DURATION:
        min_duration = default_min_duration

    return Query(
        page=page,
        page_size=page_size,
        search=truncate_search(search_text),
        min_duration=min_duration,
        bosses=frozenset(search_filter.bosses),
        classes=frozenset(search_filter.classes),
        cleared=search_filter.cleared_only,
        favorites=search_filter.favorites_only,
    )
