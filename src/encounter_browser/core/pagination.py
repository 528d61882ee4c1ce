"""Pagination arithmetic for the encounter list."""

import math

PAGE_SIZE = 10


def _check_page_size(page_size: int) -> None:
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")


def total_pages(total_count: int, page_size: int = PAGE_SIZE) -> int:
    """Number of pages for the given total, never less than 1."""
    _check_page_size(page_size)
    return max(1, math.ceil(total_count / page_size))


def clamp_page(page: int, total_count: int, page_size: int = PAGE_SIZE) -> int:
    """Clamp a page number into [1, total_pages]."""
    if page < 1:
        return 1
    last = total_pages(total_count, page_size)
    if page > last:
        return last
    return page


def row_range(page: int, page_size: int, total_count: int) -> tuple[int, int]:
    """
    1-indexed inclusive range of rows shown on a page.

    An empty result collapses to (1, 1) so the summary never reads "of 0".
    """
    _check_page_size(page_size)
    if total_count == 0:
        return 1, 1
    first = (page - 1) * page_size + 1
    last = min(first + page_size - 1, total_count)
    return first, last


def has_previous(page: int) -> bool:
    return page > 1


def has_next(page: int, page_size: int, total_count: int) -> bool:
    return page * page_size < total_count


def summary(page: int, page_size: int, total_count: int) -> str:
    """Return "first-last of total", with a denominator of 1 for no rows."""
    first, last = row_range(page, page_size, total_count)
    return f"{first}-{last} of {total_count or 1}"
