"""
Page arithmetic for post listings
"""

from dataclasses import dataclass

# Posts per page
PAGE_LENGTH = 5


@dataclass(frozen=True)
class Pagination:
    """Page indices for one listing request."""

    current: int
    next: int | None
    previous: int
    page_count: int


def normalize_page(requested_page: int) -> int:
    """Page 0 means the first page."""
    return requested_page if requested_page != 0 else 1


def page_offset(page: int) -> int:
    """Row offset of the first post on ``page``."""
    if page <= 0:
        return 0
    return PAGE_LENGTH * (page - 1)


def count_pages(total_open_count: int) -> int:
    """Number of pages for ``total_open_count`` posts, never less than 1.

    An exact multiple of the page length still yields a trailing page.
    """
    return total_open_count // PAGE_LENGTH + 1


def paginate(requested_page: int, total_open_count: int, saturate_next: bool = False) -> Pagination:
    """Compute current/next/previous page numbers.

    Neighbouring pages are computed even when they fall outside the listing.
    On the last page ``next`` is ``None``, or repeats the last page number
    when ``saturate_next`` is set.
    """
    page_count = count_pages(total_open_count)
    current = normalize_page(requested_page)

    if current == page_count:
        next_page = page_count if saturate_next else None
    else:
        next_page = current + 1

    return Pagination(
        current=current,
        next=next_page,
        previous=current - 1,
        page_count=page_count,
    )
