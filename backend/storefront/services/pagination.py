"""Page-count arithmetic shared by the listing pages."""

from __future__ import annotations

import math

from storefront.api.schemas.pages import PaginationView


def total_pages(total_count: int, page_size: int) -> int:
    """Number of pages needed for ``total_count`` records (0 when empty)."""
    if page_size < 1:
        raise ValueError(f"page_size must be positive, got {page_size}")
    return math.ceil(max(total_count, 0) / page_size)


def clamp_page(page: int, page_count: int) -> int:
    """Clamp a requested page into ``[1, page_count]``; an empty listing has page 1."""
    return max(1, min(page, max(page_count, 1)))


def build_pagination(current_page: int, total_count: int, page_size: int) -> PaginationView:
    page_count = total_pages(total_count, page_size)
    current = clamp_page(current_page, page_count)
    has_previous = current > 1
    has_next = current < page_count
    return PaginationView(
        current_page=current,
        total_pages=page_count,
        page_size=page_size,
        visible=page_count > 1,
        has_previous=has_previous,
        has_next=has_next,
        previous_page=max(1, current - 1),
        next_page=min(max(page_count, 1), current + 1),
    )
