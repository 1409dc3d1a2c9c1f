"""
Pagination helpers
Zero-based page/size pagination over counted queries.
"""

import math
from typing import Any, Dict, List

from ..services.exceptions import ValidationError


def validate_page_request(page: int, page_size: int, max_page_size: int) -> None:
    """
    Reject paging values that cannot describe a page.

    Args:
        page: zero-based page index
        page_size: number of items per page
        max_page_size: largest page size a caller may request

    Raises:
        ValidationError: if page is negative or page_size is outside 1..max_page_size
    """
    if page < 0:
        raise ValidationError(f"Page index must be zero or greater, got {page}")
    if page_size < 1 or page_size > max_page_size:
        raise ValidationError(f"Page size must be between 1 and {max_page_size}, got {page_size}")


def page_offset(page: int, page_size: int) -> int:
    """Row offset of the first item on a zero-based page."""
    return page * page_size


def total_pages(total_count: int, page_size: int) -> int:
    """Number of pages needed to hold total_count items."""
    if total_count <= 0:
        return 0
    return math.ceil(total_count / page_size)


def create_paginated_response(
    items: List[Any],
    total_count: int,
    page: int,
    page_size: int,
) -> Dict[str, Any]:
    """
    Build the paged response body.

    Args:
        items: items on the current page
        total_count: number of matching items across all pages
        page: zero-based page index
        page_size: requested page size

    Returns:
        dict with items, total_count, page, size and total_pages
    """
    return {
        "items": items,
        "total_count": total_count,
        "page": page,
        "size": page_size,
        "total_pages": total_pages(total_count, page_size),
    }
