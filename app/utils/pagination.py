"""
Page/limit clamping and the page envelope used by paginated views.
Out-of-range or non-numeric inputs are clamped silently, never rejected.
"""
import math
from typing import Any

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 50


def _to_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def clamp_pagination(page: Any = None, limit: Any = None) -> tuple[int, int]:
    """page < 1 -> 1; limit < 1 -> 10; limit > 50 -> 50."""
    p = _to_int(page)
    if p is None or p < 1:
        p = DEFAULT_PAGE
    n = _to_int(limit)
    if n is None or n < 1:
        n = DEFAULT_LIMIT
    elif n > MAX_LIMIT:
        n = MAX_LIMIT
    return p, n


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def build_page(docs: list, total_docs: int, page: int, limit: int) -> dict:
    total_pages = max(1, math.ceil(total_docs / limit)) if total_docs else 1
    has_prev = page > 1
    has_next = page < total_pages
    return {
        "docs": docs,
        "total_docs": total_docs,
        "limit": limit,
        "page": page,
        "total_pages": total_pages,
        "has_prev_page": has_prev,
        "has_next_page": has_next,
        "prev_page": page - 1 if has_prev else None,
        "next_page": page + 1 if has_next else None,
    }
