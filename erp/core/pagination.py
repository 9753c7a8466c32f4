"""
Pagination helpers shared by list endpoints
"""
import math
from typing import Any, List


def page_offset(page: int, per_page: int) -> int:
    return (max(page, 1) - 1) * per_page


def build_page(items: List[Any], total: int, page: int, per_page: int) -> dict:
    return {
        "items": items,
        "total": total,
        "page": page,
        "per_page": per_page,
        "total_pages": max(math.ceil(total / per_page), 1) if per_page else 1,
    }
