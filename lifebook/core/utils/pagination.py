"""Pagination helpers for list endpoints."""

from __future__ import annotations

from typing import Any, Dict, List, Tuple


def clamp(page: int = 1, per_page: int = 20, max_per_page: int = 100) -> Tuple[int, int]:
    page = max(page, 1)
    per_page = max(min(per_page, max_per_page), 1)
    return page, per_page


def page_payload(items: List[Any], total: int, page: int, per_page: int) -> Dict[str, Any]:
    return {
        "items": items,
        "page": page,
        "per_page": per_page,
        "total": total,
        "pages": (total + per_page - 1) // per_page if per_page else 0,
    }
