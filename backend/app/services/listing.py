"""
Listing helpers
Search / filter / sort / paginate for the admin tables

All tables load their collection once and then filter in memory, so these
helpers work on plain lists of documents (dicts or domain models).

Author: TM3
Date: 2026-02-10
"""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel


@dataclass
class Page:
    """One page of a table"""
    items: List[Any] = field(default_factory=list)
    page: int = 1
    page_size: int = 10
    total_items: int = 0
    total_pages: int = 0

    def to_dict(self) -> dict:
        return {
            "page": self.page,
            "page_size": self.page_size,
            "total_items": self.total_items,
            "total_pages": self.total_pages,
        }


def get_field(item: Any, key: str) -> Any:
    """
    Read a (dotted) field from a dict or a pydantic model

    get_field(log, "actor.email") works for both shapes.
    """
    value = item
    for part in key.split("."):
        if value is None:
            return None
        if isinstance(value, dict):
            value = value.get(part)
        elif isinstance(value, BaseModel):
            value = getattr(value, part, None)
        else:
            return None
    return value


def paginate(items: Sequence[Any], page: int = 1, page_size: int = 10, min_pages: int = 0) -> Page:
    """
    Slice one page out of items

    Args:
        page: 1-based page number; values below 1 are treated as 1
        min_pages: Floor for total_pages (the audit viewer and blog list show "1 of 1" when empty)
    """
    page = max(1, page or 1)
    total = len(items)
    total_pages = max(min_pages, math.ceil(total / page_size) if page_size else 0)
    start = (page - 1) * page_size
    return Page(
        items=list(items[start:start + page_size]),
        page=page,
        page_size=page_size,
        total_items=total,
        total_pages=total_pages,
    )


def pagination_window(current: int, total_pages: int, max_buttons: int = 5) -> List[int]:
    """
    Page numbers for the pager buttons

    All pages when they fit, otherwise a window of max_buttons around the
    current page that never runs past either end.
    """
    if total_pages <= max_buttons:
        return list(range(1, total_pages + 1))

    half = max_buttons // 2
    start = max(1, current - half)
    end = min(total_pages, start + max_buttons - 1)
    start = max(1, end - max_buttons + 1)
    return list(range(start, end + 1))


def matches_text(value: Any, query: str) -> bool:
    """
    Case-insensitive substring match

    List values match when any element matches; missing values never do.
    """
    if value is None:
        return False
    needle = (query or "").lower()
    if isinstance(value, (list, tuple)):
        return any(matches_text(v, query) for v in value)
    return needle in str(value).lower()


def search_documents(items: Iterable[Any], query: str, fields: Sequence[str]) -> List[Any]:
    """Items where any of `fields` matches the (trimmed) query; blank query keeps all"""
    needle = (query or "").strip()
    if not needle:
        return list(items)
    return [item for item in items if any(matches_text(get_field(item, f), needle) for f in fields)]


def filter_columns(items: Iterable[Any], column_filters: Optional[Dict[str, str]]) -> List[Any]:
    """Apply per-column text filters; every non-blank filter must match"""
    active = {k: v for k, v in (column_filters or {}).items() if v and str(v).strip()}
    if not active:
        return list(items)
    return [
        item for item in items
        if all(matches_text(get_field(item, key), value.strip()) for key, value in active.items())
    ]


def _sort_value(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if isinstance(value, str):
        return value.lower()
    return value


def sort_documents(items: Iterable[Any], key: Optional[str], descending: bool = False) -> List[Any]:
    """
    Stable sort on one field, documents missing the field always last
    """
    items = list(items)
    if not key:
        return items

    present = [item for item in items if _sort_value(get_field(item, key)) is not None]
    missing = [item for item in items if _sort_value(get_field(item, key)) is None]

    def sort_key(item):
        value = _sort_value(get_field(item, key))
        # Mixed types compare by their text form
        return (0, value) if isinstance(value, (int, float)) else (1, str(value))

    present.sort(key=sort_key, reverse=descending)
    return present + missing
