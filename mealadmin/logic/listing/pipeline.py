"""List pipeline: search filter -> sort -> pagination slice.

One generic implementation shared by every resource page; the resource type
supplies the searchable fields, the sortable field descriptors and the id
prefix. Pure functions over a snapshot of the collection, recomputed on each
state change.
"""
from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Sequence, Union

from mealadmin.domain.Resource_Type import FieldDescriptor, ResourceType
from mealadmin.logic.listing.comparators import SortDirection, parse_direction, sort_records
from mealadmin.utilities.constants import PAGE_GAP, PAGE_WINDOW

__all__ = [
    "SortState", "PageState", "ListView",
    "filter_records", "paginate", "count_pages", "visible_pages", "compute_view",
]


@dataclass
class SortState:
    field: Optional[FieldDescriptor] = None
    direction: SortDirection = SortDirection.NONE

    @property
    def active(self) -> bool:
        return self.field is not None and self.direction is not SortDirection.NONE


@dataclass
class PageState:
    current_page: int = 1
    items_per_page: int = 10

    def __post_init__(self):
        if self.current_page < 1:
            raise ValueError(f"current_page must be >= 1, got {self.current_page}")
        if self.items_per_page <= 0:
            raise ValueError(f"items_per_page must be > 0, got {self.items_per_page}")


@dataclass
class ListView:
    page_items: List[Any]
    total_items: int
    total_pages: int
    current_page: int = 1
    items_per_page: int = 10
    # 1-based positions for "showing X to Y of N"; 0 when the page is empty
    first_item: int = 0
    last_item: int = 0
    visible_pages: List[Union[int, str]] = field(default_factory=list)

    @property
    def is_stale(self) -> bool:
        """True when the page index points past the end of a non-empty result."""
        return not self.page_items and self.total_items > 0

    def to_dict(self) -> dict:
        return {
            "items": [r.to_dict() if hasattr(r, "to_dict") else r for r in self.page_items],
            "total_items": self.total_items,
            "total_pages": self.total_pages,
            "current_page": self.current_page,
            "items_per_page": self.items_per_page,
            "first_item": self.first_item,
            "last_item": self.last_item,
            "visible_pages": list(self.visible_pages),
        }


def _matches(record: Any, term: str, searchable: Sequence[str]) -> bool:
    for name in searchable:
        value = record.get(name) if hasattr(record, "get") else getattr(record, name, None)
        if isinstance(value, str) and term in value.lower():
            return True
    return False


def filter_records(records: Iterable[Any], term: Optional[str], searchable: Sequence[str]) -> List[Any]:
    """Keep records where any searchable field contains ``term`` (case-insensitive substring)."""
    items = list(records)
    if term is None or not term.strip():
        return items
    needle = term.lower()
    return [r for r in items if _matches(r, needle, searchable)]


def count_pages(total_items: int, items_per_page: int) -> int:
    return math.ceil(total_items / items_per_page) if total_items else 0


def paginate(items: Sequence[Any], page: PageState) -> List[Any]:
    """Slice one page; a page past the end yields an empty list (no clamping)."""
    start = (page.current_page - 1) * page.items_per_page
    return list(items[start:start + page.items_per_page])


def visible_pages(current_page: int, total_pages: int, window: int = PAGE_WINDOW) -> List[Union[int, str]]:
    """Page numbers around the current page, with first/last pages and '...' gaps.

    A stale page past the end is windowed around the last page.
    """
    if total_pages <= 0:
        return []
    anchor = min(current_page, total_pages)
    start = max(1, anchor - window)
    end = min(total_pages, anchor + window)
    pages: List[Union[int, str]] = []
    if start > 1:
        pages.append(1)
        if start > 2:
            pages.append(PAGE_GAP)
    pages.extend(range(start, end + 1))
    if end < total_pages:
        if end < total_pages - 1:
            pages.append(PAGE_GAP)
        pages.append(total_pages)
    return pages


def compute_view(records: Iterable[Any], resource_type: ResourceType, filter_term: Optional[str] = "",
                 sort_state: Optional[SortState] = None, page_state: Optional[PageState] = None) -> ListView:
    sort_state = sort_state or SortState()
    page_state = page_state or PageState()

    filtered = filter_records(records, filter_term, resource_type.searchable)
    ordered = sort_records(filtered, sort_state.field, parse_direction(sort_state.direction),
                           prefix=resource_type.prefix)
    page_items = paginate(ordered, page_state)

    total_items = len(ordered)
    total_pages = count_pages(total_items, page_state.items_per_page)
    offset = (page_state.current_page - 1) * page_state.items_per_page
    return ListView(
        page_items=page_items,
        total_items=total_items,
        total_pages=total_pages,
        current_page=page_state.current_page,
        items_per_page=page_state.items_per_page,
        first_item=offset + 1 if page_items else 0,
        last_item=offset + len(page_items),
        visible_pages=visible_pages(page_state.current_page, total_pages),
    )
