"""Session-scoped list state for one resource page (search term, sort, page)."""
from __future__ import annotations
from typing import Any, Iterable, Optional

from mealadmin.domain.Resource_Type import ResourceType
from mealadmin.logic.listing.comparators import SortDirection, parse_direction
from mealadmin.logic.listing.pipeline import ListView, PageState, SortState, compute_view
from mealadmin.utilities.config import DEFAULT_ITEMS_PER_PAGE


class ListState:
    """Mutable view state with the reset rules of the console's list pages.

    Changing the search term, the sort or the page size sends the user back
    to page 1. ``set_current_page`` does not clamp, so a caller holding a page
    number from before a shrink gets an empty page and must correct it.
    """

    def __init__(self, resource_type: ResourceType, items_per_page: int = DEFAULT_ITEMS_PER_PAGE):
        self.resource_type = resource_type
        self.default_items_per_page = items_per_page
        self.reset()

    def reset(self) -> "ListState":
        """Back to defaults, as when the page is mounted."""
        self.filter_term = ""
        self.sort = SortState()
        self.page = PageState(1, self.default_items_per_page)
        return self

    def set_filter_term(self, term: Optional[str]) -> "ListState":
        self.filter_term = term or ""
        self.page.current_page = 1
        return self

    def set_sort(self, field_name: Optional[str], direction: Any = SortDirection.ASC) -> "ListState":
        direction = parse_direction(direction)
        if field_name is None or direction is SortDirection.NONE:
            self.sort = SortState()
        else:
            self.sort = SortState(self.resource_type.field(field_name), direction)
        self.page.current_page = 1
        return self

    def toggle_sort(self, field_name: str) -> "ListState":
        """Header click: same column flips asc/desc, a new column starts ascending."""
        current = self.sort
        if current.field is not None and current.field.name == field_name and current.direction is SortDirection.ASC:
            return self.set_sort(field_name, SortDirection.DESC)
        return self.set_sort(field_name, SortDirection.ASC)

    def set_current_page(self, page: int) -> "ListState":
        if page < 1:
            raise ValueError(f"Page must be >= 1, got {page}")
        self.page.current_page = page
        return self

    def set_items_per_page(self, items_per_page: int) -> "ListState":
        if items_per_page <= 0:
            raise ValueError(f"items_per_page must be > 0, got {items_per_page}")
        self.page = PageState(1, items_per_page)
        return self

    def view(self, records: Iterable[Any]) -> ListView:
        return compute_view(records, self.resource_type, self.filter_term, self.sort, self.page)
