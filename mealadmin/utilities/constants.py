from typing import Final

# Pages shown on each side of the current page in the pager
PAGE_WINDOW: Final[int] = 2
PAGE_GAP: Final[str] = "..."

# Lookup table joined into weeks to show the menu name
WEEKLY_MENUS_TABLE: Final[str] = "weekly_menus"
WEEKLY_MENUS_ID_FIELD: Final[str] = "menu_id"

# PostgREST error code for unique_violation
UNIQUE_VIOLATION: Final[str] = "23505"

# Activity ring buffer size
MAX_ACTIVITY_EVENTS: Final[int] = 300
