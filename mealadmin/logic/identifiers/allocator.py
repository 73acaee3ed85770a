"""Sequential display identifiers (DES1, DES2, ...) per resource type.

The next number is read off the most recently created record. This is a
read-then-compute strategy, not an atomic counter: two sessions allocating at
the same time can compute the same id. The store reports that collision as
``DuplicateIdentifier`` and ``ResourceService.create_record`` re-allocates.
"""
from __future__ import annotations
import logging
import re
from typing import Any, Optional

from mealadmin.domain.Resource_Type import ResourceType
from mealadmin.infra.Record_Store import RecordStore

logger = logging.getLogger(__name__)

_LEADING_DIGITS = re.compile(r"\s*(\d+)")

__all__ = ["parse_suffix", "next_display_id", "IdentifierAllocator"]


def parse_suffix(display_id: Any, prefix: str) -> int:
    """Numeric part of ``display_id`` after ``prefix``; 0 when missing or not numeric.

    >>> parse_suffix("DES10", "DES")
    10
    >>> parse_suffix("DESx", "DES")
    0
    """
    if not isinstance(display_id, str):
        return 0
    rest = display_id.strip()
    if prefix and rest.startswith(prefix):
        rest = rest[len(prefix):]
    match = _LEADING_DIGITS.match(rest)
    return int(match.group(1)) if match else 0


def next_display_id(last_display_id: Optional[str], resource_type: ResourceType) -> str:
    if not last_display_id:
        return resource_type.format_id(1)
    return resource_type.format_id(parse_suffix(last_display_id, resource_type.prefix) + 1)


class IdentifierAllocator:
    def __init__(self, store: RecordStore, resource_type: ResourceType, log: Optional[logging.Logger] = None):
        self.store = store
        self.resource_type = resource_type
        self.logger = log or logger

    async def allocate_next(self) -> str:
        """Return the display id the next created record should carry.

        Store failures propagate to the caller; never falls back to ``<prefix>1``.
        """
        try:
            latest = await self.store.find_most_recently_created()
        except Exception as e:
            self.logger.error(f"Cannot allocate {self.resource_type.prefix} id: {e}")
            raise
        display_id = next_display_id(latest.display_id if latest else None, self.resource_type)
        self.logger.debug(f"Allocated {display_id} for {self.resource_type.key}")
        return display_id
