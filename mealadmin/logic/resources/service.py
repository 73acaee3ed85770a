"""Resource service: the one CRUD facade every resource page goes through.

Composes the record store, the identifier allocator, the list pipeline and
the event bus for a single resource type. Store errors are logged, published
as ``resource.error`` and re-raised; the caller decides what the user sees.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from mealadmin.domain.Record import Record
from mealadmin.domain.Resource_Type import ResourceType, UnknownField
from mealadmin.events.Event_Bus import (
    CollectionListed, EventBus, OperationFailed, RecordChanged, RecordDeleted,
    RESOURCE_CREATED, RESOURCE_DELETED, RESOURCE_ERROR, RESOURCE_LISTED, RESOURCE_UPDATED,
)
from mealadmin.infra.exceptions import DuplicateIdentifier, StoreError
from mealadmin.infra.Record_Store import RecordStore
from mealadmin.logic.identifiers.allocator import IdentifierAllocator
from mealadmin.logic.listing.pipeline import ListView, PageState, SortState, compute_view
from mealadmin.utilities.config import ID_ALLOCATION_RETRIES

logger = logging.getLogger(__name__)

ACTIVE_FIELD = "is_active"


class ResourceService:
    def __init__(self, resource_type: ResourceType, store: RecordStore, event_bus: Optional[EventBus] = None,
                 log: Optional[logging.Logger] = None, max_attempts: int = ID_ALLOCATION_RETRIES,
                 menu_store: Optional[RecordStore] = None):
        self.resource_type = resource_type
        self.store = store
        self.event_bus = event_bus or EventBus()
        self.logger = log or logger
        self.allocator = IdentifierAllocator(store, resource_type, self.logger)
        self.max_attempts = max(1, max_attempts)
        # weekly menus lookup, only used to show menu_name on weeks
        self.menu_store = menu_store

    # --- Helpers ----------------------------------------------------------
    def _fail(self, operation: str, error: Exception, **ids: str):
        self.logger.error(f"{operation} {self.resource_type.key} failed: {error}")
        payload = OperationFailed(resource=self.resource_type.key, operation=operation, error=str(error), **ids)
        self.event_bus.publish(RESOURCE_ERROR, payload)

    def _changed(self, record: Record) -> RecordChanged:
        return RecordChanged(resource=self.resource_type.key, display_id=record.display_id,
                             internal_id=record.internal_id)

    def _editable(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in fields.items() if k in self.resource_type.editable}

    async def _menu_names(self) -> Dict[str, str]:
        if self.menu_store is None:
            return {}
        menus = await self.menu_store.list()
        return {m.display_id: m.get("menu_name", "") for m in menus}

    async def _enrich(self, records: List[Record]) -> List[Record]:
        names = await self._menu_names()
        if names:
            for record in records:
                menu_id = record.get("weekly_menu")
                if menu_id in names:
                    record.fields["menu_name"] = names[menu_id]
        return records

    # --- Reads ------------------------------------------------------------
    async def list_records(self) -> List[Record]:
        try:
            records = await self._enrich(await self.store.list())
        except StoreError as e:
            self._fail("list", e)
            raise
        if self.resource_type.newest_first:
            records.reverse()
        self.event_bus.publish(RESOURCE_LISTED, CollectionListed(resource=self.resource_type.key, count=len(records)))
        return records

    async def get_record(self, internal_id: str) -> Record:
        try:
            record = await self.store.get(internal_id)
        except StoreError as e:
            self._fail("get", e, internal_id=internal_id)
            raise
        return (await self._enrich([record]))[0]

    async def list_view(self, filter_term: str = "", sort_state: Optional[SortState] = None,
                        page_state: Optional[PageState] = None) -> ListView:
        records = await self.list_records()
        return compute_view(records, self.resource_type, filter_term, sort_state, page_state)

    async def next_display_id(self) -> str:
        return await self.allocator.allocate_next()

    # --- Writes -----------------------------------------------------------
    async def create_record(self, draft: Dict[str, Any]) -> Record:
        """Allocate a display id and insert; re-allocate when another session took it first."""
        row = dict(self.resource_type.editable)
        row.update(self._editable(draft))
        attempt = 0
        while True:
            attempt += 1
            try:
                row[self.resource_type.id_field] = await self.allocator.allocate_next()
                record = await self.store.create(row)
            except DuplicateIdentifier as e:
                if attempt < self.max_attempts:
                    self.logger.warning(f"{e}; re-allocating (attempt {attempt}/{self.max_attempts})")
                    continue
                self._fail("create", e, display_id=e.display_id)
                raise
            except StoreError as e:
                self._fail("create", e)
                raise
            self.event_bus.publish(RESOURCE_CREATED, self._changed(record))
            return record

    async def update_record(self, internal_id: str, fields: Dict[str, Any]) -> Record:
        changes = self._editable(fields)
        try:
            record = await self.store.update(internal_id, changes)
        except StoreError as e:
            self._fail("update", e, internal_id=internal_id)
            raise
        self.event_bus.publish(RESOURCE_UPDATED, self._changed(record))
        return record

    async def delete_record(self, internal_id: str) -> None:
        try:
            await self.store.delete(internal_id)
        except StoreError as e:
            self._fail("delete", e, internal_id=internal_id)
            raise
        self.event_bus.publish(RESOURCE_DELETED, RecordDeleted(resource=self.resource_type.key, internal_id=internal_id))

    async def toggle_active(self, internal_id: str) -> Record:
        """Flip ``is_active`` (suppliers)."""
        if ACTIVE_FIELD not in self.resource_type.editable:
            raise UnknownField(f"{self.resource_type.key} has no {ACTIVE_FIELD} field")
        current = await self.get_record(internal_id)
        return await self.update_record(internal_id, {ACTIVE_FIELD: not bool(current.get(ACTIVE_FIELD))})


__all__ = ['ResourceService']
