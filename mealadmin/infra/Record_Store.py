"""Record store contract shared by every resource page.

The identifier allocator and the resource service only talk to this narrow,
async CRUD contract; the concrete adapter (local JSON files or the remote
PostgREST API) is picked from configuration by ``build_store``.
"""
from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from mealadmin.domain.Record import Record
from mealadmin.utilities import config


@runtime_checkable
class RecordStore(Protocol):
    table: str
    id_field: str

    async def list(self) -> List[Record]:
        """Full collection in creation order (oldest first), no server-side filtering."""
        ...

    async def get(self, internal_id: str) -> Record:
        ...

    async def create(self, draft: Dict[str, Any]) -> Record:
        """Insert a row; the store assigns id, created_at and updated_at."""
        ...

    async def update(self, internal_id: str, fields: Dict[str, Any]) -> Record:
        ...

    async def delete(self, internal_id: str) -> None:
        ...

    async def find_most_recently_created(self) -> Optional[Record]:
        ...


def build_store(table: str, id_field: str, *, backend: Optional[str] = None,
                data_dir: Optional[Path] = None) -> RecordStore:
    """Create the configured store adapter for one table."""
    backend = (backend or config.STORE_BACKEND).lower()
    if backend == "json":
        from mealadmin.infra.Json_Store import JsonRecordStore
        return JsonRecordStore(table, id_field, data_dir=data_dir)
    if backend == "rest":
        from mealadmin.infra.Rest_Store import RestRecordStore
        if not config.STORE_URL:
            raise ValueError("STORE_URL must be set when STORE_BACKEND=rest")
        return RestRecordStore(table, id_field, config.STORE_URL,
                               api_key=config.STORE_API_KEY, timeout=config.STORE_TIMEOUT)
    raise ValueError(f"Unsupported STORE_BACKEND: {backend}")


__all__ = ['RecordStore', 'build_store']
