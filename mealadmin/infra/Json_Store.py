"""File-backed record store: one JSON array per table, written atomically."""
import asyncio
import json
import logging
import os
import shutil
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

from mealadmin.domain.Record import Record, RESERVED_KEYS
from mealadmin.infra.exceptions import DuplicateIdentifier, RecordNotFound, StoreUnavailable
from mealadmin.infra.paths import table_file

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


class JsonRecordStore:
    def __init__(self, table: str, id_field: str, data_dir: Optional[Path] = None):
        self.table = table
        self.id_field = id_field
        self.path = table_file(table, data_dir)
        # serializes read-modify-write cycles inside this process
        self._lock = asyncio.Lock()

    # --- File helpers -----------------------------------------------------
    def _load_rows(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                rows = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Cannot read {self.path}: {e}")
            raise StoreUnavailable(f"Cannot read {self.table}: {e}") from e
        if not isinstance(rows, list):
            raise StoreUnavailable(f"{self.path} does not contain a JSON array")
        return rows

    def _atomic_write(self, rows: List[Dict[str, Any]]) -> None:
        try:
            os.makedirs(self.path.parent, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.table}_", suffix=".json")
        except OSError as e:
            raise StoreUnavailable(f"Cannot write {self.table}: {e}") from e
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(rows, tmp, indent=2, ensure_ascii=False)
            shutil.move(tmp_path, self.path)
        except OSError as e:
            raise StoreUnavailable(f"Cannot write {self.table}: {e}") from e
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    def _creation_order(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        # stable: rows sharing a timestamp keep file order
        return sorted(rows, key=lambda r: str(r.get("created_at") or ""))

    def _index_of(self, rows: List[Dict[str, Any]], internal_id: str) -> int:
        for i, row in enumerate(rows):
            if str(row.get("id")) == str(internal_id):
                return i
        raise RecordNotFound(self.table, internal_id)

    def _check_unique(self, rows: List[Dict[str, Any]], display_id: Any, skip_id: Optional[str] = None) -> None:
        if not display_id:
            return
        for row in rows:
            if row.get(self.id_field) == display_id and str(row.get("id")) != str(skip_id):
                raise DuplicateIdentifier(self.table, display_id)

    def _record(self, row: Dict[str, Any]) -> Record:
        return Record.from_row(row, self.id_field)

    # --- Contract ---------------------------------------------------------
    async def list(self) -> List[Record]:
        return [self._record(r) for r in self._creation_order(self._load_rows())]

    async def get(self, internal_id: str) -> Record:
        rows = self._load_rows()
        return self._record(rows[self._index_of(rows, internal_id)])

    async def create(self, draft: Dict[str, Any]) -> Record:
        async with self._lock:
            rows = self._load_rows()
            self._check_unique(rows, draft.get(self.id_field))
            now = _now()
            row = {k: v for k, v in draft.items() if k not in RESERVED_KEYS}
            row.update({"id": uuid4().hex, "created_at": now, "updated_at": now})
            rows.append(row)
            self._atomic_write(rows)
        logger.info(f"Created {row.get(self.id_field)} in {self.table}")
        return self._record(row)

    async def update(self, internal_id: str, fields: Dict[str, Any]) -> Record:
        async with self._lock:
            rows = self._load_rows()
            idx = self._index_of(rows, internal_id)
            changes = {k: v for k, v in fields.items() if k not in RESERVED_KEYS}
            if self.id_field in changes:
                self._check_unique(rows, changes[self.id_field], skip_id=internal_id)
            rows[idx].update(changes)
            rows[idx]["updated_at"] = _now()
            self._atomic_write(rows)
            row = rows[idx]
        return self._record(row)

    async def delete(self, internal_id: str) -> None:
        async with self._lock:
            rows = self._load_rows()
            idx = self._index_of(rows, internal_id)
            del rows[idx]
            self._atomic_write(rows)

    async def find_most_recently_created(self) -> Optional[Record]:
        rows = self._creation_order(self._load_rows())
        return self._record(rows[-1]) if rows else None

    def seed(self, rows: List[Dict[str, Any]]) -> None:
        """Replace the table contents (used to bootstrap lookup tables such as weekly menus)."""
        self._atomic_write(list(rows))
