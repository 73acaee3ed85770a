"""Remote record store speaking the PostgREST dialect (Supabase ``/rest/v1``).

Each call opens a short-lived ``httpx.AsyncClient`` unless one is injected
(tests inject a client built on ``httpx.MockTransport``).
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from mealadmin.domain.Record import Record, RESERVED_KEYS
from mealadmin.infra.exceptions import DuplicateIdentifier, RecordNotFound, StoreError, StoreUnavailable
from mealadmin.utilities.constants import UNIQUE_VIOLATION

logger = logging.getLogger(__name__)


class RestRecordStore:
    def __init__(self, table: str, id_field: str, base_url: str, api_key: str = "",
                 timeout: float = 10.0, client: Optional[httpx.AsyncClient] = None):
        self.table = table
        self.id_field = id_field
        self.url = f"{base_url.rstrip('/')}/rest/v1/{table}"
        self.api_key = api_key
        self.timeout = timeout
        self._client = client

    def _headers(self, prefer: Optional[str] = None) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        if prefer:
            headers["Prefer"] = prefer
        return headers

    async def _send(self, method: str, params: Dict[str, str], payload: Any = None,
                    prefer: Optional[str] = None) -> httpx.Response:
        kwargs = {"params": params, "headers": self._headers(prefer)}
        if payload is not None:
            kwargs["json"] = payload
        try:
            if self._client is not None:
                return await self._client.request(method, self.url, **kwargs)
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                return await client.request(method, self.url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {self.table} failed: {e}")
            raise StoreUnavailable(f"Store unreachable for {self.table}: {e}") from e

    async def _rows(self, method: str, params: Dict[str, str], payload: Any = None,
                    prefer: Optional[str] = None, display_id: str = "") -> List[Dict[str, Any]]:
        response = await self._send(method, params, payload, prefer)
        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = {}
            code = body.get("code") if isinstance(body, dict) else None
            message = body.get("message", response.text) if isinstance(body, dict) else response.text
            if response.status_code == 409 or code == UNIQUE_VIOLATION:
                raise DuplicateIdentifier(self.table, display_id)
            if response.status_code >= 500:
                raise StoreUnavailable(f"{method} {self.table} -> {response.status_code}: {message}")
            raise StoreError(f"{method} {self.table} -> {response.status_code}: {message}")
        if not response.content:
            return []
        data = response.json()
        return data if isinstance(data, list) else [data]

    def _record(self, row: Dict[str, Any]) -> Record:
        return Record.from_row(row, self.id_field)

    async def list(self) -> List[Record]:
        rows = await self._rows("GET", {"select": "*", "order": "created_at.asc"})
        return [self._record(r) for r in rows]

    async def get(self, internal_id: str) -> Record:
        rows = await self._rows("GET", {"select": "*", "id": f"eq.{internal_id}"})
        if not rows:
            raise RecordNotFound(self.table, internal_id)
        return self._record(rows[0])

    async def create(self, draft: Dict[str, Any]) -> Record:
        row = {k: v for k, v in draft.items() if k not in RESERVED_KEYS}
        rows = await self._rows("POST", {"select": "*"}, [row], prefer="return=representation",
                                display_id=str(row.get(self.id_field, "")))
        if not rows:
            raise StoreError(f"Insert into {self.table} returned no row")
        return self._record(rows[0])

    async def update(self, internal_id: str, fields: Dict[str, Any]) -> Record:
        changes = {k: v for k, v in fields.items() if k not in RESERVED_KEYS}
        rows = await self._rows("PATCH", {"id": f"eq.{internal_id}", "select": "*"}, changes,
                                prefer="return=representation",
                                display_id=str(changes.get(self.id_field, "")))
        if not rows:
            raise RecordNotFound(self.table, internal_id)
        return self._record(rows[0])

    async def delete(self, internal_id: str) -> None:
        rows = await self._rows("DELETE", {"id": f"eq.{internal_id}"}, prefer="return=representation")
        if not rows:
            raise RecordNotFound(self.table, internal_id)

    async def find_most_recently_created(self) -> Optional[Record]:
        rows = await self._rows("GET", {"select": "*", "order": "created_at.desc", "limit": "1"})
        return self._record(rows[0]) if rows else None
