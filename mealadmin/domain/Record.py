"""Record domain entity: one stored row of a resource type (discount, tax, supplier...)."""
from typing import Any, Dict, Optional

# Row keys owned by the store; never copied into the typed fields
RESERVED_KEYS = ("id", "created_at", "updated_at")


class Record:
    def __init__(self, internal_id: str = "", display_id: str = "", id_field: str = "display_id",
                 fields: Optional[Dict[str, Any]] = None, created_at: Optional[str] = None,
                 updated_at: Optional[str] = None):
        self.internal_id = internal_id
        self.display_id = display_id
        self.id_field = id_field
        self.fields = dict(fields) if fields else {}
        self.created_at = created_at
        self.updated_at = updated_at

    def get(self, name: str, default: Any = None) -> Any:
        '''Read a value by its row name; the display id answers to its resource-specific name.'''
        if name in (self.id_field, "display_id"):
            return self.display_id
        if name == "created_at":
            return self.created_at
        if name == "updated_at":
            return self.updated_at
        if name in ("id", "internal_id"):
            return self.internal_id
        return self.fields.get(name, default)

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return self.to_row() == other.to_row()

    def __str__(self) -> str:
        return f"{self.display_id} ({self.internal_id})"

    __repr__ = __str__

    @staticmethod
    def from_row(row: Dict[str, Any], id_field: str) -> "Record":
        '''Creates a Record from a store row such as {"id": ..., "discount_id": "DES1", ...}.'''
        d = dict(row) if isinstance(row, dict) else {}
        display_id = d.pop(id_field, "") or ""
        fields = {k: v for k, v in d.items() if k not in RESERVED_KEYS}
        return Record(
            internal_id=str(d.get("id", "") or ""),
            display_id=str(display_id),
            id_field=id_field,
            fields=fields,
            created_at=d.get("created_at"),
            updated_at=d.get("updated_at"),
        )

    def to_row(self) -> Dict[str, Any]:
        '''Converts the Record back to the flat row shape used by stores and the API.'''
        row: Dict[str, Any] = {"id": self.internal_id, self.id_field: self.display_id}
        row.update(self.fields)
        row["created_at"] = self.created_at
        row["updated_at"] = self.updated_at
        return row

    to_dict = to_row
