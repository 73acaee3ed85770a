"""Resource type catalogue: prefixes, sortable field descriptors and searchable fields.

Every list page of the console (discounts, taxes, protein plans, meal plans,
suppliers, ingredient categories, weeks) is described by one ResourceType
entry. Adding a new page means declaring a new entry here, not writing a new
sort or search function.
"""
from __future__ import annotations
from dataclasses import dataclass, field as dataclass_field, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class UnknownResourceType(LookupError):
    """Raised when a resource key or table name is not in the catalogue."""


class UnknownField(LookupError):
    """Raised when a field is not declared for a resource type."""


class FieldKind(str, Enum):
    STRING = "string"
    NUMERIC = "numeric"
    PREFIXED_ID = "prefixed-id"
    DATE = "date"
    BOOLEAN = "boolean"


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    kind: FieldKind = FieldKind.STRING
    label: str = ""
    # id prefix stripped before comparing prefixed-id values (DES in DES10)
    prefix: str = ""


@dataclass(frozen=True)
class ResourceType:
    key: str
    table: str
    prefix: str
    id_field: str
    sortable: Tuple[FieldDescriptor, ...]
    searchable: Tuple[str, ...]
    # editable field name -> default used when a draft leaves it out
    editable: Dict[str, Any] = dataclass_field(default_factory=dict)
    newest_first: bool = False

    def __post_init__(self):
        # prefixed-id descriptors compare on the number after this type's prefix
        bound = tuple(
            replace(d, prefix=self.prefix) if d.kind is FieldKind.PREFIXED_ID and not d.prefix else d
            for d in self.sortable
        )
        object.__setattr__(self, "sortable", bound)

    def field(self, name: str) -> FieldDescriptor:
        """Return the sortable descriptor called ``name``."""
        for descriptor in self.sortable:
            if descriptor.name == name:
                return descriptor
        raise UnknownField(f"'{name}' is not a sortable field of {self.key}")

    def format_id(self, number: int) -> str:
        return f"{self.prefix}{number}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "table": self.table,
            "prefix": self.prefix,
            "id_field": self.id_field,
            "sortable": [{"name": d.name, "kind": d.kind.value, "label": d.label} for d in self.sortable],
            "searchable": list(self.searchable),
            "editable": sorted(self.editable),
        }


def _id(name: str) -> FieldDescriptor:
    return FieldDescriptor(name, FieldKind.PREFIXED_ID, "ID")


_CREATED = FieldDescriptor("created_at", FieldKind.DATE, "Created")


DISCOUNT = ResourceType(
    key="discount",
    table="discounts",
    prefix="DES",
    id_field="discount_id",
    sortable=(
        _id("discount_id"),
        FieldDescriptor("discount_name", FieldKind.STRING, "Name"),
        FieldDescriptor("discount_percentage", FieldKind.NUMERIC, "Percentage"),
        _CREATED,
    ),
    searchable=("discount_name", "discount_id"),
    editable={"discount_name": "", "discount_percentage": 0},
)

TAX = ResourceType(
    key="tax",
    table="taxes",
    prefix="TAX",
    id_field="tax_id",
    sortable=(
        _id("tax_id"),
        FieldDescriptor("tax_name", FieldKind.STRING, "Name"),
        FieldDescriptor("tax_percentage", FieldKind.NUMERIC, "Percentage"),
        _CREATED,
    ),
    searchable=("tax_name", "tax_id"),
    editable={"tax_name": "", "tax_percentage": 0},
)

PROTEIN_PLAN = ResourceType(
    key="protein_plan",
    table="protein_plans",
    prefix="PP",
    id_field="protein_plans_id",
    sortable=(
        _id("protein_plans_id"),
        FieldDescriptor("protein_plans_name", FieldKind.STRING, "Name"),
        FieldDescriptor("protein_plans_price", FieldKind.NUMERIC, "Price"),
        _CREATED,
    ),
    searchable=("protein_plans_name", "protein_plans_id", "protein_plans_description"),
    editable={"protein_plans_name": "", "protein_plans_description": "", "protein_plans_price": 0},
)

MEAL_PLAN = ResourceType(
    key="meal_plan",
    table="meal_plans",
    prefix="MP",
    id_field="meal_plans_id",
    sortable=(
        _id("meal_plans_id"),
        FieldDescriptor("meal_plans_name", FieldKind.STRING, "Name"),
        FieldDescriptor("meal_plans_price", FieldKind.NUMERIC, "Price"),
        _CREATED,
    ),
    searchable=("meal_plans_name", "meal_plans_id", "meal_plans_description"),
    editable={"meal_plans_name": "", "meal_plans_description": "", "meal_plans_price": 0},
)

SUPPLIER = ResourceType(
    key="supplier",
    table="suppliers",
    prefix="PV",
    id_field="supplier_id",
    sortable=(
        _id("supplier_id"),
        FieldDescriptor("supplier_name", FieldKind.STRING, "Name"),
        FieldDescriptor("contact_person", FieldKind.STRING, "Contact"),
        FieldDescriptor("email", FieldKind.STRING, "Email"),
        _CREATED,
        # active suppliers surface first when sorted ascending
        FieldDescriptor("is_active", FieldKind.BOOLEAN, "Active"),
    ),
    searchable=("supplier_name", "supplier_id", "contact_person", "email", "description"),
    editable={
        "supplier_name": "",
        "contact_person": "",
        "email": "",
        "phone": "",
        "address": "",
        "description": "",
        "is_active": True,
    },
)

INGREDIENT_CATEGORY = ResourceType(
    key="ingredient_category",
    table="ingredient_categories",
    prefix="IC",
    id_field="ingredient_category_id",
    sortable=(
        _id("ingredient_category_id"),
        FieldDescriptor("ingredient_category", FieldKind.STRING, "Category"),
        FieldDescriptor("description", FieldKind.STRING, "Description"),
        _CREATED,
    ),
    searchable=("ingredient_category", "ingredient_category_id", "description"),
    editable={"ingredient_category": "", "description": ""},
)

WEEK = ResourceType(
    key="week",
    table="weeks",
    prefix="WK",
    id_field="week_id",
    sortable=(
        _id("week_id"),
        FieldDescriptor("week_name", FieldKind.STRING, "Name"),
        FieldDescriptor("menu_name", FieldKind.STRING, "Menu"),
        _CREATED,
    ),
    searchable=("week_name", "week_id", "menu_name"),
    editable={"week_name": "", "weekly_menu": ""},
    newest_first=True,
)

RESOURCE_TYPES: Dict[str, ResourceType] = {
    rt.key: rt for rt in (DISCOUNT, TAX, PROTEIN_PLAN, MEAL_PLAN, SUPPLIER, INGREDIENT_CATEGORY, WEEK)
}


def get_resource_type(name: str) -> ResourceType:
    """Look up a resource type by key (``discount``) or table name (``discounts``)."""
    rt: Optional[ResourceType] = RESOURCE_TYPES.get(name)
    if rt is not None:
        return rt
    for candidate in RESOURCE_TYPES.values():
        if candidate.table == name:
            return candidate
    raise UnknownResourceType(f"Unknown resource type: {name}")


__all__ = [
    'FieldKind', 'FieldDescriptor', 'ResourceType', 'RESOURCE_TYPES', 'get_resource_type',
    'UnknownResourceType', 'UnknownField',
    'DISCOUNT', 'TAX', 'PROTEIN_PLAN', 'MEAL_PLAN', 'SUPPLIER', 'INGREDIENT_CATEGORY', 'WEEK',
]
