"""
Input schemas using Pydantic: type coercion for create/update payloads.
"""
from typing import Dict, Optional, Tuple, Type
from pydantic import BaseModel, ConfigDict, field_validator


class _Input(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @field_validator('*', mode='before')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace."""
        if isinstance(v, str):
            return v.strip()
        return v


class DiscountInput(_Input):
    discount_name: str
    discount_percentage: float


class DiscountUpdate(_Input):
    discount_name: Optional[str] = None
    discount_percentage: Optional[float] = None


class TaxInput(_Input):
    tax_name: str
    tax_percentage: float


class TaxUpdate(_Input):
    tax_name: Optional[str] = None
    tax_percentage: Optional[float] = None


class ProteinPlanInput(_Input):
    protein_plans_name: str
    protein_plans_description: str = ""
    protein_plans_price: float


class ProteinPlanUpdate(_Input):
    protein_plans_name: Optional[str] = None
    protein_plans_description: Optional[str] = None
    protein_plans_price: Optional[float] = None


class MealPlanInput(_Input):
    meal_plans_name: str
    meal_plans_description: str = ""
    meal_plans_price: float


class MealPlanUpdate(_Input):
    meal_plans_name: Optional[str] = None
    meal_plans_description: Optional[str] = None
    meal_plans_price: Optional[float] = None


class SupplierInput(_Input):
    supplier_name: str
    contact_person: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    description: str = ""
    is_active: bool = True


class SupplierUpdate(_Input):
    supplier_name: Optional[str] = None
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class IngredientCategoryInput(_Input):
    ingredient_category: str
    description: str = ""


class IngredientCategoryUpdate(_Input):
    ingredient_category: Optional[str] = None
    description: Optional[str] = None


class WeekInput(_Input):
    week_name: str
    weekly_menu: str = ""


class WeekUpdate(_Input):
    week_name: Optional[str] = None
    weekly_menu: Optional[str] = None


# resource key -> (create schema, update schema)
INPUT_SCHEMAS: Dict[str, Tuple[Type[BaseModel], Type[BaseModel]]] = {
    "discount": (DiscountInput, DiscountUpdate),
    "tax": (TaxInput, TaxUpdate),
    "protein_plan": (ProteinPlanInput, ProteinPlanUpdate),
    "meal_plan": (MealPlanInput, MealPlanUpdate),
    "supplier": (SupplierInput, SupplierUpdate),
    "ingredient_category": (IngredientCategoryInput, IngredientCategoryUpdate),
    "week": (WeekInput, WeekUpdate),
}
