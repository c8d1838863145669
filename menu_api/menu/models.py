from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Category(str, Enum):
    appetizer = "appetizer"
    entree = "entree"
    dessert = "dessert"
    beverage = "beverage"


class FieldViolation(BaseModel):
    field: str
    message: str
    value: Any = None


class MenuItemInput(BaseModel):
    name: str = Field(..., min_length=3)
    description: str = Field(..., min_length=10)
    price: float = Field(..., gt=0)
    category: Category
    ingredients: list[str] = Field(..., min_length=1)
    available: bool | None = Field(default=None, strict=True)

    @field_validator("name", "description", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value


class CreateItemInput(MenuItemInput):
    """Validated payload for a new menu item."""


class UpdateItemInput(MenuItemInput):
    """Validated payload replacing every field of an existing menu item."""


class MenuItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1)
    name: str
    description: str
    price: float
    category: Category
    ingredients: tuple[str, ...]
    available: bool = True

    @classmethod
    def from_input(cls, item_id: int, payload: MenuItemInput) -> MenuItem:
        return cls(
            id=item_id,
            name=payload.name,
            description=payload.description,
            price=payload.price,
            category=payload.category,
            ingredients=tuple(payload.ingredients),
            available=True if payload.available is None else payload.available,
        )


class DeletedItemResponse(BaseModel):
    message: str
    item: MenuItem


class ValidationFailedResponse(BaseModel):
    message: str
    errors: list[FieldViolation]
