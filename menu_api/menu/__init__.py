from menu_api.menu.models import (
    Category,
    CreateItemInput,
    DeletedItemResponse,
    FieldViolation,
    MenuItem,
    MenuItemInput,
    UpdateItemInput,
    ValidationFailedResponse,
)
from menu_api.menu.store import MenuStore
from menu_api.menu.validation import validate_candidate

__all__ = [
    "Category",
    "CreateItemInput",
    "DeletedItemResponse",
    "FieldViolation",
    "MenuItem",
    "MenuItemInput",
    "MenuStore",
    "UpdateItemInput",
    "ValidationFailedResponse",
    "validate_candidate",
]
