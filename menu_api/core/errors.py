from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from menu_api.menu.models import FieldViolation


class MenuItemNotFound(LookupError):
    def __init__(self, item_id: int | None) -> None:
        super().__init__(f"Menu item {item_id} not found")
        self.item_id = item_id


class MenuValidationFailed(ValueError):
    def __init__(self, violations: list[FieldViolation]) -> None:
        fields = ", ".join(dict.fromkeys(v.field for v in violations))
        super().__init__(f"Validation failed for: {fields}")
        self.violations = violations
