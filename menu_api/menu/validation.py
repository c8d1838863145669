"""Field rules applied to raw menu item payloads.

Every rule is evaluated, in field order, so a caller always receives the
complete list of violations. A field that breaks two rules contributes two
entries.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Mapping
from typing import Any, NamedTuple

from pydantic import ValidationError

from menu_api.core.errors import MenuValidationFailed
from menu_api.menu.models import Category, FieldViolation, MenuItemInput

CATEGORIES = tuple(category.value for category in Category)
INPUT_FIELDS = ("name", "description", "price", "category", "ingredients", "available")
FLOAT_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")

_MISSING = object()


class Rule(NamedTuple):
    field: str
    check: Callable[[Any], bool]
    message: str
    optional: bool = False


def _as_text(value: Any) -> str:
    if value is _MISSING or value is None:
        return ""
    return str(value).strip()


def _is_string(value: Any) -> bool:
    return isinstance(value, str)


def _min_length(length: int) -> Callable[[Any], bool]:
    def _check(value: Any) -> bool:
        return len(_as_text(value)) >= length

    return _check


def coerce_price(value: Any) -> float | None:
    """Convert a numeric-looking value to float, or return None."""
    if isinstance(value, bool):
        return None
    if not isinstance(value, (int, float)) and not (
        isinstance(value, str) and FLOAT_RE.fullmatch(value)
    ):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    if not math.isfinite(number):
        return None
    return number


def _is_positive_number(value: Any) -> bool:
    price = coerce_price(value)
    return price is not None and price > 0


def _is_category(value: Any) -> bool:
    return isinstance(value, str) and value in CATEGORIES


def _is_non_empty_list(value: Any) -> bool:
    return isinstance(value, list) and len(value) >= 1


def _has_only_strings(value: Any) -> bool:
    if not isinstance(value, list):
        return True
    return all(isinstance(entry, str) for entry in value)


def _is_bool(value: Any) -> bool:
    return isinstance(value, bool)


RULES: tuple[Rule, ...] = (
    Rule("name", _is_string, "Name must be a string"),
    Rule("name", _min_length(3), "Name must be at least 3 characters"),
    Rule("description", _is_string, "Description must be a string"),
    Rule("description", _min_length(10), "Description must be at least 10 characters"),
    Rule("price", _is_positive_number, "Price must be a number greater than 0"),
    Rule("category", _is_string, "Category must be a string"),
    Rule(
        "category",
        _is_category,
        f"Category must be one of: {', '.join(CATEGORIES)}",
    ),
    Rule(
        "ingredients",
        _is_non_empty_list,
        "Ingredients must be an array with at least 1 item",
    ),
    Rule("ingredients", _has_only_strings, "Ingredients must contain only strings"),
    Rule("available", _is_bool, "Available must be a boolean", optional=True),
)


def collect_violations(candidate: Mapping[str, Any]) -> list[FieldViolation]:
    violations: list[FieldViolation] = []
    for rule in RULES:
        value = candidate.get(rule.field, _MISSING)
        if value is _MISSING and rule.optional:
            continue
        if not rule.check(value):
            violations.append(
                FieldViolation(
                    field=rule.field,
                    message=rule.message,
                    value=None if value is _MISSING else value,
                )
            )
    return violations


def validate_candidate(
    candidate: Any,
    model: type[MenuItemInput] = MenuItemInput,
) -> MenuItemInput:
    """Check a raw payload against every rule and build a typed input record.

    Anything that is not a mapping is checked as an empty payload. Raises
    MenuValidationFailed with all violations when any rule fails.
    """
    if isinstance(candidate, model):
        return candidate
    if isinstance(candidate, MenuItemInput):
        candidate = candidate.model_dump(mode="json", exclude_none=True)
    if not isinstance(candidate, Mapping):
        candidate = {}

    violations = collect_violations(candidate)
    if violations:
        raise MenuValidationFailed(violations)

    fields = {name: candidate[name] for name in INPUT_FIELDS if name in candidate}
    fields["price"] = coerce_price(candidate["price"])
    try:
        return model.model_validate(fields)
    except ValidationError as exc:
        raise MenuValidationFailed(
            [
                FieldViolation(
                    field=".".join(str(part) for part in error["loc"]),
                    message=error["msg"],
                    value=error.get("input"),
                )
                for error in exc.errors()
            ]
        ) from exc
