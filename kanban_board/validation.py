"""Field validation for user input."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from .errors import ValidationError

CARD_TITLE_MAX = 100
LIST_TITLE_MAX = 50


@dataclass
class ValidationResult:
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _title_errors(value: Any, label: str, limit: int) -> List[str]:
    if not value or not isinstance(value, str):
        return [f"{label} is required"]
    errors = []
    if not value.strip():
        errors.append(f"{label} cannot be blank")
    if len(value) > limit:
        errors.append(f"{label} cannot exceed {limit} characters")
    return errors


def check_card_title(value: Any) -> List[str]:
    errors = _title_errors(value, "Card title", CARD_TITLE_MAX)
    if isinstance(value, str) and ("<" in value or ">" in value):
        errors.append("Card title cannot contain HTML tags")
    return errors


def check_list_title(value: Any) -> List[str]:
    return _title_errors(value, "List title", LIST_TITLE_MAX)


CHECKS: Dict[str, Callable[[Any], List[str]]] = {
    "card_title": check_card_title,
    "list_title": check_list_title,
}


def validate(kind: str, value: Any) -> ValidationResult:
    return ValidationResult(CHECKS[kind](value))


def require(kind: str, value: Any) -> None:
    result = validate(kind, value)
    if not result.is_valid:
        raise ValidationError(result.errors)
