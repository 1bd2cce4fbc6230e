from __future__ import annotations

from src.domain.errors import ValidationError


def require_text(field: str, value: str | None) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(field)
    return value


def require_positive(field: str, value: int | float) -> int | float:
    if value is None or value <= 0:
        raise ValidationError(field, "must be greater than zero")
    return value
