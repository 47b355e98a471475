from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from ..core.exceptions import ValidationError


def require_non_empty(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} không hợp lệ")
    return value.strip()


def require_enum(enum_cls, value: Any, field_name: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} không hợp lệ (cho phép: {allowed})")


def require_amount(value: Any, field_name: str, *, positive: bool = False) -> Decimal:
    """Parse a money amount; must be >= 0 (or > 0 when positive=True)."""
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} không hợp lệ")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field_name} không hợp lệ")
    if not amount.is_finite():
        raise ValidationError(f"{field_name} không hợp lệ")
    if positive and amount <= 0:
        raise ValidationError(f"{field_name} phải lớn hơn 0")
    if amount < 0:
        raise ValidationError(f"{field_name} không được âm")
    return amount


def require_year(value: Any) -> int:
    try:
        year = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Năm không hợp lệ")
    if year < 1900 or year > 9999:
        raise ValidationError("Năm không hợp lệ")
    return year
