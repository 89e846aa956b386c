from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} không hợp lệ")
    return value.strip()


def optional_text(value: Optional[str]) -> Optional[str]:
    return (value or "").strip() or None


def require_int_in_range(value, field_name: str, lo: int, hi: int) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"Vui lòng nhập {field_name}")
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f"{field_name} phải là số nguyên")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} phải là số nguyên")
    if number < lo or number > hi:
        raise ValidationError(f"{field_name} phải nằm trong khoảng {lo}-{hi}")
    return number


def require_choice(value: Optional[str], field_name: str, enum_cls):
    try:
        return enum_cls((value or "").strip())
    except ValueError:
        raise ValidationError(f"{field_name} không hợp lệ")
