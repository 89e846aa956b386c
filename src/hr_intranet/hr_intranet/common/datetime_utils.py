from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_optional_date(value: Optional[str], field_name: str) -> Optional[date]:
    v = (value or "").strip()
    if not v:
        return None
    try:
        return parse_iso_date(v)
    except ValueError:
        raise ValidationError(f"{field_name} không hợp lệ (YYYY-MM-DD)")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
