"""Form validators run before any request is sent.

Each validator returns an error message, or an empty string when the value
is acceptable, so forms can show the message next to the field.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, time
from typing import Any

from .errors import ValidationError


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def validate_required(value: Any, field_label: str = "This field") -> str:
    # 0 stands for "nothing picked" in select inputs
    is_empty = _is_blank(value) or (value == 0 and "select" in field_label.lower())
    return f"{field_label} is required" if is_empty else ""


def validate_positive_number(value: Any, field_label: str = "Value") -> str:
    if value is None or value == "":
        return ""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return f"{field_label} must be a positive number"
    if number != number or number < 0:
        return f"{field_label} must be a positive number"
    return ""


def _parse_date(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def validate_date_order(
    start: Any,
    end: Any,
    *,
    start_label: str = "start date",
    end_label: str = "End date",
) -> str:
    if _is_blank(start) or _is_blank(end):
        return ""
    s = _parse_date(start)
    e = _parse_date(end)
    if s is None or e is None:
        return "Invalid date format"
    if s.tzinfo is None and e.tzinfo is not None:
        s = s.replace(tzinfo=e.tzinfo)
    elif e.tzinfo is None and s.tzinfo is not None:
        e = e.replace(tzinfo=s.tzinfo)
    if e <= s:
        return f"{end_label} must be greater than {start_label}"
    return ""


def _parse_time(value: Any) -> time | None:
    if isinstance(value, time):
        return value
    if isinstance(value, str):
        try:
            return time.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def validate_time_order(
    start: Any,
    end: Any,
    *,
    start_label: str = "start time",
    end_label: str = "End time",
) -> str:
    """Same rule as :func:`validate_date_order` for ``HH:MM`` values."""
    if _is_blank(start) or _is_blank(end):
        return ""
    s = _parse_time(start)
    e = _parse_time(end)
    if s is None or e is None:
        return "Invalid time format"
    if e <= s:
        return f"{end_label} must be greater than {start_label}"
    return ""


def validate_select_required(value: Any, field_label: str = "Selection") -> str:
    return f"{field_label} is required" if value is None or value == "" else ""


def collect_errors(checks: Mapping[str, str]) -> dict[str, str]:
    """Keep only the fields whose check produced a message."""
    return {field: message for field, message in checks.items() if message}


def raise_for_errors(checks: Mapping[str, str]) -> None:
    errors = collect_errors(checks)
    if errors:
        raise ValidationError(errors)
