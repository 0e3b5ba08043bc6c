# travel_ledger/domain/validation.py

from datetime import datetime
from enum import Enum
from typing import Any, Type, TypeVar

from travel_ledger.domain.exceptions import ValidationError

T = TypeVar("T", bound=Enum)


def require_fields(message: str, *values: Any) -> None:
    for value in values:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(message)


def parse_enum(enum_type: Type[T], value: Any, label: str) -> T:
    try:
        return enum_type(value)
    except ValueError:
        raise ValidationError(f"invalid {label}: {value}") from None


def parse_timestamp(value: str, label: str) -> datetime:
    """Parses an RFC 3339 timestamp; an explicit UTC offset is required."""
    if not isinstance(value, str):
        raise ValidationError(f"invalid {label} format: {value!r}")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValidationError(f"invalid {label} format: {exc}") from exc
    if parsed.tzinfo is None:
        raise ValidationError(f"invalid {label} format: missing UTC offset")
    return parsed


def parse_number(value: Any, label: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"failed to parse {label}: {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"failed to parse {label}: {value!r}") from None
    if number != number or number in (float("inf"), float("-inf")):
        raise ValidationError(f"failed to parse {label}: {value!r}")
    return number


def parse_count(value: Any, label: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"failed to parse {label}: {value!r}")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValidationError(f"failed to parse {label}: {value!r}") from None
