"""Named field validators and declared-type checks."""

import re
from collections.abc import Callable
from datetime import date
from typing import Any

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

CURRENCY_CODES = frozenset({"EUR", "USD", "GBP"})
URGENCY_LEVELS = frozenset({"baja", "media", "alta", "urgente"})
MEETING_TYPES = frozenset({"ordinaria", "extraordinaria"})


def is_present(value: Any) -> bool:
    return value is not None and value != ""


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_iso_date(value: Any) -> date | None:
    if not isinstance(value, str) or not _ISO_DATE.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def validate_date(value: Any) -> bool:
    return parse_iso_date(value) is not None


def validate_positive_number(value: Any) -> bool:
    return is_number(value) and value > 0


def validate_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def validate_currency_code(value: Any) -> bool:
    return not value or value in CURRENCY_CODES


def validate_urgency_level(value: Any) -> bool:
    return value in URGENCY_LEVELS


def validate_meeting_type(value: Any) -> bool:
    return value in MEETING_TYPES


def validate_array_not_empty(value: Any) -> bool:
    return isinstance(value, list) and len(value) > 0


COMMON_VALIDATORS: dict[str, Callable[[Any], bool]] = {
    "date": validate_date,
    "positive_number": validate_positive_number,
    "non_empty_string": validate_non_empty_string,
    "currency_code": validate_currency_code,
    "urgency_level": validate_urgency_level,
    "meeting_type": validate_meeting_type,
    "array_not_empty": validate_array_not_empty,
}

TYPE_CHECKS: dict[str, Callable[[Any], bool]] = {
    "string": lambda value: isinstance(value, str),
    "number": is_number,
    "integer": lambda value: isinstance(value, int) and not isinstance(value, bool),
    "date": lambda value: isinstance(value, str),
    "boolean": lambda value: isinstance(value, bool),
    "array": lambda value: isinstance(value, list),
    "object": lambda value: isinstance(value, dict),
}
