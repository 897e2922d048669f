"""Tolerant converters from AI-provided JSON values to canonical field values.

Every helper returns ``None`` (or an empty list for arrays) instead of
raising when a value cannot be interpreted.
"""

import math
import re
from collections.abc import Callable, Iterable
from datetime import date, datetime
from typing import Any

SPANISH_MONTHS = {
    "enero": 1, "febrero": 2, "marzo": 3, "abril": 4, "mayo": 5, "junio": 6,
    "julio": 7, "agosto": 8, "septiembre": 9, "setiembre": 9, "octubre": 10,
    "noviembre": 11, "diciembre": 12,
}
TRUTHY_STRINGS = frozenset({"true", "yes", "sí", "si", "1", "verdadero"})

_ISO_PREFIX = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})(?:[T ].*)?$")
_YEAR_FIRST = re.compile(r"^(\d{4})[/.](\d{1,2})[/.](\d{1,2})$")
_DAY_FIRST = re.compile(r"^(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{4})$")
_SPANISH_LONG = re.compile(
    r"^(\d{1,2})\s+de\s+([a-záéíóú]+)\s+(?:de|del)\s+(\d{4})$", re.IGNORECASE
)
_THOUSANDS_COMMA = re.compile(r"^-?\d{1,3}(,\d{3})+$")
_THOUSANDS_DOT = re.compile(r"^-?\d{1,3}(\.\d{3})+$")
_NUMBER_CHARS = re.compile(r"[^\d,.\-]")


def coerce_string(value: Any, max_length: int = 200) -> str | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str):
        return None
    cleaned = value.strip()
    if not cleaned:
        return None
    return cleaned[:max_length]


def coerce_number(value: Any, integer: bool = False) -> int | float | None:
    """Parse numbers written with either Spanish or English separators.

    ``"1.234,56 €"`` and ``"1,234.56"`` both become ``1234.56``. A lone
    separator followed by exactly three digits is read as a thousands
    separator, any other lone separator as the decimal mark.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        parsed = _parse_number_string(value)
        if parsed is None:
            return None
        number = parsed
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    if integer:
        return int(round(number))
    return int(number) if isinstance(value, int) else number


def _parse_number_string(raw: str) -> float | None:
    cleaned = _NUMBER_CHARS.sub("", raw.strip())
    if not cleaned or not any(char.isdigit() for char in cleaned):
        return None
    if "," in cleaned and "." in cleaned:
        if cleaned.rfind(",") > cleaned.rfind("."):
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    elif "," in cleaned:
        if _THOUSANDS_COMMA.match(cleaned):
            cleaned = cleaned.replace(",", "")
        else:
            cleaned = cleaned.replace(",", ".")
    elif _THOUSANDS_DOT.match(cleaned):
        cleaned = cleaned.replace(".", "")
    try:
        return float(cleaned)
    except ValueError:
        return None


def coerce_date(value: Any) -> str | None:
    """Normalize a date to ``YYYY-MM-DD``; unparseable input becomes None."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str):
        return None
    parts = _date_parts(value.strip())
    if parts is None:
        return None
    try:
        return date(*parts).isoformat()
    except ValueError:
        return None


def _date_parts(cleaned: str) -> tuple[int, int, int] | None:
    for pattern in (_ISO_PREFIX, _YEAR_FIRST):
        match = pattern.match(cleaned)
        if match:
            return int(match.group(1)), int(match.group(2)), int(match.group(3))
    match = _DAY_FIRST.match(cleaned)
    if match:
        return int(match.group(3)), int(match.group(2)), int(match.group(1))
    match = _SPANISH_LONG.match(cleaned)
    if match:
        month = SPANISH_MONTHS.get(match.group(2).lower())
        if month is not None:
            return int(match.group(3)), month, int(match.group(1))
    return None


def coerce_boolean(value: Any) -> bool | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY_STRINGS
    return False


def coerce_enum(value: Any, allowed: Iterable[str]) -> str | None:
    if not isinstance(value, str):
        return None
    candidate = value.strip().lower()
    return candidate if candidate in set(allowed) else None


def coerce_array(
    value: Any,
    max_items: int = 50,
    item: Callable[[Any], Any] | None = None,
) -> list[Any]:
    if isinstance(value, str) and value.strip():
        value = [value]
    if not isinstance(value, list):
        return []
    items = value[:max_items]
    if item is not None:
        items = [item(entry) for entry in items]
    return [entry for entry in items if entry is not None]


def coerce_object(value: Any, defaults: dict[str, Any] | None = None) -> dict[str, Any] | None:
    base = dict(defaults) if defaults else {}
    if isinstance(value, dict):
        return {**base, **value}
    return base or None


def coerce_item(kind: str | None) -> Callable[[Any], Any] | None:
    """Return the per-item converter for an array of the given item kind."""
    if kind == "string":
        return lambda entry: coerce_string(entry, max_length=500)
    if kind == "number":
        return coerce_number
    if kind == "object":
        return lambda entry: entry if isinstance(entry, dict) else None
    return None
