"""Cross-field rules referenced by name from the schema file."""

from collections.abc import Callable, Mapping
from typing import Any

from ingestion.validation.models import RuleOutcome
from ingestion.validation.validators import is_number, is_present, parse_iso_date

_OK = RuleOutcome(valid=True)


def date_order(data: Mapping[str, Any], *, start: str, end: str) -> RuleOutcome:
    start_date = parse_iso_date(data.get(start))
    end_date = parse_iso_date(data.get(end))
    if start_date is None or end_date is None or end_date >= start_date:
        return _OK
    return RuleOutcome(valid=False, error=f"{end} must not be earlier than {start}")


def array_count_matches(data: Mapping[str, Any], *, count: str, items: str) -> RuleOutcome:
    declared = data.get(count)
    values = data.get(items)
    if not is_number(declared) or not isinstance(values, list) or not values:
        return _OK
    if declared == len(values):
        return _OK
    return RuleOutcome(
        valid=False,
        error=f"{count} ({declared}) does not match number of {items} ({len(values)})",
    )


def requires_any(data: Mapping[str, Any], *, fields: list[str]) -> RuleOutcome:
    for name in fields:
        value = data.get(name)
        if isinstance(value, list):
            if value:
                return _OK
        elif isinstance(value, str):
            if value.strip():
                return _OK
        elif is_present(value):
            return _OK
    return RuleOutcome(valid=False, error=f"At least one of {', '.join(fields)} is required")


def min_length(data: Mapping[str, Any], *, field: str, length: int) -> RuleOutcome:
    value = data.get(field)
    if not isinstance(value, str) or len(value.strip()) >= length:
        return _OK
    return RuleOutcome(valid=False, error=f"{field} must be at least {length} characters")


def not_greater_than(data: Mapping[str, Any], *, field: str, limit: str) -> RuleOutcome:
    value = data.get(field)
    bound = data.get(limit)
    if not is_number(value) or not is_number(bound) or value <= bound:
        return _OK
    return RuleOutcome(valid=False, error=f"{field} must not exceed {limit}")


def amount_in_words(
    data: Mapping[str, Any], *, number: str, words: str, min_length: int
) -> RuleOutcome:
    amount = data.get(number)
    spelled = data.get(words)
    if not is_present(amount) or not is_present(spelled):
        return _OK
    if not is_number(amount):
        return RuleOutcome(valid=False, error=f"{number} must be numeric")
    if not isinstance(spelled, str) or len(spelled.strip()) <= min_length:
        return RuleOutcome(valid=False, error=f"{words} must spell out the amount")
    return _OK


CUSTOM_RULES: dict[str, Callable[..., RuleOutcome]] = {
    "date_order": date_order,
    "array_count_matches": array_count_matches,
    "requires_any": requires_any,
    "min_length": min_length,
    "not_greater_than": not_greater_than,
    "amount_in_words": amount_in_words,
}
