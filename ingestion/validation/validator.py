"""Scores extracted records against their declarative schema."""

from collections.abc import Mapping
from typing import Any

from ingestion.validation.models import DocumentSchema, FieldSpec, FieldValidation, ValidationResult
from ingestion.validation.rules import CUSTOM_RULES
from ingestion.validation.schema_loader import get_schema
from ingestion.validation.validators import COMMON_VALIDATORS, TYPE_CHECKS, is_present

REQUIRED_WEIGHT = 60
VALIDITY_WEIGHT = 40
MIN_VALID_SCORE = 70
CUSTOM_VALIDATION_FIELD = "custom_validation"


def validate_document(document_type: str, data: Mapping[str, Any] | None) -> ValidationResult:
    """Validate a record using the schema registered for its document type."""
    return validate_against_schema(get_schema(document_type), data or {})


def validate_against_schema(schema: DocumentSchema, data: Mapping[str, Any]) -> ValidationResult:
    """Check every declared field, then the custom rules, and compute the score.

    The score adds up to 60 points for present required fields and up to
    40 points for fields passing their checks. A record is valid only if
    the score reaches 70, no required field is missing and every custom
    rule passes.
    """
    details: dict[str, FieldValidation] = {}
    present: list[str] = []
    missing: list[str] = []
    invalid: list[str] = []

    for spec in schema.fields:
        check = _check_field(spec, data.get(spec.name))
        details[spec.name] = check
        if check.present:
            present.append(spec.name)
            if not check.valid:
                invalid.append(spec.name)
        elif spec.required:
            missing.append(spec.name)

    custom_errors = []
    for rule in schema.custom_rules:
        outcome = CUSTOM_RULES[rule.rule](data, **rule.params)
        if not outcome.valid:
            custom_errors.append(outcome.error or rule.rule)
    if custom_errors:
        invalid.append(CUSTOM_VALIDATION_FIELD)

    raw_score = _raw_score(schema, details)
    return ValidationResult(
        schema=schema.name,
        score=round(raw_score),
        valid=raw_score >= MIN_VALID_SCORE and not missing and not custom_errors,
        present_fields=present,
        missing_fields=missing,
        invalid_fields=invalid,
        details=details,
        custom_errors=custom_errors,
    )


def compute_score(schema: DocumentSchema, details: Mapping[str, FieldValidation]) -> int:
    """Reported score, rounded to an integer."""
    return round(_raw_score(schema, details))


def _raw_score(schema: DocumentSchema, details: Mapping[str, FieldValidation]) -> float:
    required = schema.required_fields
    if required:
        present_required = sum(1 for spec in required if details[spec.name].present)
        required_score = present_required / len(required) * REQUIRED_WEIGHT
    else:
        required_score = float(REQUIRED_WEIGHT)

    total = len(schema.fields)
    valid_count = sum(1 for spec in schema.fields if details[spec.name].valid)
    valid_score = valid_count / total * VALIDITY_WEIGHT if total else float(VALIDITY_WEIGHT)
    return required_score + valid_score


def _check_field(spec: FieldSpec, value: Any) -> FieldValidation:
    if not is_present(value):
        if spec.required:
            return FieldValidation(present=False, valid=False, value=value, error="Required field missing")
        return FieldValidation(present=False, valid=True, value=value)

    if not TYPE_CHECKS[spec.type](value):
        return FieldValidation(
            present=True, valid=False, value=value, error=f"Expected {spec.type}"
        )
    if spec.validator is not None and not COMMON_VALIDATORS[spec.validator](value):
        return FieldValidation(
            present=True,
            valid=False,
            value=value,
            error=f"Failed {spec.validator} validation",
        )
    return FieldValidation(present=True, valid=True, value=value)
