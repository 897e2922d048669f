from dataclasses import dataclass, field
from typing import Any

FIELD_TYPES = frozenset({"string", "number", "integer", "date", "boolean", "array", "object"})


@dataclass(frozen=True)
class FieldSpec:
    """One declared field of a document schema."""

    name: str
    type: str
    required: bool = False
    validator: str | None = None
    max_length: int = 200
    items: str | None = None
    enum: tuple[str, ...] = ()
    default: Any = None
    defaults: dict[str, Any] | None = None


@dataclass(frozen=True)
class CustomRuleSpec:
    """A named cross-field rule and its parameters."""

    rule: str
    params: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DocumentSchema:
    name: str
    table: str
    fields: tuple[FieldSpec, ...]
    custom_rules: tuple[CustomRuleSpec, ...] = ()
    max_output_tokens: int = 1000

    @property
    def required_fields(self) -> tuple[FieldSpec, ...]:
        return tuple(spec for spec in self.fields if spec.required)

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.fields)


@dataclass(frozen=True)
class RuleOutcome:
    valid: bool
    error: str | None = None


@dataclass(frozen=True)
class FieldValidation:
    present: bool
    valid: bool
    value: Any = None
    error: str | None = None


@dataclass(frozen=True)
class ValidationResult:
    """Compatibility report for one record against its schema."""

    schema: str
    score: int
    valid: bool
    present_fields: list[str] = field(default_factory=list)
    missing_fields: list[str] = field(default_factory=list)
    invalid_fields: list[str] = field(default_factory=list)
    details: dict[str, FieldValidation] = field(default_factory=dict)
    custom_errors: list[str] = field(default_factory=list)
