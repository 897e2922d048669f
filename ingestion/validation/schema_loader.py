import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from ingestion.validation.exceptions import SchemaError
from ingestion.validation.models import FIELD_TYPES, CustomRuleSpec, DocumentSchema, FieldSpec
from ingestion.validation.rules import CUSTOM_RULES
from ingestion.validation.validators import COMMON_VALIDATORS

DEFAULT_SCHEMA_PATH = Path(__file__).parent / "schemas" / "document_schemas.json"


def load_schemas(path: Path | None = None) -> dict[str, DocumentSchema]:
    """Load every document schema from the declarative JSON file.

    Args:
        path: Schema file. Defaults to the bundled document_schemas.json.

    Returns:
        Mapping of document type name to its schema.

    Raises:
        SchemaError: if the file cannot be read or declares unknown types,
            validators or rules.
    """
    if path is None:
        return _load_default()
    return _parse(_read(path))


@lru_cache(maxsize=1)
def _load_default() -> dict[str, DocumentSchema]:
    return _parse(_read(DEFAULT_SCHEMA_PATH))


def get_schema(document_type: str) -> DocumentSchema:
    schemas = load_schemas()
    schema = schemas.get(document_type)
    if schema is None:
        raise SchemaError(f"No schema defined for document type '{document_type}'")
    return schema


def _read(path: Path) -> dict[str, Any]:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise SchemaError(f"Failed to load schema file: {exc}") from exc
    if not isinstance(raw, dict):
        raise SchemaError("Schema file must contain an object keyed by document type")
    return raw


def _parse(raw: dict[str, Any]) -> dict[str, DocumentSchema]:
    return {name: _build_schema(name, body) for name, body in raw.items()}


def _build_schema(name: str, body: Any) -> DocumentSchema:
    if not isinstance(body, dict) or not isinstance(body.get("fields"), list):
        raise SchemaError(f"Schema '{name}' must declare a 'fields' list")
    fields = tuple(_build_field(name, item) for item in body["fields"])
    rules = tuple(_build_rule(name, item) for item in body.get("custom_rules", []))
    return DocumentSchema(
        name=name,
        table=str(body.get("table", f"extracted_{name}")),
        fields=fields,
        custom_rules=rules,
        max_output_tokens=int(body.get("max_output_tokens", 1000)),
    )


def _build_field(schema_name: str, raw: Any) -> FieldSpec:
    if not isinstance(raw, dict) or not raw.get("name"):
        raise SchemaError(f"Schema '{schema_name}' has a field without a name")
    field_type = raw.get("type")
    if field_type not in FIELD_TYPES:
        raise SchemaError(
            f"Schema '{schema_name}' field '{raw['name']}' has unknown type {field_type!r}"
        )
    validator = raw.get("validator")
    if validator is not None and validator not in COMMON_VALIDATORS:
        raise SchemaError(
            f"Schema '{schema_name}' field '{raw['name']}' uses unknown validator {validator!r}"
        )
    return FieldSpec(
        name=raw["name"],
        type=field_type,
        required=bool(raw.get("required", False)),
        validator=validator,
        max_length=int(raw.get("max_length", 200)),
        items=raw.get("items"),
        enum=tuple(raw.get("enum", ())),
        default=raw.get("default"),
        defaults=raw.get("defaults"),
    )


def _build_rule(schema_name: str, raw: Any) -> CustomRuleSpec:
    if not isinstance(raw, dict) or raw.get("rule") not in CUSTOM_RULES:
        raise SchemaError(f"Schema '{schema_name}' declares an unknown custom rule: {raw!r}")
    params = {key: value for key, value in raw.items() if key != "rule"}
    return CustomRuleSpec(rule=raw["rule"], params=params)
