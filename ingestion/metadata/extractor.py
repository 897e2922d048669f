import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ingestion.ai.exceptions import AIClientError
from ingestion.ai.prompt_loader import load_prompt_template
from ingestion.ai.service import AITextService, estimate_tokens
from ingestion.classification.models import DocumentType
from ingestion.logging.logger import Log
from ingestion.metadata.coercion import (
    coerce_array,
    coerce_boolean,
    coerce_date,
    coerce_enum,
    coerce_item,
    coerce_number,
    coerce_object,
    coerce_string,
)
from ingestion.metadata.records import RECORD_TYPES, ExtractedRecord
from ingestion.metadata.response_parser import parse_ai_response
from ingestion.metadata.topics import TOPIC_FIELDS_BY_TYPE, canonicalize_topics
from ingestion.validation.models import DocumentSchema, FieldSpec
from ingestion.validation.schema_loader import get_schema

_PROMPT_DIR = Path(__file__).parent / "prompts"
CURRENCY_VALIDATOR = "currency_code"


@dataclass(frozen=True)
class MetadataExtractionResult:
    """Outcome of one metadata extraction attempt."""

    document_type: DocumentType
    success: bool
    record: ExtractedRecord
    parsed: bool = False
    raw_response: str | None = None
    tokens_used: int = 0
    processing_time: float = 0.0
    error: str | None = None


def coerce_field(spec: FieldSpec, value: Any) -> Any:
    """Convert one raw value according to its declared field type."""
    if spec.type == "string":
        result = coerce_enum(value, spec.enum) if spec.enum else coerce_string(value, spec.max_length)
    elif spec.type == "number":
        result = coerce_number(value)
    elif spec.type == "integer":
        result = coerce_number(value, integer=True)
    elif spec.type == "date":
        result = coerce_date(value)
    elif spec.type == "boolean":
        result = coerce_boolean(value)
    elif spec.type == "array":
        result = coerce_array(value, item=coerce_item(spec.items))
    else:
        result = coerce_object(value, spec.defaults)
    if result is None and spec.default is not None:
        return spec.default
    return result


def build_record(document_type: DocumentType, payload: dict[str, Any] | None) -> ExtractedRecord:
    """Build the typed record for a document type from a parsed AI payload.

    Topic flags are renamed through the type's explicit mapping, then every
    schema field is coerced. Keys outside the schema are dropped. The
    currency defaults to EUR only when the record carries some amount.
    """
    schema = get_schema(document_type.value)
    data = dict(payload or {})
    topic_fields = TOPIC_FIELDS_BY_TYPE.get(document_type)
    if topic_fields:
        data = canonicalize_topics(data, topic_fields)
    values = {spec.name: coerce_field(spec, data.get(spec.name)) for spec in schema.fields}
    if not any(
        values[spec.name] is not None for spec in schema.fields if spec.type == "number"
    ):
        for spec in schema.fields:
            if spec.validator == CURRENCY_VALIDATOR and data.get(spec.name) is None:
                values[spec.name] = None
    return RECORD_TYPES[document_type](**values)


class MetadataExtractor:
    """Extracts the canonical field set of one document type with an AI prompt."""

    def __init__(
        self,
        document_type: DocumentType,
        ai_service: AITextService,
        *,
        schema: DocumentSchema | None = None,
        max_input_chars: int = 30000,
    ) -> None:
        self._document_type = document_type
        self._ai_service = ai_service
        self._schema = schema or get_schema(document_type.value)
        self._max_input_chars = max_input_chars
        self._prompt_template = load_prompt_template(
            _PROMPT_DIR, f"{document_type.value}_prompt.txt"
        )

    @property
    def document_type(self) -> DocumentType:
        return self._document_type

    @property
    def max_output_tokens(self) -> int:
        return self._schema.max_output_tokens

    def build_prompt(self, text: str) -> str:
        return self._prompt_template.format(document_text=text[: self._max_input_chars])

    def extract(self, text: str) -> MetadataExtractionResult:
        started = time.monotonic()
        prompt = self.build_prompt(text)
        try:
            raw_response = self._ai_service.complete(
                prompt,
                max_output_tokens=self.max_output_tokens,
                json_output=True,
            )
        except AIClientError as exc:
            Log.error(f"{self._document_type.value} metadata request failed: {exc}")
            return MetadataExtractionResult(
                document_type=self._document_type,
                success=False,
                record=build_record(self._document_type, None),
                tokens_used=estimate_tokens(prompt),
                processing_time=time.monotonic() - started,
                error=str(exc),
            )

        payload = parse_ai_response(raw_response)
        if payload is None:
            Log.warning(
                f"{self._document_type.value} metadata response could not be parsed, "
                "continuing with an empty record"
            )
        record = build_record(self._document_type, payload)
        Log.info(
            f"Extracted {self._document_type.value} metadata "
            f"({len(payload or {})} keys in response)"
        )
        return MetadataExtractionResult(
            document_type=self._document_type,
            success=True,
            record=record,
            parsed=payload is not None,
            raw_response=raw_response,
            tokens_used=estimate_tokens(prompt) + estimate_tokens(raw_response),
            processing_time=time.monotonic() - started,
        )
