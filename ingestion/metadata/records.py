"""Typed record shapes, one per document type.

Each record class is generated from the declarative schema so that the
stored field set and the validated field set can never drift apart.
"""

from dataclasses import asdict, field, make_dataclass
from typing import Any, ClassVar

from ingestion.classification.models import DocumentType
from ingestion.validation.schema_loader import get_schema


class ExtractedRecord:
    """Base of every typed metadata record."""

    document_type: ClassVar[DocumentType]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)  # type: ignore[call-overload]


def _record_class(document_type: DocumentType) -> type[ExtractedRecord]:
    schema = get_schema(document_type.value)
    return make_dataclass(
        f"{document_type.value.capitalize()}Record",
        [(name, Any, field(default=None)) for name in schema.field_names],
        bases=(ExtractedRecord,),
        frozen=True,
        namespace={"document_type": document_type},
    )


RECORD_TYPES: dict[DocumentType, type[ExtractedRecord]] = {
    document_type: _record_class(document_type) for document_type in DocumentType
}
