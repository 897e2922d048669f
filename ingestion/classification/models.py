from dataclasses import dataclass
from enum import Enum


class DocumentType(str, Enum):
    ACTA = "acta"
    FACTURA = "factura"
    COMUNICADO = "comunicado"
    CONTRATO = "contrato"
    ESCRITURA = "escritura"
    ALBARAN = "albaran"
    PRESUPUESTO = "presupuesto"

    @classmethod
    def parse(cls, value: str) -> "DocumentType | None":
        try:
            return cls(value)
        except ValueError:
            return None


class ClassificationMethod(str, Enum):
    AI = "ai"
    FILENAME = "filename-fallback"
    DEFAULT = "default"


METHOD_CONFIDENCE: dict[ClassificationMethod, float] = {
    ClassificationMethod.AI: 0.9,
    ClassificationMethod.FILENAME: 0.7,
    ClassificationMethod.DEFAULT: 0.5,
}


@dataclass(frozen=True)
class ClassificationResult:
    """Document type assigned by the classifier."""

    document_type: DocumentType
    method: ClassificationMethod
    confidence: float
    raw_response: str | None = None
    tokens_used: int = 0
    processing_time: float = 0.0
