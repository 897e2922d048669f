from dataclasses import dataclass, field
from enum import Enum


class ExtractionMethod(str, Enum):
    NATIVE = "native"
    OCR = "ocr"
    AI_OCR = "ai_ocr"
    ERROR = "error"


@dataclass(frozen=True)
class ExtractionResult:
    """Text produced by one extraction strategy for one document."""

    text: str
    method: ExtractionMethod
    confidence: float
    page_count: int = 0
    file_size_bytes: int = 0
    error: str | None = None
    processing_time: float = 0.0
    metadata: dict[str, object] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.method is not ExtractionMethod.ERROR and bool(self.text.strip())

    @classmethod
    def failure(
        cls,
        error: str,
        *,
        file_size_bytes: int = 0,
        processing_time: float = 0.0,
    ) -> "ExtractionResult":
        return cls(
            text="",
            method=ExtractionMethod.ERROR,
            confidence=0.0,
            file_size_bytes=file_size_bytes,
            error=error,
            processing_time=processing_time,
        )


@dataclass(frozen=True)
class PdfText:
    """Raw output of a PDF engine."""

    text: str
    page_count: int
