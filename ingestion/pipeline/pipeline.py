from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import ClassVar

from ingestion.classification.models import ClassificationResult
from ingestion.extraction.models import ExtractionResult
from ingestion.metadata.extractor import MetadataExtractionResult
from ingestion.pipeline.models import STAGE_LEVELS, Document, Stage
from ingestion.validation.models import ValidationResult


@dataclass(slots=True)
class PipelineContext:
    document_id: int
    processing_level: int
    reprocess: bool = False
    document: Document | None = None
    raw_bytes: bytes = b""
    extraction: ExtractionResult | None = None
    classification: ClassificationResult | None = None
    metadata: MetadataExtractionResult | None = None
    validation: ValidationResult | None = None
    chunks: list[str] = field(default_factory=list)
    tokens_used: int = 0


class PipelineStep(ABC):
    """One processing level. Raising from ``run`` fails the stage."""

    stage: ClassVar[Stage]

    @property
    def level(self) -> int:
        return STAGE_LEVELS[self.stage]

    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
