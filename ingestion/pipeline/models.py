from dataclasses import dataclass, field
from enum import Enum


class StageStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class Stage(str, Enum):
    EXTRACTION = "extraction"
    CLASSIFICATION = "classification"
    METADATA = "metadata"
    CHUNKING = "chunking"

    @property
    def status_column(self) -> str:
        return f"{self.value}_status"


STAGE_LEVELS: dict[Stage, int] = {
    Stage.EXTRACTION: 1,
    Stage.CLASSIFICATION: 2,
    Stage.METADATA: 3,
    Stage.CHUNKING: 4,
}
MIN_PROCESSING_LEVEL = 1
MAX_PROCESSING_LEVEL = 4


@dataclass(frozen=True)
class Document:
    """Domain model for an uploaded document (subset of DB columns)."""

    id: int
    uuid: str
    tenant_id: int
    filename: str
    storage_disk: str
    mime_type: str
    file_size_bytes: int
    file_hash_sha256: str
    processing_level: int = 1
    extraction_status: StageStatus = StageStatus.PENDING
    classification_status: StageStatus = StageStatus.PENDING
    metadata_status: StageStatus = StageStatus.PENDING
    chunking_status: StageStatus = StageStatus.PENDING


@dataclass
class PipelineResult:
    """Aggregated outcome of one pipeline invocation."""

    document_id: int
    processing_level: int
    success: bool = False
    completed_steps: list[str] = field(default_factory=list)
    failed_steps: list[str] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)
    timings: dict[str, float] = field(default_factory=dict)
    tokens_used: int = 0
    estimated_cost: float = 0.0
    document_type: str | None = None
    validation_score: int | None = None
