from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class JobStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    DONE = "done"
    PARTIAL = "partial"
    FAILED = "failed"


@dataclass
class JobRecord:
    """One row of ingestion_jobs: process ``document_id`` up to ``processing_level``."""

    id: int
    document_id: int
    processing_level: int
    status: str
    attempts: int
    reprocess: bool = False
    error_message: str | None = None
    locked_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
