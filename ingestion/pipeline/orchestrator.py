import time
from pathlib import Path

from ingestion.ai.factory import AIServiceFactory
from ingestion.classification.classifier import DocumentClassifier
from ingestion.config.settings import Settings
from ingestion.database.repositories.chunks_repository import ChunksRepository
from ingestion.database.repositories.documents_repository import DocumentsRepository
from ingestion.database.repositories.extracted_records_repository import (
    ExtractedRecordsRepository,
)
from ingestion.extraction.service import build_extraction_service
from ingestion.logging.logger import Log
from ingestion.metadata.factory import MetadataExtractorFactory
from ingestion.pipeline.chunker import TextChunker
from ingestion.pipeline.file_loader import FileLoader
from ingestion.pipeline.models import (
    MAX_PROCESSING_LEVEL,
    MIN_PROCESSING_LEVEL,
    Document,
    PipelineResult,
    StageStatus,
)
from ingestion.pipeline.pipeline import PipelineContext, PipelineStep
from ingestion.pipeline.steps import ChunkingStep, ClassificationStep, ExtractionStep, MetadataStep


class ProgressivePipeline:
    """Runs the processing levels of a document in order.

    Pipeline: extraction -> classification -> metadata -> chunking.
    Levels above the requested one are never run, and the first failed
    stage halts the run. Earlier results are kept when a later stage fails.
    """

    def __init__(
        self,
        steps: list[PipelineStep],
        doc_repo: DocumentsRepository,
        *,
        cost_per_1k_tokens: float = 0.0,
    ) -> None:
        self._steps = sorted(steps, key=lambda step: step.level)
        self._doc_repo = doc_repo
        self._cost_per_1k_tokens = cost_per_1k_tokens

    def process(
        self,
        document_id: int,
        processing_level: int,
        reprocess: bool = False,
    ) -> PipelineResult:
        """Process a document up to ``processing_level``.

        Raises:
            ValueError: if the level is outside 1..4.
            DocumentNotFoundError: if the document does not exist.
        """
        if not MIN_PROCESSING_LEVEL <= processing_level <= MAX_PROCESSING_LEVEL:
            raise ValueError(
                f"processing_level must be between {MIN_PROCESSING_LEVEL} and "
                f"{MAX_PROCESSING_LEVEL}, got {processing_level}"
            )
        Log.info(
            f"Processing document {document_id} up to level {processing_level}"
            + (" (reprocess)" if reprocess else "")
        )

        context = PipelineContext(
            document_id=document_id,
            processing_level=processing_level,
            reprocess=reprocess,
        )
        document = self._doc_repo.find_by_id(document_id)
        context.document = document
        result = PipelineResult(document_id=document_id, processing_level=processing_level)

        requested = [step for step in self._steps if step.level <= processing_level]
        for step in requested:
            if not self._run_step(step, document, context, result):
                break

        result.success = len(result.completed_steps) == len(requested)
        result.tokens_used = context.tokens_used
        result.estimated_cost = round(context.tokens_used / 1000 * self._cost_per_1k_tokens, 6)
        if context.classification is not None:
            result.document_type = context.classification.document_type.value
        if context.validation is not None:
            result.validation_score = context.validation.score

        if result.success:
            Log.info(
                f"Document {document_id} processed: {', '.join(result.completed_steps)}"
            )
        else:
            Log.warning(
                f"Document {document_id} stopped after {len(result.completed_steps)} "
                f"of {len(requested)} stages: {result.errors}"
            )
        return result

    def _run_step(
        self,
        step: PipelineStep,
        document: Document,
        context: PipelineContext,
        result: PipelineResult,
    ) -> bool:
        name = step.stage.value
        started = time.monotonic()
        Log.info(f"Stage {name} started for document {context.document_id}")
        try:
            self._doc_repo.update_stage_status(document, step.stage, StageStatus.PROCESSING)
            step.run(context)
            self._doc_repo.update_stage_status(document, step.stage, StageStatus.COMPLETED)
        except Exception as exc:
            result.timings[name] = time.monotonic() - started
            result.failed_steps.append(name)
            result.errors[name] = str(exc)
            Log.error(f"Stage {name} failed for document {context.document_id}: {exc}")
            self._mark_failed(document, step)
            return False

        result.timings[name] = time.monotonic() - started
        result.completed_steps.append(name)
        Log.info(
            f"Stage {name} completed for document {context.document_id} "
            f"in {result.timings[name]:.2f}s"
        )
        return True

    def _mark_failed(self, document: Document, step: PipelineStep) -> None:
        try:
            self._doc_repo.update_stage_status(document, step.stage, StageStatus.FAILED)
        except Exception as exc:
            Log.error(
                f"Could not mark stage {step.stage.value} failed for document "
                f"{document.id}: {exc}"
            )


def build_pipeline(
    settings: Settings,
    files_root: Path | None = None,
) -> ProgressivePipeline:
    """Build a ProgressivePipeline with all required adapters."""
    doc_repo = DocumentsRepository()
    ai_service = AIServiceFactory.create(settings)
    file_loader = FileLoader(
        files_root=files_root if files_root is not None else Path(settings.files_root)
    )
    steps: list[PipelineStep] = [
        ExtractionStep(file_loader, doc_repo, build_extraction_service(settings)),
        ClassificationStep(
            DocumentClassifier(ai_service, sample_size=settings.classification_sample_size),
            doc_repo,
        ),
        MetadataStep(
            MetadataExtractorFactory(
                ai_service, max_input_chars=settings.metadata_max_input_chars
            ),
            doc_repo,
            ExtractedRecordsRepository(),
        ),
        ChunkingStep(
            TextChunker(max_chars=settings.chunk_max_chars),
            doc_repo,
            ChunksRepository(),
        ),
    ]
    return ProgressivePipeline(
        steps,
        doc_repo,
        cost_per_1k_tokens=settings.ai_cost_per_1k_tokens,
    )
