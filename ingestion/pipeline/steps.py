import time
from pathlib import PurePath
from typing import Any

from ingestion.classification.classifier import DocumentClassifier
from ingestion.classification.models import DocumentType
from ingestion.database.repositories.chunks_repository import ChunksRepository
from ingestion.database.repositories.documents_repository import DocumentsRepository
from ingestion.database.repositories.extracted_records_repository import (
    ExtractedRecordsRepository,
)
from ingestion.extraction.exceptions import ExtractionError
from ingestion.extraction.models import ExtractionResult
from ingestion.extraction.service import TextExtractionService
from ingestion.logging.logger import Log
from ingestion.metadata.exceptions import MetadataExtractionError
from ingestion.metadata.extractor import MetadataExtractionResult
from ingestion.metadata.factory import MetadataExtractorFactory
from ingestion.pipeline.chunker import TextChunker
from ingestion.pipeline.exceptions import StagePreconditionError
from ingestion.pipeline.file_loader import FileLoader
from ingestion.pipeline.models import Document, Stage
from ingestion.pipeline.pipeline import PipelineContext, PipelineStep
from ingestion.validation.exceptions import ValidationFailure
from ingestion.validation.schema_loader import get_schema, load_schemas
from ingestion.validation.models import ValidationResult
from ingestion.validation.validator import validate_against_schema

DOCUMENT_LANGUAGE = "es"


def _require_text(context: PipelineContext) -> str:
    if context.extraction is None or not context.extraction.text:
        raise StagePreconditionError("No extracted text available")
    return context.extraction.text


def _require_document(context: PipelineContext) -> Document:
    if context.document is None:
        raise StagePreconditionError("PipelineContext.document must be set")
    return context.document


class ExtractionStep(PipelineStep):
    """Level 1: load the stored file and turn it into text."""

    stage = Stage.EXTRACTION

    def __init__(
        self,
        file_loader: FileLoader,
        doc_repo: DocumentsRepository,
        extraction_service: TextExtractionService,
    ) -> None:
        self._file_loader = file_loader
        self._doc_repo = doc_repo
        self._extraction_service = extraction_service

    def run(self, context: PipelineContext) -> PipelineContext:
        document = _require_document(context)
        context.raw_bytes = self._file_loader.load(document)
        Log.info(f"Loaded {len(context.raw_bytes)} bytes for document {document.id}")

        result = self._extraction_service.extract(context.raw_bytes, document.mime_type)
        context.extraction = result
        if not result.success:
            raise ExtractionError(result.error or "No text extracted")

        self._doc_repo.save_extraction(
            document,
            text=result.text,
            method=result.method.value,
            confidence=result.confidence,
            page_count=result.page_count,
        )
        Log.info(
            f"Extracted {len(result.text)} chars from document {document.id} "
            f"({result.method.value}, confidence {result.confidence:.2f})"
        )
        return context


class ClassificationStep(PipelineStep):
    """Level 2: assign the document type."""

    stage = Stage.CLASSIFICATION

    def __init__(self, classifier: DocumentClassifier, doc_repo: DocumentsRepository) -> None:
        self._classifier = classifier
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        document = _require_document(context)
        text = _require_text(context)

        result = self._classifier.classify(text, document.filename)
        context.classification = result
        context.tokens_used += result.tokens_used
        self._doc_repo.save_classification(
            document,
            document_type=result.document_type.value,
            confidence=result.confidence,
            method=result.method.value,
        )
        return context


class MetadataStep(PipelineStep):
    """Level 3: extract, validate and store the typed record.

    The record is stored even when validation fails, but the stage only
    completes when every required field is present.
    """

    stage = Stage.METADATA

    def __init__(
        self,
        extractors: MetadataExtractorFactory,
        doc_repo: DocumentsRepository,
        records_repo: ExtractedRecordsRepository,
    ) -> None:
        self._extractors = extractors
        self._doc_repo = doc_repo
        self._records_repo = records_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        document = _require_document(context)
        text = _require_text(context)
        if context.classification is None:
            raise StagePreconditionError("Document has not been classified")
        document_type = context.classification.document_type

        result = self._extractors.for_type(document_type).extract(text)
        context.metadata = result
        context.tokens_used += result.tokens_used
        if not result.success:
            raise MetadataExtractionError(result.error or "Metadata extraction failed")

        schema = get_schema(document_type.value)
        data = result.record.to_dict()
        validation = validate_against_schema(schema, data)
        context.validation = validation

        self._records_repo.replace(
            schema.table,
            document_id=document.id,
            tenant_id=document.tenant_id,
            data=data,
            validation_score=validation.score,
            stale_tables=self._stale_tables(document_type) if context.reprocess else (),
        )
        self._doc_repo.save_processing_config(
            document,
            self._processing_config(document, text, context.extraction, result, validation),
        )
        Log.info(
            f"Stored {document_type.value} record for document {document.id} "
            f"(score {validation.score}, valid {validation.valid})"
        )

        if validation.missing_fields:
            raise ValidationFailure(
                f"Missing required fields: {', '.join(validation.missing_fields)}"
            )
        return context

    @staticmethod
    def _stale_tables(document_type: DocumentType) -> list[str]:
        return [
            schema.table
            for name, schema in load_schemas().items()
            if name != document_type.value
        ]

    @staticmethod
    def _processing_config(
        document: Document,
        text: str,
        extraction: ExtractionResult | None,
        metadata: MetadataExtractionResult,
        validation: ValidationResult,
    ) -> dict[str, Any]:
        present = [value for value in metadata.record.to_dict().values() if value is not None]
        return {
            "title": PurePath(document.filename).stem,
            "document_type": metadata.document_type.value,
            "page_count": (extraction.page_count if extraction else 0) or 1,
            "language": DOCUMENT_LANGUAGE,
            "text_length": len(text),
            "extractor": f"{metadata.document_type.value}_extractor",
            "fields_count": len(present),
            "validation_score": validation.score,
            "validation_valid": validation.valid,
            "processing_time": round(metadata.processing_time, 3),
            "processed_at": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        }


class ChunkingStep(PipelineStep):
    """Level 4: split the text into paragraph chunks and store them."""

    stage = Stage.CHUNKING

    def __init__(
        self,
        chunker: TextChunker,
        doc_repo: DocumentsRepository,
        chunks_repo: ChunksRepository,
    ) -> None:
        self._chunker = chunker
        self._doc_repo = doc_repo
        self._chunks_repo = chunks_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        document = _require_document(context)
        text = _require_text(context)

        context.chunks = self._chunker.chunk(text)
        self._chunks_repo.replace(
            document_id=document.id,
            tenant_id=document.tenant_id,
            chunks=context.chunks,
        )
        self._doc_repo.save_chunks_count(document, len(context.chunks))
        Log.info(f"Document {document.id} chunked into {len(context.chunks)} pieces")
        return context
