import json
from pathlib import Path
from unittest.mock import MagicMock

from ingestion.ai.client_base import BaseAIClient
from ingestion.ai.service import AITextService
from ingestion.classification.classifier import DocumentClassifier
from ingestion.extraction.native_strategy import NativeTextStrategy
from ingestion.extraction.pdf.pdfplumber_adapter import PdfPlumberAdapter
from ingestion.extraction.service import TextExtractionService
from ingestion.metadata.factory import MetadataExtractorFactory
from ingestion.pipeline.chunker import TextChunker
from ingestion.pipeline.file_loader import FileLoader
from ingestion.pipeline.models import Document
from ingestion.pipeline.orchestrator import ProgressivePipeline
from ingestion.pipeline.steps import ChunkingStep, ClassificationStep, ExtractionStep, MetadataStep

INVOICE_ANSWER = {
    "provider_name": "Limpiezas Brillantes Sociedad Limitada",
    "client_name": "Comunidad de Propietarios Residencial Los Olivos",
    "amount": "1.250,00 €",
    "invoice_date": "15 de marzo de 2024",
    "invoice_number": "FAC-2024-0153",
    "products_summary": "Servicio mensual de limpieza de zonas comunes",
    "payment_method": "transferencia",
}


class _ScriptedClient(BaseAIClient):
    """Answers the classification prompt with a type and metadata prompts with JSON."""

    def __init__(self) -> None:
        self.prompts: list[str] = []

    def create_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        max_output_tokens: int,
        json_output: bool = False,
        document: bytes | None = None,
        mime_type: str | None = None,
    ) -> str:
        self.prompts.append(user_prompt)
        if json_output:
            return f"```json\n{json.dumps(INVOICE_ANSWER)}\n```"
        return "factura"


def _make_document() -> Document:
    return Document(
        id=42,
        uuid="5f0c0d4e-invoice",
        tenant_id=8,
        filename="documento_marzo.pdf",
        storage_disk="local",
        mime_type="application/pdf",
        file_size_bytes=0,
        file_hash_sha256="d" * 64,
        processing_level=4,
    )


def _build(tmp_path: Path) -> tuple[ProgressivePipeline, MagicMock, MagicMock, MagicMock, _ScriptedClient]:
    client = _ScriptedClient()
    ai_service = AITextService(client=client, model="scripted")
    doc_repo = MagicMock()
    doc_repo.find_by_id.return_value = _make_document()
    records_repo = MagicMock()
    chunks_repo = MagicMock()
    steps = [
        ExtractionStep(
            FileLoader(files_root=tmp_path),
            doc_repo,
            TextExtractionService([NativeTextStrategy(PdfPlumberAdapter())]),
        ),
        ClassificationStep(DocumentClassifier(ai_service), doc_repo),
        MetadataStep(MetadataExtractorFactory(ai_service), doc_repo, records_repo),
        ChunkingStep(TextChunker(min_chars=20), doc_repo, chunks_repo),
    ]
    pipeline = ProgressivePipeline(steps, doc_repo, cost_per_1k_tokens=0.002)
    return pipeline, doc_repo, records_repo, chunks_repo, client


class TestInvoiceEndToEnd:
    def test_invoice_pdf_runs_through_all_levels(
        self, tmp_path: Path, invoice_pdf_bytes: bytes
    ) -> None:
        stored = tmp_path / "8" / "5f0c0d4e-invoice.pdf"
        stored.parent.mkdir(parents=True)
        stored.write_bytes(invoice_pdf_bytes)
        pipeline, doc_repo, records_repo, chunks_repo, client = _build(tmp_path)

        result = pipeline.process(42, 4)

        assert result.success is True, result.errors
        assert result.completed_steps == ["extraction", "classification", "metadata", "chunking"]
        assert result.document_type == "factura"
        assert result.validation_score == 100
        assert result.tokens_used > 0
        assert result.estimated_cost > 0

        extraction = doc_repo.save_extraction.call_args.kwargs
        assert extraction["method"] == "native"
        assert extraction["confidence"] >= 0.8
        assert "FAC-2024-0153" in extraction["text"]

        record = records_repo.replace.call_args.kwargs["data"]
        assert records_repo.replace.call_args.args == ("extracted_invoices",)
        assert record["amount"] == 1250.0
        assert record["invoice_date"] == "2024-03-15"
        assert record["currency"] == "EUR"

        assert "FAC-2024-0153" in client.prompts[0]
        assert chunks_repo.replace.call_args.kwargs["chunks"]

    def test_stops_at_requested_level(self, tmp_path: Path, invoice_pdf_bytes: bytes) -> None:
        stored = tmp_path / "8" / "5f0c0d4e-invoice.pdf"
        stored.parent.mkdir(parents=True)
        stored.write_bytes(invoice_pdf_bytes)
        pipeline, _doc_repo, records_repo, _chunks, client = _build(tmp_path)

        result = pipeline.process(42, 2)

        assert result.success is True
        assert result.validation_score is None
        assert len(client.prompts) == 1
        records_repo.replace.assert_not_called()

    def test_missing_file_fails_extraction(self, tmp_path: Path) -> None:
        pipeline, _doc_repo, _records, _chunks, client = _build(tmp_path)

        result = pipeline.process(42, 4)

        assert result.success is False
        assert result.failed_steps == ["extraction"]
        assert "File not found" in result.errors["extraction"]
        assert client.prompts == []
