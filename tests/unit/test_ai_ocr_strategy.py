from unittest.mock import MagicMock

from ingestion.ai.exceptions import AINetworkError
from ingestion.ai.example_client_adapter import ExampleClientAdapter
from ingestion.ai.service import AITextService
from ingestion.extraction.ai_ocr_strategy import MAX_DOCUMENT_BYTES, AIDocumentStrategy
from ingestion.extraction.models import ExtractionMethod

TRANSCRIPTION = (
    "--- Página 1 ---\nCircular a los vecinos de la comunidad de propietarios "
    "sobre la revision anual del ascensor y el corte de agua del lunes."
)


def _make_strategy(
    answer: str | Exception = TRANSCRIPTION, **kwargs: int
) -> tuple[AIDocumentStrategy, MagicMock]:
    mock_service = MagicMock()
    mock_service.model = "vision-test"
    if isinstance(answer, Exception):
        mock_service.complete.side_effect = answer
    else:
        mock_service.complete.return_value = answer
    return AIDocumentStrategy(mock_service, **kwargs), mock_service


class TestCanHandle:
    def test_accepts_pdf_and_images(self) -> None:
        strategy, _service = _make_strategy()
        assert strategy.can_handle(b"%PDF", "application/pdf")
        assert strategy.can_handle(b"img", "image/png")
        assert not strategy.can_handle(b"txt", "text/plain")
        assert not strategy.can_handle(b"", "application/pdf")

    def test_rejects_large_files(self) -> None:
        strategy, _service = _make_strategy()
        assert not strategy.can_handle(b"x" * MAX_DOCUMENT_BYTES, "image/png")


class TestExtract:
    def test_sends_whole_document_to_ai(self, sample_pdf_bytes: bytes) -> None:
        strategy, mock_service = _make_strategy()

        result = strategy.extract(sample_pdf_bytes, "application/pdf")

        assert result.method is ExtractionMethod.AI_OCR
        assert result.text.startswith("--- Página 1 ---")
        assert result.page_count == 1
        assert result.metadata["model"] == "vision-test"
        kwargs = mock_service.complete.call_args.kwargs
        assert kwargs["document"] == sample_pdf_bytes
        assert kwargs["mime_type"] == "application/pdf"
        assert "application/pdf" in mock_service.complete.call_args.args[0]

    def test_rejects_documents_over_page_limit(self, multi_page_pdf_bytes: bytes) -> None:
        strategy, mock_service = _make_strategy(max_pages=1)

        result = strategy.extract(multi_page_pdf_bytes, "application/pdf")

        assert result.method is ExtractionMethod.ERROR
        assert result.error == "Document too large for AI OCR (max 1 pages)"
        mock_service.complete.assert_not_called()

    def test_unreadable_pdf_fails(self) -> None:
        strategy, mock_service = _make_strategy()

        result = strategy.extract(b"not a pdf", "application/pdf")

        assert result.method is ExtractionMethod.ERROR
        mock_service.complete.assert_not_called()

    def test_image_counts_as_one_page(self) -> None:
        strategy, _service = _make_strategy()

        result = strategy.extract(b"jpeg-bytes", "image/jpeg")

        assert result.success
        assert result.page_count == 1

    def test_provider_error_becomes_failed_result(self) -> None:
        strategy, _service = _make_strategy(AINetworkError("AI provider network error: down"))

        result = strategy.extract(b"jpeg-bytes", "image/jpeg")

        assert result.method is ExtractionMethod.ERROR
        assert result.error == "AI OCR failed: AI provider network error: down"

    def test_empty_answer_fails(self) -> None:
        strategy, _service = _make_strategy("   ")

        result = strategy.extract(b"jpeg-bytes", "image/jpeg")

        assert result.error == "No text detected by AI OCR"

    def test_offline_client_transcribes(self, sample_pdf_bytes: bytes) -> None:
        service = AITextService(client=ExampleClientAdapter(), model="example")

        result = AIDocumentStrategy(service).extract(sample_pdf_bytes, "application/pdf")

        assert result.text == ExampleClientAdapter.TRANSCRIPTION
