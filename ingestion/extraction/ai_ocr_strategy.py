import time
from pathlib import Path

import pymupdf

from ingestion.ai.exceptions import AIClientError
from ingestion.ai.prompt_loader import load_prompt_template
from ingestion.ai.service import AITextService
from ingestion.extraction.base import ExtractionStrategy
from ingestion.extraction.models import ExtractionMethod, ExtractionResult
from ingestion.extraction.quality import clean_text, score_text_quality
from ingestion.logging.logger import Log

_PROMPT_DIR = Path(__file__).parent / "prompts"

PDF_MIME_TYPE = "application/pdf"
IMAGE_MIME_TYPES = frozenset({"image/jpeg", "image/png", "image/webp"})
MAX_DOCUMENT_BYTES = 10 * 1024 * 1024


class AIDocumentStrategy(ExtractionStrategy):
    """Last-resort extraction: the AI model reads the whole file at once.

    Used after native text and page OCR gave nothing usable. Only short
    documents are sent, since the whole file travels in one request.
    """

    name = "ai_ocr"

    def __init__(
        self,
        ai_service: AITextService,
        *,
        max_pages: int = 5,
        max_output_tokens: int = 4000,
    ) -> None:
        self._ai_service = ai_service
        self._max_pages = max_pages
        self._max_output_tokens = max_output_tokens

    def can_handle(self, data: bytes, mime_type: str) -> bool:
        if not data or len(data) >= MAX_DOCUMENT_BYTES:
            return False
        return mime_type == PDF_MIME_TYPE or mime_type in IMAGE_MIME_TYPES

    def confidence(self, data: bytes) -> float:
        return 0.5

    def extract(self, data: bytes, mime_type: str = PDF_MIME_TYPE) -> ExtractionResult:
        started = time.monotonic()
        if not self.can_handle(data, mime_type):
            return ExtractionResult.failure(
                f"AI OCR does not support '{mime_type}' of {len(data)} bytes",
                file_size_bytes=len(data),
            )

        page_count = self._page_count(data, mime_type)
        if page_count is None:
            return ExtractionResult.failure(
                "AI OCR could not open the PDF", file_size_bytes=len(data)
            )
        if page_count > self._max_pages:
            return ExtractionResult.failure(
                f"Document too large for AI OCR (max {self._max_pages} pages)",
                file_size_bytes=len(data),
            )

        try:
            prompt = load_prompt_template(_PROMPT_DIR, "ai_ocr_prompt.txt").format(
                mime_type=mime_type
            )
            answer = self._ai_service.complete(
                prompt,
                max_output_tokens=self._max_output_tokens,
                document=data,
                mime_type=mime_type,
            )
        except AIClientError as exc:
            Log.error(f"AI OCR failed: {exc}")
            return ExtractionResult.failure(
                f"AI OCR failed: {exc}",
                file_size_bytes=len(data),
                processing_time=time.monotonic() - started,
            )

        text = clean_text(answer)
        elapsed = time.monotonic() - started
        if not text:
            return ExtractionResult.failure(
                "No text detected by AI OCR",
                file_size_bytes=len(data),
                processing_time=elapsed,
            )
        confidence = score_text_quality(text)
        Log.info(f"AI OCR read {page_count} page(s), {len(text)} chars (confidence {confidence:.2f})")
        return ExtractionResult(
            text=text,
            method=ExtractionMethod.AI_OCR,
            confidence=confidence,
            page_count=page_count,
            file_size_bytes=len(data),
            processing_time=elapsed,
            metadata={"model": self._ai_service.model},
        )

    @staticmethod
    def _page_count(data: bytes, mime_type: str) -> int | None:
        if mime_type != PDF_MIME_TYPE:
            return 1
        try:
            with pymupdf.open(stream=data, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                return int(doc.page_count)
        except Exception as exc:
            Log.warning(f"AI OCR could not count PDF pages: {exc}")
            return None
