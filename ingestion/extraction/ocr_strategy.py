import time

from ingestion.extraction.base import ExtractionStrategy
from ingestion.extraction.exceptions import OcrError
from ingestion.extraction.models import ExtractionMethod, ExtractionResult
from ingestion.extraction.ocr.client_base import BaseOcrClient
from ingestion.extraction.quality import clean_text, score_text_quality
from ingestion.extraction.rasterizer import PageRasterizer
from ingestion.logging.logger import Log

PDF_MIME_TYPE = "application/pdf"
IMAGE_MIME_TYPES = frozenset({"image/jpeg", "image/png", "image/tiff", "image/webp"})
LANGUAGE_HINTS = ["es", "es-ES"]
LARGE_FILE_BYTES = 5 * 1024 * 1024


class OcrStrategy(ExtractionStrategy):
    """Rasterizes pages and sends each one to the external OCR capability.

    Document confidence is the mean text-quality score of the pages that
    produced text. Blank pages are skipped rather than scored as zero.
    """

    name = "ocr"

    def __init__(
        self,
        client: BaseOcrClient | None,
        rasterizer: PageRasterizer | None = None,
    ) -> None:
        self._client = client
        self._rasterizer = rasterizer or PageRasterizer()

    @property
    def available(self) -> bool:
        return self._client is not None

    def can_handle(self, data: bytes, mime_type: str) -> bool:
        if not self.available or not data:
            return False
        return mime_type == PDF_MIME_TYPE or mime_type in IMAGE_MIME_TYPES

    def confidence(self, data: bytes) -> float:
        if not self.available:
            return 0.0
        if len(data) > LARGE_FILE_BYTES:
            return 0.6
        return 0.8

    def extract(self, data: bytes, mime_type: str = PDF_MIME_TYPE) -> ExtractionResult:
        started = time.monotonic()
        if self._client is None:
            return ExtractionResult.failure("OCR not available", file_size_bytes=len(data))
        if not self.can_handle(data, mime_type):
            return ExtractionResult.failure(
                f"OCR does not support '{mime_type}'", file_size_bytes=len(data)
            )

        try:
            images, image_mime = self._page_images(data, mime_type)
        except OcrError as exc:
            Log.error(f"OCR extraction failed: {exc}")
            return ExtractionResult.failure(
                str(exc),
                file_size_bytes=len(data),
                processing_time=time.monotonic() - started,
            )

        page_texts, page_scores, page_errors = self._recognize_pages(
            self._client, images, image_mime
        )
        elapsed = time.monotonic() - started
        if not page_texts:
            error = "No text detected by OCR"
            if page_errors and len(page_errors) == len(images):
                error = page_errors[-1]
            return ExtractionResult.failure(
                error,
                file_size_bytes=len(data),
                processing_time=elapsed,
            )

        confidence = sum(page_scores) / len(page_scores)
        Log.info(
            f"OCR recognized text on {len(page_texts)}/{len(images)} pages "
            f"(confidence {confidence:.2f})"
        )
        return ExtractionResult(
            text="\n\n".join(page_texts),
            method=ExtractionMethod.OCR,
            confidence=confidence,
            page_count=len(images),
            file_size_bytes=len(data),
            processing_time=elapsed,
            metadata={
                "pages_with_text": len(page_texts),
                "page_scores": page_scores,
                "failed_pages": len(page_errors),
            },
        )

    def _page_images(self, data: bytes, mime_type: str) -> tuple[list[bytes], str]:
        if mime_type == PDF_MIME_TYPE:
            return self._rasterizer.rasterize(data), "image/png"
        return [data], mime_type

    @staticmethod
    def _recognize_pages(
        client: BaseOcrClient,
        images: list[bytes],
        image_mime: str,
    ) -> tuple[list[str], list[float], list[str]]:
        """Recognize each page on its own; a failed page counts as blank."""
        page_texts: list[str] = []
        page_scores: list[float] = []
        page_errors: list[str] = []
        for number, image in enumerate(images, start=1):
            try:
                page = client.recognize(
                    image, mime_type=image_mime, language_hints=LANGUAGE_HINTS
                )
            except OcrError as exc:
                Log.warning(f"OCR page {number} failed: {exc}")
                page_errors.append(str(exc))
                continue
            text = clean_text(page.text)
            if not text:
                Log.debug(f"OCR page {number} returned no text, skipping")
                continue
            page_texts.append(f"--- Página {number} ---\n{text}")
            page_scores.append(score_text_quality(text))
        return page_texts, page_scores, page_errors
