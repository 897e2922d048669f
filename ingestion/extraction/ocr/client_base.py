from abc import ABC, abstractmethod

from ingestion.extraction.ocr.models import OcrPage


class BaseOcrClient(ABC):
    """Contract for external OCR providers."""

    @abstractmethod
    def recognize(
        self,
        image: bytes,
        *,
        mime_type: str,
        language_hints: list[str],
    ) -> OcrPage:
        """Recognize text on a single page image.

        Args:
            image: Encoded image bytes (PNG for rasterized PDF pages).
            mime_type: MIME type of ``image``.
            language_hints: BCP-47 language codes, most specific last.

        Returns:
            OcrPage with the recognized text and any provider confidence.

        Raises:
            OcrError: with a user-facing reason when the provider call fails.
        """
