"""Offline OCR client that returns a fixed transcription.

Useful for local development and tests. Register real providers in
OcrClientFactory.
"""

from ingestion.extraction.ocr.client_base import BaseOcrClient
from ingestion.extraction.ocr.models import OcrPage


class ExampleOcrClient(BaseOcrClient):
    DEFAULT_TEXT = (
        "Acta de la junta ordinaria de la comunidad de propietarios. "
        "Reunidos en fecha indicada, el presidente abre la sesión."
    )

    def __init__(self, text: str | None = None) -> None:
        self._text = self.DEFAULT_TEXT if text is None else text

    def recognize(
        self,
        image: bytes,
        *,
        mime_type: str,
        language_hints: list[str],
    ) -> OcrPage:
        _ = image, mime_type, language_hints
        return OcrPage(text=self._text, confidence=None)
