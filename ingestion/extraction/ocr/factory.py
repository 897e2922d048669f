from ingestion.config.settings import Settings
from ingestion.extraction.ocr.client_base import BaseOcrClient
from ingestion.extraction.ocr.example_client_adapter import ExampleOcrClient
from ingestion.extraction.ocr.openai_vision_adapter import OpenAIVisionOcrClient


class OcrClientFactory:
    """Creates the OCR client configured in settings, or None when disabled."""

    @classmethod
    def create(cls, settings: Settings) -> BaseOcrClient | None:
        provider = settings.ocr_provider.lower()
        if provider == "disabled":
            return None
        if provider == "example":
            return ExampleOcrClient()
        if provider == "openai":
            if not settings.ocr_model_name:
                raise ValueError("ocr_model_name is required for ocr_provider=openai")
            return OpenAIVisionOcrClient(
                api_key=settings.ocr_api_key,
                model=settings.ocr_model_name,
                timeout_seconds=settings.ocr_timeout_seconds,
                base_url=settings.ocr_base_url or None,
            )
        raise ValueError(
            f"Unknown OCR provider '{provider}'. Choose from: ['disabled', 'example', 'openai']"
        )
