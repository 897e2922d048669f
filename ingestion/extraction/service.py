import time
from dataclasses import dataclass, field

from ingestion.ai.factory import AIServiceFactory
from ingestion.config.settings import Settings
from ingestion.extraction.ai_ocr_strategy import AIDocumentStrategy
from ingestion.extraction.base import ExtractionStrategy
from ingestion.extraction.exceptions import OcrUnavailableError
from ingestion.extraction.models import ExtractionResult
from ingestion.extraction.native_strategy import NativeTextStrategy
from ingestion.extraction.ocr.factory import OcrClientFactory
from ingestion.extraction.ocr_strategy import OcrStrategy
from ingestion.extraction.pdf.factory import PdfExtractorFactory
from ingestion.extraction.quality import needs_ocr
from ingestion.extraction.rasterizer import PageRasterizer
from ingestion.logging.logger import Log


@dataclass
class ExtractionStats:
    """Advisory running counters for one service instance."""

    total: int = 0
    by_method: dict[str, int] = field(default_factory=dict)
    average_confidence: float = 0.0

    def record(self, result: ExtractionResult) -> None:
        self.total += 1
        method = result.method.value
        self.by_method[method] = self.by_method.get(method, 0) + 1
        self.average_confidence += (result.confidence - self.average_confidence) / self.total


class TextExtractionService:
    """Runs extraction strategies in order and keeps the best result.

    List order is the priority: strategies are tried cheapest first and
    ``ExtractionStrategy.confidence`` is reported, not used for ordering.

    A result whose text passes the OCR-need heuristic short-circuits the
    chain. Otherwise later strategies are tried, and a later successful
    result replaces the current one only if it carries more text.
    """

    def __init__(self, strategies: list[ExtractionStrategy]) -> None:
        self._strategies = strategies
        self._stats = ExtractionStats()

    def extract(self, data: bytes, mime_type: str) -> ExtractionResult:
        started = time.monotonic()
        best: ExtractionResult | None = None
        errors: list[str] = []

        for strategy in self._strategies:
            if not strategy.can_handle(data, mime_type):
                Log.debug(f"Strategy '{strategy.name}' cannot handle {mime_type}, skipping")
                continue
            result = strategy.extract(data, mime_type)
            if not result.success:
                errors.append(f"{strategy.name}: {result.error or 'no text'}")
                Log.warning(f"Strategy '{strategy.name}' failed: {result.error}")
                continue
            if best is None or len(result.text) > len(best.text):
                best = result
            if not needs_ocr(best.text):
                break
            Log.info(f"Text from '{strategy.name}' looks unusable, trying next strategy")

        if best is None:
            reason = "; ".join(errors) or f"No extraction strategy supports '{mime_type}'"
            best = ExtractionResult.failure(
                reason,
                file_size_bytes=len(data),
                processing_time=time.monotonic() - started,
            )
        self._stats.record(best)
        return best

    def extract_with(self, strategy_name: str, data: bytes, mime_type: str) -> ExtractionResult:
        """Run one named strategy directly, bypassing the fallback chain."""
        for strategy in self._strategies:
            if strategy.name == strategy_name:
                result = strategy.extract(data, mime_type)
                self._stats.record(result)
                return result
        raise ValueError(f"Unknown extraction strategy '{strategy_name}'")

    def extract_with_ocr(self, data: bytes, mime_type: str) -> ExtractionResult:
        """Force OCR, e.g. for a document whose stored native text is unusable.

        Raises:
            OcrUnavailableError: if no OCR strategy is configured.
        """
        if OcrStrategy.name not in self.methods:
            raise OcrUnavailableError("OCR not available")
        return self.extract_with(OcrStrategy.name, data, mime_type)

    def stats(self) -> ExtractionStats:
        return self._stats

    @property
    def methods(self) -> list[str]:
        return [strategy.name for strategy in self._strategies]


def build_extraction_service(settings: Settings) -> TextExtractionService:
    """Build the native, page OCR, then AI OCR chain from settings."""
    strategies: list[ExtractionStrategy] = [
        NativeTextStrategy(
            PdfExtractorFactory.create(settings),
            subprocess_timeout_seconds=settings.native_subprocess_timeout_seconds,
        )
    ]
    ocr_client = OcrClientFactory.create(settings)
    if ocr_client is None:
        Log.warning("OCR provider disabled, scanned documents will rely on native text only")
    else:
        strategies.append(
            OcrStrategy(
                ocr_client,
                PageRasterizer(
                    max_pages=settings.ocr_max_pages,
                    target_size=settings.ocr_target_size,
                ),
            )
        )
    if settings.ai_ocr_enabled:
        strategies.append(
            AIDocumentStrategy(
                AIServiceFactory.create(settings),
                max_pages=settings.ai_ocr_max_pages,
                max_output_tokens=settings.ai_ocr_max_output_tokens,
            )
        )
    return TextExtractionService(strategies)
