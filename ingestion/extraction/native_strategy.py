import json
import subprocess
import sys
import time

from ingestion.extraction.base import ExtractionStrategy
from ingestion.extraction.exceptions import PdfExtractionError
from ingestion.extraction.models import ExtractionMethod, ExtractionResult, PdfText
from ingestion.extraction.pdf.base import BasePdfExtractor
from ingestion.extraction.quality import clean_text, needs_ocr
from ingestion.logging.logger import Log

PDF_MIME_TYPE = "application/pdf"
NATIVE_FAILURE_MESSAGE = "PDF text extraction failed - may need OCR"


class NativeTextStrategy(ExtractionStrategy):
    """Extracts the embedded text layer of digital PDFs.

    The configured engine runs in-process first. If it raises or finds no
    text, the same engine is re-run in a child process before giving up.
    """

    name = "native"

    IN_PROCESS_CONFIDENCE = 0.9
    SUBPROCESS_CONFIDENCE = 0.8
    NEEDS_OCR_CONFIDENCE = 0.6

    def __init__(
        self,
        pdf_extractor: BasePdfExtractor,
        *,
        subprocess_timeout_seconds: int = 30,
    ) -> None:
        self._pdf_extractor = pdf_extractor
        self._subprocess_timeout = subprocess_timeout_seconds

    def can_handle(self, data: bytes, mime_type: str) -> bool:
        return mime_type == PDF_MIME_TYPE and len(data) > 0

    def confidence(self, data: bytes) -> float:
        return 0.8

    def extract(self, data: bytes, mime_type: str = PDF_MIME_TYPE) -> ExtractionResult:
        started = time.monotonic()
        if not self.can_handle(data, mime_type):
            return ExtractionResult.failure(
                f"Native extraction does not support '{mime_type}'",
                file_size_bytes=len(data),
            )

        pdf_text, confidence, via_subprocess = self._extract_with_fallback(data)
        elapsed = time.monotonic() - started
        if pdf_text is None:
            return ExtractionResult.failure(
                NATIVE_FAILURE_MESSAGE,
                file_size_bytes=len(data),
                processing_time=elapsed,
            )

        text = clean_text(pdf_text.text)
        ocr_needed = needs_ocr(text)
        if ocr_needed:
            confidence = self.NEEDS_OCR_CONFIDENCE
        return ExtractionResult(
            text=text,
            method=ExtractionMethod.NATIVE,
            confidence=confidence,
            page_count=pdf_text.page_count,
            file_size_bytes=len(data),
            processing_time=elapsed,
            metadata={
                "engine": self._pdf_extractor.name,
                "subprocess_fallback": via_subprocess,
                "needs_ocr": ocr_needed,
            },
        )

    def _extract_with_fallback(self, data: bytes) -> tuple[PdfText | None, float, bool]:
        try:
            result = self._pdf_extractor.extract(data)
            if result.text.strip():
                return result, self.IN_PROCESS_CONFIDENCE, False
            Log.warning("In-process PDF extraction returned no text, retrying in subprocess")
        except PdfExtractionError as exc:
            Log.warning(f"In-process PDF extraction failed, retrying in subprocess: {exc}")

        result = self._extract_in_subprocess(data)
        if result is not None and result.text.strip():
            return result, self.SUBPROCESS_CONFIDENCE, True
        return None, 0.0, True

    def _extract_in_subprocess(self, data: bytes) -> PdfText | None:
        command = [
            sys.executable,
            "-m",
            "ingestion.extraction.pdf_cli",
            "--engine",
            self._pdf_extractor.name,
        ]
        try:
            completed = subprocess.run(
                command,
                input=data,
                capture_output=True,
                timeout=self._subprocess_timeout,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            Log.error(f"Subprocess PDF extraction failed: {exc}")
            return None
        return parse_subprocess_output(completed.stdout.decode("utf-8", errors="replace"))


def parse_subprocess_output(stdout: str) -> PdfText | None:
    """Parse the JSON document printed by the extraction child process.

    Anything printed before the first ``{`` (library warnings) is ignored.
    """
    start = stdout.find("{")
    if start == -1:
        return None
    try:
        payload = json.loads(stdout[start:])
    except json.JSONDecodeError:
        return None
    if not isinstance(payload, dict) or "error" in payload:
        if isinstance(payload, dict):
            Log.error(f"Subprocess PDF extraction failed: {payload['error']}")
        return None
    text = payload.get("text")
    if not isinstance(text, str):
        return None
    page_count = payload.get("page_count")
    return PdfText(text=text, page_count=page_count if isinstance(page_count, int) else 0)
