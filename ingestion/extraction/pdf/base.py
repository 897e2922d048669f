from abc import ABC, abstractmethod

from ingestion.extraction.models import PdfText


class BasePdfExtractor(ABC):
    """Contract for PDF text-layer engines."""

    name: str = ""

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> PdfText:
        """Read the native text layer of a PDF.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            PdfText with page texts joined by newlines and the page count.

        Raises:
            PdfExtractionError: if the engine cannot open or read the file.
        """
