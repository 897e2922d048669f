from abc import ABC, abstractmethod

from ingestion.extraction.models import ExtractionResult


class ExtractionStrategy(ABC):
    """Contract shared by every way of turning document bytes into text."""

    name: str = ""

    @abstractmethod
    def can_handle(self, data: bytes, mime_type: str) -> bool:
        """Return True if this strategy accepts the given input."""

    @abstractmethod
    def confidence(self, data: bytes) -> float:
        """Self-reported confidence used to rank strategies, between 0 and 1."""

    @abstractmethod
    def extract(self, data: bytes, mime_type: str = "application/pdf") -> ExtractionResult:
        """Extract text from the document.

        Never raises for document-level problems: failures are reported as
        an ExtractionResult with method ``error`` and a reason.
        """
