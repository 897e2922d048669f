class ExtractionError(Exception):
    """Raised when no usable text can be produced for a document."""


class PdfExtractionError(ExtractionError):
    """Raised when a PDF engine fails to read a document."""


class OcrError(ExtractionError):
    """Raised when the OCR capability fails for a page or document."""


class OcrUnavailableError(OcrError):
    """Raised when OCR is requested but no OCR capability is configured."""
