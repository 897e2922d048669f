from dataclasses import dataclass


@dataclass(frozen=True)
class OcrPage:
    """Text recognized on one page image."""

    text: str
    confidence: float | None = None
