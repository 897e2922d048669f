import re

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


class TextChunker:
    """Splits text into paragraph chunks for downstream retrieval.

    Paragraphs shorter than ``min_chars`` are dropped; paragraphs longer than
    ``max_chars`` are cut at the last whitespace before the limit.
    """

    def __init__(self, *, max_chars: int = 2000, min_chars: int = 50) -> None:
        self._max_chars = max_chars
        self._min_chars = min_chars

    def chunk(self, text: str) -> list[str]:
        chunks: list[str] = []
        for paragraph in _PARAGRAPH_BREAK.split(text):
            paragraph = paragraph.strip()
            if len(paragraph) <= self._min_chars:
                continue
            chunks.extend(self._split_long(paragraph))
        if not chunks and text.strip():
            chunks = self._split_long(text.strip())
        return chunks

    def _split_long(self, paragraph: str) -> list[str]:
        pieces: list[str] = []
        remaining = paragraph
        while len(remaining) > self._max_chars:
            cut = remaining.rfind(" ", 0, self._max_chars)
            if cut <= 0:
                cut = self._max_chars
            pieces.append(remaining[:cut].strip())
            remaining = remaining[cut:].strip()
        if remaining:
            pieces.append(remaining)
        return pieces
