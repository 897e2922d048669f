"""Heuristics that decide whether extracted text looks like real prose.

Two independent scorers live here:

* ``needs_ocr`` inspects text from a native PDF text layer and flags
  documents whose text layer is missing, too short or full of glyph noise.
* ``score_text_quality`` rates OCR output for a single page on a 0..1 scale.
"""

import re

MIN_TEXT_LENGTH = 100
MAX_ARTIFACT_RATIO = 0.05
MIN_NORMAL_WORD_RATIO = 0.6

_ARTIFACT_PATTERNS = (
    re.compile(r"[Il1|]{3,}"),
    re.compile(r"[oO0]{3,}"),
    re.compile(r"\s[a-zA-Z]\s"),
    re.compile(r"[^\w\s.,;:!?()\[\]{}'\"áéíóúñü]"),
)
_PUNCTUATION = re.compile(r"[.,;:!?]")
_WORD_EDGE_CHARS = ".,;:!?()[]{}'\"«»¿¡"

SPANISH_STOPWORDS = (
    "el", "la", "de", "que", "y", "a", "en", "un", "es", "se", "no", "te",
    "lo", "le", "da", "su", "por", "son", "con", "para", "del", "está",
    "una", "hasta", "desde",
)
DOMAIN_WORDS = (
    "junta", "acta", "reunión", "administración", "factura", "contrato",
    "euros", "fecha", "presidente", "comunidad", "propietarios",
)
# Cyrillic look-alikes show up when a page is rasterized upside down.
_WRONG_ORIENTATION_CHARS = frozenset("ГЭЯЖЩФДЛЧСМИТЬБЮ")
_ALPHA_CHAR = re.compile(r"[a-zA-ZáéíóúñüÁÉÍÓÚÑÜ\s]")


def clean_text(text: str) -> str:
    """Normalize line endings and collapse redundant whitespace."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def artifact_ratio(text: str) -> float:
    if not text:
        return 0.0
    matches = sum(len(pattern.findall(text)) for pattern in _ARTIFACT_PATTERNS)
    return matches / len(text)


def is_normal_word(token: str) -> bool:
    word = token.strip(_WORD_EDGE_CHARS)
    return len(word) >= 3 and word.isalpha()


def normal_word_ratio(text: str) -> float:
    tokens = text.split()
    if not tokens:
        return 0.0
    return sum(1 for token in tokens if is_normal_word(token)) / len(tokens)


def has_normal_structure(text: str) -> bool:
    return (
        normal_word_ratio(text) >= MIN_NORMAL_WORD_RATIO
        and _PUNCTUATION.search(text) is not None
        and " " in text
        and not text.startswith(" " * 10)
    )


def needs_ocr(text: str) -> bool:
    """Return True when the text layer is unusable and OCR should be tried.

    Args:
        text: Text returned by a native PDF engine.

    Returns:
        True if any of the length, artifact or structure checks fails.
    """
    if not text or len(text.strip()) < MIN_TEXT_LENGTH:
        return True
    if artifact_ratio(text) > MAX_ARTIFACT_RATIO:
        return True
    return not has_normal_structure(text)


def score_text_quality(text: str) -> float:
    """Rate OCR output for one page between 0.0 and 1.0.

    Stopword coverage contributes up to 0.4, alphabetic density up to 0.3,
    absence of wrong-orientation glyphs 0.2 and domain vocabulary 0.1.
    """
    if not text or len(text) < 10:
        return 0.0

    lowered = text.lower()
    padded = f" {lowered} "
    score = 0.0

    stopword_hits = sum(1 for word in SPANISH_STOPWORDS if f" {word} " in padded)
    score += min(stopword_hits / len(SPANISH_STOPWORDS), 0.4)

    alpha_ratio = len(_ALPHA_CHAR.findall(text)) / len(text)
    score += min(alpha_ratio * 0.3, 0.3)

    if not any(char in _WRONG_ORIENTATION_CHARS for char in text):
        score += 0.2

    if any(word in lowered for word in DOMAIN_WORDS):
        score += 0.1

    return min(score, 1.0)
