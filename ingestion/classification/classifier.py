"""Cost-aware document type classification.

Only a bounded sample of the text is sent to the AI service: the opening
of the document plus a slice from its first third, where the structural
cues that reveal the type usually live.
"""

import re
import time
from pathlib import Path

from ingestion.ai.exceptions import AIClientError
from ingestion.ai.prompt_loader import load_prompt_template
from ingestion.ai.service import AITextService, estimate_tokens
from ingestion.classification.exceptions import ClassificationUncertainError
from ingestion.classification.keywords import match_filename
from ingestion.classification.models import (
    METHOD_CONFIDENCE,
    ClassificationMethod,
    ClassificationResult,
    DocumentType,
)
from ingestion.logging.logger import Log

_PROMPT_DIR = Path(__file__).parent / "prompts"
_NON_WORD = re.compile(r"[^\w]")

DEFAULT_DOCUMENT_TYPE = DocumentType.COMUNICADO
MAX_OUTPUT_TOKENS = 10
OUTPUT_TOKENS_ESTIMATE = 2


def build_sample(text: str, size: int = 1000) -> str:
    """Select the part of the text sent to the AI service.

    Args:
        text: Full extracted text.
        size: Character budget for the sample.

    Returns:
        The stripped text when it fits the budget, otherwise the first
        ``size // 2`` characters plus a disjoint slice starting at one third
        of the text, truncated to ``size`` characters with a trailing ``...``.
    """
    if len(text) <= size:
        return text.strip()
    half = size // 2
    start = text[:half]
    middle_start = max(len(text) // 3, half)
    middle = text[middle_start:middle_start + half]
    combined = f"{start}\n\n[...]\n\n{middle}"
    return combined[:size] + "..."


def normalize_answer(raw: str) -> DocumentType:
    """Map a raw AI answer onto the canonical type set.

    Raises:
        ClassificationUncertainError: if the answer is not a known type.
    """
    candidate = _NON_WORD.sub("", raw.strip().lower())
    document_type = DocumentType.parse(candidate)
    if document_type is None:
        raise ClassificationUncertainError(f"AI answer '{raw.strip()}' is not a document type")
    return document_type


class DocumentClassifier:
    """Assigns one of the canonical document types.

    Fallback order: AI answer, filename keywords, then the generic default.
    """

    def __init__(
        self,
        ai_service: AITextService | None,
        *,
        sample_size: int = 1000,
        default_type: DocumentType = DEFAULT_DOCUMENT_TYPE,
    ) -> None:
        self._ai_service = ai_service
        self._sample_size = sample_size
        self._default_type = default_type
        self._prompt_template = load_prompt_template(_PROMPT_DIR, "classification_prompt.txt")

    def classify(self, text: str, filename: str = "") -> ClassificationResult:
        started = time.monotonic()
        raw_response: str | None = None
        tokens_used = 0

        if self._ai_service is not None and text.strip():
            prompt = self.build_prompt(text, filename)
            tokens_used = estimate_tokens(prompt) + OUTPUT_TOKENS_ESTIMATE
            try:
                raw_response = self._ai_service.complete(
                    prompt, max_output_tokens=MAX_OUTPUT_TOKENS
                )
                document_type = normalize_answer(raw_response)
                Log.info(f"Classified '{filename}' as {document_type.value} (ai)")
                return self._result(
                    document_type,
                    ClassificationMethod.AI,
                    started,
                    raw_response=raw_response,
                    tokens_used=tokens_used,
                )
            except ClassificationUncertainError as exc:
                Log.warning(f"Classification uncertain for '{filename}': {exc}")
            except AIClientError as exc:
                Log.warning(f"AI classification failed for '{filename}': {exc}")

        document_type = match_filename(filename)
        if document_type is not None:
            Log.info(f"Classified '{filename}' as {document_type.value} (filename)")
            return self._result(
                document_type,
                ClassificationMethod.FILENAME,
                started,
                raw_response=raw_response,
                tokens_used=tokens_used,
            )

        Log.info(f"Classified '{filename}' as {self._default_type.value} (default)")
        return self._result(
            self._default_type,
            ClassificationMethod.DEFAULT,
            started,
            raw_response=raw_response,
            tokens_used=tokens_used,
        )

    def build_prompt(self, text: str, filename: str) -> str:
        categories = ", ".join(member.value for member in DocumentType)
        return self._prompt_template.format(
            filename=filename or "(sin nombre)",
            sample=build_sample(text, self._sample_size),
            categories=categories,
        )

    @staticmethod
    def _result(
        document_type: DocumentType,
        method: ClassificationMethod,
        started: float,
        *,
        raw_response: str | None,
        tokens_used: int,
    ) -> ClassificationResult:
        return ClassificationResult(
            document_type=document_type,
            method=method,
            confidence=METHOD_CONFIDENCE[method],
            raw_response=raw_response,
            tokens_used=tokens_used,
            processing_time=time.monotonic() - started,
        )
