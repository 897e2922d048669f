from ingestion.ai.service import AITextService
from ingestion.classification.models import DocumentType
from ingestion.metadata.exceptions import MetadataExtractionError
from ingestion.metadata.extractor import MetadataExtractor


class MetadataExtractorFactory:
    """Holds one extractor per document type, sharing a single AI service."""

    def __init__(self, ai_service: AITextService, *, max_input_chars: int = 30000) -> None:
        self._extractors = {
            document_type: MetadataExtractor(
                document_type, ai_service, max_input_chars=max_input_chars
            )
            for document_type in DocumentType
        }

    def for_type(self, document_type: DocumentType) -> MetadataExtractor:
        extractor = self._extractors.get(document_type)
        if extractor is None:
            raise MetadataExtractionError(
                f"No metadata extractor registered for '{document_type}'"
            )
        return extractor
