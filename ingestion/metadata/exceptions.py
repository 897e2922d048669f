class MetadataExtractionError(Exception):
    """Raised when metadata cannot be requested from the AI service."""


class ResponseParseError(MetadataExtractionError):
    """Raised when an AI answer does not contain a JSON object."""
