class ClassificationUncertainError(Exception):
    """Raised when the AI answer is not a known document type."""
