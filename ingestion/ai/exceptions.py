class AIClientError(Exception):
    """Raised when the AI text service returns an unusable response."""


class AINetworkError(AIClientError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""
