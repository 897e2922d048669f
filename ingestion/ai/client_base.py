from abc import ABC, abstractmethod


class BaseAIClient(ABC):
    """Contract for provider-specific AI text-generation clients."""

    @abstractmethod
    def create_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        max_output_tokens: int,
        json_output: bool = False,
        document: bytes | None = None,
        mime_type: str | None = None,
    ) -> str:
        """Return the provider response as plain text.

        When ``document`` is given, the raw file (a PDF or an image of type
        ``mime_type``) is attached to the user message so the model can read it.

        Raises:
            AINetworkError: on transport or provider API failures.
            AIClientError: when the provider returns no content.
        """
