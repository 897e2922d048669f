from ingestion.ai.client_base import BaseAIClient
from ingestion.logging.logger import Log


class AITextService:
    """Binds an AI client to a model and a low sampling temperature."""

    def __init__(
        self,
        *,
        client: BaseAIClient,
        model: str,
        temperature: float = 0.1,
        system_prompt: str = "",
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(0.2, temperature))
        self._system_prompt = system_prompt

    @property
    def model(self) -> str:
        return self._model

    @property
    def temperature(self) -> float:
        return self._temperature

    def complete(
        self,
        prompt: str,
        *,
        max_output_tokens: int,
        json_output: bool = False,
        document: bytes | None = None,
        mime_type: str | None = None,
    ) -> str:
        """Send one prompt and return the raw text answer.

        A ``document`` is attached to the prompt as a file the model reads
        directly, for documents without a usable text layer.

        Raises:
            AINetworkError: on transport or provider API failures.
            AIClientError: when the provider returns no content.
        """
        Log.debug(f"AI prompt ({len(prompt)} chars, max {max_output_tokens} tokens)")
        attachment: dict[str, object] = {}
        if document is not None:
            attachment = {"document": document, "mime_type": mime_type}
        response = self._client.create_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
            max_output_tokens=max_output_tokens,
            json_output=json_output,
            **attachment,
        )
        Log.debug(f"AI raw response:\n{response}")
        return response


def estimate_tokens(text: str) -> int:
    """Rough token count used for cost reporting (four characters per token)."""
    return len(text) // 4
