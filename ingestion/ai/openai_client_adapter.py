import base64

import httpx
import openai

from ingestion.ai.client_base import BaseAIClient
from ingestion.ai.exceptions import AIClientError, AINetworkError

PDF_MIME_TYPE = "application/pdf"


def _document_part(document: bytes, mime_type: str) -> dict[str, object]:
    """Build the message part carrying a PDF file or an image."""
    data_url = f"data:{mime_type};base64,{base64.b64encode(document).decode('ascii')}"
    if mime_type.startswith("image/"):
        return {"type": "image_url", "image_url": {"url": data_url}}
    return {"type": "file", "file": {"filename": "document.pdf", "file_data": data_url}}


class OpenAIClientAdapter(BaseAIClient):
    """AI client adapter built on the OpenAI-compatible chat API."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )

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
        messages: list[dict[str, object]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        if document is None:
            messages.append({"role": "user", "content": user_prompt})
        else:
            messages.append(
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": user_prompt},
                        _document_part(document, mime_type or PDF_MIME_TYPE),
                    ],
                }
            )
        extra: dict[str, object] = {}
        if json_output:
            extra["response_format"] = {"type": "json_object"}
        try:
            response = self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                max_tokens=max_output_tokens,
                messages=messages,
                **extra,
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise AINetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise AINetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise AIClientError("AI returned no choices")
        content = response.choices[0].message.content
        if content is None:
            raise AIClientError("AI returned empty response")
        return content
