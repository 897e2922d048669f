import base64

import httpx
import openai

from ingestion.extraction.exceptions import OcrError
from ingestion.extraction.ocr.client_base import BaseOcrClient
from ingestion.extraction.ocr.models import OcrPage

_SYSTEM_PROMPT = (
    "You are an OCR engine. Transcribe every piece of text visible in the "
    "image exactly as written, preserving line breaks. Do not translate, "
    "summarize or comment. If the image contains no text, answer with an "
    "empty message."
)


class OpenAIVisionOcrClient(BaseOcrClient):
    """OCR through a vision-capable OpenAI-compatible chat model."""

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._model = model
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )

    def recognize(
        self,
        image: bytes,
        *,
        mime_type: str,
        language_hints: list[str],
    ) -> OcrPage:
        data_url = f"data:{mime_type};base64,{base64.b64encode(image).decode('ascii')}"
        languages = ", ".join(language_hints)
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                temperature=0.0,
                messages=[
                    {"role": "system", "content": _SYSTEM_PROMPT},
                    {
                        "role": "user",
                        "content": [
                            {
                                "type": "text",
                                "text": f"Expected document language: {languages}.",
                            },
                            {"type": "image_url", "image_url": {"url": data_url}},
                        ],
                    },
                ],
            )
        except openai.AuthenticationError as exc:
            raise OcrError("OCR credentials not configured") from exc
        except openai.RateLimitError as exc:
            raise OcrError("OCR API quota exceeded") from exc
        except openai.PermissionDeniedError as exc:
            raise OcrError("OCR API not enabled or insufficient permissions") from exc
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise OcrError(f"OCR provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise OcrError(f"OCR extraction failed: {exc}") from exc

        if not response.choices:
            return OcrPage(text="")
        return OcrPage(text=(response.choices[0].message.content or "").strip())
