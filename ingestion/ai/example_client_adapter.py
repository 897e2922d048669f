"""Offline AI client adapter.

Returns canned answers without any network call. Handy for local runs and
as a template for new provider adapters: implement BaseAIClient and
register the provider in AIServiceFactory.
"""

import json

from ingestion.ai.client_base import BaseAIClient


class ExampleClientAdapter(BaseAIClient):
    """Answers classification prompts with a fixed type, extraction prompts with ``{}``
    and attached documents with a fixed transcription.
    """

    TRANSCRIPTION = (
        "Comunicado a los vecinos de la comunidad de propietarios. "
        "Documento transcrito por el cliente de ejemplo sin conexion."
    )

    def __init__(self, document_type: str = "comunicado") -> None:
        self._document_type = document_type

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
        _ = model, temperature, system_prompt, user_prompt, max_output_tokens, mime_type
        if document is not None and not json_output:
            return self.TRANSCRIPTION
        if json_output:
            return json.dumps({})
        return self._document_type
