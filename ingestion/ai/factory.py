from typing import ClassVar

from ingestion.ai.example_client_adapter import ExampleClientAdapter
from ingestion.ai.openai_client_adapter import OpenAIClientAdapter
from ingestion.ai.service import AITextService
from ingestion.config.settings import Settings


class AIServiceFactory:
    """Creates the configured AI text service."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> AITextService:
        """Create an AI text service from application settings."""
        provider = settings.ai_provider.lower()
        if provider == "example":
            return AITextService(client=ExampleClientAdapter(), model="example")
        if not settings.ai_model_name:
            raise ValueError(f"ai_model_name is required for ai_provider={provider}")
        client = OpenAIClientAdapter(
            api_key=settings.ai_api_key,
            timeout_seconds=settings.ai_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
        )
        return AITextService(
            client=client,
            model=settings.ai_model_name,
            temperature=settings.ai_temperature,
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return settings.ai_base_url.strip() or None
        if provider == "openai_compatible":
            url = settings.ai_base_url.strip()
            if not url:
                raise ValueError(
                    "ai_base_url is required for ai_provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return settings.ai_base_url.strip() or default_base_url
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(f"Unknown AI provider '{provider}'. Choose from: {supported}")
