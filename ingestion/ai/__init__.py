from ingestion.ai.factory import AIServiceFactory
from ingestion.ai.service import AITextService

__all__ = ["AIServiceFactory", "AITextService"]
