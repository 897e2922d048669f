from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "ingestion"
    db_username: str = "ingestion"
    db_password: str = "secret"
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10

    max_job_attempts: int = 3
    job_poll_interval_seconds: int = 5
    files_root: str = "/app/files"

    pdf_engine: str = "pdfplumber"
    native_subprocess_timeout_seconds: int = 30

    ocr_provider: str = "disabled"
    ocr_api_key: str = ""
    ocr_model_name: str = ""
    ocr_base_url: str = ""
    ocr_timeout_seconds: int = 60
    ocr_max_pages: int = 5
    ocr_target_size: int = 2000

    ai_ocr_enabled: bool = False
    ai_ocr_max_pages: int = 5
    ai_ocr_max_output_tokens: int = 4000

    ai_provider: str = "openai"
    ai_api_key: str = ""
    ai_model_name: str = ""
    ai_base_url: str = ""
    ai_timeout_seconds: int = 30
    ai_temperature: float = 0.1
    ai_cost_per_1k_tokens: float = 0.0

    classification_sample_size: int = 1000
    metadata_max_input_chars: int = 30000
    chunk_max_chars: int = 2000
