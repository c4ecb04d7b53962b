from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 5000
    cors_allowed_origins: str = (
        "http://localhost:3000,http://localhost:3001,"
        "https://localhost:3000,https://localhost:3001"
    )

    max_files_per_batch: int = 2
    max_file_size_bytes: int = 20 * 1024 * 1024

    pdf_engine: str = "pdfplumber"
    ocr_language: str = "eng"
    tesseract_cmd: str = ""
    strict_content_sniffing: bool = False

    file_deadline_seconds: float = 180.0

    analysis_provider: str = "anthropic"
    analysis_max_tokens: int = 2000
    chat_max_tokens: int = 1000
    analysis_temperature: float = 0.3
    analysis_max_input_chars: int = 50_000
    analysis_max_attempts: int = 3
    analysis_retry_backoff_seconds: float = 1.0

    anthropic_api_key: str = ""
    anthropic_model_name: str = "claude-3-5-sonnet-20241022"
    anthropic_base_url: str = "https://api.anthropic.com/v1"
    anthropic_version: str = "2023-06-01"
    anthropic_timeout_seconds: int = 60

    openai_api_key: str = ""
    openai_model_name: str = ""
    openai_timeout_seconds: int = 60

    openai_compatible_base_url: str = ""
    openai_compatible_api_key: str = ""
    openai_compatible_model_name: str = ""

    analysis_store: str = "memory"
    db_host: str = "localhost"
    db_port: int = 5432
    db_database: str = "qash"
    db_username: str = "qash"
    db_password: str = "secret"

    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_from: str = "Qash Financial Analysis <noreply@qash.com>"
    smtp_use_tls: bool = True

    @property
    def cors_origins(self) -> list[str]:
        return [
            origin.strip()
            for origin in self.cors_allowed_origins.split(",")
            if origin.strip()
        ]
