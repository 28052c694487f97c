from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    collaborator_mode: str = "http"
    user_agent: str = "DocumentProcessingService/1.0"

    archive_root: str = "/app/archive"
    source_fetch_timeout_seconds: int = 30

    error_reporting_base_url: str = ""
    error_reporting_api_key: str = ""
    error_reporting_timeout_seconds: int = 30

    print_service_base_url: str = ""
    print_service_api_key: str = ""
    print_service_timeout_seconds: int = 30

    document_workers: int = 1
    event_handler_workers: int = 4
