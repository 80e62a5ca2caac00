from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    api_base_url: str = "http://localhost:8080"

    save_timeout_seconds: float = 30.0
    autosave_debounce_seconds: float = 60.0
    autosave_max_wait_seconds: float = 300.0

    upload_timeout_seconds: float = 30.0
    upload_max_width: int = 1200
    upload_max_size_mb: float = 2.0

    scan_timeout_seconds: float = 10.0
    scan_concurrency: int = 1

    draft_store: str = "file"
    draft_dir: str = ".drafts"
    recovery_tolerance_seconds: float = 5.0

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "editorsync"
    db_username: str = "editorsync"
    db_password: str = "secret"
