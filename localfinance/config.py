"""Application configuration from environment variables."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Application
    app_name: str = "Local Finance Manager"
    debug: bool = False
    environment: str = "development"  # "development" or "production"

    # Server (uvicorn)
    host: str = "127.0.0.1"
    port: int = 8000

    # Database
    data_dir: Path = Path("data")
    database_filename: str = "finance.db"

    # Sample accounts are only ever loaded outside production
    seed_sample_data: bool = True

    # Logging (5MB per file, keep 3 backups)
    log_max_bytes: int = 5 * 1024 * 1024
    log_backup_count: int = 3

    # HTTP client used by UI code
    api_base_url: str = "http://localhost:8000"
    http_timeout_seconds: float = 30.0

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    @property
    def database_path(self) -> Path:
        return self.data_dir / self.database_filename


settings = Settings()
