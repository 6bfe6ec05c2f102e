from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite:///./chronos.db"
    jwt_secret: str = "dev-only-jwt-secret-change-me-in-production"
    session_secret: str = "dev-only-session-secret-change-me"
    token_ttl_days: int = 30
    logs_read_limit: int = 100

    # Collector side
    server_url: str = "http://localhost:8000"
    collector_dir: Path = Path.home() / ".chronos"
    sync_interval_seconds: int = 30
    sync_timeout_seconds: float = 30.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
