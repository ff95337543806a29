"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Remote API (empty -> fixture mode)
    api_base_url: str = ""
    request_timeout: float = 600.0

    # Fixture mode
    fixture_latency_scale: float = 1.0

    # Session snapshot
    snapshot_backend: Literal["file", "redis", "memory"] = "file"
    snapshot_path: Path = Path(".memo_session.json")
    redis_url: str = "redis://localhost:6379"

    # Display
    date_locale: str = "ko-KR"
    display_timezone: str = "Asia/Seoul"

    # Observability
    log_level: str = "INFO"
    metrics_port: int = 0

    @property
    def fixture_mode(self) -> bool:
        """True when no remote endpoint is configured."""
        return not self.api_base_url.strip()


settings = Settings()
