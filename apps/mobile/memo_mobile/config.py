"""Client configuration."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Settings for the recording client, read from ``MEMO_*`` variables."""

    model_config = SettingsConfigDict(env_prefix="MEMO_", env_file=".env", extra="ignore")

    api_url: str = "http://localhost:8000/v1"
    api_token: str | None = None
    documents_dir: Path = Field(default_factory=lambda: Path.home() / ".memo" / "recordings")
    timeout: float = 30.0
    progress_update_interval_ms: int = 500
