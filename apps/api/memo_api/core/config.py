"""Application configuration."""

from typing import Any

from pydantic import Field, PostgresDsn, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # API Settings
    API_V1_STR: str = "/v1"
    PROJECT_NAME: str = "Voice Memo API"
    LOG_LEVEL: str = "INFO"

    # CORS
    ALLOWED_HOSTS: list[str] = ["http://localhost:8081", "http://localhost:19006"]

    # Auth
    SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"

    # Database
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "voice_memos"
    POSTGRES_PORT: int = 5432
    DATABASE_URL: str | None = Field(default=None, validate_default=True)

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def assemble_db_connection(cls, v: str | None, info: ValidationInfo) -> Any:
        """Assemble database URL from components."""
        if isinstance(v, str):
            return v
        values = info.data
        return str(
            PostgresDsn.build(
                scheme="postgresql+asyncpg",
                username=values.get("POSTGRES_USER"),
                password=values.get("POSTGRES_PASSWORD"),
                host=values.get("POSTGRES_SERVER"),
                port=values.get("POSTGRES_PORT"),
                path=values.get("POSTGRES_DB") or "",
            )
        )

    # MinIO/S3
    S3_ENDPOINT: str = "http://localhost:9000"
    S3_ACCESS_KEY: str = "minioadmin"
    S3_SECRET_KEY: str = "minioadmin"
    S3_BUCKET: str = "recordings"
    S3_REGION: str = "us-east-1"
    STORAGE_URL_EXPIRES_SECONDS: int = 3600

    # Transcription
    DEEPGRAM_API_KEY: str = ""
    DEEPGRAM_URL: str = "https://api.deepgram.com/v1/listen"
    DEEPGRAM_MODEL: str = "nova-2"

    # OpenAI
    OPENAI_API_KEY: str = ""
    OPENAI_TITLE_MODEL: str = "gpt-4o-mini"


settings = Settings()
