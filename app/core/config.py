from pathlib import Path
from typing import Optional
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class OpenAISettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    model: str = Field(default="gpt-4o-mini", alias="OPENAI_MODEL")
    base_url: Optional[str] = Field(default=None, alias="OPENAI_BASE_URL")
    timeout: float = Field(default=30.0, alias="OPENAI_TIMEOUT")


class ExtractionSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    # Matches the "max 10MB" limit advertised by the upload form
    max_upload_bytes: int = Field(default=10 * 1024 * 1024, alias="MAX_UPLOAD_BYTES")


class ClientSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    data_file: Path = Field(
        default_factory=lambda: Path.home() / ".flashcards" / "storage.json",
        alias="FLASHCARDS_DATA_FILE",
    )
    server_url: str = Field(
        default="http://localhost:9000", alias="FLASHCARDS_SERVER_URL"
    )
    request_timeout: float = Field(default=60.0, alias="FLASHCARDS_REQUEST_TIMEOUT")


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    name: str = Field(default="flashcards", alias="APP_NAME")
    version: str = Field(default="v1", alias="API_VERSION")
    port: int = Field(default=9000, alias="APP_PORT")
    mode: str = Field(default="prod", alias="MODE")

    @computed_field
    def is_production(self) -> bool:
        return self.mode != "dev"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=lambda: AppSettings())
    openai: OpenAISettings = Field(default_factory=lambda: OpenAISettings())
    extraction: ExtractionSettings = Field(default_factory=lambda: ExtractionSettings())
    client: ClientSettings = Field(default_factory=lambda: ClientSettings())

    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"], alias="CORS_ORIGINS"
    )


settings = Settings()
