from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="XAI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Stored as SecretStr to avoid accidental logging
    api_key: SecretStr | None = Field(default=None)
    base_url: str = Field(default="https://api.x.ai")

    # Call behaviour
    timeout_seconds: int = Field(default=60, gt=0)
    max_attempts: int = Field(default=1, ge=1)

    # Observability
    log_level: str = Field(default="INFO")
    otel_service_name: str = Field(default="xai-client")
    otel_exporter_otlp_endpoint: str | None = Field(default=None)
