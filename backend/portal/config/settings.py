"""Portal configuration from environment variables and .env"""
from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Every field can be overridden by the upper-case environment variable"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # MongoDB
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "egov_portal_dev"

    # Secondary document-status lookup (used when the direct query fails)
    document_status_url: str = ""
    document_status_timeout_seconds: float = 5.0

    # Issued documents
    verification_base_url: str = "https://verify.egov.example"

    # Uploaded evidence (inline base64 payloads)
    uploads_max_mb: int = 5
    allowed_mime_types: str = "application/pdf,image/png,image/jpeg"

    # Logging
    logs_path: str = "./logs"
    log_level: str = "INFO"

    # CORS - set to "*" to allow all origins
    cors_origins: str = "*"

    # Environment
    environment: str = "development"
    debug: bool = True

    @property
    def cors_origins_list(self) -> List[str]:
        return _split_csv(self.cors_origins)

    @property
    def allowed_mime_types_list(self) -> List[str]:
        return _split_csv(self.allowed_mime_types)

    @property
    def uploads_max_bytes(self) -> int:
        return self.uploads_max_mb * 1024 * 1024


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Settings are read once per process"""
    return Settings()


settings = get_settings()
