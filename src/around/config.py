"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    elasticsearch_url: str = "http://localhost:9200"
    post_index: str = "around"
    user_index: str = "around-users"
    index_request_timeout: float = 10.0
    gcs_bucket: str
    gcp_project_id: str | None = None
    jwt_signing_key: str
    jwt_algorithm: str = "HS256"
    token_ttl_hours: int = 24
    default_search_distance_km: float = 200.0
    environment: str = _ENVIRONMENT
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
