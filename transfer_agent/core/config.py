"""Configuration management for the transfer agent service."""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    app_name: str = Field(default="Transfer Agent Records")
    version: str = Field(default="0.1.0")
    docs_url: str | None = Field(default="/docs")
    redoc_url: str | None = Field(default="/redoc")
    openapi_url: str = Field(default="/openapi.json")

    database_url: str = Field(default="postgresql+psycopg://transfer:transfer@db:5432/transfer_agent")
    site_url: str = Field(default="http://localhost:3000")

    auth_url: str = Field(default="http://localhost:9999/auth/v1")
    auth_api_key: str = Field(default="anon-key")
    auth_service_role_key: str | None = Field(default=None)
    auth_jwt_secret: str = Field(default="super-secret-jwt-token-with-at-least-32-characters")
    auth_jwt_algorithm: str = Field(default="HS256")
    auth_jwt_audience: str = Field(default="authenticated")
    auth_timeout_seconds: float = Field(default=10.0)
    session_cookie_name: str = Field(default="ta-access-token")
    session_cookie_max_age_seconds: int = Field(default=3600)

    aws_region: str = Field(default="us-east-1")
    s3_endpoint_url: str | None = Field(default=None)
    documents_bucket: str = Field(default="documents")
    documents_public_base_url: str | None = Field(default=None)
    documents_cache_control: str = Field(default="3600")
    audit_log_bucket: str = Field(default="transfer-agent-audit-logs")
    audit_log_prefix: str = Field(default="audit/records")
    audit_log_sample_rate: float = Field(default=1.0)

    featured_documents_issuer_id: str = Field(default="e28e5ed8-3710-4dae-819a-e0489686ab01")

    log_level: str | None = Field(default=None)
    enable_metrics: bool = Field(default=True)
    enable_tracing: bool = Field(default=True)
    otel_exporter_endpoint: str | None = Field(default=None)


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()


__all__ = ["Settings", "get_settings"]
