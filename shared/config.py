"""
Shared configuration management for the Client Queries service.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CLIENTS_",
        case_sensitive=False,
        extra="allow"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Cache tier
    redis_url: str = Field(default="redis://localhost:6379/0")
    redis_socket_timeout: float = Field(default=5.0)
    cache_name: str = Field(default="CLIENT-LIST")

    # Durable tier
    postgres_dsn: str = Field(default="postgresql://localhost:5432/clients")
    postgres_min_pool: int = Field(default=2)
    postgres_max_pool: int = Field(default=10)
    postgres_command_timeout: float = Field(default=30.0)
    create_schema: bool = Field(default=False)

    # Lookup behaviour
    propagate_cache_read_errors: bool = Field(default=False)

    # Observability
    enable_tracing: bool = Field(default=False)
    otel_exporter: str = Field(default="http://localhost:4317")
    enable_console_tracing: bool = Field(default=False)


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port)
