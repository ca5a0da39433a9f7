"""Configuration management for mcp-res-proxy."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    Loaded once at startup and never mutated afterwards; every component
    receives the same instance.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Server Configuration
    host: str = Field("0.0.0.0", description="HTTP server host")
    port: str = Field("3000", description="HTTP server port")
    mount_prefix: str = Field(
        "/mcp", description="Path prefix the proxy is mounted under"
    )

    # Upstream Configuration
    target_base_url: str = Field(
        "", description="Default upstream base URL, overridable per request"
    )
    request_timeout: float = Field(
        15.0, description="Upstream request timeout in seconds", gt=0
    )
    wrap_response: bool = Field(
        True, description="Wrap upstream responses in a {success, data|error} envelope"
    )

    # Upstream Authentication
    auth_type: str = Field("none", description="Upstream auth: none, bearer or basic")
    auth_token: str = Field("", description="Bearer token")
    auth_user: str = Field("", description="Basic auth user")
    auth_pass: str = Field("", description="Basic auth password")

    # Tool dispatch
    strict_tool_names: bool = Field(
        False, description="Reject unknown tool names instead of defaulting to GET"
    )

    # Application Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "INFO", description="Logging level"
    )
    debug: bool = Field(False, description="Enable debug mode")

    @property
    def normalized_auth_type(self) -> str:
        return self.auth_type.strip().lower()


@lru_cache
def get_settings() -> Settings:
    """Get the application settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
