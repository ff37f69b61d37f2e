"""
Application settings and configuration management.
"""
from typing import Literal
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Server Configuration
    server_host: str = Field(default="0.0.0.0", description="Server host")
    server_port: int = Field(default=8000, description="Server port")
    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Environment"
    )
    log_level: str = Field(default="INFO", description="Log level")

    # Google Gemini API
    gemini_api_key: str = Field(default="", description="Gemini API key")
    gemini_api_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Gemini REST API base URL",
    )
    gemini_model_text: str = Field(
        default="gemini-2.5-flash", description="Model for the Planner and Writer stages"
    )
    gemini_model_image: str = Field(
        default="gemini-2.5-flash-image", description="Model for image generation"
    )

    # Request handling
    request_timeout_seconds: float = Field(
        default=60.0, gt=0, description="Per-request timeout for generative calls"
    )
    fanout_policy: Literal["settle", "fail_fast"] = Field(
        default="settle",
        description="settle keeps partial results; fail_fast aborts on the first failed request",
    )
    max_image_count: int = Field(default=8, ge=1, description="Upper bound for images per run")
    default_image_count: int = Field(default=4, ge=1, description="Images per run when unspecified")
    verify_image_data: bool = Field(
        default=True, description="Reject uploads Pillow cannot decode (PNG/JPEG/WebP only)"
    )

    # Monitoring
    enable_metrics: bool = Field(default=True, description="Enable Prometheus metrics")
    enable_structured_logging: bool = Field(
        default=True, description="Enable structured JSON logging"
    )


# Global settings instance
settings = Settings()
