"""Data models and schemas."""
from .schemas import (
    GeneratedContentSchema,
    GeneratedImageSchema,
    GenerationFailureSchema,
    GenerateResponse,
    HealthResponse,
    ErrorDetail,
    ErrorResponse,
)

__all__ = [
    "GeneratedContentSchema",
    "GeneratedImageSchema",
    "GenerationFailureSchema",
    "GenerateResponse",
    "HealthResponse",
    "ErrorDetail",
    "ErrorResponse",
]
