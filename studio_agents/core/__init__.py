"""
Core infrastructure for the studio pipeline.

Provides the configuration loader, the Gemini REST client and the
exception hierarchy shared by services and agents.
"""

from studio_agents.core.config import (
    ModelProfile,
    StudioConfig,
    load_config,
    get_config,
    reset_config,
)
from studio_agents.core.exceptions import (
    StudioError,
    ConfigError,
    ValidationError,
    UnsupportedMimeTypeError,
    EncodingError,
    OrchestrationError,
    PlannerEmptyResponseError,
    PlannerMalformedResponseError,
    WriterEmptyResponseError,
    WriterMalformedResponseError,
    NoImageDataError,
    TransportError,
    GenerationTimeoutError,
)
from studio_agents.core.gemini_client import GeminiClient, GeminiResponse
from studio_agents.core.agent import AgentState, BaseAgent

__all__ = [
    # Config
    "ModelProfile",
    "StudioConfig",
    "load_config",
    "get_config",
    "reset_config",
    # Agent base
    "AgentState",
    "BaseAgent",
    # Client
    "GeminiClient",
    "GeminiResponse",
    # Exceptions
    "StudioError",
    "ConfigError",
    "ValidationError",
    "UnsupportedMimeTypeError",
    "EncodingError",
    "OrchestrationError",
    "PlannerEmptyResponseError",
    "PlannerMalformedResponseError",
    "WriterEmptyResponseError",
    "WriterMalformedResponseError",
    "NoImageDataError",
    "TransportError",
    "GenerationTimeoutError",
]
