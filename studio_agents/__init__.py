"""
Studio Agents - multi-agent prompt orchestration for image generation.

Turns a short brief plus optional categorized images into a structured
prompt (Planner -> Writer) and a batch of generated images.
"""

from studio_agents.core.agent import BaseAgent, AgentState
from studio_agents.core.config import StudioConfig, load_config
from studio_agents.core.exceptions import (
    StudioError,
    ValidationError,
    EncodingError,
    OrchestrationError,
    NoImageDataError,
    TransportError,
    GenerationTimeoutError,
)
from studio_agents.core.gemini_client import GeminiClient

# Models package - shared data classes and enums
from studio_agents import models

__version__ = "0.1.0"

__all__ = [
    # Core classes
    "BaseAgent",
    "AgentState",
    "GeminiClient",
    # Config
    "StudioConfig",
    "load_config",
    # Exceptions
    "StudioError",
    "ValidationError",
    "EncodingError",
    "OrchestrationError",
    "NoImageDataError",
    "TransportError",
    "GenerationTimeoutError",
    # Subpackages
    "models",
]
