"""
Text Generation Service

Model tooling for multimodal text completions used by the Planner and
Writer stages. Holds no persona logic: system instructions are passed in
by the caller.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence
import logging

from studio_agents.core.config import ModelProfile, StudioConfig, get_config
from studio_agents.core.exceptions import ConfigError
from studio_agents.core.gemini_client import GeminiClient, RequestPart

logger = logging.getLogger(__name__)


@dataclass
class TextGenerationResult:
    """Result from text generation."""
    content: str
    model_used: str
    tokens_input: int = 0
    tokens_output: int = 0
    latency_ms: int = 0
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.content or not self.content.strip()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "content": self.content,
            "model_used": self.model_used,
            "tokens_input": self.tokens_input,
            "tokens_output": self.tokens_output,
            "latency_ms": self.latency_ms,
            "metadata": self.metadata,
        }


class TextGenerationService:
    """
    Profile-driven text generation over the shared GeminiClient.

    Each call is a single request; failures propagate to the caller
    without retry or model fallback.
    """

    def __init__(
        self,
        client: GeminiClient,
        config: Optional[StudioConfig] = None,
    ):
        """
        Initialize TextGenerationService.

        Args:
            client: Shared GeminiClient instance
            config: Model profiles. Defaults to the loaded StudioConfig.
        """
        self._client = client
        self._config = config or get_config()

    def _get_profile(self, profile_name: str) -> ModelProfile:
        profile = self._config.get_model_profile(profile_name)
        if profile is None or not profile.model:
            raise ConfigError(f"No model configured for profile '{profile_name}'")
        return profile

    async def generate_text(
        self,
        parts: Sequence[RequestPart],
        system_prompt: Optional[str] = None,
        profile_name: str = "writer",
    ) -> TextGenerationResult:
        """
        Generate text from ordered multimodal parts.

        Args:
            parts: Request parts (text strings and encoded images)
            system_prompt: Optional system instructions
            profile_name: Model profile to use (planner or writer)

        Returns:
            TextGenerationResult; ``content`` is empty if the model returned no text

        Raises:
            ConfigError: If the profile has no model
            TransportError: For service failures (GenerationTimeoutError on timeout)
        """
        profile = self._get_profile(profile_name)

        response = await self._client.generate_content(
            model=profile.model,
            parts=parts,
            system_instruction=system_prompt,
            generation_config=profile.generation_config(),
        )

        logger.debug(
            f"text_generation.completed: profile={profile_name}, model={response.model}, "
            f"chars={len(response.text)}, latency_ms={response.latency_ms}"
        )

        return TextGenerationResult(
            content=response.text,
            model_used=response.model,
            tokens_input=response.tokens_input,
            tokens_output=response.tokens_output,
            latency_ms=response.latency_ms,
            metadata={
                "finish_reason": response.finish_reason,
                "block_reason": response.block_reason,
            },
        )
