"""
Pipeline enums.

Shared enums for agent context selection and generation modes.
"""

from enum import Enum


class AgentContext(str, Enum):
    """Writer persona selected by which optional images are present."""
    DEFAULT = "default"
    INPAINTING = "inpainting"
    FLOORPLAN = "floorplan"
    RELATED_SCENE = "related_scene"


class GenerationMode(str, Enum):
    """Which pipeline stages run for a request."""
    PROMPT_AND_IMAGE = "prompt_and_image"  # Planner + Writer, then image fan-out
    PROMPT_ONLY = "prompt_only"            # Planner + Writer only
    IMAGE_ONLY = "image_only"              # Skip the agents, generate from the raw brief

    @property
    def runs_agents(self) -> bool:
        return self is not GenerationMode.IMAGE_ONLY

    @property
    def runs_images(self) -> bool:
        return self is not GenerationMode.PROMPT_ONLY


class FanoutPolicy(str, Enum):
    """Failure policy for the parallel image requests."""
    SETTLE = "settle"
    FAIL_FAST = "fail_fast"
