"""
Configuration loading for the studio agents.

This module loads model profiles for the Planner, Writer and image
generation stages from a YAML file, falling back to the model names
declared in the environment settings.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional
import os
import yaml

from config import settings


@dataclass
class ModelProfile:
    """
    Configuration profile for one generative model call site.

    Values loaded from config/agent_profiles.yaml
    """
    name: str
    model: str = ""
    temperature: Optional[float] = None
    max_output_tokens: Optional[int] = None

    def generation_config(self) -> Dict[str, Any]:
        """Return the generationConfig fields this profile overrides."""
        config: Dict[str, Any] = {}
        if self.temperature is not None:
            config["temperature"] = self.temperature
        if self.max_output_tokens is not None:
            config["maxOutputTokens"] = self.max_output_tokens
        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "model": self.model,
            "temperature": self.temperature,
            "max_output_tokens": self.max_output_tokens,
        }

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any], default_model: str = "") -> "ModelProfile":
        """Create from dictionary."""
        return cls(
            name=name,
            model=data.get("model") or default_model,
            temperature=data.get("temperature"),
            max_output_tokens=data.get("max_output_tokens"),
        )


@dataclass
class StudioConfig:
    """
    Model profiles for every stage of the pipeline.

    The planner and writer share the text model by default; the image
    profile drives the fan-out requests.
    """
    planner: ModelProfile = field(
        default_factory=lambda: ModelProfile(name="planner", model=settings.gemini_model_text)
    )
    writer: ModelProfile = field(
        default_factory=lambda: ModelProfile(name="writer", model=settings.gemini_model_text)
    )
    image: ModelProfile = field(
        default_factory=lambda: ModelProfile(name="image", model=settings.gemini_model_image)
    )

    def get_model_profile(self, name: str) -> Optional[ModelProfile]:
        """Get model profile for a stage (planner, writer, image)."""
        return {
            "planner": self.planner,
            "writer": self.writer,
            "image": self.image,
        }.get(name)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "planner": self.planner.to_dict(),
            "writer": self.writer.to_dict(),
            "image": self.image.to_dict(),
        }


# Global config instance
_config: Optional[StudioConfig] = None


def load_config(config_path: Optional[str] = None) -> StudioConfig:
    """
    Load model profiles from a YAML file.

    Args:
        config_path: Path to config file. If None, uses STUDIO_CONFIG_PATH
            or config/agent_profiles.yaml.

    Returns:
        Loaded StudioConfig instance.
    """
    global _config

    if config_path is None:
        config_path = os.environ.get(
            "STUDIO_CONFIG_PATH",
            str(Path(__file__).parent.parent.parent / "config" / "agent_profiles.yaml"),
        )

    config_file = Path(config_path)

    if not config_file.exists():
        _config = StudioConfig()
        return _config

    with open(config_file, "r") as f:
        data = yaml.safe_load(f) or {}

    profiles = data.get("model_profiles", {})
    _config = StudioConfig(
        planner=ModelProfile.from_dict(
            "planner", profiles.get("planner", {}), settings.gemini_model_text
        ),
        writer=ModelProfile.from_dict(
            "writer", profiles.get("writer", {}), settings.gemini_model_text
        ),
        image=ModelProfile.from_dict(
            "image", profiles.get("image", {}), settings.gemini_model_image
        ),
    )
    return _config


def get_config() -> StudioConfig:
    """
    Get the current configuration.

    Loads default config if not already loaded.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Reset the global config (useful for testing)."""
    global _config
    _config = None
