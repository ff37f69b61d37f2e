"""
Generated content models.

GeneratedContent is the structured output of the Writer stage;
ImageBatchResult and StudioResult carry what the pipeline returns.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .enums import AgentContext, GenerationMode
from .images import GeneratedImage

# Aspect ratios the image model accepts in the trailing "AR: W:H" tag
SUPPORTED_ASPECT_RATIOS = (
    "1:1", "2:3", "3:2", "3:4", "4:3", "4:5", "5:4", "9:16", "16:9", "21:9",
)


@dataclass
class GeneratedContent:
    """Structured prompt produced by the Planner and Writer stages."""
    checklist: List[str]
    final_prompt: str
    assumptions: List[str] = field(default_factory=list)
    questions: List[str] = field(default_factory=list)
    aspect_ratio: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "checklist": self.checklist,
            "final_prompt": self.final_prompt,
            "assumptions": self.assumptions,
            "questions": self.questions,
            "aspect_ratio": self.aspect_ratio,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeneratedContent":
        """Create from dictionary."""
        return cls(
            checklist=data.get("checklist", []),
            final_prompt=data.get("final_prompt", ""),
            assumptions=data.get("assumptions", []),
            questions=data.get("questions", []),
            aspect_ratio=data.get("aspect_ratio"),
        )


@dataclass
class GenerationFailure:
    """Diagnostic for one image request that did not complete."""
    request_index: int
    error_code: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "request_index": self.request_index,
            "error_code": self.error_code,
            "message": self.message,
        }


@dataclass
class ImageBatchResult:
    """Flattened images from all fan-out requests plus per-request failures."""
    images: List[GeneratedImage] = field(default_factory=list)
    failures: List[GenerationFailure] = field(default_factory=list)
    requested: int = 0
    model_used: str = ""
    duration_ms: int = 0

    @property
    def is_partial(self) -> bool:
        return bool(self.images) and bool(self.failures)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "images": [image.to_dict() for image in self.images],
            "failures": [failure.to_dict() for failure in self.failures],
            "requested": self.requested,
            "model_used": self.model_used,
            "duration_ms": self.duration_ms,
        }


@dataclass
class StudioResult:
    """Result of one pipeline invocation."""
    mode: GenerationMode
    agent_context: AgentContext
    content: Optional[GeneratedContent] = None
    images: List[GeneratedImage] = field(default_factory=list)
    failures: List[GenerationFailure] = field(default_factory=list)
    duration_ms: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "mode": self.mode.value,
            "agent_context": self.agent_context.value,
            "content": self.content.to_dict() if self.content else None,
            "images": [image.to_dict() for image in self.images],
            "failures": [failure.to_dict() for failure in self.failures],
            "duration_ms": self.duration_ms,
        }
