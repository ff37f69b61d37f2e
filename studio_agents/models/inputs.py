"""
Request models.

Used by ContextClassifierService and StudioPipeline.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from .enums import AgentContext, GenerationMode
from .images import ImageInput


@dataclass
class ImageSlots:
    """Categorized optional image inputs for one request."""
    background: Optional[ImageInput] = None
    edit_image: Optional[ImageInput] = None
    mask_image: Optional[ImageInput] = None
    sketch_image: Optional[ImageInput] = None
    floorplan_image: Optional[ImageInput] = None
    related_image: Optional[ImageInput] = None
    reference_images: List[ImageInput] = field(default_factory=list)

    def iter_populated(self) -> Iterator[Tuple[str, ImageInput]]:
        """Yield (slot name, image) for every populated slot."""
        for name in (
            "background",
            "edit_image",
            "mask_image",
            "sketch_image",
            "floorplan_image",
            "related_image",
        ):
            image = getattr(self, name)
            if image is not None:
                yield name, image
        for image in self.reference_images:
            yield "reference_images", image

    def summary(self) -> Dict[str, int]:
        """Count of images per slot, for logging."""
        counts: Dict[str, int] = {}
        for name, _ in self.iter_populated():
            counts[name] = counts.get(name, 0) + 1
        return counts


@dataclass
class StudioRequest:
    """Everything the pipeline needs for one invocation."""
    brief: str = ""
    edit_brief: str = ""
    mode: GenerationMode = GenerationMode.PROMPT_AND_IMAGE
    image_count: int = 4
    slots: ImageSlots = field(default_factory=ImageSlots)


@dataclass(frozen=True)
class ClassifiedContext:
    """Classifier output: persona tag, ordered prompt images and annotated brief."""
    agent_context: AgentContext
    prompt_images: Tuple[ImageInput, ...]
    brief_text: str
