"""
Context Classifier Service - validates inputs and selects the agent context.

Given which optional image slots are populated, this service:
- Rejects conflicting combinations before any network call
- Resolves exactly one AgentContext (edit > floor plan > related scene > default)
- Orders the images sent to the Planner and Writer
- Annotates the brief with one instruction sentence per image category,
  in the same order as the images that follow it in the request

It makes no network calls and holds no state; classification is a pure
function of the request.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple
import logging

from config import settings
from studio_agents.core.exceptions import UnsupportedMimeTypeError, ValidationError
from studio_agents.models.enums import AgentContext
from studio_agents.models.images import SUPPORTED_MIME_TYPES, ImageInput
from studio_agents.models.inputs import ClassifiedContext, StudioRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BriefInstructions:
    """Instruction sentences appended to the brief, one per image category."""
    background: str = (
        "[Instruction] Use the following image as the background for the generation."
    )
    sketch: str = (
        "[Instruction] Use the following image as the structural base for an image-to-image "
        "generation. Transform it based on the brief."
    )
    floorplan: str = (
        "[Instruction] Use the following floor plan image as the structural base for an "
        "image-to-image generation. Visualize it based on the brief."
    )
    related_scene: str = (
        "[Instruction] Generate a new scene that is a logical extension or different perspective "
        "of the provided image, guided by the user's brief. The new scene must match the "
        "original's style and theme."
    )
    references: str = (
        "[Instruction] Use the following images as visual cues for style and content. Describe "
        "their key features in the final prompt to reinforce their influence, as both the prompt "
        "and the images will be sent to the final image model."
    )


class ContextClassifierService:
    """
    Validates a StudioRequest and classifies it into an AgentContext.

    Usage:
        classifier = ContextClassifierService()
        classifier.validate(request)
        classified = classifier.classify(request)
        generation_images = classifier.generation_images(request)
    """

    def __init__(
        self,
        instructions: Optional[BriefInstructions] = None,
        max_image_count: Optional[int] = None,
    ):
        """
        Initialize ContextClassifierService.

        Args:
            instructions: Brief annotation sentences
            max_image_count: Upper bound for image_count (defaults to settings)
        """
        self.instructions = instructions or BriefInstructions()
        self.max_image_count = max_image_count or settings.max_image_count

    def validate(self, request: StudioRequest) -> None:
        """
        Validate a request before any network call.

        Raises:
            UnsupportedMimeTypeError: If an image has an unsupported MIME type
            ValidationError: For conflicting images, a missing brief or a bad count
        """
        slots = request.slots

        for slot_name, image in slots.iter_populated():
            if image.mime_type not in SUPPORTED_MIME_TYPES:
                raise UnsupportedMimeTypeError(
                    f"Unsupported image type {image.mime_type!r} for "
                    f"{image.filename or slot_name}. Use PNG, JPEG, WebP, HEIC or HEIF.",
                    fields=[slot_name],
                )

        if slots.edit_image and (slots.sketch_image or slots.floorplan_image):
            raise ValidationError(
                "Please provide either an Image to Edit or a Base Image, but not both.",
                fields=["edit_image", "sketch_image" if slots.sketch_image else "floorplan_image"],
            )
        if slots.sketch_image and slots.floorplan_image:
            raise ValidationError(
                "Please provide either a Sketch/Photo Base Image or a Floor Plan Base Image, "
                "but not both.",
                fields=["sketch_image", "floorplan_image"],
            )

        if slots.edit_image is None and not request.brief.strip():
            raise ValidationError("Please enter a brief.", fields=["brief"])
        if slots.edit_image is not None and not request.edit_brief.strip():
            raise ValidationError(
                "Please describe what you want to change for the masked image.",
                fields=["edit_brief"],
            )

        if request.mode.runs_images and not 1 <= request.image_count <= self.max_image_count:
            raise ValidationError(
                f"Image count must be between 1 and {self.max_image_count}.",
                fields=["image_count"],
            )

    def classify(self, request: StudioRequest) -> ClassifiedContext:
        """
        Resolve the agent context, prompt images and annotated brief.

        Precedence: edit image > floor plan > related scene > background/sketch.
        Assumes ``validate`` has passed.
        """
        slots = request.slots
        images: List[ImageInput] = []

        if slots.edit_image is not None:
            brief = request.edit_brief
            images.append(slots.edit_image)
            if slots.mask_image is not None:
                images.append(slots.mask_image)
            brief, images = self._append_references(brief, images, slots.reference_images)
            return ClassifiedContext(
                agent_context=AgentContext.INPAINTING,
                prompt_images=tuple(images),
                brief_text=brief,
            )

        brief = request.brief
        context = AgentContext.DEFAULT

        if slots.background is not None:
            brief += f"\n\n{self.instructions.background}"
            images.append(slots.background)
        if slots.sketch_image is not None:
            brief += f"\n\n{self.instructions.sketch}"
            images.append(slots.sketch_image)
        if slots.floorplan_image is not None:
            brief += f"\n\n{self.instructions.floorplan}"
            images.append(slots.floorplan_image)
            context = AgentContext.FLOORPLAN
        if slots.related_image is not None:
            brief += f"\n\n{self.instructions.related_scene}"
            images.append(slots.related_image)
            if context is AgentContext.DEFAULT:
                context = AgentContext.RELATED_SCENE

        brief, images = self._append_references(brief, images, slots.reference_images)
        return ClassifiedContext(
            agent_context=context,
            prompt_images=tuple(images),
            brief_text=brief,
        )

    def _append_references(
        self,
        brief: str,
        images: List[ImageInput],
        references: List[ImageInput],
    ) -> Tuple[str, List[ImageInput]]:
        if references:
            brief += f"\n\n{self.instructions.references}"
            images.extend(references)
        return brief, images

    def generation_images(self, request: StudioRequest) -> List[ImageInput]:
        """
        Images sent with the final prompt to the image model.

        Edit requests send only the edit image and its mask; other requests
        send every base image followed by the reference cues.
        """
        slots = request.slots
        if slots.edit_image is not None:
            images = [slots.edit_image]
            if slots.mask_image is not None:
                images.append(slots.mask_image)
            return images
        return self._base_images(request) + list(slots.reference_images)

    def direct_images(self, request: StudioRequest) -> List[ImageInput]:
        """Images for image-only mode: edit and mask first, then everything else."""
        slots = request.slots
        images: List[ImageInput] = []
        if slots.edit_image is not None:
            images.append(slots.edit_image)
            if slots.mask_image is not None:
                images.append(slots.mask_image)
        return images + self._base_images(request) + list(slots.reference_images)

    def direct_prompt(self, request: StudioRequest) -> str:
        """Raw brief used when the agents are skipped."""
        return request.edit_brief if request.slots.edit_image is not None else request.brief

    def _base_images(self, request: StudioRequest) -> List[ImageInput]:
        slots = request.slots
        return [
            image
            for image in (
                slots.background,
                slots.sketch_image,
                slots.floorplan_image,
                slots.related_image,
            )
            if image is not None
        ]
