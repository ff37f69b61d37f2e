"""
Studio Agents Models Package

Shared data classes and enums for the studio pipeline.
"""

# Enums
from .enums import (
    AgentContext,
    GenerationMode,
    FanoutPolicy,
)

# Images
from .images import (
    SUPPORTED_MIME_TYPES,
    ImageInput,
    EncodedImagePart,
    GeneratedImage,
)

# Requests
from .inputs import (
    ImageSlots,
    StudioRequest,
    ClassifiedContext,
)

# Results
from .content import (
    SUPPORTED_ASPECT_RATIOS,
    GeneratedContent,
    GenerationFailure,
    ImageBatchResult,
    StudioResult,
)

__all__ = [
    # Enums
    "AgentContext",
    "GenerationMode",
    "FanoutPolicy",
    # Images
    "SUPPORTED_MIME_TYPES",
    "ImageInput",
    "EncodedImagePart",
    "GeneratedImage",
    # Requests
    "ImageSlots",
    "StudioRequest",
    "ClassifiedContext",
    # Results
    "SUPPORTED_ASPECT_RATIOS",
    "GeneratedContent",
    "GenerationFailure",
    "ImageBatchResult",
    "StudioResult",
]
