"""
Test doubles and sample data shared across the test suite.
"""

import io
from typing import Any, Dict, List, Optional, Sequence, Union

from PIL import Image

from studio_agents.core.gemini_client import GeminiResponse
from studio_agents.models import GeneratedImage, ImageInput


PLANNER_TEXT = """**Checklist**
- Use a photorealistic rendering style.
- Show a red bicycle as the main subject.
- Place it on a sandy beach at golden hour.
"""

WRITER_TEXT = """**Final One-Shot Prompt**
A photorealistic shot of a glossy red bicycle leaning on its kickstand on a wide sandy beach
at golden hour, shot on a 35mm lens at eye level with warm rim light.
AR: 16:9

**Assumptions**
- Assumed a daytime scene.
- Assumed a photorealistic style.

**Clarifying Questions**
1. Should there be people in the scene?
"""


def make_image_bytes(fmt: str = "PNG", color: str = "red", size: int = 4) -> bytes:
    """Encode a tiny solid-color image with Pillow."""
    buffer = io.BytesIO()
    Image.new("RGB", (size, size), color).save(buffer, format=fmt)
    return buffer.getvalue()


def make_image(name: str = "image.png", mime_type: str = "image/png", color: str = "red") -> ImageInput:
    fmt = {"image/png": "PNG", "image/jpeg": "JPEG", "image/webp": "WEBP"}.get(mime_type, "PNG")
    return ImageInput(data=make_image_bytes(fmt, color), mime_type=mime_type, filename=name)


def text_response(text: str, model: str = "gemini-2.5-flash") -> GeminiResponse:
    return GeminiResponse(text=text, model=model)


def image_response(count: int = 1, model: str = "gemini-2.5-flash-image") -> GeminiResponse:
    return GeminiResponse(
        text="",
        model=model,
        images=[GeneratedImage(base64_data=f"aW1hZ2U{i}", mime_type="image/png") for i in range(count)],
    )


Outcome = Union[GeminiResponse, Exception]


class FakeGeminiClient:
    """
    In-memory stand-in for GeminiClient.

    Text calls pop from ``text_outcomes`` in order; image calls (IMAGE
    response modality) pop from ``image_outcomes`` or fall back to
    ``default_image``. Exceptions in either queue are raised.
    """

    def __init__(
        self,
        text_outcomes: Optional[List[Outcome]] = None,
        image_outcomes: Optional[List[Outcome]] = None,
        default_image: Optional[GeminiResponse] = None,
    ):
        self.text_outcomes = list(text_outcomes or [])
        self.image_outcomes = list(image_outcomes or [])
        self.default_image = default_image or image_response()
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    async def generate_content(
        self,
        model: str,
        parts: Sequence[Any],
        system_instruction: Optional[str] = None,
        response_modalities: Optional[List[str]] = None,
        generation_config: Optional[Dict[str, Any]] = None,
    ) -> GeminiResponse:
        self.calls.append({
            "model": model,
            "parts": list(parts),
            "system_instruction": system_instruction,
            "response_modalities": response_modalities,
            "generation_config": generation_config,
        })
        if response_modalities == ["IMAGE"]:
            outcome = self.image_outcomes.pop(0) if self.image_outcomes else self.default_image
        else:
            outcome = self.text_outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    @property
    def text_calls(self) -> List[Dict[str, Any]]:
        return [c for c in self.calls if c["response_modalities"] != ["IMAGE"]]

    @property
    def image_calls(self) -> List[Dict[str, Any]]:
        return [c for c in self.calls if c["response_modalities"] == ["IMAGE"]]

    async def close(self) -> None:
        self.closed = True
