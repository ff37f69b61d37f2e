"""
Image data models.

ImageInput is borrowed from the caller for the duration of one request;
EncodedImagePart is its wire form; GeneratedImage is one result image.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union
import mimetypes

# MIME types accepted by the generative service for inline image data
SUPPORTED_MIME_TYPES = frozenset({
    "image/png",
    "image/jpeg",
    "image/webp",
    "image/heic",
    "image/heif",
})

_SUFFIX_MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".heic": "image/heic",
    ".heif": "image/heif",
}


@dataclass(eq=False)
class ImageInput:
    """
    An uploaded image: raw bytes, declared MIME type and original filename.

    Compared by identity so per-request encode caches key on the resource
    rather than on its contents.
    """
    data: bytes
    mime_type: str
    filename: str = ""

    @property
    def is_supported(self) -> bool:
        return self.mime_type in SUPPORTED_MIME_TYPES

    @classmethod
    def from_path(cls, path: Union[str, Path], mime_type: Optional[str] = None) -> "ImageInput":
        """Read an image file, guessing the MIME type from its suffix."""
        path = Path(path)
        if mime_type is None:
            mime_type = _SUFFIX_MIME_TYPES.get(path.suffix.lower())
        if mime_type is None:
            mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return cls(data=path.read_bytes(), mime_type=mime_type, filename=path.name)

    def __repr__(self) -> str:
        return (
            f"ImageInput(filename={self.filename!r}, mime_type={self.mime_type!r}, "
            f"size={len(self.data)})"
        )


@dataclass(frozen=True)
class EncodedImagePart:
    """Inline image payload: base64 without any data URI prefix."""
    base64_data: str
    mime_type: str

    def to_wire(self) -> Dict[str, Any]:
        """Render as a generateContent inline data part."""
        return {"inline_data": {"mime_type": self.mime_type, "data": self.base64_data}}

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64_data}"


@dataclass
class GeneratedImage:
    """A single generated image returned by the image model."""
    base64_data: str
    mime_type: str = "image/png"
    request_index: int = 0
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_data_url(self) -> str:
        """Data URL for display; never sent back to the generative service."""
        return f"data:{self.mime_type};base64,{self.base64_data}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "mime_type": self.mime_type,
            "request_index": self.request_index,
            "data_url": self.to_data_url(),
            "metadata": self.metadata,
        }
