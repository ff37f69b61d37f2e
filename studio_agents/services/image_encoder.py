"""
Image Encoder Service

Converts uploaded images into the inline base64 wire format accepted by the
generative service. The MIME type is preserved exactly and pixel data is
never re-encoded; Pillow is only used to check that the bytes decode.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence
import asyncio
import base64
import binascii
import io
import logging

from PIL import Image, UnidentifiedImageError

from config import settings
from studio_agents.core.exceptions import EncodingError, UnsupportedMimeTypeError
from studio_agents.models.images import SUPPORTED_MIME_TYPES, EncodedImagePart, ImageInput

logger = logging.getLogger(__name__)

# Formats Pillow can verify without optional plugins
VERIFIABLE_MIME_TYPES = frozenset({"image/png", "image/jpeg", "image/webp"})


def strip_data_url_prefix(value: str) -> str:
    """
    Return the base64 payload of a data URL, or the value unchanged.

    "data:image/png;base64,AAAA" -> "AAAA"
    """
    if value.startswith("data:") and "," in value:
        return value.split(",", 1)[1]
    return value


def decode_data_url(value: str, filename: str = "") -> ImageInput:
    """Build an ImageInput from a data URL such as a browser FileReader result."""
    if not value.startswith("data:") or "," not in value:
        raise EncodingError("Expected a base64 data URL", filename=filename or None)
    header = value[len("data:"):value.index(",")]
    mime_type = header.split(";", 1)[0] or "application/octet-stream"
    try:
        data = base64.b64decode(strip_data_url_prefix(value), validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncodingError(
            f"Could not decode image data for {filename or 'upload'}",
            filename=filename or None,
        ) from e
    return ImageInput(data=data, mime_type=mime_type, filename=filename)


@dataclass
class EncodingCache:
    """Per-invocation memo of encoded parts, keyed by resource identity."""
    _parts: Dict[int, EncodedImagePart] = field(default_factory=dict)

    def get(self, image: ImageInput) -> Optional[EncodedImagePart]:
        return self._parts.get(id(image))

    def put(self, image: ImageInput, part: EncodedImagePart) -> None:
        self._parts[id(image)] = part

    def __len__(self) -> int:
        return len(self._parts)


class ImageEncoderService:
    """
    Encodes ImageInput objects into EncodedImagePart payloads.

    Usage:
        encoder = ImageEncoderService()
        parts = await encoder.encode_all(images, cache=EncodingCache())
    """

    def __init__(self, verify_image_data: Optional[bool] = None):
        """
        Initialize ImageEncoderService.

        Args:
            verify_image_data: Check that PNG/JPEG/WebP bytes decode.
                Defaults to settings.verify_image_data.
        """
        self.verify_image_data = (
            settings.verify_image_data if verify_image_data is None else verify_image_data
        )

    def encode(self, image: ImageInput) -> EncodedImagePart:
        """
        Encode a single image.

        Raises:
            UnsupportedMimeTypeError: If the MIME type is not accepted
            EncodingError: If the image data cannot be read
        """
        if image.mime_type not in SUPPORTED_MIME_TYPES:
            raise UnsupportedMimeTypeError(
                f"Unsupported image type {image.mime_type!r} for {image.filename or 'upload'}. "
                f"Use PNG, JPEG, WebP, HEIC or HEIF.",
                fields=[image.filename] if image.filename else None,
            )

        data = image.data
        if not isinstance(data, (bytes, bytearray)):
            raise EncodingError(
                f"Could not read {image.filename or 'upload'}: expected bytes, got {type(data).__name__}",
                filename=image.filename or None,
            )
        if not data:
            raise EncodingError(
                f"Could not read {image.filename or 'upload'}: the file is empty",
                filename=image.filename or None,
            )

        if self.verify_image_data and image.mime_type in VERIFIABLE_MIME_TYPES:
            self._verify(image)

        return EncodedImagePart(
            base64_data=base64.b64encode(bytes(data)).decode("ascii"),
            mime_type=image.mime_type,
        )

    def _verify(self, image: ImageInput) -> None:
        """Check that Pillow can parse the image without decoding pixels."""
        try:
            with Image.open(io.BytesIO(image.data)) as img:
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
            logger.warning(f"image_encoder.verify_failed: filename={image.filename}, error={e}")
            raise EncodingError(
                f"Could not read {image.filename or 'upload'}: the image data is corrupt",
                filename=image.filename or None,
            ) from e

    async def encode_async(
        self,
        image: ImageInput,
        cache: Optional[EncodingCache] = None,
    ) -> EncodedImagePart:
        """Encode one image off the event loop, consulting the cache first."""
        if cache is not None:
            cached = cache.get(image)
            if cached is not None:
                return cached

        part = await asyncio.to_thread(self.encode, image)

        if cache is not None:
            cache.put(image, part)
        return part

    async def encode_all(
        self,
        images: Sequence[ImageInput],
        cache: Optional[EncodingCache] = None,
    ) -> List[EncodedImagePart]:
        """
        Encode images concurrently, preserving input order.

        Args:
            images: Images in request order
            cache: Optional per-invocation cache

        Returns:
            Encoded parts in the same order as ``images``
        """
        if not images:
            return []
        parts = await asyncio.gather(
            *(self.encode_async(image, cache) for image in images)
        )
        logger.debug(f"image_encoder.encoded: count={len(parts)}")
        return list(parts)
