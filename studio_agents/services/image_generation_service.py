"""
Image Generation Service

Fans out N identical image generation requests concurrently and flattens
every returned inline image into one list.

Failure policy is explicit (settings.fanout_policy):
- settle: every request runs to completion; successes are kept and each
  failure is recorded as a GenerationFailure.
- fail_fast: the first failed request aborts the batch and cancels every
  request still in flight.

Either way, a batch that yields no image at all fails: with the first
request error when every request failed, otherwise with NoImageDataError.
"""

from typing import List, Optional, Sequence, Union
import asyncio
import logging
import time

from config import settings
from studio_agents.core.config import StudioConfig, get_config
from studio_agents.core.exceptions import ConfigError, NoImageDataError, StudioError
from studio_agents.core.gemini_client import GeminiClient, GeminiResponse
from studio_agents.models.content import GenerationFailure, ImageBatchResult
from studio_agents.models.enums import FanoutPolicy
from studio_agents.models.images import EncodedImagePart, GeneratedImage

logger = logging.getLogger(__name__)

IMAGE_RESPONSE_MODALITIES = ["IMAGE"]


class ImageGenerationService:
    """
    Service for parallel image generation.

    Features:
    - Images-then-text part ordering (transform the supplied images)
    - Image-only response modality
    - Explicit settle / fail-fast aggregation
    """

    def __init__(
        self,
        client: GeminiClient,
        config: Optional[StudioConfig] = None,
        policy: Optional[Union[FanoutPolicy, str]] = None,
    ):
        """
        Initialize ImageGenerationService.

        Args:
            client: Shared GeminiClient instance
            config: Model profiles. Defaults to the loaded StudioConfig.
            policy: Failure policy. Defaults to settings.fanout_policy.
        """
        self._client = client
        self._config = config or get_config()
        self.policy = FanoutPolicy(policy or settings.fanout_policy)

    @property
    def model(self) -> str:
        profile = self._config.image
        if not profile.model:
            raise ConfigError("No image model configured")
        return profile.model

    def build_parts(
        self,
        prompt: str,
        images: Sequence[EncodedImagePart],
    ) -> List[Union[EncodedImagePart, str]]:
        """Image parts first, then the prompt: the model reads this as 'transform these'."""
        return [*images, prompt]

    async def _generate_one(
        self,
        index: int,
        model: str,
        parts: Sequence[Union[EncodedImagePart, str]],
    ) -> GeminiResponse:
        response = await self._client.generate_content(
            model=model,
            parts=parts,
            response_modalities=IMAGE_RESPONSE_MODALITIES,
            generation_config=self._config.image.generation_config(),
        )
        logger.info(
            f"image_generation.request.completed: index={index}, images={len(response.images)}, "
            f"finish_reason={response.finish_reason}, block_reason={response.block_reason}"
        )
        return response

    async def generate_images(
        self,
        prompt: str,
        count: int,
        images: Sequence[EncodedImagePart] = (),
    ) -> ImageBatchResult:
        """
        Issue ``count`` concurrent requests with the same prompt and images.

        Args:
            prompt: Final prompt text
            count: Number of requests (1..settings.max_image_count)
            images: Encoded images to send ahead of the prompt

        Returns:
            ImageBatchResult with all images and any per-request failures

        Raises:
            ValueError: If count is out of range
            NoImageDataError: If requests completed but returned no images
            StudioError: The first request error when every request failed,
                or any request error under the fail_fast policy
        """
        if not 1 <= count <= settings.max_image_count:
            raise ValueError(f"count must be between 1 and {settings.max_image_count}, got {count}")

        model = self.model
        parts = self.build_parts(prompt, images)
        start_time = time.time()

        logger.info(
            f"image_generation.batch.start: model={model}, count={count}, "
            f"input_images={len(images)}, policy={self.policy.value}"
        )

        tasks = [
            asyncio.create_task(self._generate_one(index, model, parts))
            for index in range(count)
        ]
        if self.policy is FanoutPolicy.FAIL_FAST:
            outcomes = await self._gather_fail_fast(tasks)
        else:
            outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        result = ImageBatchResult(requested=count, model_used=model)
        errors: List[BaseException] = []

        for index, outcome in enumerate(outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                errors.append(outcome)
                result.failures.append(self._to_failure(index, outcome))
                logger.warning(f"image_generation.request.failed: index={index}, error={outcome}")
                continue
            for image in outcome.images:
                result.images.append(GeneratedImage(
                    base64_data=image.base64_data,
                    mime_type=image.mime_type,
                    request_index=index,
                ))

        result.duration_ms = int((time.time() - start_time) * 1000)

        if not result.images:
            if errors and len(errors) == count:
                raise errors[0]
            raise NoImageDataError(
                "Image generation succeeded but no image data was returned. "
                "The prompt might have been blocked.",
                failures=[failure.to_dict() for failure in result.failures],
            )

        logger.info(
            f"image_generation.batch.complete: images={len(result.images)}, "
            f"failures={len(result.failures)}, duration_ms={result.duration_ms}"
        )
        return result

    @staticmethod
    async def _gather_fail_fast(tasks: List["asyncio.Task[GeminiResponse]"]) -> List[GeminiResponse]:
        """Await every task; on the first error, cancel the rest and raise it."""
        try:
            done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        finally:
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        for task in tasks:
            if task in done and task.exception() is not None:
                cancelled = len(pending)
                if cancelled:
                    logger.warning(f"image_generation.batch.aborted: cancelled={cancelled}")
                raise task.exception()
        return [task.result() for task in tasks]

    @staticmethod
    def _to_failure(index: int, error: Exception) -> GenerationFailure:
        if isinstance(error, StudioError):
            return GenerationFailure(
                request_index=index,
                error_code=error.error_code,
                message=error.message,
            )
        return GenerationFailure(
            request_index=index,
            error_code=type(error).__name__,
            message=str(error),
        )
