"""
Studio Pipeline - top-level generate operation.

Wires the stages together according to the generation mode:

    validate -> classify -> encode -> Planner -> Writer -> fan-out

- prompt_and_image: every stage
- prompt_only: stops after the Writer; no image requests are issued
- image_only: skips the agents and sends the raw brief with the images

Validation always runs first, so conflicting inputs fail before any
network call. The GeminiClient is passed in explicitly and shared by all
stages of one pipeline instance.
"""

from typing import List, Optional, Union
import uuid

from src.utils.logger import get_logger, set_correlation_context
from src.utils.metrics import (
    active_generations,
    error_count,
    image_generation_count,
    images_generated,
    pipeline_duration,
    pipeline_runs,
)
from studio_agents.agents.prompt_orchestrator import PromptOrchestratorAgent
from studio_agents.core.agent import BaseAgent
from studio_agents.core.config import StudioConfig, get_config
from studio_agents.core.exceptions import StudioError
from studio_agents.core.gemini_client import GeminiClient
from studio_agents.models.content import ImageBatchResult, StudioResult
from studio_agents.models.enums import FanoutPolicy, GenerationMode
from studio_agents.models.images import EncodedImagePart
from studio_agents.models.inputs import ClassifiedContext, StudioRequest
from studio_agents.services.context_classifier import ContextClassifierService
from studio_agents.services.image_encoder import EncodingCache, ImageEncoderService
from studio_agents.services.image_generation_service import ImageGenerationService
from studio_agents.services.text_generation_service import TextGenerationService

logger = get_logger(__name__)


class StudioPipeline(BaseAgent):
    """
    Runs one studio request end to end.

    Usage:
        async with GeminiClient() as client:
            pipeline = StudioPipeline(client)
            result = await pipeline.generate(request)
    """

    def __init__(
        self,
        client: GeminiClient,
        config: Optional[StudioConfig] = None,
        classifier: Optional[ContextClassifierService] = None,
        encoder: Optional[ImageEncoderService] = None,
        policy: Optional[Union[FanoutPolicy, str]] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            client: Shared GeminiClient used by every stage
            config: Model profiles. Defaults to the loaded StudioConfig.
            classifier: Context classifier (default instance if None)
            encoder: Image encoder (default instance if None)
            policy: Fan-out failure policy. Defaults to settings.fanout_policy.
        """
        super().__init__(
            name="studio_pipeline",
            description="Brief and images in, structured prompt and images out",
        )
        config = config or get_config()
        self.client = client
        self.classifier = classifier or ContextClassifierService()
        self.encoder = encoder or ImageEncoderService()
        self.orchestrator = PromptOrchestratorAgent(TextGenerationService(client, config))
        self.image_service = ImageGenerationService(client, config, policy=policy)

    async def run(self, request: StudioRequest) -> StudioResult:
        return await self.generate(request)

    async def generate(
        self,
        request: StudioRequest,
        generation_id: Optional[str] = None,
    ) -> StudioResult:
        """
        Execute one request.

        Args:
            request: Brief, mode, image count and categorized images
            generation_id: Correlation ID for logs (generated if None)

        Returns:
            StudioResult; ``content`` is None in image_only mode and
            ``images`` is empty in prompt_only mode

        Raises:
            StudioError: Any validation, encoding, orchestration or
                generation failure. Nothing is retried.
        """
        generation_id = generation_id or str(uuid.uuid4())
        set_correlation_context(generation_id=generation_id)
        mode = GenerationMode(request.mode)

        self._start_execution()
        active_generations.inc()
        logger.info(
            "studio_pipeline.start",
            mode=mode.value,
            image_count=request.image_count,
            slots=request.slots.summary(),
        )

        classified: Optional[ClassifiedContext] = None
        try:
            self.classifier.validate(request)
            classified = self.classifier.classify(request)
            cache = EncodingCache()

            if mode is GenerationMode.IMAGE_ONLY:
                result = await self._generate_direct(request, classified, cache)
            else:
                result = await self._generate_with_agents(request, classified, cache)
        except StudioError as e:
            duration_ms = self._end_execution(success=False)
            context_label = classified.agent_context.value if classified else "unknown"
            pipeline_runs.labels(mode=mode.value, agent_context=context_label, status="error").inc()
            error_count.labels(error_code=e.error_code, component="pipeline").inc()
            logger.error(
                "studio_pipeline.failed",
                error_code=e.error_code,
                err_msg=e.message,
                duration_ms=duration_ms,
            )
            raise
        finally:
            active_generations.dec()

        result.duration_ms = self._end_execution(success=True)
        pipeline_runs.labels(
            mode=mode.value,
            agent_context=result.agent_context.value,
            status="partial" if result.failures else "success",
        ).inc()
        pipeline_duration.labels(mode=mode.value).observe(result.duration_ms / 1000)
        logger.info(
            "studio_pipeline.complete",
            agent_context=result.agent_context.value,
            images=len(result.images),
            failures=len(result.failures),
            duration_ms=result.duration_ms,
        )
        return result

    async def _generate_with_agents(
        self,
        request: StudioRequest,
        classified: ClassifiedContext,
        cache: EncodingCache,
    ) -> StudioResult:
        mode = GenerationMode(request.mode)
        prompt_parts = await self.encoder.encode_all(classified.prompt_images, cache)

        content = await self.orchestrator.run(
            classified.agent_context,
            classified.brief_text,
            prompt_parts,
        )
        result = StudioResult(
            mode=mode,
            agent_context=classified.agent_context,
            content=content,
        )

        if not mode.runs_images:
            return result

        generation_parts = await self.encoder.encode_all(
            self.classifier.generation_images(request), cache
        )
        batch = await self._fan_out(content.final_prompt, request.image_count, generation_parts)
        result.images = batch.images
        result.failures = batch.failures
        return result

    async def _generate_direct(
        self,
        request: StudioRequest,
        classified: ClassifiedContext,
        cache: EncodingCache,
    ) -> StudioResult:
        parts = await self.encoder.encode_all(self.classifier.direct_images(request), cache)
        batch = await self._fan_out(self.classifier.direct_prompt(request), request.image_count, parts)
        return StudioResult(
            mode=GenerationMode.IMAGE_ONLY,
            agent_context=classified.agent_context,
            images=batch.images,
            failures=batch.failures,
        )

    async def _fan_out(
        self,
        prompt: str,
        count: int,
        parts: List[EncodedImagePart],
    ) -> ImageBatchResult:
        model = self.image_service.model
        try:
            batch = await self.image_service.generate_images(prompt, count, parts)
        except StudioError:
            image_generation_count.labels(model=model, status="error").inc(count)
            raise

        image_generation_count.labels(model=model, status="success").inc(count - len(batch.failures))
        if batch.failures:
            image_generation_count.labels(model=model, status="error").inc(len(batch.failures))
        images_generated.labels(model=model).inc(len(batch.images))
        return batch
