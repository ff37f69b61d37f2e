"""
Prompt Orchestrator Agent - Planner then Writer.

Two strictly sequential model calls turn an annotated brief and its images
into a structured prompt:

1. Planner: reads the brief and images, answers with a **Checklist**.
2. Writer: the persona selected by the agent context reads the brief, the
   checklist (embedded as **Plan**) and the same images, and answers with
   the final prompt, assumptions and clarifying questions.

Any empty or unparseable answer aborts the invocation. There is no retry
and no fallback model.
"""

from typing import List, Optional, Sequence, Union
import time

from src.utils.logger import get_logger
from src.utils.metrics import error_count, stage_count, stage_duration
from studio_agents.core.agent import BaseAgent
from studio_agents.core.exceptions import (
    PlannerEmptyResponseError,
    PlannerMalformedResponseError,
    StudioError,
    WriterEmptyResponseError,
    WriterMalformedResponseError,
)
from studio_agents.models.content import GeneratedContent
from studio_agents.models.enums import AgentContext
from studio_agents.models.images import EncodedImagePart
from studio_agents.services.personas import PLANNER_SYSTEM_PROMPT, get_writer_persona
from studio_agents.services.response_parser import (
    PlannerSections,
    is_parse_failure,
    parse_planner_response,
    parse_writer_response,
)
from studio_agents.services.text_generation_service import TextGenerationService

logger = get_logger(__name__)

Part = Union[str, EncodedImagePart]


def planner_parts(brief: str, images: Sequence[EncodedImagePart]) -> List[Part]:
    """Planner request: the quoted brief, then every prompt image."""
    return [f'USER BRIEF: "{brief}"', *images]


def writer_parts(
    brief: str,
    plan: PlannerSections,
    images: Sequence[EncodedImagePart],
) -> List[Part]:
    """Writer request: the quoted brief with the Planner's checklist, then every prompt image."""
    return [f'USER BRIEF: "{brief}"\n\n**Plan**\n{plan.checklist_text}', *images]


class PromptOrchestratorAgent(BaseAgent):
    """
    Runs the Planner and Writer stages for one classified request.

    Usage:
        orchestrator = PromptOrchestratorAgent(TextGenerationService(client))
        content = await orchestrator.run(AgentContext.DEFAULT, brief, images)
    """

    def __init__(self, text_service: TextGenerationService):
        super().__init__(
            name="prompt_orchestrator",
            description="Plans and writes a one-shot image generation prompt",
        )
        self.text_service = text_service

    async def run(
        self,
        agent_context: AgentContext,
        brief: str,
        images: Sequence[EncodedImagePart] = (),
    ) -> GeneratedContent:
        """
        Produce GeneratedContent for an annotated brief.

        Args:
            agent_context: Selects the Writer persona
            brief: Brief text including any instruction sentences
            images: Encoded prompt images, in classifier order

        Returns:
            GeneratedContent with a non-empty final prompt

        Raises:
            PlannerEmptyResponseError, PlannerMalformedResponseError,
            WriterEmptyResponseError, WriterMalformedResponseError,
            TransportError: On any stage failure
        """
        self._start_execution()
        logger.info(
            "prompt_orchestrator.start",
            agent_context=AgentContext(agent_context).value,
            brief_chars=len(brief),
            images=len(images),
        )

        try:
            plan = await self.plan(brief, images)
            content = await self.write(agent_context, brief, plan, images)
        except StudioError as e:
            duration_ms = self._end_execution(success=False)
            logger.error(
                "prompt_orchestrator.failed",
                error_code=e.error_code,
                err_msg=e.message,
                duration_ms=duration_ms,
            )
            raise

        duration_ms = self._end_execution(success=True)
        logger.info(
            "prompt_orchestrator.complete",
            checklist_items=len(content.checklist),
            assumptions=len(content.assumptions),
            questions=len(content.questions),
            aspect_ratio=content.aspect_ratio,
            duration_ms=duration_ms,
        )
        return content

    async def plan(
        self,
        brief: str,
        images: Sequence[EncodedImagePart] = (),
    ) -> PlannerSections:
        """Planner stage: brief and images in, checklist out."""
        start_time = time.time()
        try:
            result = await self.text_service.generate_text(
                parts=planner_parts(brief, images),
                system_prompt=PLANNER_SYSTEM_PROMPT,
                profile_name="planner",
            )

            if result.is_empty:
                raise PlannerEmptyResponseError("The Planner agent returned an empty response.")

            sections = parse_planner_response(result.content)
            if sections is None:
                logger.warning(
                    "prompt_orchestrator.planner.unparsed",
                    response_preview=result.content[:200],
                )
                raise PlannerMalformedResponseError(
                    "The Planner agent's response did not contain a checklist."
                )
        except StudioError as e:
            self._record_stage("planner", "error", start_time, e)
            raise

        self._record_stage("planner", "success", start_time)
        logger.info(
            "prompt_orchestrator.planner.complete",
            model=result.model_used,
            checklist_items=len(sections.checklist),
        )
        return sections

    async def write(
        self,
        agent_context: AgentContext,
        brief: str,
        plan: PlannerSections,
        images: Sequence[EncodedImagePart] = (),
    ) -> GeneratedContent:
        """Writer stage: persona by agent context, structured content out."""
        persona = get_writer_persona(agent_context)
        start_time = time.time()
        try:
            result = await self.text_service.generate_text(
                parts=writer_parts(brief, plan, images),
                system_prompt=persona.instructions,
                profile_name="writer",
            )

            if result.is_empty:
                raise WriterEmptyResponseError(
                    f"The {persona.name} agent returned an empty response."
                )

            content = parse_writer_response(result.content, plan.checklist)
            if is_parse_failure(content):
                logger.warning(
                    "prompt_orchestrator.writer.unparsed",
                    persona=persona.name,
                    response_preview=result.content[:200],
                )
                raise WriterMalformedResponseError(
                    f"The {persona.name} agent's response did not contain a final prompt."
                )
        except StudioError as e:
            self._record_stage("writer", "error", start_time, e)
            raise

        self._record_stage("writer", "success", start_time)
        logger.info(
            "prompt_orchestrator.writer.complete",
            persona=persona.name,
            model=result.model_used,
        )
        return persona.apply(content)

    @staticmethod
    def _record_stage(
        stage: str,
        status: str,
        start_time: float,
        error: Optional[StudioError] = None,
    ) -> None:
        stage_count.labels(stage=stage, status=status).inc()
        stage_duration.labels(stage=stage).observe(time.time() - start_time)
        if error is not None:
            error_count.labels(error_code=error.error_code, component=stage).inc()
