"""
Request and response schemas for API endpoints.
"""
from datetime import datetime, timezone
from typing import Any, Optional
from pydantic import BaseModel, Field

from studio_agents.models import AgentContext, GenerationMode, StudioResult


# Studio Schemas
class GeneratedContentSchema(BaseModel):
    """Structured prompt from the Planner and Writer."""
    checklist: list[str] = Field(default_factory=list, description="Planner checklist items")
    final_prompt: str = Field(..., description="One-shot prompt for the image model")
    assumptions: list[str] = Field(default_factory=list)
    questions: list[str] = Field(default_factory=list, description="Clarifying questions")
    aspect_ratio: Optional[str] = Field(default=None, description="Aspect ratio tag, e.g. 16:9")


class GeneratedImageSchema(BaseModel):
    """One generated image, ready for display."""
    data_url: str = Field(..., description="data:<mime>;base64,<payload>")
    mime_type: str
    request_index: int = Field(..., description="Index of the fan-out request that returned it")


class GenerationFailureSchema(BaseModel):
    """One fan-out request that did not complete."""
    request_index: int
    error_code: str
    message: str


class GenerateResponse(BaseModel):
    """Response from POST /studio/generate."""
    generation_id: str
    mode: GenerationMode
    agent_context: AgentContext
    content: Optional[GeneratedContentSchema] = None
    images: list[GeneratedImageSchema] = Field(default_factory=list)
    failures: list[GenerationFailureSchema] = Field(default_factory=list)
    duration_ms: int = 0
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_result(cls, generation_id: str, result: StudioResult) -> "GenerateResponse":
        """Build the API response from a pipeline result."""
        return cls(
            generation_id=generation_id,
            mode=result.mode,
            agent_context=result.agent_context,
            content=(
                GeneratedContentSchema(**result.content.to_dict())
                if result.content is not None
                else None
            ),
            images=[
                GeneratedImageSchema(
                    data_url=image.to_data_url(),
                    mime_type=image.mime_type,
                    request_index=image.request_index,
                )
                for image in result.images
            ],
            failures=[GenerationFailureSchema(**failure.to_dict()) for failure in result.failures],
            duration_ms=result.duration_ms,
        )


# Health Schemas
class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    version: str = "0.1.0"
    services: dict[str, bool]


# Error Schemas
class ErrorDetail(BaseModel):
    """Error detail."""
    code: str
    message: str
    details: Optional[dict[str, Any]] = None


class ErrorResponse(BaseModel):
    """Error response."""
    error: ErrorDetail
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    request_id: Optional[str] = None
