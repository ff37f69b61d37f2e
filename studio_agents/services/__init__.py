"""
Services layer for the studio pipeline.

Stateless building blocks used by the agents:
- Image encoding into inline wire parts
- Input validation and agent-context classification
- Planner and Writer personas
- Section parsing of model output
- Text and image generation over the shared GeminiClient
"""
from studio_agents.services.image_encoder import (
    EncodingCache,
    ImageEncoderService,
    decode_data_url,
    strip_data_url_prefix,
)
from studio_agents.services.context_classifier import (
    BriefInstructions,
    ContextClassifierService,
)
from studio_agents.services.personas import (
    PLANNER_SYSTEM_PROMPT,
    WRITER_PERSONAS,
    WriterPersona,
    get_writer_persona,
    list_personas,
)
from studio_agents.services.response_parser import (
    ASSUMPTIONS_HEADER,
    CHECKLIST_HEADER,
    PARSE_FAILURE,
    PROMPT_HEADER,
    QUESTIONS_HEADER,
    PlannerSections,
    is_parse_failure,
    parse_planner_response,
    parse_writer_response,
)
from studio_agents.services.text_generation_service import (
    TextGenerationResult,
    TextGenerationService,
)
from studio_agents.services.image_generation_service import (
    ImageGenerationService,
)

__all__ = [
    # Image encoding
    "EncodingCache",
    "ImageEncoderService",
    "decode_data_url",
    "strip_data_url_prefix",
    # Classification
    "BriefInstructions",
    "ContextClassifierService",
    # Personas
    "PLANNER_SYSTEM_PROMPT",
    "WRITER_PERSONAS",
    "WriterPersona",
    "get_writer_persona",
    "list_personas",
    # Parsing
    "ASSUMPTIONS_HEADER",
    "CHECKLIST_HEADER",
    "PARSE_FAILURE",
    "PROMPT_HEADER",
    "QUESTIONS_HEADER",
    "PlannerSections",
    "is_parse_failure",
    "parse_planner_response",
    "parse_writer_response",
    # Generation
    "TextGenerationResult",
    "TextGenerationService",
    "ImageGenerationService",
]
