"""
Studio API routes.
"""
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from config import settings
from src.models.schemas import GenerateResponse
from src.utils import get_logger
from studio_agents.agents import StudioPipeline
from studio_agents.core.exceptions import ValidationError
from studio_agents.models import GenerationMode, ImageInput, ImageSlots, StudioRequest

logger = get_logger(__name__)
router = APIRouter()


def get_pipeline(request: Request) -> StudioPipeline:
    """Pipeline created in the application lifespan."""
    return request.app.state.pipeline


async def read_upload(upload: Optional[UploadFile]) -> Optional[ImageInput]:
    """Read an optional multipart file into an ImageInput; empty fields count as absent."""
    if upload is None or not upload.filename:
        return None
    data = await upload.read()
    return ImageInput(
        data=data,
        mime_type=upload.content_type or "application/octet-stream",
        filename=upload.filename,
    )


def parse_mode(value: str) -> GenerationMode:
    try:
        return GenerationMode(value)
    except ValueError:
        allowed = ", ".join(mode.value for mode in GenerationMode)
        raise ValidationError(f"Unknown mode {value!r}. Use one of: {allowed}.", fields=["mode"])


@router.post("/generate", response_model=GenerateResponse)
async def generate(
    brief: str = Form(""),
    edit_brief: str = Form(""),
    mode: str = Form(GenerationMode.PROMPT_AND_IMAGE.value),
    image_count: int = Form(settings.default_image_count),
    background: Optional[UploadFile] = File(None),
    edit_image: Optional[UploadFile] = File(None),
    mask_image: Optional[UploadFile] = File(None),
    sketch_image: Optional[UploadFile] = File(None),
    floorplan_image: Optional[UploadFile] = File(None),
    related_image: Optional[UploadFile] = File(None),
    reference_images: Optional[List[UploadFile]] = File(None),
    pipeline: StudioPipeline = Depends(get_pipeline),
) -> GenerateResponse:
    """
    Generate a structured prompt and/or images from a brief and optional images.

    Errors are raised as StudioError subclasses and rendered by the
    application's exception handler.
    """
    references = []
    for upload in reference_images or []:
        image = await read_upload(upload)
        if image is not None:
            references.append(image)

    studio_request = StudioRequest(
        brief=brief,
        edit_brief=edit_brief,
        mode=parse_mode(mode),
        image_count=image_count,
        slots=ImageSlots(
            background=await read_upload(background),
            edit_image=await read_upload(edit_image),
            mask_image=await read_upload(mask_image),
            sketch_image=await read_upload(sketch_image),
            floorplan_image=await read_upload(floorplan_image),
            related_image=await read_upload(related_image),
            reference_images=references,
        ),
    )

    generation_id = str(uuid.uuid4())
    logger.info(
        "Studio generation request received",
        generation_id=generation_id,
        mode=studio_request.mode.value,
        image_count=image_count,
        slots=studio_request.slots.summary(),
    )

    result = await pipeline.generate(studio_request, generation_id=generation_id)
    return GenerateResponse.from_result(generation_id, result)
