"""
End-to-end tests for StudioPipeline with a fake Gemini client.
"""

import base64

import pytest

from fakes import (
    PLANNER_TEXT,
    WRITER_TEXT,
    FakeGeminiClient,
    make_image,
    text_response,
)
from studio_agents.agents.studio_pipeline import StudioPipeline
from studio_agents.core.exceptions import (
    EncodingError,
    PlannerEmptyResponseError,
    TransportError,
    ValidationError,
)
from studio_agents.models import (
    AgentContext,
    EncodedImagePart,
    GenerationMode,
    ImageInput,
    ImageSlots,
    StudioRequest,
)


def agent_client(**kwargs):
    return FakeGeminiClient(
        text_outcomes=[text_response(PLANNER_TEXT), text_response(WRITER_TEXT)],
        **kwargs,
    )


def part_for(image: ImageInput) -> EncodedImagePart:
    return EncodedImagePart(base64_data=base64.b64encode(image.data).decode(), mime_type=image.mime_type)


class TestPromptAndImage:
    """Full pipeline runs."""

    @pytest.mark.asyncio
    async def test_brief_only(self):
        client = agent_client()
        pipeline = StudioPipeline(client)

        result = await pipeline.generate(StudioRequest(brief="a red bicycle on a beach", image_count=2))

        assert len(client.text_calls) == 2
        assert len(client.image_calls) == 2
        assert result.agent_context is AgentContext.DEFAULT
        for call in client.image_calls:
            assert call["parts"] == [result.content.final_prompt]
        assert result.content.checklist
        assert result.content.assumptions
        assert result.content.questions
        assert len(result.images) == 2
        assert result.failures == []

    @pytest.mark.asyncio
    async def test_edit_with_mask(self):
        client = agent_client()
        edit, mask = make_image("edit.png"), make_image("mask.png", color="white")
        request = StudioRequest(
            edit_brief="add a skylight",
            image_count=1,
            slots=ImageSlots(edit_image=edit, mask_image=mask),
        )

        result = await StudioPipeline(client).generate(request)

        assert result.agent_context is AgentContext.INPAINTING
        writer_text = client.text_calls[1]["parts"][0]
        assert writer_text.startswith('USER BRIEF: "add a skylight"')
        image_parts = client.image_calls[0]["parts"]
        assert image_parts[:2] == [part_for(edit), part_for(mask)]
        assert image_parts[2] == result.content.final_prompt
        assert len(image_parts) == 3

    @pytest.mark.asyncio
    async def test_prompt_images_and_generation_images(self):
        client = agent_client()
        sketch, ref = make_image("sketch.png"), make_image("ref.jpg", mime_type="image/jpeg")
        request = StudioRequest(
            brief="a villa",
            image_count=1,
            slots=ImageSlots(sketch_image=sketch, reference_images=[ref]),
        )

        await StudioPipeline(client).generate(request)

        planner_parts = client.text_calls[0]["parts"]
        assert planner_parts[1:] == [part_for(sketch), part_for(ref)]
        assert client.image_calls[0]["parts"][:2] == [part_for(sketch), part_for(ref)]

    @pytest.mark.asyncio
    async def test_partial_failure_is_reported(self):
        client = agent_client(image_outcomes=[TransportError("boom")])
        result = await StudioPipeline(client, policy="settle").generate(
            StudioRequest(brief="a red bicycle", image_count=3)
        )
        assert len(result.images) == 2
        assert len(result.failures) == 1


class TestModes:
    """Mode-dependent stage selection."""

    @pytest.mark.asyncio
    async def test_prompt_only_issues_no_image_requests(self):
        client = agent_client()
        result = await StudioPipeline(client).generate(
            StudioRequest(brief="a red bicycle", mode=GenerationMode.PROMPT_ONLY, image_count=8)
        )
        assert client.image_calls == []
        assert result.images == []
        assert result.content is not None

    @pytest.mark.asyncio
    async def test_prompt_only_accepts_any_image_count(self):
        client = agent_client()
        result = await StudioPipeline(client).generate(
            StudioRequest(brief="a red bicycle", mode=GenerationMode.PROMPT_ONLY, image_count=0)
        )
        assert client.image_calls == []
        assert result.content is not None

    @pytest.mark.asyncio
    async def test_image_only_skips_agents(self):
        client = FakeGeminiClient()
        background = make_image("bg.png")
        result = await StudioPipeline(client).generate(
            StudioRequest(
                brief="a red bicycle",
                mode=GenerationMode.IMAGE_ONLY,
                image_count=2,
                slots=ImageSlots(background=background),
            )
        )
        assert client.text_calls == []
        assert len(client.image_calls) == 2
        assert client.image_calls[0]["parts"] == [part_for(background), "a red bicycle"]
        assert result.content is None
        assert len(result.images) == 2


class TestFailures:
    """Errors abort the invocation."""

    @pytest.mark.asyncio
    async def test_conflicting_bases_fail_before_network(self):
        client = agent_client()
        request = StudioRequest(
            brief="a house",
            slots=ImageSlots(sketch_image=make_image("s.png"), floorplan_image=make_image("f.png")),
        )
        with pytest.raises(ValidationError):
            await StudioPipeline(client).generate(request)
        assert client.calls == []

    @pytest.mark.asyncio
    async def test_encoding_error_fails_before_network(self):
        client = agent_client()
        bad = ImageInput(data=b"not an image", mime_type="image/png", filename="bad.png")
        request = StudioRequest(brief="x", slots=ImageSlots(background=bad))
        with pytest.raises(EncodingError):
            await StudioPipeline(client).generate(request)
        assert client.calls == []

    @pytest.mark.asyncio
    async def test_planner_failure_stops_pipeline(self):
        client = FakeGeminiClient(text_outcomes=[text_response("")])
        with pytest.raises(PlannerEmptyResponseError):
            await StudioPipeline(client).generate(StudioRequest(brief="x", image_count=2))
        assert client.image_calls == []
