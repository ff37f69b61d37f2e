"""Tests for studio_agents.models.content and enums."""

from studio_agents.models import (
    AgentContext,
    GeneratedContent,
    GeneratedImage,
    GenerationFailure,
    GenerationMode,
    ImageBatchResult,
    StudioResult,
)


class TestGenerationMode:
    """Tests for GenerationMode stage flags."""

    def test_prompt_and_image(self):
        assert GenerationMode.PROMPT_AND_IMAGE.runs_agents
        assert GenerationMode.PROMPT_AND_IMAGE.runs_images

    def test_prompt_only(self):
        assert GenerationMode.PROMPT_ONLY.runs_agents
        assert not GenerationMode.PROMPT_ONLY.runs_images

    def test_image_only(self):
        assert not GenerationMode.IMAGE_ONLY.runs_agents
        assert GenerationMode.IMAGE_ONLY.runs_images

    def test_values(self):
        assert GenerationMode("prompt_only") is GenerationMode.PROMPT_ONLY
        assert AgentContext("related_scene") is AgentContext.RELATED_SCENE


class TestGeneratedContent:
    """Tests for GeneratedContent."""

    def test_round_trip(self):
        content = GeneratedContent(
            checklist=["a"],
            final_prompt="prompt",
            assumptions=["b"],
            questions=["c"],
            aspect_ratio="4:3",
        )
        assert GeneratedContent.from_dict(content.to_dict()) == content

    def test_defaults(self):
        content = GeneratedContent.from_dict({"final_prompt": "p"})
        assert content.checklist == []
        assert content.assumptions == []
        assert content.aspect_ratio is None


class TestResults:
    """Tests for batch and pipeline results."""

    def test_is_partial(self):
        batch = ImageBatchResult(
            images=[GeneratedImage(base64_data="AA")],
            failures=[GenerationFailure(request_index=1, error_code="TRANSPORT_ERROR", message="x")],
        )
        assert batch.is_partial
        assert not ImageBatchResult(images=[GeneratedImage(base64_data="AA")]).is_partial

    def test_studio_result_to_dict(self):
        result = StudioResult(
            mode=GenerationMode.PROMPT_ONLY,
            agent_context=AgentContext.FLOORPLAN,
            content=GeneratedContent(checklist=["a"], final_prompt="p"),
        )
        data = result.to_dict()
        assert data["mode"] == "prompt_only"
        assert data["agent_context"] == "floorplan"
        assert data["content"]["final_prompt"] == "p"
        assert data["images"] == []
