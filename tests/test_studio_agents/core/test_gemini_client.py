"""
Tests for GeminiClient using httpx.MockTransport.
"""

import json

import httpx
import pytest

from studio_agents.core.exceptions import ConfigError, GenerationTimeoutError, TransportError
from studio_agents.core.gemini_client import GeminiClient, to_wire_part
from studio_agents.models import EncodedImagePart


def make_client(handler, api_key="test-key"):
    return GeminiClient(
        api_key=api_key,
        base_url="https://example.test/v1beta",
        timeout=5,
        transport=httpx.MockTransport(handler),
    )


def text_payload(*texts, finish_reason="STOP"):
    return {
        "candidates": [{
            "content": {"parts": [{"text": t} for t in texts]},
            "finishReason": finish_reason,
        }],
        "usageMetadata": {"promptTokenCount": 12, "candidatesTokenCount": 34},
        "modelVersion": "gemini-2.5-flash",
    }


class TestWireParts:
    """Tests for request part conversion."""

    def test_text_part(self):
        assert to_wire_part("hello") == {"text": "hello"}

    def test_image_part(self):
        part = EncodedImagePart(base64_data="AAAA", mime_type="image/png")
        assert to_wire_part(part) == {"inline_data": {"mime_type": "image/png", "data": "AAAA"}}

    def test_dict_passthrough(self):
        assert to_wire_part({"text": "x"}) == {"text": "x"}


class TestGenerateContent:
    """Tests for generate_content."""

    @pytest.mark.asyncio
    async def test_request_shape(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["headers"] = request.headers
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json=text_payload("ok"))

        client = make_client(handler)
        image = EncodedImagePart(base64_data="AAAA", mime_type="image/jpeg")
        await client.generate_content(
            model="gemini-2.5-flash",
            parts=[image, "make it blue"],
            system_instruction="You are the Planner.",
            response_modalities=["IMAGE"],
            generation_config={"temperature": 0.4},
        )
        await client.close()

        assert captured["url"] == "https://example.test/v1beta/models/gemini-2.5-flash:generateContent"
        assert captured["headers"]["x-goog-api-key"] == "test-key"
        body = captured["body"]
        assert body["contents"] == [{
            "role": "user",
            "parts": [
                {"inline_data": {"mime_type": "image/jpeg", "data": "AAAA"}},
                {"text": "make it blue"},
            ],
        }]
        assert body["systemInstruction"] == {"parts": [{"text": "You are the Planner."}]}
        assert body["generationConfig"] == {"temperature": 0.4, "responseModalities": ["IMAGE"]}

    @pytest.mark.asyncio
    async def test_minimal_request_has_no_optional_fields(self):
        captured = {}

        def handler(request):
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json=text_payload("ok"))

        client = make_client(handler)
        await client.generate_content(model="m", parts=["hi"])
        await client.close()

        assert "systemInstruction" not in captured["body"]
        assert "generationConfig" not in captured["body"]

    @pytest.mark.asyncio
    async def test_text_and_usage(self):
        client = make_client(lambda request: httpx.Response(200, json=text_payload("Hello ", "world")))
        response = await client.generate_content(model="gemini-2.5-flash", parts=["hi"])
        await client.close()

        assert response.text == "Hello world"
        assert response.finish_reason == "STOP"
        assert response.tokens_input == 12
        assert response.tokens_output == 34
        assert response.images == []

    @pytest.mark.asyncio
    async def test_thought_parts_excluded(self):
        payload = {"candidates": [{"content": {"parts": [
            {"text": "thinking...", "thought": True},
            {"text": "answer"},
        ]}}]}
        client = make_client(lambda request: httpx.Response(200, json=payload))
        response = await client.generate_content(model="m", parts=["hi"])
        await client.close()
        assert response.text == "answer"

    @pytest.mark.asyncio
    async def test_missing_text_is_empty(self):
        client = make_client(lambda request: httpx.Response(200, json={"candidates": []}))
        response = await client.generate_content(model="m", parts=["hi"])
        await client.close()
        assert response.text == ""

    @pytest.mark.asyncio
    async def test_inline_images_from_all_candidates(self):
        payload = {
            "candidates": [
                {"content": {"parts": [
                    {"inlineData": {"mimeType": "image/png", "data": "AAA"}},
                    {"text": "caption"},
                ]}},
                {"content": {"parts": [
                    {"inline_data": {"mime_type": "image/jpeg", "data": "BBB"}},
                    {"text": "ignored"},
                ]}},
            ],
            "promptFeedback": {},
        }
        client = make_client(lambda request: httpx.Response(200, json=payload))
        response = await client.generate_content(model="m", parts=["hi"], response_modalities=["IMAGE"])
        await client.close()

        assert [(i.base64_data, i.mime_type) for i in response.images] == [
            ("AAA", "image/png"),
            ("BBB", "image/jpeg"),
        ]

    @pytest.mark.asyncio
    async def test_block_reason(self):
        payload = {"candidates": [], "promptFeedback": {"blockReason": "SAFETY"}}
        client = make_client(lambda request: httpx.Response(200, json=payload))
        response = await client.generate_content(model="m", parts=["hi"])
        await client.close()
        assert response.block_reason == "SAFETY"
        assert response.images == []


class TestErrors:
    """Tests for error mapping."""

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        client = make_client(lambda request: httpx.Response(200, json={}), api_key="")
        with pytest.raises(ConfigError):
            await client.generate_content(model="m", parts=["hi"])

    @pytest.mark.asyncio
    async def test_missing_model(self):
        client = make_client(lambda request: httpx.Response(200, json={}))
        with pytest.raises(ConfigError):
            await client.generate_content(model="", parts=["hi"])

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        body = {"error": {"message": "API key not valid"}}
        client = make_client(lambda request: httpx.Response(400, json=body))
        with pytest.raises(TransportError) as exc_info:
            await client.generate_content(model="m", parts=["hi"])
        await client.close()
        assert exc_info.value.status_code == 400
        assert "API key not valid" in exc_info.value.message

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body, expected", [
        ({"error": "quota exceeded"}, "quota exceeded"),
        (["unexpected", "list"], "unexpected"),
        ({"error": None}, "error"),
    ])
    async def test_http_error_with_unusual_json_body(self, body, expected):
        client = make_client(lambda request: httpx.Response(503, json=body))
        with pytest.raises(TransportError) as exc_info:
            await client.generate_content(model="m", parts=["hi"])
        await client.close()
        assert exc_info.value.status_code == 503
        assert expected in exc_info.value.message

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        client = make_client(lambda request: httpx.Response(200, text="<html>oops</html>"))
        with pytest.raises(TransportError):
            await client.generate_content(model="m", parts=["hi"])
        await client.close()

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client = make_client(handler)
        with pytest.raises(GenerationTimeoutError) as exc_info:
            await client.generate_content(model="m", parts=["hi"])
        await client.close()
        assert isinstance(exc_info.value, TimeoutError)

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = make_client(handler)
        with pytest.raises(TransportError) as exc_info:
            await client.generate_content(model="m", parts=["hi"])
        await client.close()
        assert not isinstance(exc_info.value, GenerationTimeoutError)


class TestLifecycle:
    """Tests for client lifecycle."""

    @pytest.mark.asyncio
    async def test_context_manager_closes(self):
        async with make_client(lambda request: httpx.Response(200, json=text_payload("x"))) as client:
            await client.generate_content(model="m", parts=["hi"])
            assert client._client is not None
        assert client._client is None
