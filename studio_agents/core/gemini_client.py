"""
Low-level client for the Gemini generateContent REST API.

One explicitly constructed client object is shared by the Planner, Writer
and image generation stages. Requests are never retried: any failure is
terminal for the current invocation and surfaces to the caller.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union
import httpx

from config import settings
from studio_agents.core.exceptions import (
    ConfigError,
    GenerationTimeoutError,
    TransportError,
)
from studio_agents.models.images import EncodedImagePart, GeneratedImage

RequestPart = Union[str, EncodedImagePart, Dict[str, Any]]


@dataclass
class GeminiResponse:
    """
    Response from a generateContent call.

    ``text`` is empty when the model returned no text parts; ``images``
    holds every inline image part of every candidate, in order.
    """
    text: str
    model: str
    images: List[GeneratedImage] = field(default_factory=list)
    finish_reason: str = ""
    block_reason: Optional[str] = None

    # Token usage
    tokens_input: int = 0
    tokens_output: int = 0

    # Timing
    latency_ms: int = 0

    # Raw response for debugging
    raw_response: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "text": self.text,
            "model": self.model,
            "images": len(self.images),
            "finish_reason": self.finish_reason,
            "block_reason": self.block_reason,
            "tokens_input": self.tokens_input,
            "tokens_output": self.tokens_output,
            "latency_ms": self.latency_ms,
        }


def to_wire_part(part: RequestPart) -> Dict[str, Any]:
    """Convert a text string or encoded image into a REST part."""
    if isinstance(part, str):
        return {"text": part}
    if isinstance(part, EncodedImagePart):
        return part.to_wire()
    return part


class GeminiClient:
    """
    Async client for Gemini ``models/{model}:generateContent``.

    Features:
    - Single shared httpx.AsyncClient per instance
    - Per-request timeout mapped to GenerationTimeoutError
    - Text and inline image extraction from candidates
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: Gemini API key. If None, read from settings.
            base_url: REST base URL. If None, read from settings.
            timeout: Request timeout in seconds. If None, read from settings.
            transport: Optional httpx transport (used by tests).
        """
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.base_url = (base_url or settings.gemini_api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout_seconds
        self._transport = transport

        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if not self.api_key:
            raise ConfigError("GEMINI_API_KEY is not set")
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers={
                    "x-goog-api-key": self.api_key,
                    "Content-Type": "application/json",
                },
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def generate_content(
        self,
        model: str,
        parts: Sequence[RequestPart],
        system_instruction: Optional[str] = None,
        response_modalities: Optional[List[str]] = None,
        generation_config: Optional[Dict[str, Any]] = None,
    ) -> GeminiResponse:
        """
        Send one generateContent request.

        Args:
            model: Model ID (e.g. gemini-2.5-flash)
            parts: Ordered request parts; strings become text parts
            system_instruction: Optional system instructions
            response_modalities: e.g. ["IMAGE"] for image-only output
            generation_config: Extra generationConfig fields

        Returns:
            GeminiResponse with text, images and usage

        Raises:
            ConfigError: When no API key or model is configured
            GenerationTimeoutError: On timeout
            TransportError: On connection failures and non-200 responses
        """
        if not model:
            raise ConfigError("No model specified")

        payload: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [to_wire_part(p) for p in parts]}],
        }
        if system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}

        config = dict(generation_config or {})
        if response_modalities:
            config["responseModalities"] = list(response_modalities)
        if config:
            payload["generationConfig"] = config

        client = await self._get_client()
        url = f"{self.base_url}/models/{model}:generateContent"

        try:
            start_time = time.time()
            response = await client.post(url, json=payload)
            latency_ms = int((time.time() - start_time) * 1000)
        except httpx.TimeoutException as e:
            raise GenerationTimeoutError(
                f"The request to {model} timed out after {self.timeout:g}s. Please try again.",
                details={"model": model},
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(
                f"Could not reach the generative service: {e}",
                details={"model": model},
            ) from e

        if response.status_code != 200:
            error_msg = response.text
            try:
                body = response.json()
            except ValueError:
                body = None
            error = body.get("error") if isinstance(body, dict) else None
            if isinstance(error, dict) and error.get("message"):
                error_msg = error["message"]
            elif isinstance(error, str) and error:
                error_msg = error
            raise TransportError(
                f"Generative service error ({response.status_code}): {error_msg}",
                status_code=response.status_code,
                details={"model": model},
            )

        try:
            data = response.json()
        except ValueError as e:
            raise TransportError(
                "Generative service returned a non-JSON response",
                details={"model": model},
            ) from e

        return self._parse_response(data, model, latency_ms)

    def _parse_response(
        self,
        data: Dict[str, Any],
        model: str,
        latency_ms: int,
    ) -> GeminiResponse:
        """Parse API response into GeminiResponse."""
        candidates = data.get("candidates") or []
        usage = data.get("usageMetadata") or {}
        feedback = data.get("promptFeedback") or {}

        text_chunks: List[str] = []
        images: List[GeneratedImage] = []
        finish_reason = ""

        for index, candidate in enumerate(candidates):
            if index == 0:
                finish_reason = candidate.get("finishReason", "")
            content = candidate.get("content") or {}
            for part in content.get("parts") or []:
                inline = part.get("inlineData") or part.get("inline_data")
                if inline and inline.get("data"):
                    images.append(GeneratedImage(
                        base64_data=inline["data"],
                        mime_type=inline.get("mimeType") or inline.get("mime_type") or "image/png",
                    ))
                elif index == 0 and part.get("text") and not part.get("thought"):
                    text_chunks.append(part["text"])

        return GeminiResponse(
            text="".join(text_chunks),
            model=data.get("modelVersion", model),
            images=images,
            finish_reason=finish_reason,
            block_reason=feedback.get("blockReason"),
            tokens_input=usage.get("promptTokenCount", 0),
            tokens_output=usage.get("candidatesTokenCount", 0),
            latency_ms=latency_ms,
            raw_response=data,
        )

    async def __aenter__(self) -> "GeminiClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()
