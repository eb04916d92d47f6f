"""Chat and media provider backed by the Google Gen AI SDK."""

from typing import Any, AsyncIterator

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from ..errors import (
    ConfigurationError,
    NotFoundError,
    QuotaExceededError,
    StudioError,
    TransportError,
    looks_like_not_found,
    looks_like_quota,
)
from ..logging_config import get_logger
from ..models import (
    VIDEO_MODEL,
    GeneratedImage,
    ImageModel,
    ModelVariant,
    VideoOperation,
)
from .provider import InlinePart, Part

logger = get_logger(__name__)

PRO_THINKING_BUDGET = 32768


def convert_error(exc: Exception) -> StudioError:
    """Map an SDK or network exception onto the studio error taxonomy."""
    if isinstance(exc, StudioError):
        return exc

    if isinstance(exc, genai_errors.APIError):
        status = getattr(exc, "status", None)
        code = getattr(exc, "code", None)
        message = str(exc)
        if looks_like_quota(status, code, message):
            return QuotaExceededError(message)
        if looks_like_not_found(status, code, message):
            return NotFoundError(message)
        return TransportError(message)

    if isinstance(exc, httpx.HTTPError):
        return TransportError(f"Network error: {exc}")

    return TransportError(f"Gemini API error: {exc}")


def build_chat_config(
    model_variant: ModelVariant, system_instruction: str
) -> types.GenerateContentConfig:
    """Per-variant session config: thinking for Pro, grounding tools for Flash."""
    kwargs: dict[str, Any] = {"system_instruction": system_instruction}

    if model_variant == ModelVariant.PRO:
        kwargs["thinking_config"] = types.ThinkingConfig(
            thinking_budget=PRO_THINKING_BUDGET
        )
    elif model_variant == ModelVariant.FLASH:
        kwargs["tools"] = [
            types.Tool(google_search=types.GoogleSearch()),
            types.Tool(google_maps=types.GoogleMaps()),
        ]

    return types.GenerateContentConfig(**kwargs)


def to_sdk_parts(parts: list[Part]) -> list[types.Part]:
    sdk_parts = []
    for part in parts:
        if isinstance(part, InlinePart):
            sdk_parts.append(
                types.Part.from_bytes(data=part.data, mime_type=part.mime_type)
            )
        else:
            sdk_parts.append(types.Part.from_text(text=part.text))
    return sdk_parts


def to_video_operation(operation: Any) -> VideoOperation:
    video_uri = None
    response = getattr(operation, "response", None)
    generated = getattr(response, "generated_videos", None) if response else None
    if generated:
        video = getattr(generated[0], "video", None)
        video_uri = getattr(video, "uri", None)

    error = getattr(operation, "error", None)
    return VideoOperation(
        handle=operation,
        done=bool(operation.done),
        video_uri=video_uri,
        error=str(error) if error else None,
    )


class GeminiProvider:
    """Google Gemini provider.

    The client is created lazily so that a missing key surfaces when a
    session is created rather than at import or startup.
    """

    def __init__(self, api_key: str | None = None):
        self._api_key = api_key
        self._client: genai.Client | None = None

    @property
    def api_key(self) -> str | None:
        return self._api_key

    def _get_client(self) -> genai.Client:
        if not self._api_key:
            raise ConfigurationError("GEMINI_API_KEY environment variable not set")
        if self._client is None:
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    def create_chat(self, model_variant: ModelVariant, system_instruction: str) -> Any:
        """Create an async chat bound to a model and instruction."""
        client = self._get_client()
        return client.aio.chats.create(
            model=model_variant.value,
            config=build_chat_config(model_variant, system_instruction),
            history=[],
        )

    async def stream_message(self, chat: Any, parts: list[Part]) -> AsyncIterator[str]:
        """Send parts through the chat and yield response text chunks."""
        try:
            stream = await chat.send_message_stream(message=to_sdk_parts(parts))
        except Exception as e:
            raise convert_error(e) from e

        try:
            async for chunk in stream:
                yield chunk.text or ""
        except Exception as e:
            raise convert_error(e) from e
        finally:
            # Closes the HTTP stream when the consumer stops early
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()

    async def generate_image(
        self, prompt: str, model: ImageModel = ImageModel.FLASH_IMAGE
    ) -> GeneratedImage | None:
        """Generate one image; returns None when no image part comes back."""
        client = self._get_client()

        config = None
        if model == ImageModel.PRO_IMAGE:
            config = types.GenerateContentConfig(
                image_config=types.ImageConfig(image_size="2K", aspect_ratio="1:1")
            )

        try:
            response = await client.aio.models.generate_content(
                model=model.value,
                contents=[types.Part.from_text(text=prompt)],
                config=config,
            )
        except Exception as e:
            raise convert_error(e) from e

        candidates = response.candidates or []
        if candidates and candidates[0].content and candidates[0].content.parts:
            for part in candidates[0].content.parts:
                if part.inline_data and part.inline_data.data:
                    return GeneratedImage(
                        data=part.inline_data.data,
                        mime_type=part.inline_data.mime_type or "image/png",
                    )
        return None

    async def start_video(self, prompt: str, aspect_ratio: str = "16:9") -> VideoOperation:
        client = self._get_client()
        try:
            operation = await client.aio.models.generate_videos(
                model=VIDEO_MODEL,
                prompt=prompt,
                config=types.GenerateVideosConfig(
                    number_of_videos=1,
                    resolution="720p",
                    aspect_ratio=aspect_ratio,
                ),
            )
        except Exception as e:
            raise convert_error(e) from e
        logger.info(f"Video operation submitted: {getattr(operation, 'name', None)}")
        return to_video_operation(operation)

    async def poll_video(self, operation: VideoOperation) -> VideoOperation:
        client = self._get_client()
        try:
            refreshed = await client.aio.operations.get(operation.handle)
        except Exception as e:
            raise convert_error(e) from e
        return to_video_operation(refreshed)
