"""Chat provider using the Anthropic Claude API."""

import base64
from dataclasses import dataclass, field
from typing import Any, AsyncIterator

import anthropic

from ..errors import (
    ConfigurationError,
    NotFoundError,
    QuotaExceededError,
    StudioError,
    TransportError,
    looks_like_quota,
)
from ..models import GeneratedImage, ImageModel, ModelVariant, VideoOperation
from .provider import InlinePart, Part


@dataclass
class AnthropicChat:
    """Chat handle. The Messages API is stateless, so history lives here."""

    model: str
    system: str
    model_variant: ModelVariant
    history: list[dict] = field(default_factory=list)


def convert_error(exc: Exception) -> StudioError:
    """Map an Anthropic SDK exception onto the studio error taxonomy."""
    if isinstance(exc, anthropic.RateLimitError):
        return QuotaExceededError(str(exc))
    if isinstance(exc, anthropic.NotFoundError):
        return NotFoundError(str(exc))
    if isinstance(exc, anthropic.APIConnectionError):
        return TransportError(f"Network error: {exc}")
    if isinstance(exc, anthropic.APIStatusError):
        if looks_like_quota(None, exc.status_code, str(exc)):
            return QuotaExceededError(str(exc))
        return TransportError(f"LLM API error: {exc}")
    return TransportError(f"LLM API error: {exc}")


def to_content_blocks(parts: list[Part]) -> list[dict]:
    blocks = []
    for part in parts:
        if isinstance(part, InlinePart):
            encoded = base64.b64encode(part.data).decode("ascii")
            if part.mime_type.startswith("image/"):
                block_type = "image"
            elif part.mime_type == "application/pdf":
                block_type = "document"
            else:
                raise NotFoundError(
                    f"Inline {part.mime_type} is not supported by Anthropic models",
                    user_message="This file type is not supported by the selected model.",
                )
            blocks.append(
                {
                    "type": block_type,
                    "source": {
                        "type": "base64",
                        "media_type": part.mime_type,
                        "data": encoded,
                    },
                }
            )
        else:
            blocks.append({"type": "text", "text": part.text})
    return blocks


class AnthropicProvider:
    """Anthropic Claude provider. Chat only; media generation is unavailable."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "claude-sonnet-4-5",
        max_tokens: int = 4096,
    ):
        self._api_key = api_key
        self._model = model
        self._max_tokens = max_tokens
        self._client: anthropic.AsyncAnthropic | None = None

    @property
    def api_key(self) -> str | None:
        return self._api_key

    def _get_client(self) -> anthropic.AsyncAnthropic:
        if not self._api_key:
            raise ConfigurationError("ANTHROPIC_API_KEY environment variable not set")
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(api_key=self._api_key)
        return self._client

    def create_chat(self, model_variant: ModelVariant, system_instruction: str) -> Any:
        self._get_client()
        return AnthropicChat(
            model=self._model,
            system=system_instruction,
            model_variant=model_variant,
        )

    async def stream_message(self, chat: Any, parts: list[Part]) -> AsyncIterator[str]:
        """Stream a reply; history is extended only when the reply completes."""
        client = self._get_client()
        user_turn = {"role": "user", "content": to_content_blocks(parts)}
        collected: list[str] = []

        try:
            async with client.messages.stream(
                model=chat.model,
                system=chat.system,
                messages=[*chat.history, user_turn],
                max_tokens=self._max_tokens,
            ) as stream:
                async for text in stream.text_stream:
                    collected.append(text)
                    yield text
        except StudioError:
            raise
        except Exception as e:
            raise convert_error(e) from e

        chat.history.append(user_turn)
        chat.history.append({"role": "assistant", "content": "".join(collected)})

    async def generate_image(
        self, prompt: str, model: ImageModel = ImageModel.FLASH_IMAGE
    ) -> GeneratedImage | None:
        raise NotFoundError("Image generation is not available with Anthropic")

    async def start_video(self, prompt: str, aspect_ratio: str = "16:9") -> VideoOperation:
        raise NotFoundError("Video generation is not available with Anthropic")

    async def poll_video(self, operation: VideoOperation) -> VideoOperation:
        raise NotFoundError("Video generation is not available with Anthropic")
