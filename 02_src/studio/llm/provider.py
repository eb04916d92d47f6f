"""Provider abstraction for the remote generative-AI service."""

from dataclasses import dataclass
from typing import Any, AsyncIterator, Protocol, Union

from ..models import GeneratedImage, ImageModel, ModelVariant, VideoOperation


@dataclass(frozen=True)
class InlinePart:
    """Binary payload sent inline with a request."""

    data: bytes
    mime_type: str


@dataclass(frozen=True)
class TextPart:
    """Prompt text."""

    text: str


Part = Union[InlinePart, TextPart]


class IChatProvider(Protocol):
    """Abstraction for the remote service."""

    def create_chat(self, model_variant: ModelVariant, system_instruction: str) -> Any:
        """Create a chat handle. Raises ConfigurationError without a credential."""
        ...

    def stream_message(self, chat: Any, parts: list[Part]) -> AsyncIterator[str]:
        """Send ordered parts and yield text chunks as they arrive."""
        ...

    async def generate_image(
        self, prompt: str, model: ImageModel
    ) -> GeneratedImage | None:
        """Single-shot image generation."""
        ...

    async def start_video(self, prompt: str, aspect_ratio: str) -> VideoOperation:
        """Submit a video generation request."""
        ...

    async def poll_video(self, operation: VideoOperation) -> VideoOperation:
        """Refresh the state of a video operation."""
        ...
