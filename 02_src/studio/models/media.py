"""Generated media data models."""

import base64
from dataclasses import dataclass
from typing import Any


@dataclass
class GeneratedImage:
    """An image returned by a one-shot generation call."""

    data: bytes
    mime_type: str = "image/png"

    @property
    def data_uri(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


@dataclass
class VideoOperation:
    """Provider-neutral view of a long-running video operation."""

    handle: Any  # provider operation object, passed back when polling
    done: bool = False
    video_uri: str | None = None
    error: str | None = None


@dataclass
class VideoResult:
    """A finished video, addressed by URI."""

    uri: str
