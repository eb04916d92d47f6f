"""Pytest configuration and fixtures."""

import asyncio
import base64
import sys
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from studio.errors import ConfigurationError, TransportError  # noqa: E402
from studio.models import Attachment, AttachmentKind  # noqa: E402

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"


class FakeProvider:
    """Scripted provider.

    ``fragments`` are streamed in order. With ``fail_after=k`` the stream
    raises ``error`` after yielding k fragments.
    """

    def __init__(
        self, fragments=None, fail_after=None, error=None, api_key="test_key", delay=0.0
    ):
        self.api_key = api_key
        self.fragments = list(fragments) if fragments is not None else ["Hi", " there"]
        self.fail_after = fail_after
        self.error = error or TransportError("stream dropped")
        self.delay = delay

        self.created: list[tuple] = []
        self.sent: list[tuple] = []
        self.streams_opened = 0
        self.streams_closed = 0

        self.generate_image = AsyncMock(return_value=None)
        self.start_video = AsyncMock()
        self.poll_video = AsyncMock()

    def create_chat(self, model_variant, system_instruction):
        if not self.api_key:
            raise ConfigurationError("no key")
        handle = {"chat_id": len(self.created) + 1}
        self.created.append((model_variant, system_instruction, handle))
        return handle

    async def stream_message(self, chat, parts):
        self.sent.append((chat, parts))
        self.streams_opened += 1
        try:
            for index, fragment in enumerate(self.fragments):
                if index == self.fail_after:
                    raise self.error
                if self.delay:
                    await asyncio.sleep(self.delay)
                yield fragment
            if self.fail_after is not None and self.fail_after >= len(self.fragments):
                raise self.error
        finally:
            self.streams_closed += 1


def image_attachment(name="photo.png", data=PNG_BYTES, mime_type="image/png"):
    encoded = base64.b64encode(data).decode("ascii")
    return Attachment(
        name=name,
        mime_type=mime_type,
        kind=AttachmentKind.IMAGE,
        data=f"data:{mime_type};base64,{encoded}",
    )


def text_attachment(name="notes.md", body="# Notes"):
    return Attachment(
        name=name,
        mime_type="text/markdown",
        kind=AttachmentKind.TEXT,
        data=f"[FILE_CONTENT: {name}]\n{body}",
    )


@pytest.fixture
def fake_provider():
    """Create scripted provider."""
    return FakeProvider()


@pytest.fixture
def registry(fake_provider):
    """Create SessionRegistry over the fake provider."""
    from studio.sessions import SessionRegistry

    return SessionRegistry(fake_provider)


@pytest.fixture
def exchange(fake_provider):
    """Create StreamingExchange over the fake provider."""
    from studio.exchange import StreamingExchange

    return StreamingExchange(fake_provider)


@pytest.fixture
def lane_agent(registry, exchange):
    """Create LaneAgent for testing."""
    from studio.dialogue import LaneAgent

    return LaneAgent(registry=registry, exchange=exchange, failure_message="Request failed.")


@pytest.fixture
def recorded_sleep():
    """Sleep replacement that records delays instead of waiting."""
    delays: list[float] = []

    async def sleep(delay: float) -> None:
        delays.append(delay)

    sleep.delays = delays
    return sleep


@pytest_asyncio.fixture
async def application(fake_provider):
    """Create a started Application over the fake provider."""
    from studio.app import Application
    from studio.config import StudioConfig

    app = Application(
        config=StudioConfig(gemini_api_key="test_key", failure_message="Request failed."),
        provider=fake_provider,
    )
    await app.start()
    yield app
    await app.stop()
