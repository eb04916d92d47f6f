"""Tests for the Anthropic provider."""

from unittest.mock import MagicMock, patch

import anthropic
import httpx
import pytest

from studio.errors import (
    ConfigurationError,
    NotFoundError,
    QuotaExceededError,
    TransportError,
)
from studio.llm import AnthropicProvider, InlinePart, TextPart
from studio.llm.anthropic_provider import convert_error, to_content_blocks
from studio.models import ImageModel, ModelVariant

REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


class FakeMessageStream:
    """Stand-in for the SDK's MessageStreamManager."""

    def __init__(self, texts, error=None):
        self._texts = texts
        self._error = error

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    @property
    def text_stream(self):
        return self._iterate()

    async def _iterate(self):
        for text in self._texts:
            yield text
        if self._error is not None:
            raise self._error


@pytest.fixture
def mock_client():
    with patch("studio.llm.anthropic_provider.anthropic.AsyncAnthropic") as client_cls:
        client = MagicMock()
        client_cls.return_value = client
        yield client


class TestConvertError:
    def test_rate_limit(self):
        exc = anthropic.RateLimitError(
            "slow down", response=httpx.Response(429, request=REQUEST), body=None
        )
        assert isinstance(convert_error(exc), QuotaExceededError)

    def test_not_found(self):
        exc = anthropic.NotFoundError(
            "no model", response=httpx.Response(404, request=REQUEST), body=None
        )
        assert isinstance(convert_error(exc), NotFoundError)

    def test_connection(self):
        exc = anthropic.APIConnectionError(request=REQUEST)
        assert isinstance(convert_error(exc), TransportError)


class TestToContentBlocks:
    def test_image_and_text(self):
        blocks = to_content_blocks(
            [InlinePart(data=b"img", mime_type="image/png"), TextPart(text="hello")]
        )
        assert blocks[0]["type"] == "image"
        assert blocks[0]["source"]["media_type"] == "image/png"
        assert blocks[1] == {"type": "text", "text": "hello"}

    def test_pdf_is_document(self):
        blocks = to_content_blocks([InlinePart(data=b"%PDF", mime_type="application/pdf")])
        assert blocks[0]["type"] == "document"

    def test_video_unsupported(self):
        with pytest.raises(NotFoundError):
            to_content_blocks([InlinePart(data=b"mp4", mime_type="video/mp4")])


class TestAnthropicProvider:
    """Tests for AnthropicProvider."""

    def test_missing_key(self):
        with pytest.raises(ConfigurationError):
            AnthropicProvider(api_key=None).create_chat(ModelVariant.FLASH, "hi")

    @pytest.mark.asyncio
    async def test_stream_keeps_history(self, mock_client):
        mock_client.messages.stream.return_value = FakeMessageStream(["Hi", " there"])
        provider = AnthropicProvider(api_key="test_key")
        chat = provider.create_chat(ModelVariant.FLASH, "be brief")

        fragments = [f async for f in provider.stream_message(chat, [TextPart(text="hello")])]

        assert fragments == ["Hi", " there"]
        kwargs = mock_client.messages.stream.call_args.kwargs
        assert kwargs["system"] == "be brief"
        assert chat.history == [
            {"role": "user", "content": [{"type": "text", "text": "hello"}]},
            {"role": "assistant", "content": "Hi there"},
        ]

    @pytest.mark.asyncio
    async def test_failed_stream_leaves_history(self, mock_client):
        error = anthropic.APIConnectionError(request=REQUEST)
        mock_client.messages.stream.return_value = FakeMessageStream(["Hi"], error=error)
        provider = AnthropicProvider(api_key="test_key")
        chat = provider.create_chat(ModelVariant.FLASH, "be brief")

        with pytest.raises(TransportError):
            async for _ in provider.stream_message(chat, [TextPart(text="hello")]):
                pass

        assert chat.history == []

    @pytest.mark.asyncio
    async def test_media_unavailable(self):
        provider = AnthropicProvider(api_key="test_key")
        with pytest.raises(NotFoundError):
            await provider.generate_image("a fox", ImageModel.FLASH_IMAGE)
        with pytest.raises(NotFoundError):
            await provider.start_video("a cat")
