"""Tests for quota retry, image and video generation."""

import httpx
import pytest
from unittest.mock import AsyncMock

from studio.errors import (
    ConfigurationError,
    NotFoundError,
    OperationTimeoutError,
    QuotaExceededError,
    TransportError,
)
from studio.media import ImageGenerator, VideoGenerator, call_with_quota_retry
from studio.models import GeneratedImage, ImageModel, VideoOperation, VideoResult


class TestQuotaRetry:
    """Tests for call_with_quota_retry()."""

    @pytest.mark.asyncio
    async def test_gives_up_after_three_retries(self, recorded_sleep):
        """Four attempts, waits of 2, 4 and 6 seconds, then the error."""
        call = AsyncMock(side_effect=QuotaExceededError("429"))

        with pytest.raises(QuotaExceededError):
            await call_with_quota_retry(call, sleep=recorded_sleep)

        assert call.await_count == 4
        assert recorded_sleep.delays == [2.0, 4.0, 6.0]

    @pytest.mark.asyncio
    async def test_succeeds_on_second_attempt(self, recorded_sleep):
        call = AsyncMock(side_effect=[QuotaExceededError("429"), "ok"])

        result = await call_with_quota_retry(call, sleep=recorded_sleep)

        assert result == "ok"
        assert recorded_sleep.delays == [2.0]

    @pytest.mark.asyncio
    async def test_other_errors_not_retried(self, recorded_sleep):
        call = AsyncMock(side_effect=NotFoundError("404"))

        with pytest.raises(NotFoundError):
            await call_with_quota_retry(call, sleep=recorded_sleep)

        assert call.await_count == 1
        assert recorded_sleep.delays == []


class TestImageGenerator:
    """Tests for ImageGenerator."""

    @pytest.mark.asyncio
    async def test_generate(self, fake_provider, recorded_sleep):
        image = GeneratedImage(data=b"img")
        fake_provider.generate_image = AsyncMock(
            side_effect=[QuotaExceededError("quota"), image]
        )
        generator = ImageGenerator(fake_provider, sleep=recorded_sleep)

        result = await generator.generate("a red fox", ImageModel.PRO_IMAGE)

        assert result is image
        fake_provider.generate_image.assert_awaited_with("a red fox", ImageModel.PRO_IMAGE)
        assert recorded_sleep.delays == [2.0]

    @pytest.mark.asyncio
    async def test_no_image_returns_none(self, fake_provider, recorded_sleep):
        generator = ImageGenerator(fake_provider, sleep=recorded_sleep)
        assert await generator.generate("a red fox") is None

    @pytest.mark.asyncio
    async def test_empty_prompt(self, fake_provider):
        generator = ImageGenerator(fake_provider)
        with pytest.raises(ValueError):
            await generator.generate("  ")
        fake_provider.generate_image.assert_not_awaited()


def pending(handle="operations/1"):
    return VideoOperation(handle=handle, done=False)


class TestVideoGenerator:
    """Tests for VideoGenerator."""

    @pytest.mark.asyncio
    async def test_polls_until_done(self, fake_provider, recorded_sleep):
        """Done on the fourth poll: four sleeps of the poll interval."""
        fake_provider.start_video = AsyncMock(return_value=pending())
        fake_provider.poll_video = AsyncMock(
            side_effect=[
                pending(),
                pending(),
                pending(),
                VideoOperation(
                    handle="operations/1", done=True, video_uri="https://files/v.mp4"
                ),
            ]
        )
        generator = VideoGenerator(fake_provider, api_key="k", sleep=recorded_sleep)

        result = await generator.generate("a cat surfing", "9:16")

        assert result == VideoResult(uri="https://files/v.mp4")
        assert fake_provider.poll_video.await_count == 4
        assert recorded_sleep.delays == [5.0, 5.0, 5.0, 5.0]
        fake_provider.start_video.assert_awaited_once_with("a cat surfing", "9:16")

    @pytest.mark.asyncio
    async def test_times_out(self, fake_provider, recorded_sleep):
        fake_provider.start_video = AsyncMock(return_value=pending())
        fake_provider.poll_video = AsyncMock(return_value=pending())
        generator = VideoGenerator(fake_provider, max_polls=3, sleep=recorded_sleep)

        with pytest.raises(OperationTimeoutError):
            await generator.generate("a cat surfing")

        assert fake_provider.poll_video.await_count == 3

    @pytest.mark.asyncio
    async def test_operation_error(self, fake_provider, recorded_sleep):
        fake_provider.start_video = AsyncMock(
            return_value=VideoOperation(handle="op", done=True, error="blocked")
        )
        generator = VideoGenerator(fake_provider, sleep=recorded_sleep)

        with pytest.raises(TransportError, match="blocked"):
            await generator.generate("a cat surfing")

    @pytest.mark.asyncio
    async def test_done_without_video(self, fake_provider, recorded_sleep):
        fake_provider.start_video = AsyncMock(
            return_value=VideoOperation(handle="op", done=True)
        )
        generator = VideoGenerator(fake_provider, sleep=recorded_sleep)

        assert await generator.generate("a cat surfing") is None
        assert recorded_sleep.delays == []

    @pytest.mark.asyncio
    async def test_invalid_aspect_ratio(self, fake_provider):
        generator = VideoGenerator(fake_provider)
        with pytest.raises(ValueError):
            await generator.generate("a cat surfing", "4:3")

    @pytest.mark.asyncio
    async def test_download_sends_key_header(self, fake_provider):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["key"] = request.headers.get("x-goog-api-key")
            seen["url"] = str(request.url)
            return httpx.Response(200, content=b"mp4-bytes")

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            generator = VideoGenerator(fake_provider, api_key="secret", http_client=client)
            data = await generator.download(VideoResult(uri="https://files/v.mp4"))

        assert data == b"mp4-bytes"
        assert seen == {"key": "secret", "url": "https://files/v.mp4"}

    @pytest.mark.asyncio
    async def test_download_http_error(self, fake_provider):
        transport = httpx.MockTransport(lambda request: httpx.Response(403))
        async with httpx.AsyncClient(transport=transport) as client:
            generator = VideoGenerator(fake_provider, api_key="secret", http_client=client)
            with pytest.raises(TransportError):
                await generator.download(VideoResult(uri="https://files/v.mp4"))

    @pytest.mark.asyncio
    async def test_download_without_key(self, fake_provider):
        generator = VideoGenerator(fake_provider)
        with pytest.raises(ConfigurationError):
            await generator.download(VideoResult(uri="https://files/v.mp4"))
