"""Long-running video generation with bounded polling."""

import asyncio

import httpx

from ..errors import ConfigurationError, OperationTimeoutError, TransportError
from ..logging_config import get_logger
from ..models import VideoResult
from ..llm import IChatProvider
from .retry import Sleep

logger = get_logger(__name__)

ASPECT_RATIOS = ("16:9", "9:16")


class VideoGenerator:
    """Submits a video request and polls the operation until it is done."""

    def __init__(
        self,
        provider: IChatProvider,
        api_key: str | None = None,
        poll_interval: float = 5.0,
        max_polls: int = 120,
        sleep: Sleep = asyncio.sleep,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._provider = provider
        self._api_key = api_key
        self._poll_interval = poll_interval
        self._max_polls = max_polls
        self._sleep = sleep
        self._http_client = http_client

    async def generate(self, prompt: str, aspect_ratio: str = "16:9") -> VideoResult | None:
        """Generate one video.

        Returns:
            The finished video, or None if the operation finished without one.

        Raises:
            OperationTimeoutError: If the operation is not done after max_polls.
            TransportError: If the operation finished with an error.
        """
        if not prompt.strip():
            raise ValueError("Prompt must not be empty")
        if aspect_ratio not in ASPECT_RATIOS:
            raise ValueError(f"Unsupported aspect ratio: {aspect_ratio}")

        operation = await self._provider.start_video(prompt, aspect_ratio)

        polls = 0
        while not operation.done:
            if polls >= self._max_polls:
                raise OperationTimeoutError(
                    f"Video operation not done after {polls} polls"
                )
            await self._sleep(self._poll_interval)
            operation = await self._provider.poll_video(operation)
            polls += 1
            logger.debug("Video operation polled", extra={"poll": polls})

        if operation.error:
            raise TransportError(f"Video operation failed: {operation.error}")

        logger.info(f"Video operation finished after {polls} polls")
        if not operation.video_uri:
            return None
        return VideoResult(uri=operation.video_uri)

    async def download(self, result: VideoResult) -> bytes:
        """Fetch the video file. The key goes in a header, not the URL."""
        if not self._api_key:
            raise ConfigurationError("GEMINI_API_KEY environment variable not set")

        headers = {"x-goog-api-key": self._api_key}
        try:
            if self._http_client is not None:
                response = await self._http_client.get(result.uri, headers=headers)
            else:
                async with httpx.AsyncClient(follow_redirects=True, timeout=120) as client:
                    response = await client.get(result.uri, headers=headers)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise TransportError(f"Video download failed: {e}") from e
        return response.content
