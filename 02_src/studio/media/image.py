"""One-shot image generation."""

import asyncio

from ..llm import IChatProvider
from ..logging_config import get_logger
from ..models import GeneratedImage, ImageModel
from .retry import Sleep, call_with_quota_retry

logger = get_logger(__name__)


class ImageGenerator:
    """Generates images with quota-aware retry."""

    def __init__(
        self,
        provider: IChatProvider,
        max_retries: int = 3,
        backoff_seconds: float = 2.0,
        sleep: Sleep = asyncio.sleep,
    ):
        self._provider = provider
        self._max_retries = max_retries
        self._backoff_seconds = backoff_seconds
        self._sleep = sleep

    async def generate(
        self, prompt: str, model: ImageModel = ImageModel.FLASH_IMAGE
    ) -> GeneratedImage | None:
        """Generate one image, or None if the model returned no image."""
        if not prompt.strip():
            raise ValueError("Prompt must not be empty")

        logger.info(f"Generating image: {prompt[:100]}", extra={"model": model.value})
        image = await call_with_quota_retry(
            lambda: self._provider.generate_image(prompt, model),
            max_retries=self._max_retries,
            backoff_seconds=self._backoff_seconds,
            sleep=self._sleep,
        )
        if image is None:
            logger.warning("Image generation returned no image", extra={"model": model.value})
        return image
