"""Application bootstrap and lifecycle management."""

from typing import Protocol

from .config import StudioConfig
from .dialogue import LaneAgent
from .exchange import StreamingExchange
from .llm import IChatProvider, create_provider
from .logging_config import get_logger
from .media import ImageGenerator, VideoGenerator
from .sessions import SessionRegistry

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    async def reset(self) -> None:
        """Drop all lanes and sessions."""
        ...


class Application:
    """Main application bootstrap."""

    def __init__(
        self,
        config: StudioConfig | None = None,
        provider: IChatProvider | None = None,
    ):
        self._config = config or StudioConfig.from_env()
        self._provider_override = provider

        # Components (will be initialized in start())
        self._provider: IChatProvider | None = None
        self._registry: SessionRegistry | None = None
        self._lane_agent: LaneAgent | None = None
        self._image_generator: ImageGenerator | None = None
        self._video_generator: VideoGenerator | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info(f"Starting application with provider {self._config.provider}")

        # 1. Provider (no dependencies). A missing key is reported when the
        # first session is created, not here.
        self._provider = self._provider_override or create_provider(self._config)

        # 2. SessionRegistry (depends on provider)
        self._registry = SessionRegistry(self._provider)

        # 3. LaneAgent (depends on registry + exchange)
        self._lane_agent = LaneAgent(
            registry=self._registry,
            exchange=StreamingExchange(self._provider),
            failure_message=self._config.failure_message,
        )

        # 4. Media generators (depend on provider)
        self._image_generator = ImageGenerator(
            self._provider,
            max_retries=self._config.quota_max_retries,
            backoff_seconds=self._config.quota_backoff_seconds,
        )
        self._video_generator = VideoGenerator(
            self._provider,
            api_key=self._config.api_key,
            poll_interval=self._config.video_poll_interval,
            max_polls=self._config.video_max_polls,
        )
        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Cancel in-flight exchanges and drop sessions."""
        if self._lane_agent and self._registry:
            for lane in self._registry.lanes():
                self._lane_agent.cancel(lane, reason="shutdown")
                self._registry.close(lane)
        logger.info("Application stopped")

    async def reset(self) -> None:
        """Clear every lane."""
        if self._lane_agent and self._registry:
            for lane in set(self._registry.lanes()) | set(self._lane_agent.lanes()):
                self._lane_agent.clear_lane(lane)
            logger.info("Reset complete")

    @property
    def config(self) -> StudioConfig:
        return self._config

    @property
    def registry(self) -> SessionRegistry:
        """Get session registry instance."""
        if not self._registry:
            raise RuntimeError("Application not started")
        return self._registry

    @property
    def lane_agent(self) -> LaneAgent:
        """Get lane agent instance."""
        if not self._lane_agent:
            raise RuntimeError("Application not started")
        return self._lane_agent

    @property
    def image_generator(self) -> ImageGenerator:
        if not self._image_generator:
            raise RuntimeError("Application not started")
        return self._image_generator

    @property
    def video_generator(self) -> VideoGenerator:
        if not self._video_generator:
            raise RuntimeError("Application not started")
        return self._video_generator
