"""SessionRegistry: one model session per conversation lane."""

from typing import Protocol

from ..llm import IChatProvider
from ..logging_config import get_logger
from ..models import ModelVariant, Session
from .lanes import DEFAULT_INSTRUCTION, DEFAULT_LANES, LaneProfile

logger = get_logger(__name__)


class ISessionRegistry(Protocol):
    """Hands out sessions keyed by lane."""

    def open(
        self,
        lane: str,
        model_variant: ModelVariant | None = None,
        system_instruction: str | None = None,
    ) -> Session:
        """Return the lane's session, creating it if needed."""
        ...

    def refresh(
        self,
        lane: str,
        model_variant: ModelVariant,
        system_instruction: str | None = None,
    ) -> Session:
        """Replace the lane's session with a new one."""
        ...

    def close(self, lane: str) -> None:
        """Drop the lane's session."""
        ...

    def get(self, lane: str) -> Session | None:
        """Return the current session without creating one."""
        ...


class SessionRegistry:
    """Caching session registry.

    ``open`` reuses the lane's session while the requested variant and
    instruction match it. Remote history is never transplanted into a
    replacement session.
    """

    def __init__(
        self,
        provider: IChatProvider,
        profiles: dict[str, LaneProfile] | None = None,
    ):
        self._provider = provider
        self._profiles = dict(DEFAULT_LANES if profiles is None else profiles)
        self._sessions: dict[str, Session] = {}

    def profile(self, lane: str) -> LaneProfile | None:
        return self._profiles.get(lane)

    def _resolve(
        self,
        lane: str,
        model_variant: ModelVariant | None,
        system_instruction: str | None,
    ) -> tuple[ModelVariant, str]:
        profile = self._profiles.get(lane)
        current = self._sessions.get(lane)

        if model_variant is None:
            if current is not None:
                model_variant = current.model_variant
            elif profile is not None:
                model_variant = profile.model_variant
            else:
                model_variant = ModelVariant.FLASH

        if system_instruction is None:
            if current is not None:
                system_instruction = current.system_instruction
            elif profile is not None:
                system_instruction = profile.system_instruction
            else:
                system_instruction = DEFAULT_INSTRUCTION

        return model_variant, system_instruction

    def _create(
        self, lane: str, model_variant: ModelVariant, system_instruction: str
    ) -> Session:
        handle = self._provider.create_chat(model_variant, system_instruction)
        session = Session(
            lane=lane,
            model_variant=model_variant,
            system_instruction=system_instruction,
            handle=handle,
        )
        self._sessions[lane] = session
        logger.info(
            f"Session created for lane {lane}",
            extra={"lane": lane, "model": model_variant.value},
        )
        return session

    def open(
        self,
        lane: str,
        model_variant: ModelVariant | None = None,
        system_instruction: str | None = None,
    ) -> Session:
        """Return the lane's session, creating it if needed.

        Raises:
            ConfigurationError: If the provider has no credential.
        """
        model_variant, system_instruction = self._resolve(
            lane, model_variant, system_instruction
        )

        current = self._sessions.get(lane)
        if current is not None and current.matches(model_variant, system_instruction):
            return current

        return self._create(lane, model_variant, system_instruction)

    def refresh(
        self,
        lane: str,
        model_variant: ModelVariant,
        system_instruction: str | None = None,
    ) -> Session:
        """Invalidate the lane's session and create a fresh one."""
        self.close(lane)
        model_variant, system_instruction = self._resolve(
            lane, model_variant, system_instruction
        )
        return self._create(lane, model_variant, system_instruction)

    def close(self, lane: str) -> None:
        if self._sessions.pop(lane, None) is not None:
            logger.info(f"Session closed for lane {lane}", extra={"lane": lane})

    def get(self, lane: str) -> Session | None:
        return self._sessions.get(lane)

    def lanes(self) -> list[str]:
        """Lanes that currently hold a session."""
        return list(self._sessions)
