"""Lane profiles: default model and instruction per conversation lane."""

from dataclasses import dataclass

from ..models import ModelVariant

CHAT_LANE = "chat"
CODE_LANE = "code"

DEFAULT_INSTRUCTION = (
    "You are a helpful and intelligent AI assistant. "
    "Reply in the user's language unless asked otherwise. "
    "Be polite, concise, and accurate."
)

CODING_INSTRUCTION = (
    "You are an expert senior software engineer and coding assistant. "
    "Provide high-quality, efficient, and secure code. "
    "Explain complex concepts simply. "
    "Assume the user wants the latest stable versions of libraries."
)


@dataclass(frozen=True)
class LaneProfile:
    """Defaults applied when a lane opens a session without explicit values."""

    name: str
    model_variant: ModelVariant
    system_instruction: str = DEFAULT_INSTRUCTION


DEFAULT_LANES: dict[str, LaneProfile] = {
    CHAT_LANE: LaneProfile(CHAT_LANE, ModelVariant.FLASH),
    CODE_LANE: LaneProfile(CODE_LANE, ModelVariant.PRO, CODING_INSTRUCTION),
}
