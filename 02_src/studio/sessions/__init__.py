"""Sessions module."""

from .lanes import (
    CHAT_LANE,
    CODE_LANE,
    CODING_INSTRUCTION,
    DEFAULT_INSTRUCTION,
    DEFAULT_LANES,
    LaneProfile,
)
from .registry import ISessionRegistry, SessionRegistry

__all__ = [
    "ISessionRegistry",
    "SessionRegistry",
    "LaneProfile",
    "DEFAULT_LANES",
    "DEFAULT_INSTRUCTION",
    "CODING_INSTRUCTION",
    "CHAT_LANE",
    "CODE_LANE",
]
