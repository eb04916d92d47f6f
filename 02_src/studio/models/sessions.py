"""Session-related data models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ModelVariant(str, Enum):
    """Chat model capability tiers."""

    FLASH = "gemini-2.5-flash"  # fast, search and maps grounding
    PRO = "gemini-3-pro-preview"  # deep thinking
    FLASH_LITE = "gemini-flash-lite-latest"


class ImageModel(str, Enum):
    """Image generation models."""

    FLASH_IMAGE = "gemini-2.5-flash-image"
    PRO_IMAGE = "gemini-3-pro-image-preview"


VIDEO_MODEL = "veo-3.1-fast-generate-preview"


@dataclass
class Session:
    """Handle to a server-side conversational context.

    Replaced, never mutated, when the variant or instruction changes.
    """

    lane: str
    model_variant: ModelVariant
    system_instruction: str
    handle: Any  # provider-specific chat object
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def matches(self, model_variant: ModelVariant, system_instruction: str) -> bool:
        return (
            self.model_variant == model_variant
            and self.system_instruction == system_instruction
        )
