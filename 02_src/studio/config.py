"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"

DEFAULT_FAILURE_MESSAGE = "Sorry, something went wrong while processing your request."


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value else default


@dataclass
class StudioConfig:
    """Runtime settings for the studio core."""

    provider: str = "gemini"  # "gemini" or "anthropic"
    gemini_api_key: str | None = None
    anthropic_api_key: str | None = None
    anthropic_model: str = "claude-sonnet-4-5"

    quota_max_retries: int = 3
    quota_backoff_seconds: float = 2.0
    video_poll_interval: float = 5.0
    video_max_polls: int = 120

    failure_message: str = DEFAULT_FAILURE_MESSAGE

    @property
    def api_key(self) -> str | None:
        """Credential for the selected provider."""
        if self.provider == "anthropic":
            return self.anthropic_api_key
        return self.gemini_api_key

    @classmethod
    def from_env(cls) -> "StudioConfig":
        """Build configuration from environment variables."""
        return cls(
            provider=os.getenv("STUDIO_PROVIDER", "gemini").lower(),
            gemini_api_key=os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY"),
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY"),
            anthropic_model=os.getenv("ANTHROPIC_MODEL", "claude-sonnet-4-5"),
            quota_max_retries=_env_int("QUOTA_MAX_RETRIES", 3),
            quota_backoff_seconds=_env_float("QUOTA_BACKOFF_SECONDS", 2.0),
            video_poll_interval=_env_float("VIDEO_POLL_INTERVAL", 5.0),
            video_max_polls=_env_int("VIDEO_MAX_POLLS", 120),
            failure_message=os.getenv("STUDIO_FAILURE_MESSAGE", DEFAULT_FAILURE_MESSAGE),
        )
