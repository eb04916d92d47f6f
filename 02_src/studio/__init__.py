"""Studio core module."""

from .app import Application, IApplication
from .attachments import ingest_file
from .config import StudioConfig
from .dialogue import ILaneAgent, LaneAgent, LaneBuffer
from .errors import (
    AttachmentError,
    ConfigurationError,
    LaneBusyError,
    NotFoundError,
    OperationTimeoutError,
    QuotaExceededError,
    StudioError,
    TransportError,
)
from .exchange import CancellationToken, FragmentSequence, StreamingExchange
from .llm import AnthropicProvider, GeminiProvider, IChatProvider, create_provider
from .media import ImageGenerator, VideoGenerator
from .models import (
    Attachment,
    AttachmentKind,
    GeneratedImage,
    ImageModel,
    Message,
    MessageStatus,
    ModelVariant,
    Session,
    VideoResult,
)
from .sessions import ISessionRegistry, LaneProfile, SessionRegistry

__all__ = [
    # Application
    "Application",
    "IApplication",
    "StudioConfig",
    # Models
    "Attachment",
    "AttachmentKind",
    "Message",
    "MessageStatus",
    "ModelVariant",
    "ImageModel",
    "Session",
    "GeneratedImage",
    "VideoResult",
    # Errors
    "StudioError",
    "ConfigurationError",
    "QuotaExceededError",
    "TransportError",
    "NotFoundError",
    "OperationTimeoutError",
    "AttachmentError",
    "LaneBusyError",
    # Components
    "IChatProvider",
    "GeminiProvider",
    "AnthropicProvider",
    "create_provider",
    "ISessionRegistry",
    "SessionRegistry",
    "LaneProfile",
    "StreamingExchange",
    "FragmentSequence",
    "CancellationToken",
    "ILaneAgent",
    "LaneAgent",
    "LaneBuffer",
    "ImageGenerator",
    "VideoGenerator",
    "ingest_file",
]
