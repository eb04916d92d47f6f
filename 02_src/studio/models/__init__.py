"""Core data models for the studio."""

from .messages import (
    INLINE_KINDS,
    Attachment,
    AttachmentKind,
    Message,
    MessageStatus,
)
from .sessions import VIDEO_MODEL, ImageModel, ModelVariant, Session
from .media import GeneratedImage, VideoOperation, VideoResult

__all__ = [
    # Messages
    "Attachment",
    "AttachmentKind",
    "INLINE_KINDS",
    "Message",
    "MessageStatus",
    # Sessions
    "ModelVariant",
    "ImageModel",
    "VIDEO_MODEL",
    "Session",
    # Media
    "GeneratedImage",
    "VideoOperation",
    "VideoResult",
]
