"""Message-related data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Literal


class AttachmentKind(str, Enum):
    """Semantic kind of an attachment."""

    IMAGE = "image"
    VIDEO = "video"
    DOCUMENT = "document"
    ARCHIVE = "archive"  # text extracted from an archive
    TEXT = "text"

    @property
    def is_inline(self) -> bool:
        """Binary kinds travel as inline parts, the rest as prompt text."""
        return self in INLINE_KINDS


INLINE_KINDS = frozenset(
    {AttachmentKind.IMAGE, AttachmentKind.VIDEO, AttachmentKind.DOCUMENT}
)


class MessageStatus(str, Enum):
    """Lifecycle of a message."""

    PENDING = "pending"
    STREAMING = "streaming"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset(
    {MessageStatus.DONE, MessageStatus.FAILED, MessageStatus.CANCELLED}
)


@dataclass
class Attachment:
    """A named payload attached to a user message.

    For inline kinds ``data`` is a base64 string, optionally wrapped in a
    ``data:<mime>;base64,`` URI. For text kinds it is decoded text.
    """

    name: str
    mime_type: str
    kind: AttachmentKind
    data: str
    size: int | None = None


@dataclass
class Message:
    """A single message in a lane."""

    id: int
    role: Literal["user", "model"]
    content: str
    timestamp: datetime
    status: MessageStatus = MessageStatus.DONE
    attachments: list[Attachment] = field(default_factory=list)
    partial_content: str | None = None  # text received before a failure

    @property
    def is_error(self) -> bool:
        return self.status == MessageStatus.FAILED

    @property
    def is_final(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def append(self, fragment: str) -> None:
        """Append a streamed fragment."""
        if self.is_final:
            raise RuntimeError(f"Message {self.id} is already finalized")
        self.content += fragment
        self.status = MessageStatus.STREAMING

    def finalize(self) -> None:
        """Mark streaming as complete. Calling it twice is a no-op."""
        if self.is_final:
            return
        self.status = MessageStatus.DONE

    def fail(self, failure_text: str) -> None:
        """Replace content with ``failure_text`` and keep what had streamed."""
        if self.is_final:
            return
        self.partial_content = self.content or None
        self.content = failure_text
        self.status = MessageStatus.FAILED

    def cancel(self) -> None:
        if self.is_final:
            return
        self.status = MessageStatus.CANCELLED
