"""Conversation lane API routes."""

import asyncio
from collections.abc import AsyncGenerator, Callable
from datetime import datetime

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from ...app import Application
from ...errors import StudioError
from ...logging_config import get_logger
from ...models import Attachment, AttachmentKind, Message, MessageStatus, ModelVariant
from ..errors import to_http_exception

logger = get_logger(__name__)


class AttachmentPayload(BaseModel):
    """Attachment as sent by the browser or returned by /api/attachments."""

    name: str
    mime_type: str
    kind: AttachmentKind
    data: str
    size: int | None = None

    @classmethod
    def from_attachment(cls, attachment: Attachment) -> "AttachmentPayload":
        return cls(
            name=attachment.name,
            mime_type=attachment.mime_type,
            kind=attachment.kind,
            data=attachment.data,
            size=attachment.size,
        )

    def to_attachment(self) -> Attachment:
        return Attachment(
            name=self.name,
            mime_type=self.mime_type,
            kind=self.kind,
            data=self.data,
            size=self.size,
        )


class SendMessageRequest(BaseModel):
    """Request model for sending a message on a lane."""

    text: str = ""
    attachments: list[AttachmentPayload] = Field(default_factory=list)


class StreamChunk(BaseModel):
    """One Server-Sent Event of a streamed reply.

    Non-final chunks carry the new fragment in ``content``. The final chunk
    has ``done=True`` and, on failure, the failure text in ``error``.
    """

    message_id: int | None = None
    content: str = ""
    done: bool = False
    status: MessageStatus
    error: str | None = None


class MessageResponse(BaseModel):
    """Response model for a lane message."""

    id: int
    role: str
    content: str
    timestamp: datetime
    status: MessageStatus
    is_error: bool
    attachments: list[AttachmentPayload] = Field(default_factory=list)

    @classmethod
    def from_message(cls, message: Message) -> "MessageResponse":
        return cls(
            id=message.id,
            role=message.role,
            content=message.content,
            timestamp=message.timestamp,
            status=message.status,
            is_error=message.is_error,
            attachments=[AttachmentPayload.from_attachment(a) for a in message.attachments],
        )


class ModelRequest(BaseModel):
    model: ModelVariant


class SessionResponse(BaseModel):
    lane: str
    model: ModelVariant
    system_instruction: str
    created_at: datetime


class StatusResponse(BaseModel):
    status: str


def _sse(chunk: StreamChunk) -> str:
    return f"data: {chunk.model_dump_json()}\n\n"


def _exchange_done_callback(
    queue: "asyncio.Queue[tuple[MessageStatus, str] | None]",
) -> Callable[["asyncio.Task[Message]"], None]:
    """Ends the event stream and retrieves the task's exception, if any."""

    def callback(task: "asyncio.Task[Message]") -> None:
        queue.put_nowait(None)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Exchange task failed: {error!r}")

    return callback


def create_lanes_router(app: Application) -> APIRouter:
    """Create lanes router."""
    router = APIRouter(prefix="/api/lanes", tags=["lanes"])

    @router.post("/{lane}/messages")
    async def send_message(lane: str, request: SendMessageRequest) -> StreamingResponse:
        """Send a message and stream the reply as Server-Sent Events."""
        attachments = [a.to_attachment() for a in request.attachments]
        if not request.text.strip() and not attachments:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Message must contain text or attachments",
            )

        agent = app.lane_agent
        try:
            # Surfaces a missing credential before the stream starts
            app.registry.open(lane)
            # Claimed before responding so a concurrent send gets 409
            token = agent.reserve(lane)
        except StudioError as e:
            raise to_http_exception(e) from e

        queue: asyncio.Queue[tuple[MessageStatus, str] | None] = asyncio.Queue()

        async def on_update(message: Message) -> None:
            await queue.put((message.status, message.content))

        task = asyncio.create_task(
            agent.send_message(
                lane,
                request.text,
                attachments,
                on_update=on_update,
                cancel_token=token,
            )
        )
        task.add_done_callback(_exchange_done_callback(queue))

        async def event_stream() -> AsyncGenerator[str, None]:
            sent = 0
            try:
                while (item := await queue.get()) is not None:
                    message_status, content = item
                    if message_status != MessageStatus.STREAMING:
                        continue
                    if len(content) > sent:
                        yield _sse(
                            StreamChunk(content=content[sent:], status=message_status)
                        )
                        sent = len(content)

                try:
                    reply = task.result()
                except StudioError as e:
                    yield _sse(
                        StreamChunk(
                            done=True, status=MessageStatus.FAILED, error=e.user_message
                        )
                    )
                    return

                yield _sse(
                    StreamChunk(
                        message_id=reply.id,
                        done=True,
                        status=reply.status,
                        error=reply.content if reply.is_error else None,
                    )
                )
            finally:
                if not task.done():
                    token.cancel("client disconnected")

        return StreamingResponse(event_stream(), media_type="text/event-stream")

    @router.get("/{lane}/messages", response_model=list[MessageResponse])
    async def get_messages(lane: str) -> list[MessageResponse]:
        """Get the lane's messages in order."""
        return [MessageResponse.from_message(m) for m in app.lane_agent.get_messages(lane)]

    @router.delete("/{lane}", response_model=StatusResponse)
    async def clear_lane(lane: str) -> dict:
        """Clear the lane's messages and session."""
        app.lane_agent.clear_lane(lane)
        return {"status": "ok"}

    @router.put("/{lane}/model", response_model=SessionResponse)
    async def set_model(lane: str, request: ModelRequest) -> SessionResponse:
        """Switch the lane to another model; the lane's remote history is lost."""
        try:
            session = app.lane_agent.set_model(lane, request.model)
        except StudioError as e:
            raise to_http_exception(e) from e
        return SessionResponse(
            lane=session.lane,
            model=session.model_variant,
            system_instruction=session.system_instruction,
            created_at=session.created_at,
        )

    return router
