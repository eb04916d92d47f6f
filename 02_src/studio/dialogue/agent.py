"""LaneAgent implementation."""

import asyncio
import itertools
from contextlib import aclosing
from datetime import datetime, timezone
from typing import Awaitable, Callable, Iterable, Literal, Protocol

from ..config import DEFAULT_FAILURE_MESSAGE
from ..errors import LaneBusyError, NotFoundError, StudioError
from ..exchange import CancellationToken, StreamingExchange, merge_text_attachments
from ..logging_config import get_logger
from ..models import Attachment, Message, MessageStatus, ModelVariant, Session
from ..sessions import SessionRegistry
from .buffer import LaneBuffer

logger = get_logger(__name__)

UpdateCallback = Callable[[Message], Awaitable[None]]


class ILaneAgent(Protocol):
    """Runs exchanges for conversation lanes."""

    async def send_message(
        self,
        lane: str,
        text: str,
        attachments: Iterable[Attachment] = (),
        on_update: UpdateCallback | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> Message:
        """Send a user message on a lane and stream the model reply into it."""
        ...

    def get_messages(self, lane: str) -> list[Message]:
        """Messages of a lane in order."""
        ...

    def clear_lane(self, lane: str) -> None:
        """Drop the lane's messages and session."""
        ...

    def set_model(self, lane: str, model_variant: ModelVariant) -> Session:
        """Switch the lane to another model variant."""
        ...


class LaneAgent:
    """Manages conversation lanes.

    Each lane owns a buffer and a session, and runs at most one exchange at
    a time.
    """

    def __init__(
        self,
        registry: SessionRegistry,
        exchange: StreamingExchange,
        failure_message: str = DEFAULT_FAILURE_MESSAGE,
    ):
        self._registry = registry
        self._exchange = exchange
        self._failure_message = failure_message

        self._buffers: dict[str, LaneBuffer] = {}
        self._active: dict[str, CancellationToken] = {}  # lane -> in-flight exchange
        self._ids = itertools.count(1)

    def _buffer(self, lane: str) -> LaneBuffer:
        if lane not in self._buffers:
            self._buffers[lane] = LaneBuffer(lane)
        return self._buffers[lane]

    def _new_message(
        self,
        role: Literal["user", "model"],
        content: str,
        status: MessageStatus,
        attachments: list[Attachment] | None = None,
    ) -> Message:
        return Message(
            id=next(self._ids),
            role=role,
            content=content,
            timestamp=datetime.now(timezone.utc),
            status=status,
            attachments=attachments or [],
        )

    def lanes(self) -> list[str]:
        """Lanes that have a message buffer."""
        return list(self._buffers)

    def is_busy(self, lane: str) -> bool:
        return lane in self._active

    def get_messages(self, lane: str) -> list[Message]:
        buffer = self._buffers.get(lane)
        return buffer.get_all() if buffer else []

    def reserve(
        self, lane: str, cancel_token: CancellationToken | None = None
    ) -> CancellationToken:
        """Claim the lane for one exchange and return its token.

        A later ``send_message`` with the returned token runs on the claim and
        releases it when done. Reserving with the token that already holds
        the lane returns it unchanged.

        Raises:
            LaneBusyError: If another exchange holds the lane.
        """
        current = self._active.get(lane)
        if current is not None:
            if current is cancel_token:
                return current
            raise LaneBusyError(f"Lane {lane} already has an exchange in flight")

        token = cancel_token or CancellationToken()
        self._active[lane] = token
        return token

    def cancel(self, lane: str, reason: str | None = None) -> bool:
        """Cancel the lane's in-flight exchange, if any."""
        token = self._active.get(lane)
        if token is None:
            return False
        token.cancel(reason)
        logger.info(f"Exchange cancelled on lane {lane}", extra={"lane": lane})
        return True

    def clear_lane(self, lane: str) -> None:
        """Cancel any exchange, empty the buffer and drop the session."""
        self.cancel(lane, reason="lane cleared")
        buffer = self._buffers.get(lane)
        if buffer:
            buffer.clear()
        self._registry.close(lane)

    def set_model(self, lane: str, model_variant: ModelVariant) -> Session:
        """Replace the lane's session with one for ``model_variant``."""
        current = self._registry.get(lane)
        if current is not None and current.model_variant == model_variant:
            return current
        return self._registry.refresh(lane, model_variant)

    async def send_message(
        self,
        lane: str,
        text: str,
        attachments: Iterable[Attachment] = (),
        on_update: UpdateCallback | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> Message:
        """Send a user message and stream the reply into a model message.

        The user message and a pending model message are appended to the
        lane buffer. ``on_update`` is awaited after every fragment and once
        more when the reply is finalized or failed.

        Returns:
            The model message in its final state.

        Raises:
            ValueError: If both text and attachments are empty.
            LaneBusyError: If the lane already has an exchange in flight.
            ConfigurationError: If no credential is configured.
        """
        token = self.reserve(lane, cancel_token)
        try:
            attachments = list(attachments)
            text = text.strip()
            if not text and not attachments:
                raise ValueError("Message must contain text or attachments")
            return await self._run_exchange(lane, text, attachments, on_update, token)
        finally:
            self._active.pop(lane, None)

    async def _run_exchange(
        self,
        lane: str,
        text: str,
        attachments: list[Attachment],
        on_update: UpdateCallback | None,
        token: CancellationToken,
    ) -> Message:
        session = self._registry.open(lane)

        logger.info(
            f"Message received on lane {lane}: {text[:100]}",
            extra={"lane": lane, "model": session.model_variant.value},
        )

        prompt, inline = merge_text_attachments(text, attachments)
        buffer = self._buffer(lane)
        buffer.add(self._new_message("user", text, MessageStatus.DONE, attachments))
        reply = self._new_message("model", "", MessageStatus.PENDING)
        buffer.add(reply)

        async def publish() -> None:
            if on_update is not None and not token.cancelled:
                await on_update(reply)

        try:
            await publish()
            fragments = self._exchange.send(session, prompt, inline, cancel_token=token)
            async with aclosing(fragments.__aiter__()) as stream:
                async for fragment in stream:
                    if token.cancelled:
                        break
                    reply.append(fragment)
                    await publish()
        except StudioError as e:
            logger.error(
                f"Exchange failed on lane {lane}: {e}",
                extra={"lane": lane, "message_id": reply.id},
            )
            failure_text = (
                e.user_message if isinstance(e, NotFoundError) else self._failure_message
            )
            reply.fail(failure_text)
            await publish()
            return reply
        except asyncio.CancelledError:
            reply.cancel()
            raise
        except Exception:
            reply.fail(self._failure_message)
            raise

        if token.cancelled:
            reply.cancel()
            return reply

        reply.finalize()
        await publish()
        logger.debug(
            f"Reply finalized on lane {lane}: {reply.content[:50]}",
            extra={"lane": lane, "message_id": reply.id},
        )
        return reply
