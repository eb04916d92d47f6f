"""StreamingExchange and the fragment sequence it produces."""

from typing import AsyncIterator, Callable, Iterable

from ..errors import StudioError, TransportError
from ..llm import IChatProvider
from ..logging_config import get_logger
from ..models import Attachment, Session
from .cancellation import CancellationToken
from .payload import build_parts

logger = get_logger(__name__)


class FragmentSequence:
    """Lazy, ordered, one-shot stream of text fragments.

    The request starts on the first ``__anext__``. Empty chunks are dropped.
    Iterating a second time raises ``RuntimeError``. Breaking out of the loop,
    closing the iterator or cancelling the token closes the provider stream.
    """

    def __init__(
        self,
        open_stream: Callable[[], AsyncIterator[str]],
        cancel_token: CancellationToken | None = None,
    ):
        self._open_stream = open_stream
        self._token = cancel_token or CancellationToken()
        self._consumed = False
        self._fragments = 0

    @property
    def consumed(self) -> bool:
        return self._consumed

    @property
    def cancel_token(self) -> CancellationToken:
        return self._token

    @property
    def fragment_count(self) -> int:
        return self._fragments

    def __aiter__(self) -> AsyncIterator[str]:
        if self._consumed:
            raise RuntimeError("FragmentSequence can only be consumed once")
        self._consumed = True
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[str]:
        if self._token.cancelled:
            return

        source = self._open_stream()
        try:
            async for chunk in source:
                if self._token.cancelled:
                    logger.info(f"Exchange cancelled after {self._fragments} fragments")
                    break
                if not chunk:
                    continue
                self._fragments += 1
                yield chunk
        except StudioError:
            raise
        except Exception as e:
            raise TransportError(f"Stream failed: {e}") from e
        finally:
            aclose = getattr(source, "aclose", None)
            if aclose is not None:
                await aclose()

    async def collect(self) -> str:
        """Consume the whole sequence and return the concatenated text."""
        return "".join([fragment async for fragment in self])


class StreamingExchange:
    """Executes one request/response cycle against a session."""

    def __init__(self, provider: IChatProvider):
        self._provider = provider

    def send(
        self,
        session: Session,
        text: str,
        attachments: Iterable[Attachment] = (),
        cancel_token: CancellationToken | None = None,
    ) -> FragmentSequence:
        """Build the payload and return an unstarted fragment sequence.

        Text-like attachments must already be merged into ``text``.

        Raises:
            AttachmentError: If an inline attachment is not valid base64.
        """
        parts = build_parts(text, attachments)
        logger.debug(
            f"Exchange prepared with {len(parts)} parts",
            extra={"lane": session.lane, "model": session.model_variant.value},
        )
        return FragmentSequence(
            lambda: self._provider.stream_message(session.handle, parts),
            cancel_token=cancel_token,
        )
