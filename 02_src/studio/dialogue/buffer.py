"""LaneBuffer implementation."""

from ..models import Message


class LaneBuffer:
    """Ordered messages of one conversation lane."""

    def __init__(self, lane: str):
        self.lane = lane
        self._messages: list[Message] = []

    def add(self, message: Message) -> None:
        """Add a message to the buffer."""
        self._messages.append(message)

    def get(self, message_id: int) -> Message | None:
        for message in self._messages:
            if message.id == message_id:
                return message
        return None

    def get_all(self) -> list[Message]:
        """Get all messages in buffer."""
        return self._messages.copy()

    def clear(self) -> None:
        """Clear the buffer."""
        self._messages.clear()

    def __len__(self) -> int:
        return len(self._messages)
