"""Cancellation handle for an in-flight exchange."""


class CancellationToken:
    """Cooperative cancellation flag.

    Checked by the fragment sequence before each fragment and by the lane
    agent before each state update.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str | None = None) -> None:
        if not self._cancelled:
            self._cancelled = True
            self._reason = reason
