"""Session-scoped cancellation for awaited external calls."""

from collections.abc import Callable


class CancellationToken:
    """
    Cancelled when the owning form session is torn down.

    Code that resumes after an await checks `cancelled` before writing any
    session state, so a late response cannot touch a closed session.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._callbacks: list[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def on_cancel(self, callback: Callable[[], None]) -> None:
        """Run `callback` on cancellation, immediately if already cancelled."""
        if self._cancelled:
            callback()
        else:
            self._callbacks.append(callback)
