import threading

from docbatch.dispatch.exceptions import OperationCancelledError


class CancellationToken:
    """Thread-safe cancellation flag shared by one run and all of its handlers."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        """Raise OperationCancelledError if cancel() has been called."""
        if self._event.is_set():
            raise OperationCancelledError("Operation was cancelled")
