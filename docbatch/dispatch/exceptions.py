class DispatchError(Exception):
    """Base exception for all dispatch-related errors."""


class HandlerNotFoundError(DispatchError):
    """Raised when no handler is registered for a command or query type."""

    def __init__(self, message_type: type) -> None:
        self.message_type = message_type
        super().__init__(f"No handler registered for {message_type.__name__}")


class HandlerFaultError(DispatchError):
    """Raised when a handler fails; the original exception is kept as .original."""

    def __init__(self, message_type: type, original: BaseException) -> None:
        self.message_type = message_type
        self.original = original
        super().__init__(f"Handler for {message_type.__name__} failed: {original}")


class EventHandlerFaultError(DispatchError):
    """Raised after event fan-out when one or more subscribers failed."""

    def __init__(
        self,
        event_type: type,
        failures: list[tuple[str, BaseException]],
    ) -> None:
        self.event_type = event_type
        self.failures = failures
        details = "; ".join(f"{name}: {exc}" for name, exc in failures)
        super().__init__(
            f"{len(failures)} handler(s) failed for {event_type.__name__}: {details}"
        )


class OperationCancelledError(Exception):
    """Raised when a run observes that its cancellation token was triggered."""
