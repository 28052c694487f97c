from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from docbatch.dispatch.cancellation import CancellationToken
from docbatch.dispatch.messages import Command, Event, Query

TCommand = TypeVar("TCommand", bound=Command)
TQuery = TypeVar("TQuery", bound=Query)
TEvent = TypeVar("TEvent", bound=Event)
TResult = TypeVar("TResult")


class BaseCommandHandler(ABC, Generic[TCommand, TResult]):
    """Contract for the single handler of a command type."""

    @abstractmethod
    def handle(self, command: TCommand, cancellation: CancellationToken) -> TResult:
        """Execute the command and return its result."""


class BaseQueryHandler(ABC, Generic[TQuery, TResult]):
    """Contract for the single handler of a query type."""

    @abstractmethod
    def handle(self, query: TQuery, cancellation: CancellationToken) -> TResult:
        """Answer the query without side effects."""


class BaseEventHandler(ABC, Generic[TEvent]):
    """Contract for one subscriber of an event type."""

    @abstractmethod
    def handle(self, event: TEvent, cancellation: CancellationToken) -> None:
        """React to the event."""
