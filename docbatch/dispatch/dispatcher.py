"""Type-directed routing of commands, queries and events to their handlers."""

from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from types import MappingProxyType
from typing import Any, TypeVar

from docbatch.dispatch.base import BaseCommandHandler, BaseEventHandler, BaseQueryHandler
from docbatch.dispatch.cancellation import CancellationToken
from docbatch.dispatch.exceptions import (
    EventHandlerFaultError,
    HandlerFaultError,
    HandlerNotFoundError,
)
from docbatch.dispatch.messages import Command, Event, Query
from docbatch.logging.logger import Log

TResult = TypeVar("TResult")


class HandlerRegistry:
    """Collects handler registrations at startup and freezes them into a Dispatcher."""

    def __init__(self) -> None:
        self._commands: dict[type, BaseCommandHandler[Any, Any]] = {}
        self._queries: dict[type, BaseQueryHandler[Any, Any]] = {}
        self._events: dict[type, list[BaseEventHandler[Any]]] = {}

    def register_command(
        self,
        command_type: type[Command[Any]],
        handler: BaseCommandHandler[Any, Any],
    ) -> "HandlerRegistry":
        if command_type in self._commands:
            raise ValueError(f"Handler already registered for {command_type.__name__}")
        self._commands[command_type] = handler
        return self

    def register_query(
        self,
        query_type: type[Query[Any]],
        handler: BaseQueryHandler[Any, Any],
    ) -> "HandlerRegistry":
        if query_type in self._queries:
            raise ValueError(f"Handler already registered for {query_type.__name__}")
        self._queries[query_type] = handler
        return self

    def subscribe(
        self,
        event_type: type[Event],
        handler: BaseEventHandler[Any],
    ) -> "HandlerRegistry":
        self._events.setdefault(event_type, []).append(handler)
        return self

    def require(self, message_types: Iterable[type]) -> None:
        """Fail fast at startup if any command or query type has no handler."""
        missing = [
            t for t in message_types if t not in self._commands and t not in self._queries
        ]
        if missing:
            raise HandlerNotFoundError(missing[0])

    def build(self, event_workers: int = 4) -> "Dispatcher":
        return Dispatcher(
            commands=self._commands,
            queries=self._queries,
            events={k: tuple(v) for k, v in self._events.items()},
            event_workers=event_workers,
        )


class Dispatcher:
    """Routes a message to its handler(s) by the message's concrete class.

    Command and query handlers are unique per type. Event handlers run
    concurrently on a thread pool and are joined before dispatch_event returns.
    """

    def __init__(
        self,
        *,
        commands: Mapping[type, BaseCommandHandler[Any, Any]],
        queries: Mapping[type, BaseQueryHandler[Any, Any]],
        events: Mapping[type, tuple[BaseEventHandler[Any], ...]],
        event_workers: int = 4,
    ) -> None:
        self._commands = MappingProxyType(dict(commands))
        self._queries = MappingProxyType(dict(queries))
        self._events = MappingProxyType(dict(events))
        self._event_workers = max(1, event_workers)

    def dispatch_command(
        self,
        command: Command[TResult],
        cancellation: CancellationToken | None = None,
    ) -> TResult:
        handler = self._commands.get(type(command))
        if handler is None:
            raise HandlerNotFoundError(type(command))
        return self._invoke(handler, command, cancellation)

    def dispatch_query(
        self,
        query: Query[TResult],
        cancellation: CancellationToken | None = None,
    ) -> TResult:
        handler = self._queries.get(type(query))
        if handler is None:
            raise HandlerNotFoundError(type(query))
        return self._invoke(handler, query, cancellation)

    def dispatch_event(
        self,
        event: Event,
        cancellation: CancellationToken | None = None,
    ) -> None:
        """Run every subscriber of the event and wait for all of them.

        Raises:
            EventHandlerFaultError: listing every subscriber that failed.
        """
        handlers = self._events.get(type(event), ())
        if not handlers:
            return
        token = cancellation or CancellationToken()
        workers = min(len(handlers), self._event_workers)
        failures: list[tuple[str, BaseException]] = []
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [(h, pool.submit(h.handle, event, token)) for h in handlers]
            for handler, future in futures:
                exc = future.exception()
                if exc is not None:
                    name = type(handler).__name__
                    Log.error(f"Event handler {name} failed for {type(event).__name__}: {exc}")
                    failures.append((name, exc))
        if failures:
            raise EventHandlerFaultError(type(event), failures)

    @staticmethod
    def _invoke(
        handler: BaseCommandHandler[Any, Any] | BaseQueryHandler[Any, Any],
        message: Any,
        cancellation: CancellationToken | None,
    ) -> Any:
        try:
            return handler.handle(message, cancellation or CancellationToken())
        except Exception as exc:
            raise HandlerFaultError(type(message), exc) from exc
