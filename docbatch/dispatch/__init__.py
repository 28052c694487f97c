from docbatch.dispatch.base import BaseCommandHandler, BaseEventHandler, BaseQueryHandler
from docbatch.dispatch.cancellation import CancellationToken
from docbatch.dispatch.dispatcher import Dispatcher, HandlerRegistry
from docbatch.dispatch.exceptions import (
    DispatchError,
    EventHandlerFaultError,
    HandlerFaultError,
    HandlerNotFoundError,
    OperationCancelledError,
)
from docbatch.dispatch.messages import Command, Event, Query

__all__ = [
    "BaseCommandHandler",
    "BaseEventHandler",
    "BaseQueryHandler",
    "CancellationToken",
    "Command",
    "DispatchError",
    "Dispatcher",
    "Event",
    "EventHandlerFaultError",
    "HandlerFaultError",
    "HandlerNotFoundError",
    "HandlerRegistry",
    "OperationCancelledError",
    "Query",
]
