"""Marker base classes for the three message shapes the dispatcher routes.

Handlers are looked up by the concrete message class, so every command,
query or event is its own subclass.
"""

from typing import Generic, TypeVar

TResult = TypeVar("TResult")


class Command(Generic[TResult]):
    """Request with side effects, handled by exactly one handler."""


class Query(Generic[TResult]):
    """Read-only request, handled by exactly one handler."""


class Event:
    """Notification fanned out to every subscribed handler."""
