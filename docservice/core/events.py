"""Service events published after successful mutations."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Mapping, Protocol

SERVICE_EVENTS = ("created", "updated", "patched", "removed")


@dataclass(frozen=True)
class ServiceEvent:
    """Immutable event describing one record mutation."""

    type: str  # e.g. "people.created"
    resource: str  # service path, e.g. "people"
    key: Any  # record identifier
    payload: Mapping[str, Any]  # record as returned to the caller
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


# Type alias for event handlers
EventHandler = Callable[[ServiceEvent], Awaitable[None]]


class EventBus(Protocol):
    """Protocol for event bus implementations."""

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        """Subscribe to specific event type."""
        ...

    def subscribe_all(self, handler: EventHandler) -> None:
        """Subscribe to all events."""
        ...

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        """Unsubscribe from specific event type."""
        ...

    async def publish(self, event: ServiceEvent) -> None:
        """Publish event to matching subscribers."""
        ...


class InProcessEventBus:
    """Simple in-process pub/sub."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = {}
        self._global_handlers: list[EventHandler] = []

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        self._handlers.setdefault(event_type, []).append(handler)

    def subscribe_all(self, handler: EventHandler) -> None:
        self._global_handlers.append(handler)

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    async def publish(self, event: ServiceEvent) -> None:
        handlers = self._handlers.get(event.type, []) + self._global_handlers
        for handler in handlers:
            await handler(event)
