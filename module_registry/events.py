"""
Registry Event Bus

Synchronous, in-process publish/subscribe for module lifecycle events.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

logger = logging.getLogger(__name__)


class RegistryEvent(Enum):
    """Event types emitted by the module registry."""
    MODULE_REGISTERED = "module:registered"
    MODULE_ENABLED = "module:enabled"
    MODULE_DISABLED = "module:disabled"
    MODULE_ERROR = "module:error"
    MODULE_HEALTH_CHECK = "module:health-check"
    REGISTRY_READY = "registry:ready"


@dataclass
class ModuleEvent:
    """Event object passed to listeners."""
    type: RegistryEvent
    module_name: Optional[str] = None
    data: Any = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


EventListener = Callable[[ModuleEvent], None]
EventType = Union[RegistryEvent, str]


def _event_type(event_type: EventType) -> RegistryEvent:
    if isinstance(event_type, RegistryEvent):
        return event_type
    return RegistryEvent(event_type)


class EventBus:
    """
    Observer registry keyed by event type.

    Listeners run synchronously in the order they were added. An exception in
    one listener is logged and does not stop the others or the operation that
    emitted the event.
    """

    def __init__(self):
        self._listeners: Dict[RegistryEvent, List[EventListener]] = {}
        self._lock = threading.RLock()

    def add_listener(self, event_type: EventType, listener: EventListener) -> None:
        with self._lock:
            self._listeners.setdefault(_event_type(event_type), []).append(listener)

    def remove_listener(self, event_type: EventType, listener: EventListener) -> None:
        """Remove a listener; unknown listeners are ignored."""
        with self._lock:
            listeners = self._listeners.get(_event_type(event_type))
            if not listeners:
                return
            try:
                listeners.remove(listener)
            except ValueError:
                pass  # Listener not found

    def listener_count(self, event_type: EventType) -> int:
        with self._lock:
            return len(self._listeners.get(_event_type(event_type), []))

    def emit(self, event_type: EventType, module_name: Optional[str] = None, data: Any = None) -> ModuleEvent:
        """
        Deliver an event to every listener of its type.

        Returns:
            The event object that was delivered
        """
        event = ModuleEvent(type=_event_type(event_type), module_name=module_name, data=data)

        with self._lock:
            listeners = list(self._listeners.get(event.type, []))

        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception(f"Error in event listener for {event.type.value}")

        return event
