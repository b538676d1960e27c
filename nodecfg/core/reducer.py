"""
Reducer: pure functions folding store events into a state value.

Handlers must be pure and deterministic: the same (state, event) always
yields the same new state.
"""

from typing import Any, Callable, Dict, Iterable

from .events import Event
from .errors import DeviceStoreError

# Handler signature: (current_state, event) -> new_state
Handler = Callable[[Any, Event], Any]


class Reducer:
    """
    Registry of event handlers.

    Usage:
        reducer = Reducer()
        reducer.register("DeviceRegistered", on_device_registered)
        state = reducer.fold(initial, events)
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, Handler] = {}

    def register(self, event_type: str, handler: Handler) -> None:
        self._handlers[event_type] = handler

    def apply(self, state: Any, event: Event) -> Any:
        """
        Apply one event.

        Raises:
            DeviceStoreError: If no handler is registered for the event type
        """
        if event.type not in self._handlers:
            raise DeviceStoreError(f"No handler for event type: {event.type}")
        return self._handlers[event.type](state, event)

    def fold(self, state: Any, events: Iterable[Event]) -> Any:
        for event in events:
            state = self.apply(state, event)
        return state
