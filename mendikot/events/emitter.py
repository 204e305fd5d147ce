"""
Event system for the Mendikot engine.

State transitions are pure, but every accepted play, trick resolution and
round result is announced on an event bus so that presentation, persistence
and logging collaborators can react without the engine knowing about them.

Handlers are plain callables. A handler registered with :meth:`EventEmitter.on`
receives the event's data dict; one registered with :meth:`EventEmitter.on_any`
receives an ``(event_type_name, data)`` tuple.
"""

from collections import defaultdict
from enum import Enum
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Union
import logging
import threading

logger = logging.getLogger("mendikot.events")

EventKey = Union[str, Enum]


class EventPriority(Enum):
    """Priority levels for event handlers."""

    LOW = 0
    NORMAL = 1
    HIGH = 2
    CRITICAL = 3


class _Handler(NamedTuple):
    callback: Callable
    priority: int


def _event_name(event_type: EventKey) -> str:
    """Enum members and their names address the same handlers."""
    return event_type.name if isinstance(event_type, Enum) else event_type


class EventEmitter:
    """
    Event emitter with priority-ordered subscriptions.

    Higher priority handlers run first; handlers of equal priority run in
    subscription order. Emission is thread-safe and handlers are called
    outside the lock, so a handler may subscribe or emit in turn.
    """

    def __init__(self):
        self._listeners: Dict[str, List[_Handler]] = defaultdict(list)
        self._global_listeners: List[_Handler] = []
        self._listener_lock = threading.RLock()

    def _subscribe(
        self, handlers: List[_Handler], callback: Callable, priority: EventPriority
    ) -> Callable:
        handler = _Handler(callback, priority.value)

        with self._listener_lock:
            for i, existing in enumerate(handlers):
                if existing.priority < handler.priority:
                    handlers.insert(i, handler)
                    break
            else:
                handlers.append(handler)

        def unsubscribe():
            with self._listener_lock:
                # Identity, so subscribing a callback twice needs two unsubscribes
                for i, existing in enumerate(handlers):
                    if existing is handler:
                        del handlers[i]
                        break

        return unsubscribe

    def on(
        self,
        event_type: EventKey,
        callback: Callable,
        priority: EventPriority = EventPriority.NORMAL,
    ) -> Callable:
        """
        Subscribe to an event type.

        Args:
            event_type: The event type to subscribe to (string or enum)
            callback: Function to call when event occurs, signature: fn(event_data)
            priority: Priority level for this handler

        Returns:
            Unsubscribe function that can be called to remove this subscription
        """
        with self._listener_lock:
            handlers = self._listeners[_event_name(event_type)]
        return self._subscribe(handlers, callback, priority)

    def once(
        self,
        event_type: EventKey,
        callback: Callable,
        priority: EventPriority = EventPriority.NORMAL,
    ) -> Callable:
        """
        Subscribe to an event type for a single occurrence.

        Returns:
            Unsubscribe function, usable before the event fires
        """
        unsubscribe = None

        def one_time_handler(event_data):
            try:
                callback(event_data)
            finally:
                unsubscribe()

        unsubscribe = self.on(event_type, one_time_handler, priority)
        return unsubscribe

    def on_any(
        self, callback: Callable, priority: EventPriority = EventPriority.NORMAL
    ) -> Callable:
        """
        Subscribe to all events.

        The engine uses this to queue a round's events for its adapter.

        Args:
            callback: Called with an ``(event_type_name, event_data)`` tuple
            priority: Priority level for this handler

        Returns:
            Unsubscribe function that can be called to remove this subscription
        """
        return self._subscribe(self._global_listeners, callback, priority)

    def emit(self, event_type: EventKey, data: Dict[str, Any]) -> None:
        """
        Emit an event to all registered listeners.

        Handler exceptions are logged and do not propagate to the emitter, so
        a failing listener cannot interrupt a state transition.

        Args:
            event_type: The type of event to emit
            data: The data to include with the event
        """
        name = _event_name(event_type)

        with self._listener_lock:
            calls = [(h.callback, data) for h in self._listeners.get(name, [])]
            calls.extend((h.callback, (name, data)) for h in self._global_listeners)

        for callback, payload in calls:
            try:
                callback(payload)
            except Exception:
                logger.exception("Error in event handler for %s", name)

    def listener_count(self, event_type: Optional[EventKey] = None) -> int:
        """Number of handlers for one event type, or of all handlers."""
        with self._listener_lock:
            if event_type is None:
                return sum(len(h) for h in self._listeners.values()) + len(
                    self._global_listeners
                )
            return len(self._listeners.get(_event_name(event_type), []))

    def remove_all_listeners(self, event_type: Optional[EventKey] = None) -> None:
        """
        Remove the listeners of one event type, or every listener.

        Args:
            event_type: Event type to clear; None clears everything, on_any
                        handlers included
        """
        with self._listener_lock:
            if event_type is None:
                self._listeners.clear()
                self._global_listeners.clear()
            else:
                self._listeners.pop(_event_name(event_type), None)


class EventBus:
    """
    Process-wide event bus.

    Transitions, engines and the simulator all emit on the same emitter.
    Tests reset ``EventBus._instance`` to start from a clean bus.
    """

    _instance = None
    _lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> EventEmitter:
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = EventEmitter()
        return cls._instance


class EngineEventType(Enum):
    """
    Events announced while a round is set up and played.

    Round events carry the ``game_id`` of the round they belong to.
    """

    # Engine lifecycle: engine_type, config
    ENGINE_INIT = "engine_init"
    ENGINE_SHUTDOWN = "engine_shutdown"

    # Round lifecycle
    GAME_CREATED = "game_created"  # players, dealer_index
    ROUND_STARTED = "round_started"  # dealer_index, first_player
    ROUND_ENDED = "round_ended"  # winner, is_mendikot, is_whitewash, tallies

    # Seats
    PLAYER_JOINED = "player_joined"  # seat, player_name, team, is_human
    PLAYER_DECISION_NEEDED = "player_decision_needed"  # seat, player_name

    # Play
    CARD_DEALT = "card_dealt"  # seat, player_name, card_count
    CARD_PLAYED = "card_played"  # seat, player_name, card, lead_suit
    PLAY_REJECTED = "play_rejected"  # seat, card, reason, message
    TRUMP_REVEALED = "trump_revealed"  # trump_suit, setter_seat, setter_name
    TRICK_COMPLETED = "trick_completed"  # trick_number, winner_*, cards, tens
    TENS_CONFIRMED = "tens_confirmed"  # team, tens, forced

    # Bots
    STRATEGY_DECISION = "strategy_decision"  # seat, strategy, card

    # Headless simulation
    SIMULATION_PROGRESS = "simulation_progress"
    SIMULATION_RESULT = "simulation_result"

    WARNING = "warning"  # seat, message
