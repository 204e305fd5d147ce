"""
Base engine class for Mendikot.

An engine owns the current round and sits between the pure transitions and
a platform adapter: it feeds proposed plays into the transitions, renders
the results, and forwards the round's events to the adapter.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from mendikot.adapters import PlatformAdapter
from mendikot.events import EventBus
from mendikot.game.state import GameState


class GameEngine(ABC):
    """
    Abstract base class for game engines.

    Events emitted on the bus while the engine is initialized are queued and
    handed to the adapter by :meth:`_flush_events`, but only those that
    belong to the engine's current round (or carry no round id at all).
    Other engines sharing the bus never leak into this adapter.
    """

    def __init__(self, adapter: PlatformAdapter, config: Dict[str, Any] = None):
        """
        Initialize the engine.

        Args:
            adapter: Platform adapter to use for rendering and input
            config: Configuration options for the game
        """
        self.adapter = adapter
        self.config = config or {}
        self.event_bus = EventBus.get_instance()
        self.state: Optional[GameState] = None
        self._pending_events: List[Tuple[str, Dict[str, Any]]] = []
        self._unsubscribe = None

    def _queue_event(self, event: Tuple[str, Dict[str, Any]]) -> None:
        self._pending_events.append(event)

    async def _flush_events(self) -> None:
        """Forward queued events of the current round to the adapter."""
        events, self._pending_events = self._pending_events, []
        game_id = self.state.id if self.state else None
        for event_type, data in events:
            if data.get("game_id", game_id) != game_id:
                continue
            await self.adapter.notify_game_event(event_type, data)

    def _require_state(self) -> GameState:
        if self.state is None:
            raise RuntimeError("No round in progress; call start_game() first")
        return self.state

    @abstractmethod
    async def initialize(self) -> None:
        """
        Initialize the adapter and start listening for round events.
        """
        await self.adapter.initialize()
        if self._unsubscribe is None:
            self._unsubscribe = self.event_bus.on_any(self._queue_event)

    @abstractmethod
    async def shutdown(self) -> None:
        """
        Stop listening for round events and shut the adapter down.
        """
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._pending_events.clear()
        await self.adapter.shutdown()

    @abstractmethod
    async def start_game(self) -> GameState:
        """
        Deal a new round.
        """
        pass

    @abstractmethod
    async def execute_player_action(self, player_id: int, action: str, **kwargs):
        """
        Execute a player action.

        Args:
            player_id: Seat of the player
            action: Action to perform
        """
        pass

    @abstractmethod
    async def render_state(self) -> None:
        """
        Render the current round through the adapter.
        """
        pass
