"""
Base adapter interface for the Mendikot engine.

This module defines the interface that platform-specific adapters must implement
to interact with the Mendikot engine.
"""

import asyncio
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from mendikot.common.card import Card
from mendikot.game.view import PlayerView


class PlatformAdapter(ABC):
    """
    Base interface for platform-specific adapters.

    This abstract class defines the methods that platform-specific adapters
    must implement to interact with the Mendikot engine. These methods handle
    rendering the round, asking a human seat for a card, and notifying of
    game events.

    An adapter only ever receives a seat's :class:`PlayerView` or the
    adapter-format state, so it never sees cards it should not.
    """

    @abstractmethod
    async def render_game_state(self, state: Dict[str, Any]) -> None:
        """
        Render the current round to the platform.

        Args:
            state: The round in adapter format (see ``GameState.to_adapter_format``)
        """
        pass

    @abstractmethod
    async def request_card(
        self,
        seat: int,
        player_name: str,
        view: PlayerView,
        legal_cards: List[Card],
        timeout_seconds: Optional[float] = None,
    ) -> Card:
        """
        Ask a human seat which card to play.

        Args:
            seat: Seat whose turn it is
            player_name: Display name of the seat
            view: What the seat can see of the round
            legal_cards: Cards the seat may play, never empty
            timeout_seconds: Optional timeout for the decision

        Returns:
            The chosen card. The engine validates it again before playing it.

        Raises:
            TimeoutError: If the player doesn't respond within the timeout period
        """
        pass

    @abstractmethod
    async def notify_game_event(
        self, event_type: Union[str, Enum], data: Dict[str, Any]
    ) -> None:
        """
        Notify the platform of a game event.

        Args:
            event_type: The type of event that occurred
            data: Data associated with the event
        """
        pass

    async def handle_timeout(
        self, seat: int, player_name: str, legal_cards: List[Card]
    ) -> Card:
        """
        Pick a card for a seat that did not answer in time.

        Args:
            seat: Seat that timed out
            player_name: Display name of the seat
            legal_cards: Cards the seat may play

        Returns:
            The lowest legal card
        """
        return min(legal_cards, key=lambda card: card.rank.rank_value)

    async def initialize(self) -> None:
        """Called by the engine before the first round."""
        pass

    async def shutdown(self) -> None:
        """Called by the engine when it shuts down."""
        pass

    def get_sync_methods(self) -> Dict[str, Callable]:
        """
        Blocking versions of the adapter's coroutines, for hosts without an
        event loop (a GUI callback, a test harness). Each call runs on a fresh
        loop, so they must not be used from inside a running one.
        """

        def blocking(coroutine_function):
            def run(*args, **kwargs):
                loop = asyncio.new_event_loop()
                try:
                    return loop.run_until_complete(coroutine_function(*args, **kwargs))
                finally:
                    loop.close()

            return run

        return {
            name: blocking(getattr(self, name))
            for name in (
                "render_game_state",
                "request_card",
                "notify_game_event",
                "handle_timeout",
                "initialize",
                "shutdown",
            )
        }
