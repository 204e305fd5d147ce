"""
Dummy adapter for the Mendikot engine, used for testing and simulation.

This module provides a non-interactive adapter that can be used for automated
testing, simulations, and benchmarks where no user interaction is needed.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from mendikot.adapters.base import PlatformAdapter
from mendikot.common.card import Card
from mendikot.game.view import PlayerView

logger = logging.getLogger("mendikot.adapters.dummy")


class DummyAdapter(PlatformAdapter):
    """
    Dummy adapter for testing and simulation.

    This adapter doesn't interact with any real platform and is designed for
    automated tests, simulations, and benchmarks. Human seats are answered
    from a queue of predefined cards, then by a choice function, then with
    the first legal card.
    """

    def __init__(
        self,
        auto_cards: Optional[Dict[int, List[Card]]] = None,
        choice_function: Optional[Callable[[PlayerView, List[Card]], Card]] = None,
        verbose: bool = False,
    ):
        """
        Initialize the dummy adapter.

        Args:
            auto_cards: Optional dictionary mapping seats to cards to play in
                        sequence. Predefined cards are returned as-is, legal
                        or not, so tests can drive illegal proposals.
            choice_function: Optional function that takes (view, legal_cards)
                             and returns a card
            verbose: Whether to log events at INFO (useful for debugging)
        """
        self.auto_cards = {
            seat: list(cards) for seat, cards in (auto_cards or {}).items()
        }
        self.choice_function = choice_function
        self.verbose = verbose

        # Track events for later inspection
        self.events = []

        # Track rendered states and card requests for testing
        self.rendered_states = []
        self.requests = []

        self.initialized = False
        self.shut_down = False

    async def initialize(self) -> None:
        self.initialized = True

    async def shutdown(self) -> None:
        self.shut_down = True

    async def render_game_state(self, state: Dict[str, Any]) -> None:
        """
        Store the round state for later inspection.

        Args:
            state: The round in adapter format
        """
        self.rendered_states.append(state)
        if self.verbose:
            logger.info("State: %s", state.get("message"))

    async def request_card(
        self,
        seat: int,
        player_name: str,
        view: PlayerView,
        legal_cards: List[Card],
        timeout_seconds: Optional[float] = None,
    ) -> Card:
        """
        Return a predefined card or select one with the choice function.

        Args:
            seat: Seat whose turn it is
            player_name: Display name of the seat
            view: What the seat can see of the round
            legal_cards: Cards the seat may play
            timeout_seconds: Optional timeout (ignored in this adapter)

        Returns:
            A selected card
        """
        self.requests.append((seat, list(legal_cards)))

        queued = self.auto_cards.get(seat)
        if queued:
            selected = queued.pop(0)
        elif self.choice_function:
            selected = self.choice_function(view, list(legal_cards))
        else:
            selected = legal_cards[0]

        if self.verbose:
            logger.info("%s selects %s", player_name, selected)

        return selected

    async def notify_game_event(
        self, event_type: Union[str, Enum], data: Dict[str, Any]
    ) -> None:
        """
        Store the event for later inspection.

        Args:
            event_type: The type of event that occurred
            data: Data associated with the event
        """
        event_type_str = event_type.name if isinstance(event_type, Enum) else event_type
        self.events.append((event_type_str, data))

        if self.verbose:
            logger.info("Event: %s %s", event_type_str, data)

    def get_events_by_type(self, event_type: Union[str, Enum]) -> List[Dict[str, Any]]:
        """
        Get all events of a specific type.

        Args:
            event_type: The type of events to retrieve

        Returns:
            A list of event data dictionaries
        """
        event_type_str = event_type.name if isinstance(event_type, Enum) else event_type
        return [data for typ, data in self.events if typ == event_type_str]

    def clear(self) -> None:
        """Clear all stored events, states and requests."""
        self.events.clear()
        self.rendered_states.clear()
        self.requests.clear()
