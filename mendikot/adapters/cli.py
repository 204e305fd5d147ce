"""
Command-line interface adapter for the Mendikot engine.

This module provides an adapter for console-based play: the table is printed
after every card and human seats pick a card by number or by id.
"""

import asyncio
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from mendikot.adapters.base import PlatformAdapter
from mendikot.common.card import Card
from mendikot.common.deck import sort_for_display
from mendikot.common.io_interface import ConsoleIOInterface, IOInterface
from mendikot.game.view import PlayerView


class CLIAdapter(PlatformAdapter):
    """
    Command-line interface adapter for the Mendikot engine.

    This adapter uses the standard console for input/output, providing a
    simple text-based interface to the game.
    """

    def __init__(self, io_interface: Optional[IOInterface] = None):
        """
        Initialize the CLI adapter.

        Args:
            io_interface: Optional IOInterface to use for I/O. If None, a default
                          console IOInterface will be created.
        """
        self.io_interface = io_interface or ConsoleIOInterface()

    async def _read_line(self, prompt: str, timeout_seconds: Optional[float]) -> str:
        # Console input blocks, so read it off the event loop thread
        loop = asyncio.get_running_loop()
        pending = loop.run_in_executor(None, self.io_interface.input, prompt)
        if timeout_seconds:
            return await asyncio.wait_for(pending, timeout_seconds)
        return await pending

    async def render_game_state(self, state: Dict[str, Any]) -> None:
        """
        Render the current round to the console.

        Args:
            state: The round in adapter format
        """
        lines = ["\n=== Mendikot ==="]

        trump = state.get("trump_suit")
        if trump:
            lines.append(f"Trump: {trump} (cut by {state.get('trump_setter')})")
        else:
            lines.append("Trump: hidden")

        score = state.get("score", {})
        for team in ("A", "B"):
            tally = score.get(team, {})
            lines.append(
                f"Team {team}: {tally.get('tricks', 0)} tricks, "
                f"{tally.get('tens', 0)} tens"
            )
        pot = state.get("pot", {})
        if pot.get("tens"):
            lines.append(f"Pot: {pot['tens']} tens held for team {pot.get('team')}")

        names = {p["seat"]: p["name"] for p in state.get("players", [])}
        trick = state.get("trick", [])
        if trick:
            played = ", ".join(
                f"{names.get(play['seat'], play['seat'])}: {play['card']}"
                for play in trick
            )
            lines.append(f"Table: {played}")

        lines.append(state.get("message", ""))
        lines.append("================\n")
        self.io_interface.output_lines(lines)

    async def request_card(
        self,
        seat: int,
        player_name: str,
        view: PlayerView,
        legal_cards: List[Card],
        timeout_seconds: Optional[float] = None,
    ) -> Card:
        """
        Ask the player at the console to choose a card.

        The hand is listed in display order; legal cards are numbered.
        Either the number or the card id (``10-hearts``) is accepted.

        Raises:
            TimeoutError: If the player doesn't respond within the timeout period
        """
        options = [card for card in sort_for_display(view.hand) if card in legal_cards]
        by_key = {str(i + 1): card for i, card in enumerate(options)}
        by_key.update({card.id.lower(): card for card in options})

        hand = "  ".join(str(card) for card in sort_for_display(view.hand))
        self.io_interface.output_lines(
            [f"\n{player_name}, your hand:", f"  {hand}", "Playable cards:"]
            + [f"{i + 1}: {card}" for i, card in enumerate(options)]
        )

        while True:
            try:
                choice = await self._read_line("Enter your choice: ", timeout_seconds)
            except asyncio.TimeoutError:
                raise TimeoutError(f"Player {player_name} timed out")
            except (KeyboardInterrupt, EOFError):
                raise TimeoutError(f"Player {player_name} cancelled")

            card = by_key.get(choice.strip().lower())
            if card is not None:
                return card
            self.io_interface.output("Invalid choice. Please try again.")

    async def notify_game_event(
        self, event_type: Union[str, Enum], data: Dict[str, Any]
    ) -> None:
        """
        Notify the user of a game event via the console.

        Args:
            event_type: The type of event that occurred
            data: Data associated with the event
        """
        if isinstance(event_type, Enum):
            event_type = event_type.name

        message = self._format_event_message(event_type, data)
        if message:
            self.io_interface.output(message)

    def _format_event_message(
        self, event_type: str, data: Dict[str, Any]
    ) -> Optional[str]:
        """
        Format an event message based on the event type.

        Returns:
            Formatted message string or None if no message needed
        """
        if event_type == "CARD_PLAYED":
            return f"{data.get('player_name')} plays {data.get('card')}"

        elif event_type == "TRUMP_REVEALED":
            return f"{data.get('setter_name')} cuts! Trump is {data.get('trump_suit')}"

        elif event_type == "TRICK_COMPLETED":
            return (
                f"Trick {data.get('trick_number')} to {data.get('winner_name')} "
                f"(team {data.get('winner_team')})"
            )

        elif event_type == "PLAY_REJECTED":
            return f"Play rejected: {data.get('message')}"

        elif event_type == "ROUND_ENDED":
            return f"Round over. Team {data.get('winner')} wins."

        return None

    async def handle_timeout(
        self, seat: int, player_name: str, legal_cards: List[Card]
    ) -> Card:
        """
        Handle a player timeout by playing the lowest legal card.
        """
        card = await super().handle_timeout(seat, player_name, legal_cards)
        self.io_interface.output(f"{player_name} timed out. Playing {card}.")
        return card
