"""
Mendikot API module.

This module provides a high-level, platform-agnostic API for playing
Mendikot, supporting both synchronous and asynchronous operation.
"""

from typing import Any, Dict, List, Optional, Union

from mendikot.adapters import PlatformAdapter
from mendikot.api.base import CardGame
from mendikot.common.card import Card
from mendikot.engine import MendikotEngine
from mendikot.events import EngineEventType
from mendikot.game import schema
from mendikot.game.state import GameState, PlayResult, Team
from mendikot.game.view import PlayerView


class MendikotGame(CardGame):
    """
    High-level, platform-agnostic API for Mendikot.

    This class provides a simple interface for creating and running rounds,
    abstracting away the details of engine operation and event handling.

    Example:
        ```python
        # Async usage
        game = MendikotGame(adapter=DummyAdapter(), config={"human_seats": ()})
        await game.initialize()
        await game.start_game()
        result = await game.play_card(1, "10-hearts")
        state = await game.play_round_to_end()
        await game.shutdown()

        # Sync usage
        game = MendikotGame(use_async=False)
        game.initialize_sync()
        game.start_game_sync()
        # etc.
        ```
    """

    def __init__(
        self,
        adapter: Optional[PlatformAdapter] = None,
        config: Optional[Dict[str, Any]] = None,
        use_async: bool = True,
    ):
        """
        Initialize a new Mendikot game.

        Args:
            adapter: Platform adapter to use for rendering and input.
                   If None, a CLI adapter will be used.
            config: Engine configuration (see MendikotEngine)
            use_async: Whether to use async mode
        """
        super().__init__(adapter, config, use_async)
        self.engine: Optional[MendikotEngine] = None
        self.rounds_played = 0
        self.round_wins = {Team.A: 0, Team.B: 0}

    async def initialize(self) -> None:
        """
        Initialize the engine and subscribe to round results.
        """
        self.engine = MendikotEngine(self.adapter, self.config)
        await self.engine.initialize()
        self.on(EngineEventType.ROUND_ENDED, self._on_round_ended)

    async def shutdown(self) -> None:
        """
        Shut down the engine and drop this game's event handlers.
        """
        self.remove_handlers()
        if self.engine:
            await self.engine.shutdown()

    def _on_round_ended(self, data: Dict[str, Any]) -> None:
        if self.engine is None or self.engine.state is None:
            return
        if data.get("game_id") != self.engine.state.id:
            return
        self.rounds_played += 1
        self.round_wins[Team(data["winner"])] += 1

    def _require_engine(self) -> MendikotEngine:
        if self.engine is None:
            raise RuntimeError("Game not initialized; call initialize() first")
        return self.engine

    async def start_game(self, deck: Optional[List[Card]] = None) -> GameState:
        """
        Deal a new round.

        Args:
            deck: Optional pre-arranged deck

        Returns:
            The dealt round
        """
        return await self._require_engine().start_game(deck=deck)

    async def get_state(self) -> Optional[GameState]:
        """
        Get the current round state.
        """
        return self._require_engine().state

    async def get_view(self, seat: int) -> PlayerView:
        """What ``seat`` can see of the current round."""
        return self._require_engine().get_view(seat)

    async def get_legal_cards(self, seat: int) -> List[Card]:
        """Cards ``seat`` may play now; empty when it is not the seat's turn."""
        return self._require_engine().get_valid_actions(seat).get("PLAY_CARD", [])

    async def play_card(self, seat: int, card: Union[Card, str]) -> PlayResult:
        """
        Play a card for a seat.

        Args:
            seat: Seat playing the card
            card: The card, or its id such as ``"10-hearts"``

        Returns:
            The result; a refused play leaves the round unchanged
        """
        return await self._require_engine().execute_player_action(
            seat, "play_card", card=card
        )

    async def play_bot_turn(self) -> PlayResult:
        """Let the bot whose turn it is play one card."""
        return await self._require_engine().play_bot_turn()

    async def play_round(self, deck: Optional[List[Card]] = None) -> GameState:
        """Deal and play a complete round."""
        return await self._require_engine().play_round(deck=deck)

    async def play_round_to_end(self) -> GameState:
        """
        Finish the current round, asking humans through the adapter.
        """
        engine = self._require_engine()
        while not engine.is_round_over():
            if engine.is_human(engine.state.current_player_index):
                await engine.play_human_turn()
            else:
                await engine.play_bot_turn()
        return engine.state

    async def is_round_over(self) -> bool:
        return self._require_engine().is_round_over()

    async def get_winner(self) -> Optional[Team]:
        return self._require_engine().get_winner()

    async def save_state(self) -> str:
        """
        Serialize the current round to JSON.
        """
        state = await self.get_state()
        if state is None:
            raise RuntimeError("No round in progress")
        return schema.dumps(state)

    async def load_state(self, text: str) -> GameState:
        """
        Resume a round saved with :meth:`save_state`.

        Raises:
            SchemaError: If the text is not a valid round
        """
        state = schema.loads(text)
        await self._require_engine().load_state(state)
        return state

    # Synchronous API wrappers

    def start_game_sync(self, deck: Optional[List[Card]] = None) -> GameState:
        return self._run_async(self.start_game(deck))

    def get_view_sync(self, seat: int) -> PlayerView:
        return self._run_async(self.get_view(seat))

    def get_legal_cards_sync(self, seat: int) -> List[Card]:
        return self._run_async(self.get_legal_cards(seat))

    def play_card_sync(self, seat: int, card: Union[Card, str]) -> PlayResult:
        return self._run_async(self.play_card(seat, card))

    def play_bot_turn_sync(self) -> PlayResult:
        return self._run_async(self.play_bot_turn())

    def play_round_sync(self, deck: Optional[List[Card]] = None) -> GameState:
        return self._run_async(self.play_round(deck))

    def play_round_to_end_sync(self) -> GameState:
        return self._run_async(self.play_round_to_end())

    def is_round_over_sync(self) -> bool:
        return self._run_async(self.is_round_over())

    def get_winner_sync(self) -> Optional[Team]:
        return self._run_async(self.get_winner())

    def save_state_sync(self) -> str:
        return self._run_async(self.save_state())

    def load_state_sync(self, text: str) -> GameState:
        return self._run_async(self.load_state(text))
