"""
Mendikot game engine implementation.

This module provides the MendikotEngine class, which implements the GameEngine
interface for Mendikot. The engine owns the current round, feeds plays from
human seats (through the adapter) and bot seats (through a strategy) into
:class:`~mendikot.game.transitions.StateTransitionEngine`, and forwards
round events to the adapter.
"""

import asyncio
import logging
import random
import time
from typing import Any, Dict, List, Optional

from mendikot.adapters import PlatformAdapter
from mendikot.common.card import Card
from mendikot.engine.base import GameEngine
from mendikot.events import EngineEventType
from mendikot.game.constants import (
    DEFAULT_DEALER_INDEX,
    DEFAULT_HUMAN_SEATS,
    DEFAULT_PLAYER_NAMES,
)
from mendikot.game.schema import validate_state
from mendikot.game.state import GamePhase, GameState, MendikotRules, PlayResult, Team
from mendikot.game.strategy import Strategy, get_strategy
from mendikot.game.transitions import StateTransitionEngine
from mendikot.game.view import PlayerView, build_view

logger = logging.getLogger("mendikot.engine")

MAX_HUMAN_ATTEMPTS = 3


class MendikotEngine(GameEngine):
    """
    Engine implementation for Mendikot.

    Plays are serialized: only one ``apply_play`` runs at a time per engine,
    whether it comes from ``execute_player_action`` or from ``play_round``.
    """

    def __init__(self, adapter: PlatformAdapter, config: Dict[str, Any] = None):
        """
        Initialize the Mendikot engine.

        Args:
            adapter: Platform adapter to use for rendering and input
            config: Configuration options for the game

        Raises:
            ValueError: If the table setup or the strategy name is invalid
        """
        super().__init__(adapter, config)

        # Apply default configuration
        default_config = {
            "player_names": DEFAULT_PLAYER_NAMES,
            "human_seats": DEFAULT_HUMAN_SEATS,
            "dealer_index": DEFAULT_DEALER_INDEX,
            "strategy": "simple",  # simple, easy or random
            "strategies": {},  # per-seat override, seat -> name
            "bot_delay_ms": 0,
            "decision_timeout": None,  # seconds a human seat may think
            "seed": None,
        }

        # Merge with provided config
        if config:
            default_config.update(config)

        self.config = default_config

        # Create the rules
        self.rules = MendikotRules(
            player_names=tuple(self.config["player_names"]),
            human_seats=tuple(self.config["human_seats"]),
            dealer_index=self.config["dealer_index"],
        )

        self.rng = random.Random(self.config["seed"])
        self.strategies: Dict[int, Strategy] = {
            seat: get_strategy(
                self.config["strategies"].get(seat, self.config["strategy"]), self.rng
            )
            for seat in range(len(self.rules.player_names))
            if seat not in self.rules.human_seats
        }

        self._play_lock = asyncio.Lock()

    async def initialize(self) -> None:
        """
        Initialize the engine and prepare for a game.
        """
        await super().initialize()

        self.event_bus.emit(
            EngineEventType.ENGINE_INIT,
            {
                "engine_type": "mendikot",
                "config": self.config,
                "timestamp": time.time(),
            },
        )
        await self._flush_events()

    async def shutdown(self) -> None:
        """
        Shut down the engine and clean up resources.
        """
        self.event_bus.emit(EngineEventType.ENGINE_SHUTDOWN, {"timestamp": time.time()})
        await self._flush_events()
        await super().shutdown()

    async def start_game(self, deck: Optional[List[Card]] = None) -> GameState:
        """
        Deal a new round.

        Args:
            deck: Optional pre-arranged deck, dealt instead of a shuffle

        Returns:
            The freshly dealt round
        """
        async with self._play_lock:
            self.state = StateTransitionEngine.create_round(
                self.rules, rng=self.rng, deck=deck
            )
            for player in self.state.players:
                self.event_bus.emit(
                    EngineEventType.PLAYER_JOINED,
                    {
                        "game_id": self.state.id,
                        "seat": player.id,
                        "player_name": player.name,
                        "team": player.team.value,
                        "is_human": player.is_human,
                    },
                )
        await self._flush_events()
        await self.render_state()
        return self.state

    async def load_state(self, state: GameState) -> None:
        """
        Resume a saved round.

        Raises:
            SchemaError: If the round breaks an invariant
        """
        validate_state(state)
        async with self._play_lock:
            self.state = state
        await self.render_state()

    async def execute_player_action(
        self, player_id: int, action: str, **kwargs
    ) -> PlayResult:
        """
        Execute a player action.

        Args:
            player_id: Seat of the player
            action: Action to perform (only ``play_card``)
            **kwargs: ``card`` (a Card or card id such as ``"10-hearts"``)

        Returns:
            The result of the play; a refused play leaves the round unchanged

        Raises:
            ValueError: If the action is unknown or no card was given
        """
        if action.upper() != "PLAY_CARD":
            raise ValueError(f"Unknown action: {action}")

        card = kwargs.get("card")
        if card is None:
            raise ValueError("Missing card")
        if isinstance(card, str):
            card = Card.from_id(card)

        async with self._play_lock:
            state = self._require_state()
            result = StateTransitionEngine.apply_play(state, player_id, card)
            self.state = result.state

        await self._flush_events()
        if result.accepted:
            await self.render_state()
        return result

    async def render_state(self) -> None:
        """
        Render the current round, showing the hand of the first human seat.
        """
        state = self._require_state()
        viewer = self.rules.human_seats[0] if self.rules.human_seats else None
        await self.adapter.render_game_state(state.to_adapter_format(viewer))

    def get_valid_actions(self, player_id: int) -> Dict[str, List[Card]]:
        """
        Get valid actions for a player.

        Args:
            player_id: Seat of the player

        Returns:
            ``{"PLAY_CARD": [...]}`` on the seat's turn, otherwise an empty dict
        """
        if self.state is None:
            return {}
        cards = StateTransitionEngine.legal_cards_for(self.state, player_id)
        return {"PLAY_CARD": cards} if cards else {}

    def get_view(self, seat: int) -> PlayerView:
        """What ``seat`` can see of the current round."""
        return build_view(self._require_state(), seat)

    def is_human(self, seat: int) -> bool:
        return seat in self.rules.human_seats

    async def _choose_bot_card(self, seat: int) -> Card:
        state = self._require_state()
        view = build_view(state, seat)
        legal = StateTransitionEngine.legal_cards_for(state, seat)
        strategy = self.strategies[seat]

        card = strategy.choose_card(view, legal)
        if card not in legal:
            logger.warning(
                "%s strategy proposed illegal %s for seat %d; playing %s",
                strategy.name,
                card,
                seat,
                legal[0],
            )
            self.event_bus.emit(
                EngineEventType.WARNING,
                {
                    "game_id": state.id,
                    "seat": seat,
                    "message": f"Strategy {strategy.name} proposed an illegal card",
                },
            )
            card = legal[0]

        self.event_bus.emit(
            EngineEventType.STRATEGY_DECISION,
            {
                "game_id": state.id,
                "seat": seat,
                "strategy": strategy.name,
                "card": card.id,
            },
        )
        return card

    async def play_bot_turn(self) -> PlayResult:
        """
        Let the strategy of the seat to act play one card.

        Raises:
            ValueError: If it is a human seat's turn
        """
        state = self._require_state()
        seat = state.current_player_index
        if self.is_human(seat):
            raise ValueError(f"Seat {seat} is played by a human")

        delay = self.config["bot_delay_ms"]
        if delay:
            await asyncio.sleep(delay / 1000)

        card = await self._choose_bot_card(seat)
        return await self.execute_player_action(seat, "play_card", card=card)

    async def play_human_turn(self) -> PlayResult:
        """
        Ask the adapter for the card of the human seat to act.

        A refused card is reported to the adapter and the seat is asked again.
        A seat that times out, or is refused three times, plays the adapter's
        timeout default.
        """
        state = self._require_state()
        seat = state.current_player_index
        player = state.players[seat]

        for _ in range(MAX_HUMAN_ATTEMPTS):
            view = build_view(self.state, seat)
            legal = StateTransitionEngine.legal_cards_for(self.state, seat)
            self.event_bus.emit(
                EngineEventType.PLAYER_DECISION_NEEDED,
                {"game_id": self.state.id, "seat": seat, "player_name": player.name},
            )
            await self._flush_events()

            try:
                card = await self.adapter.request_card(
                    seat,
                    player.name,
                    view,
                    legal,
                    self.config["decision_timeout"],
                )
            except TimeoutError:
                card = await self.adapter.handle_timeout(seat, player.name, legal)

            result = await self.execute_player_action(seat, "play_card", card=card)
            if result.accepted:
                return result

        legal = StateTransitionEngine.legal_cards_for(self.state, seat)
        card = await self.adapter.handle_timeout(seat, player.name, legal)
        return await self.execute_player_action(seat, "play_card", card=card)

    async def play_round(self, deck: Optional[List[Card]] = None) -> GameState:
        """
        Deal and play a whole round, asking human seats through the adapter.

        Args:
            deck: Optional pre-arranged deck

        Returns:
            The finished round
        """
        await self.start_game(deck=deck)
        while not self.is_round_over():
            seat = self.state.current_player_index
            if self.is_human(seat):
                await self.play_human_turn()
            else:
                await self.play_bot_turn()
        return self.state

    def is_round_over(self) -> bool:
        return self.state is not None and self.state.phase == GamePhase.ROUND_END

    def get_winner(self) -> Optional[Team]:
        return self.state.winner if self.state else None
