"""
Headless round runner.

Rounds are played with the pure transitions only: no engine, no adapter and
no event loop. Each seat is driven by a :class:`~mendikot.game.strategy.Strategy`.
"""

import logging
import random
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

from mendikot.common.card import Card
from mendikot.events import EngineEventType, EventBus
from mendikot.game.constants import NUM_SEATS
from mendikot.game.state import GamePhase, GameState, MendikotRules, Team
from mendikot.game.strategy import Strategy, get_strategy
from mendikot.game.transitions import StateTransitionEngine
from mendikot.game.view import build_view

logger = logging.getLogger("mendikot.simulation")

StrategySpec = Union[str, Strategy]


@dataclass(frozen=True)
class RoundSummary:
    """
    Outcome of one simulated round.

    Attributes:
        round_id: Id of the round state
        dealer_index: Dealer seat
        winner: Winning team
        is_mendikot: The winner collected all four tens
        is_whitewash: The winner took every trick
        team_a_tens / team_b_tens: Tens confirmed per team
        team_a_tricks / team_b_tricks: Tricks per team
        trump_suit: Suit that became trump, None if nobody cut
        trump_setter_team: Team of the seat that cut trump
    """

    round_id: str
    dealer_index: int
    winner: Team
    is_mendikot: bool
    is_whitewash: bool
    team_a_tens: int
    team_b_tens: int
    team_a_tricks: int
    team_b_tricks: int
    trump_suit: Optional[str] = None
    trump_setter_team: Optional[Team] = None

    @classmethod
    def from_state(cls, state: GameState) -> "RoundSummary":
        if state.phase != GamePhase.ROUND_END:
            raise ValueError("Round is not finished")
        setter = state.trump_setter_index
        return cls(
            round_id=state.id,
            dealer_index=state.dealer_index,
            winner=state.winner,
            is_mendikot=state.is_mendikot,
            is_whitewash=state.is_whitewash,
            team_a_tens=state.team_a_tens,
            team_b_tens=state.team_b_tens,
            team_a_tricks=state.team_a_tricks_won,
            team_b_tricks=state.team_b_tricks_won,
            trump_suit=state.trump_suit.value if state.trump_suit else None,
            trump_setter_team=Team.for_seat(setter) if setter is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["winner"] = self.winner.value
        data["trump_setter_team"] = (
            self.trump_setter_team.value if self.trump_setter_team else None
        )
        return data


@dataclass
class SimulationResult:
    """Collected round summaries of a simulation run."""

    rounds: List[RoundSummary] = field(default_factory=list)
    strategies: List[str] = field(default_factory=list)
    seed: Optional[int] = None
    elapsed_seconds: float = 0.0

    @property
    def n_rounds(self) -> int:
        return len(self.rounds)

    def wins(self, team: Team) -> int:
        return sum(1 for summary in self.rounds if summary.winner is team)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "n_rounds": self.n_rounds,
            "strategies": list(self.strategies),
            "seed": self.seed,
            "elapsed_seconds": self.elapsed_seconds,
            "wins": {team.value: self.wins(team) for team in Team},
            "rounds": [summary.to_dict() for summary in self.rounds],
        }


def resolve_strategies(
    strategies: Optional[Sequence[StrategySpec]] = None,
    rng: Optional[random.Random] = None,
) -> List[Strategy]:
    """
    Turn names or strategy objects into one strategy per seat.

    A single entry is used for every seat.

    Raises:
        ValueError: On an unknown name or a wrong number of entries
    """
    if not strategies:
        strategies = ["simple"]
    if len(strategies) == 1:
        strategies = list(strategies) * NUM_SEATS
    if len(strategies) != NUM_SEATS:
        raise ValueError(
            f"Expected 1 or {NUM_SEATS} strategies, got {len(strategies)}"
        )
    return [
        get_strategy(entry, rng) if isinstance(entry, str) else entry
        for entry in strategies
    ]


def play_round(
    strategies: Sequence[Strategy],
    rng: Optional[random.Random] = None,
    rules: Optional[MendikotRules] = None,
    deck: Optional[Sequence[Card]] = None,
) -> GameState:
    """
    Play one round to the end with the given strategies.

    Args:
        strategies: One strategy per seat
        rng: Random source for the shuffle
        rules: Table setup; every seat is a bot regardless of ``human_seats``
        deck: Optional pre-arranged deck

    Returns:
        The finished round
    """
    rules = rules or MendikotRules(human_seats=())
    state = StateTransitionEngine.create_round(rules, rng=rng, deck=deck)

    while state.phase != GamePhase.ROUND_END:
        seat = state.current_player_index
        legal = StateTransitionEngine.legal_cards_for(state, seat)
        strategy = strategies[seat]
        card = strategy.choose_card(build_view(state, seat), legal)
        if card not in legal:
            logger.warning(
                "%s strategy proposed illegal %s for seat %d; playing %s",
                strategy.name,
                card,
                seat,
                legal[0],
            )
            card = legal[0]

        result = StateTransitionEngine.apply_play(state, seat, card)
        if not result.accepted:
            raise RuntimeError(f"Legal card refused: {result.message}")
        state = result.state

    return state


def run_simulation(
    n_rounds: int,
    strategies: Optional[Sequence[StrategySpec]] = None,
    seed: Optional[int] = None,
    rotate_dealer: bool = True,
    progress_every: int = 100,
) -> SimulationResult:
    """
    Play many rounds and collect their summaries.

    Args:
        n_rounds: Number of rounds to play
        strategies: One name/strategy for all seats, or one per seat
        seed: Seed for shuffles and randomized strategies
        rotate_dealer: Pass the deal clockwise after each round
        progress_every: Emit SIMULATION_PROGRESS every this many rounds

    Returns:
        The simulation result
    """
    if n_rounds < 0:
        raise ValueError("n_rounds must be non-negative")

    rng = random.Random(seed)
    seat_strategies = resolve_strategies(strategies, rng)
    event_bus = EventBus.get_instance()
    result = SimulationResult(
        strategies=[strategy.name for strategy in seat_strategies], seed=seed
    )

    start = time.time()
    dealer = 0
    for i in range(n_rounds):
        rules = MendikotRules(human_seats=(), dealer_index=dealer)
        state = play_round(seat_strategies, rng=rng, rules=rules)
        result.rounds.append(RoundSummary.from_state(state))

        if rotate_dealer:
            dealer = (dealer + 1) % NUM_SEATS

        if progress_every and (i + 1) % progress_every == 0:
            event_bus.emit(
                EngineEventType.SIMULATION_PROGRESS,
                {"rounds_played": i + 1, "n_rounds": n_rounds},
            )
            logger.debug("Simulated %d/%d rounds", i + 1, n_rounds)

    result.elapsed_seconds = time.time() - start
    event_bus.emit(
        EngineEventType.SIMULATION_RESULT,
        {
            "n_rounds": result.n_rounds,
            "wins": {team.value: result.wins(team) for team in Team},
            "elapsed_seconds": result.elapsed_seconds,
        },
    )
    logger.info(
        "Simulated %d rounds in %.2fs", result.n_rounds, result.elapsed_seconds
    )
    return result
