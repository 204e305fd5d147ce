"""
Per-seat view of a round.

A :class:`PlayerView` is what one seat is allowed to know: its own hand,
everyone's hand sizes, the table and the scores. Presentation layers and
strategies receive a view instead of the full state, so opponents' cards are
never exposed.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from mendikot.common.card import Card, Suit
from mendikot.game.state import (
    CompletedTrick,
    GamePhase,
    GameState,
    PlayedCard,
    Team,
)


@dataclass(frozen=True)
class PlayerView:
    """
    Immutable snapshot of a round from one seat's point of view.

    Attributes:
        seat: The viewing seat
        team: The viewing seat's team
        hand: The viewing seat's cards
        hand_sizes: Card count for every seat
        trick: Cards on the table in play order
        lead_suit: Lead suit of the trick in progress
        trump_suit: Trump suit, None while it is hidden
        trump_setter_index: Seat that cut trump
        completed_tricks: Finished tricks, all cards face up
        team_a_tricks / team_b_tricks: Trick tallies
        team_a_tens / team_b_tens: Confirmed tens
        pot_tens / pot_tens_team: Unconfirmed tens and their owner
        phase: Round phase
        current_player_index: Seat whose turn it is
        message: Status line
    """

    seat: int
    team: Team
    hand: Tuple[Card, ...]
    hand_sizes: Tuple[int, ...]
    trick: Tuple[PlayedCard, ...]
    lead_suit: Optional[Suit]
    trump_suit: Optional[Suit]
    trump_setter_index: Optional[int]
    completed_tricks: Tuple[CompletedTrick, ...]
    team_a_tricks: int
    team_b_tricks: int
    team_a_tens: int
    team_b_tens: int
    pot_tens: int
    pot_tens_team: Optional[Team]
    phase: GamePhase
    current_player_index: int
    message: str

    @property
    def is_leading(self) -> bool:
        return not self.trick

    @property
    def trump_revealed(self) -> bool:
        return self.trump_suit is not None

    @property
    def tricks_played(self) -> int:
        return len(self.completed_tricks)

    @property
    def partner_seat(self) -> int:
        return (self.seat + 2) % len(self.hand_sizes)

    def tens(self, team: Team) -> int:
        return self.team_a_tens if team is Team.A else self.team_b_tens


def build_view(state: GameState, seat: int) -> PlayerView:
    """
    Build the view of ``state`` visible to ``seat``.

    Raises:
        IndexError: If the seat is not at the table
    """
    if isinstance(seat, bool) or not 0 <= seat < len(state.players):
        raise IndexError(f"Seat {seat} is not at the table")
    player = state.players[seat]
    return PlayerView(
        seat=seat,
        team=player.team,
        hand=player.hand,
        hand_sizes=tuple(p.card_count for p in state.players),
        trick=state.trick.plays,
        lead_suit=state.trick.lead_suit,
        trump_suit=state.trump_suit if state.trump_revealed else None,
        trump_setter_index=state.trump_setter_index,
        completed_tricks=state.completed_tricks,
        team_a_tricks=state.team_a_tricks_won,
        team_b_tricks=state.team_b_tricks_won,
        team_a_tens=state.team_a_tens,
        team_b_tens=state.team_b_tens,
        pot_tens=state.pot_tens,
        pot_tens_team=state.pot_tens_team,
        phase=state.phase,
        current_player_index=state.current_player_index,
        message=state.message,
    )
