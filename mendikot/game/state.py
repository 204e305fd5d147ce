"""
Immutable state models for a round of Mendikot.

This module provides frozen dataclasses for representing a round in an
immutable manner. They are designed to be used with the pure transition
functions in :mod:`mendikot.game.transitions`, which create new state
instances rather than modifying existing ones.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple
from enum import Enum, auto
import uuid
import time

from mendikot.common.card import Card, Suit
from mendikot.game.constants import (
    DECK_SIZE,
    DEFAULT_DEALER_INDEX,
    DEFAULT_HUMAN_SEATS,
    DEFAULT_PLAYER_NAMES,
    NUM_SEATS,
    TRICK_SIZE,
    TRICKS_PER_ROUND,
)


class Team(Enum):
    """The two partnerships. Seats 0 and 2 are team A, seats 1 and 3 team B."""

    A = "A"
    B = "B"

    @classmethod
    def for_seat(cls, seat: int) -> "Team":
        return cls.A if seat % 2 == 0 else cls.B

    @property
    def opponent(self) -> "Team":
        return Team.B if self is Team.A else Team.A

    def __str__(self) -> str:
        return self.value


class GamePhase(Enum):
    """Phases of a round."""

    DEALING = auto()
    PLAYING = auto()
    TRICK_END = auto()  # transient, reported by PlayResult, never stored
    ROUND_END = auto()


class RejectionReason(Enum):
    """Why a proposed play was refused."""

    WRONG_PHASE = auto()
    WRONG_TURN = auto()
    INVALID_SEAT = auto()
    CARD_NOT_IN_HAND = auto()
    MUST_FOLLOW_SUIT = auto()


@dataclass(frozen=True)
class PlayedCard:
    """A card on the table, tagged with the seat that played it."""

    seat: int
    card: Card


@dataclass(frozen=True)
class TrickState:
    """
    Immutable representation of the trick in progress.

    Attributes:
        plays: Cards played so far, in play order
        lead_suit: Suit of the first card, None before the first play
        winner_id: Seat of the winner once resolved
    """

    plays: Tuple[PlayedCard, ...] = ()
    lead_suit: Optional[Suit] = None
    winner_id: Optional[int] = None

    @property
    def cards(self) -> Tuple[Card, ...]:
        return tuple(play.card for play in self.plays)

    @property
    def is_empty(self) -> bool:
        return not self.plays

    @property
    def is_complete(self) -> bool:
        return len(self.plays) == TRICK_SIZE


@dataclass(frozen=True)
class CompletedTrick:
    """A resolved trick kept in the round history."""

    winner_id: int
    plays: Tuple[PlayedCard, ...]

    @property
    def cards(self) -> Tuple[Card, ...]:
        return tuple(play.card for play in self.plays)

    @property
    def lead_suit(self) -> Suit:
        return self.plays[0].card.suit

    @property
    def tens(self) -> int:
        return sum(1 for card in self.cards if card.is_ten)


@dataclass(frozen=True)
class PlayerState:
    """
    Immutable representation of a seated player.

    Attributes:
        id: Seat index, 0-3, fixed for the round
        name: Display name of the player
        team: Partnership, determined by seat parity
        is_human: Whether moves come from a person rather than a strategy
        hand: Cards currently held. Order is a display concern only.
    """

    id: int
    name: str = "Player"
    team: Team = Team.A
    is_human: bool = False
    hand: Tuple[Card, ...] = ()

    @property
    def card_count(self) -> int:
        """Get the number of cards in the player's hand."""
        return len(self.hand)

    def has_card(self, card: Card) -> bool:
        return card in self.hand

    def has_suit(self, suit: Suit) -> bool:
        return any(card.suit == suit for card in self.hand)


@dataclass(frozen=True)
class MendikotRules:
    """
    Immutable table setup for a round.

    Attributes:
        player_names: Display names in seat order
        human_seats: Seats driven by human input
        dealer_index: Dealer seat; the seat after the dealer leads the first trick
    """

    player_names: Tuple[str, ...] = DEFAULT_PLAYER_NAMES
    human_seats: Tuple[int, ...] = DEFAULT_HUMAN_SEATS
    dealer_index: int = DEFAULT_DEALER_INDEX

    def __post_init__(self):
        if len(self.player_names) != NUM_SEATS:
            raise ValueError(
                f"Mendikot needs {NUM_SEATS} player names, got {len(self.player_names)}"
            )
        if not 0 <= self.dealer_index < NUM_SEATS:
            raise ValueError(f"Dealer seat out of range: {self.dealer_index}")
        for seat in self.human_seats:
            if not 0 <= seat < NUM_SEATS:
                raise ValueError(f"Human seat out of range: {seat}")


@dataclass(frozen=True)
class GameState:
    """
    Immutable representation of one round of Mendikot.

    Attributes:
        id: Unique identifier for this round
        players: The four seated players
        phase: Current phase of the round
        current_player_index: Seat whose play is awaited
        dealer_index: Seat that dealt
        trump_suit: Trump suit, None until revealed
        trump_revealed: Whether trump has been cut
        trump_setter_index: Seat whose off-suit play set trump
        trick: The trick in progress
        completed_tricks: Resolved tricks in play order
        team_a_tricks_won / team_b_tricks_won: Trick tallies
        team_a_tens / team_b_tens: Confirmed tens
        pot_tens: Tens captured but not yet confirmed
        pot_tens_team: Team that must confirm the pot
        last_trick_winner: Team that won the latest trick
        message: Human-readable status line
        winner: Winning team once the round has ended
        is_mendikot: Winner captured all four tens
        is_whitewash: Winner took all thirteen tricks
        timestamp: Time when this state was created
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    players: Tuple[PlayerState, ...] = ()
    phase: GamePhase = GamePhase.DEALING
    current_player_index: int = 0
    dealer_index: int = DEFAULT_DEALER_INDEX
    trump_suit: Optional[Suit] = None
    trump_revealed: bool = False
    trump_setter_index: Optional[int] = None
    trick: TrickState = field(default_factory=TrickState)
    completed_tricks: Tuple[CompletedTrick, ...] = ()
    team_a_tricks_won: int = 0
    team_b_tricks_won: int = 0
    team_a_tens: int = 0
    team_b_tens: int = 0
    pot_tens: int = 0
    pot_tens_team: Optional[Team] = None
    last_trick_winner: Optional[Team] = None
    message: str = ""
    winner: Optional[Team] = None
    is_mendikot: bool = False
    is_whitewash: bool = False
    timestamp: float = field(default_factory=lambda: time.time())

    @property
    def current_player(self) -> Optional[PlayerState]:
        """Get the player whose turn it is."""
        if 0 <= self.current_player_index < len(self.players):
            return self.players[self.current_player_index]
        return None

    @property
    def round_over(self) -> bool:
        return self.phase == GamePhase.ROUND_END

    @property
    def tricks_played(self) -> int:
        return len(self.completed_tricks)

    @property
    def is_last_trick(self) -> bool:
        return self.tricks_played == TRICKS_PER_ROUND - 1

    def tricks_won(self, team: Team) -> int:
        return self.team_a_tricks_won if team is Team.A else self.team_b_tricks_won

    def tens(self, team: Team) -> int:
        """Confirmed tens for a team."""
        return self.team_a_tens if team is Team.A else self.team_b_tens

    def team_of(self, seat: int) -> Team:
        return self.players[seat].team

    @property
    def cards_accounted_for(self) -> int:
        """Cards in hands, on the table and in the trick history. Always 52."""
        return (
            sum(p.card_count for p in self.players)
            + len(self.trick.plays)
            + sum(len(t.plays) for t in self.completed_tricks)
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the round state to a dictionary suitable for serialization.

        Every field is included, hands and trick history too. Use
        :meth:`to_adapter_format` for anything shown to a player.
        """
        from mendikot.game.schema import state_to_dict

        return state_to_dict(self)

    def to_adapter_format(self, viewer_seat: Optional[int] = None) -> Dict[str, Any]:
        """
        Convert the round state to a format suitable for platform adapters.

        Only the viewer's own cards are listed; other seats show a hand size.
        With no viewer, every hand is hidden.

        Args:
            viewer_seat: Seat whose hand may be shown

        Returns:
            Dictionary in adapter-friendly format
        """
        last_trick = self.completed_tricks[-1] if self.completed_tricks else None
        return {
            "game_id": self.id,
            "phase": self.phase.name,
            "message": self.message,
            "current_player": self.current_player.name if self.current_player else None,
            "current_player_index": self.current_player_index,
            "trump_suit": str(self.trump_suit) if self.trump_revealed else None,
            "trump_setter": (
                self.players[self.trump_setter_index].name
                if self.trump_setter_index is not None
                else None
            ),
            "lead_suit": str(self.trick.lead_suit) if self.trick.lead_suit else None,
            "trick": [
                {"seat": play.seat, "card": str(play.card)} for play in self.trick.plays
            ],
            "last_trick": (
                {
                    "winner": self.players[last_trick.winner_id].name,
                    "cards": [str(card) for card in last_trick.cards],
                }
                if last_trick
                else None
            ),
            "tricks_played": self.tricks_played,
            "score": {
                "A": {"tricks": self.team_a_tricks_won, "tens": self.team_a_tens},
                "B": {"tricks": self.team_b_tricks_won, "tens": self.team_b_tens},
            },
            "pot": {
                "tens": self.pot_tens,
                "team": str(self.pot_tens_team) if self.pot_tens_team else None,
            },
            "winner": str(self.winner) if self.winner else None,
            "is_mendikot": self.is_mendikot,
            "is_whitewash": self.is_whitewash,
            "players": [
                {
                    "seat": player.id,
                    "name": player.name,
                    "team": str(player.team),
                    "is_human": player.is_human,
                    "hand_size": player.card_count,
                    "cards": (
                        [str(card) for card in player.hand]
                        if player.id == viewer_seat
                        else None
                    ),
                }
                for player in self.players
            ],
        }


@dataclass(frozen=True)
class PlayResult:
    """
    Outcome of proposing a play.

    A rejected result carries the unchanged input state. An accepted one
    carries the new state plus what happened during the transition.

    Attributes:
        accepted: Whether the play was applied
        state: Resulting (or unchanged) round state
        reason: Why the play was refused, when rejected
        message: Explanation for a rejection, or the new status line
        completed_trick: The trick this play closed, if any
        trump_revealed: Whether this play cut trump
        tens_confirmed: Tens moved from the pot into a team's tally
    """

    accepted: bool
    state: GameState
    reason: Optional[RejectionReason] = None
    message: str = ""
    completed_trick: Optional[CompletedTrick] = None
    trump_revealed: bool = False
    tens_confirmed: int = 0

    def __bool__(self) -> bool:
        return self.accepted


def all_cards_accounted(state: GameState) -> bool:
    """True when the 52 cards are each in exactly one place."""
    seen = [card for player in state.players for card in player.hand]
    seen.extend(state.trick.cards)
    for trick in state.completed_tricks:
        seen.extend(trick.cards)
    return len(seen) == DECK_SIZE and len(set(seen)) == DECK_SIZE
