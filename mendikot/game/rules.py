"""
Pure rule functions for Mendikot.

Nothing here touches a :class:`~mendikot.game.state.GameState`; the
functions take the pieces of state they need and return plain values, so the
transition engine, the strategies and the presentation layer share a single
definition of what is legal and who wins.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from mendikot.common.card import Card, Suit
from mendikot.game.constants import (
    TENS_PER_DECK,
    TENS_TO_WIN,
    TRICKS_PER_ROUND,
    TRICKS_TO_WIN,
)
from mendikot.game.state import (
    PlayedCard,
    RejectionReason,
    Team,
    TrickState,
)


def play_rejection(
    card: Card, hand: Sequence[Card], trick: TrickState
) -> Optional[RejectionReason]:
    """
    Check a card against the hand and the trick in progress.

    Returns:
        None if the card may be played, otherwise the reason it may not
    """
    if card not in hand:
        return RejectionReason.CARD_NOT_IN_HAND
    if trick.lead_suit is None:
        return None
    if card.suit != trick.lead_suit and any(c.suit == trick.lead_suit for c in hand):
        return RejectionReason.MUST_FOLLOW_SUIT
    return None


def is_legal_play(
    card: Card,
    hand: Sequence[Card],
    trick: TrickState,
    trump_suit: Optional[Suit] = None,
    trump_revealed: bool = False,
) -> bool:
    """
    Check whether ``card`` may be played from ``hand`` into ``trick``.

    Opening a trick, any card is legal. Otherwise the lead suit must be
    followed when the hand holds it; a hand void in the lead suit may play
    anything. Trump does not change the follow-suit obligation, the trump
    arguments are accepted so callers can pass the full trick context.
    """
    return play_rejection(card, hand, trick) is None


def legal_cards(hand: Sequence[Card], trick: TrickState) -> List[Card]:
    """The cards of ``hand`` that may be played into ``trick``, in hand order."""
    if trick.lead_suit is not None:
        following = [card for card in hand if card.suit == trick.lead_suit]
        if following:
            return following
    return list(hand)


def reveals_trump(
    hand: Sequence[Card], trick: TrickState, trump_revealed: bool
) -> bool:
    """
    Whether the next play from ``hand`` cuts trump.

    True when trump is still hidden, the trick already has a lead suit and
    the hand holds no card of it.
    """
    if trump_revealed or trick.lead_suit is None:
        return False
    return not any(card.suit == trick.lead_suit for card in hand)


def _beats(
    challenger: Card,
    best: Card,
    lead_suit: Optional[Suit],
    trump_suit: Optional[Suit],
) -> bool:
    challenger_trump = trump_suit is not None and challenger.suit == trump_suit
    best_trump = trump_suit is not None and best.suit == trump_suit

    if challenger_trump != best_trump:
        return challenger_trump
    if challenger_trump:
        return challenger.rank.rank_value > best.rank.rank_value
    if challenger.suit != lead_suit:
        # Off-suit discard never wins
        return False
    if best.suit != lead_suit:
        return True
    return challenger.rank.rank_value > best.rank.rank_value


def winning_play(
    plays: Sequence[PlayedCard],
    lead_suit: Optional[Suit],
    trump_suit: Optional[Suit] = None,
    trump_revealed: bool = False,
) -> PlayedCard:
    """
    Find the winning play of a trick.

    Trump only counts once revealed. Among non-trumps, only the lead suit can
    win. Ranks are unique within a suit, so there are no ties.

    Raises:
        ValueError: If there are no plays
    """
    if not plays:
        raise ValueError("Cannot resolve an empty trick")

    effective_trump = trump_suit if trump_revealed else None
    if lead_suit is None:
        lead_suit = plays[0].card.suit

    best = plays[0]
    for play in plays[1:]:
        if _beats(play.card, best.card, lead_suit, effective_trump):
            best = play
    return best


def resolve_trick(
    trick: TrickState,
    trump_suit: Optional[Suit] = None,
    trump_revealed: bool = False,
) -> int:
    """Return the seat that wins ``trick``."""
    return winning_play(trick.plays, trick.lead_suit, trump_suit, trump_revealed).seat


def count_tens(cards: Iterable[Card]) -> int:
    return sum(1 for card in cards if card.is_ten)


@dataclass(frozen=True)
class TensSettlement:
    """
    Ten tallies after a trick has been resolved.

    Attributes:
        team_a_tens / team_b_tens: Confirmed tens
        pot_tens: Tens still waiting for confirmation
        pot_tens_team: Team that owns the pot
        confirmed: Tens confirmed from an earlier pot by this trick
        forced: Tens awarded to the last trick's winner at round end
    """

    team_a_tens: int
    team_b_tens: int
    pot_tens: int
    pot_tens_team: Optional[Team]
    confirmed: int = 0
    forced: int = 0


def settle_tens_pot(
    team_a_tens: int,
    team_b_tens: int,
    pot_tens: int,
    pot_tens_team: Optional[Team],
    winner_team: Team,
    tens_in_trick: int,
    is_final_trick: bool = False,
) -> TensSettlement:
    """
    Apply the tens pot protocol for one resolved trick.

    1. An existing pot is confirmed when its owner wins this trick; if the
       other team wins, the pot is left as it is.
    2. Tens captured in this trick go into the pot, and the pot now belongs
       to this trick's winner. Any unconfirmed tens from the other team
       stay in the pot and change owner with it.
    3. After the final trick, whatever is left in the pot goes to the final
       trick's winner.
    """
    tallies = {Team.A: team_a_tens, Team.B: team_b_tens}
    confirmed = 0
    forced = 0

    if pot_tens > 0 and pot_tens_team is winner_team:
        tallies[winner_team] += pot_tens
        confirmed = pot_tens
        pot_tens = 0
        pot_tens_team = None

    if tens_in_trick > 0:
        pot_tens += tens_in_trick
        pot_tens_team = winner_team

    if is_final_trick and pot_tens > 0:
        tallies[winner_team] += pot_tens
        forced = pot_tens
        pot_tens = 0
        pot_tens_team = None

    return TensSettlement(
        team_a_tens=tallies[Team.A],
        team_b_tens=tallies[Team.B],
        pot_tens=pot_tens,
        pot_tens_team=pot_tens_team,
        confirmed=confirmed,
        forced=forced,
    )


@dataclass(frozen=True)
class RoundOutcome:
    """Winner of a round and its bonus flags."""

    winner: Team
    is_mendikot: bool = False
    is_whitewash: bool = False


def determine_round_winner(
    team_a_tens: int,
    team_b_tens: int,
    team_a_tricks: int,
    team_b_tricks: int,
) -> RoundOutcome:
    """
    Classify a finished round.

    Three or more tens win outright; all four is a Mendikot and all thirteen
    tricks is a Whitewash. With the tens split 2-2 the team holding the
    majority of tricks wins.
    """
    tens = {Team.A: team_a_tens, Team.B: team_b_tens}
    tricks = {Team.A: team_a_tricks, Team.B: team_b_tricks}

    for team in (Team.A, Team.B):
        if tens[team] >= TENS_TO_WIN:
            return RoundOutcome(
                winner=team,
                is_mendikot=tens[team] == TENS_PER_DECK,
                is_whitewash=tricks[team] == TRICKS_PER_ROUND,
            )

    winner = Team.A if team_a_tricks >= TRICKS_TO_WIN else Team.B
    return RoundOutcome(winner=winner)
