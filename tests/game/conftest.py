"""
Fixtures for building round states by hand.
"""

import pytest

from mendikot.common.card import Card, Suit
from mendikot.common.deck import RANK_ORDER
from mendikot.game.state import (
    GamePhase,
    GameState,
    PlayedCard,
    PlayerState,
    Team,
    TrickState,
)

NAMES = ("You", "West", "Partner", "East")


def cards(*card_ids):
    return tuple(Card.from_id(card_id) for card_id in card_ids)


def _make_state(hands, current=0, trick=(), trump=None, setter=None, **fields):
    """
    Build a PLAYING state.

    Args:
        hands: Four lists of card ids
        current: Seat to act
        trick: (seat, card id) pairs already on the table
        trump: Revealed trump suit, if any
        setter: Seat that cut trump
    """
    players = tuple(
        PlayerState(id=seat, name=NAMES[seat], team=Team.for_seat(seat), hand=cards(*hand))
        for seat, hand in enumerate(hands)
    )
    plays = tuple(PlayedCard(seat, Card.from_id(card_id)) for seat, card_id in trick)
    return GameState(
        players=players,
        phase=GamePhase.PLAYING,
        current_player_index=current,
        trick=TrickState(plays=plays, lead_suit=plays[0].card.suit if plays else None),
        trump_suit=trump,
        trump_revealed=trump is not None,
        trump_setter_index=setter if trump is not None else None,
        **fields,
    )


@pytest.fixture
def make_state():
    """Factory for hand-built PLAYING states."""
    return _make_state


@pytest.fixture
def suit_per_seat_deck():
    """
    A deck that deals all spades to seat 0, hearts to seat 1, diamonds to
    seat 2 and clubs to seat 3, each hand ordered ace to two.
    """
    return [
        Card(suit, rank)
        for suit in (Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS)
        for rank in RANK_ORDER
    ]


@pytest.fixture
def first_legal():
    """Drive a round by always playing the first legal card."""
    from mendikot.game.transitions import StateTransitionEngine

    def play_out(state):
        states = [state]
        while state.phase == GamePhase.PLAYING:
            seat = state.current_player_index
            card = StateTransitionEngine.legal_cards_for(state, seat)[0]
            result = StateTransitionEngine.apply_play(state, seat, card)
            assert result.accepted, result.message
            state = result.state
            states.append(state)
        return states

    return play_out
