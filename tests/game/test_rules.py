"""
Tests for the pure rule functions: legality and trick resolution.
"""

from itertools import permutations

import pytest

from mendikot.common.card import Card, Suit
from mendikot.game.rules import (
    count_tens,
    is_legal_play,
    legal_cards,
    play_rejection,
    resolve_trick,
    reveals_trump,
    winning_play,
)
from mendikot.game.state import PlayedCard, RejectionReason, TrickState

c = Card.from_id


def hand(*card_ids):
    return tuple(c(card_id) for card_id in card_ids)


def trick(*card_ids, first_seat=0):
    plays = tuple(
        PlayedCard((first_seat + i) % 4, c(card_id)) for i, card_id in enumerate(card_ids)
    )
    return TrickState(plays=plays, lead_suit=plays[0].card.suit if plays else None)


class TestLegality:
    def test_any_card_may_lead(self):
        cards = hand("2-hearts", "A-spades", "10-clubs")
        for card in cards:
            assert is_legal_play(card, cards, TrickState())

    def test_must_follow_lead_suit(self):
        cards = hand("2-hearts", "A-spades", "10-clubs")
        table = trick("K-hearts")
        assert is_legal_play(c("2-hearts"), cards, table)
        assert not is_legal_play(c("A-spades"), cards, table)
        assert play_rejection(c("A-spades"), cards, table) == RejectionReason.MUST_FOLLOW_SUIT

    def test_void_hand_may_play_anything(self):
        cards = hand("A-spades", "10-clubs")
        table = trick("K-hearts")
        assert all(is_legal_play(card, cards, table) for card in cards)

    def test_trump_does_not_lift_follow_suit(self):
        cards = hand("2-hearts", "A-diamonds")
        table = trick("K-hearts")
        assert not is_legal_play(
            c("A-diamonds"), cards, table, trump_suit=Suit.DIAMONDS, trump_revealed=True
        )

    def test_card_not_in_hand(self):
        cards = hand("2-hearts")
        assert not is_legal_play(c("3-hearts"), cards, TrickState())
        assert (
            play_rejection(c("3-hearts"), cards, TrickState())
            == RejectionReason.CARD_NOT_IN_HAND
        )

    def test_legal_cards_following(self):
        cards = hand("2-hearts", "A-spades", "J-hearts")
        assert legal_cards(cards, trick("K-hearts")) == [c("2-hearts"), c("J-hearts")]

    def test_legal_cards_void_or_leading(self):
        cards = hand("A-spades", "10-clubs")
        assert legal_cards(cards, trick("K-hearts")) == list(cards)
        assert legal_cards(cards, TrickState()) == list(cards)

    def test_legal_cards_agree_with_is_legal_play(self):
        cards = hand("2-hearts", "A-spades", "J-hearts", "10-clubs")
        table = trick("K-hearts", "3-hearts")
        for card in cards:
            assert (card in legal_cards(cards, table)) == is_legal_play(card, cards, table)


class TestRevealsTrump:
    def test_void_follower_reveals(self):
        assert reveals_trump(hand("5-diamonds"), trick("K-hearts"), False)

    def test_leader_never_reveals(self):
        assert not reveals_trump(hand("5-diamonds"), TrickState(), False)

    def test_holding_lead_suit_does_not_reveal(self):
        assert not reveals_trump(hand("5-hearts", "5-diamonds"), trick("K-hearts"), False)

    def test_only_once(self):
        assert not reveals_trump(hand("5-diamonds"), trick("K-hearts"), True)


class TestTrickResolution:
    def test_simple_trick_no_trump(self):
        table = trick("2-spades", "K-spades", "7-spades", "9-spades")
        assert resolve_trick(table) == 1

    def test_off_suit_discard_never_wins_without_trump(self):
        table = trick("2-spades", "A-hearts", "A-diamonds", "3-spades")
        assert resolve_trick(table) == 3

    def test_trump_beats_lead_suit(self):
        table = trick("A-spades", "2-diamonds", "K-spades", "Q-spades")
        assert resolve_trick(table, Suit.DIAMONDS, True) == 1

    def test_highest_trump_wins(self):
        table = trick("A-spades", "2-diamonds", "J-diamonds", "Q-spades")
        assert resolve_trick(table, Suit.DIAMONDS, True) == 2

    def test_unrevealed_trump_is_ignored(self):
        table = trick("A-spades", "2-diamonds", "K-spades", "Q-spades")
        assert resolve_trick(table, Suit.DIAMONDS, False) == 0

    def test_trump_lead(self):
        table = trick("3-diamonds", "A-spades", "9-diamonds", "K-hearts")
        assert resolve_trick(table, Suit.DIAMONDS, True) == 2

    def test_seats_follow_first_player(self):
        table = trick("2-spades", "K-spades", "7-spades", "9-spades", first_seat=3)
        assert resolve_trick(table) == 0

    def test_empty_trick_raises(self):
        with pytest.raises(ValueError):
            winning_play((), None)

    @pytest.mark.parametrize(
        "cards, trump",
        [
            (("5-hearts", "K-hearts", "A-clubs", "2-hearts"), None),
            (("5-hearts", "K-hearts", "3-diamonds", "Q-diamonds"), Suit.DIAMONDS),
            (("5-hearts", "2-clubs", "3-spades", "4-diamonds"), Suit.SPADES),
        ],
    )
    def test_winner_independent_of_follower_order(self, cards, trump):
        lead, followers = cards[0], cards[1:]
        expected = winning_play(
            trick(*cards).plays, Suit.HEARTS, trump, trump is not None
        ).card
        for order in permutations(followers):
            table = trick(lead, *order)
            winner = winning_play(table.plays, table.lead_suit, trump, trump is not None)
            assert winner.card == expected


def test_count_tens():
    assert count_tens(hand("10-hearts", "10-clubs", "9-clubs")) == 2
    assert count_tens(()) == 0
