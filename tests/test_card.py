import pickle

import pytest

from mendikot.common.card import Card, Rank, Suit


def test_card_initialization():
    card = Card(Suit.HEARTS, Rank.EIGHT)
    assert card.suit == Suit.HEARTS
    assert card.rank == Rank.EIGHT


def test_card_repr():
    card = Card(Suit.HEARTS, Rank.EIGHT)
    assert repr(card) == "Card(Suit.HEARTS, Rank.EIGHT)"


def test_card_str():
    assert str(Card(Suit.HEARTS, Rank.EIGHT)) == "8 of ♥"
    assert str(Card(Suit.SPADES, Rank.KING)) == "K of ♠"


def test_invalid_suit():
    with pytest.raises(TypeError):
        Card("Z", Rank.EIGHT)


def test_invalid_rank():
    with pytest.raises(TypeError):
        Card(Suit.HEARTS, "invalid")


def test_non_enum_rank():
    with pytest.raises(TypeError):
        Card(Suit.HEARTS, 10)


def test_card_is_immutable():
    card = Card(Suit.CLUBS, Rank.TWO)
    with pytest.raises(AttributeError):
        card.suit = Suit.HEARTS


def test_card_equality_and_hash():
    assert Card(Suit.HEARTS, Rank.TEN) == Card(Suit.HEARTS, Rank.TEN)
    assert Card(Suit.HEARTS, Rank.TEN) != Card(Suit.SPADES, Rank.TEN)
    assert len({Card(Suit.HEARTS, Rank.TEN), Card(Suit.HEARTS, Rank.TEN)}) == 1


def test_card_pickles():
    card = Card(Suit.DIAMONDS, Rank.QUEEN)
    assert pickle.loads(pickle.dumps(card)) == card


@pytest.mark.parametrize(
    "suit, rank, card_id",
    [
        (Suit.HEARTS, Rank.TEN, "10-hearts"),
        (Suit.SPADES, Rank.ACE, "A-spades"),
        (Suit.CLUBS, Rank.TWO, "2-clubs"),
        (Suit.DIAMONDS, Rank.JACK, "J-diamonds"),
    ],
)
def test_card_id(suit, rank, card_id):
    card = Card(suit, rank)
    assert card.id == card_id
    assert Card.from_id(card_id) == card


@pytest.mark.parametrize("card_id", ["", "10hearts", "1-hearts", "10-stars", "Z-clubs"])
def test_from_id_rejects_malformed(card_id):
    with pytest.raises(ValueError):
        Card.from_id(card_id)


def test_is_ten():
    assert Card(Suit.CLUBS, Rank.TEN).is_ten
    assert not Card(Suit.CLUBS, Rank.NINE).is_ten


def test_rank_order():
    assert Rank.TWO < Rank.TEN < Rank.JACK < Rank.ACE
    assert sorted([Rank.ACE, Rank.TWO, Rank.KING]) == [Rank.TWO, Rank.KING, Rank.ACE]


def test_rank_str_round_trip():
    for rank in Rank:
        assert Rank.from_str(rank.rank_str) is rank
