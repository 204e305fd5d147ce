"""
This module defines the `Suit`, `Rank`, and `Card` classes, which are used to represent playing cards.

- `Suit`: An enum representing the four suits of a standard deck of playing
cards: Hearts, Diamonds, Clubs, and Spades.

- `Rank`: An enum representing the thirteen ranks of a standard deck, ordered
Two (lowest) through Ace (highest).

- `Card`: An immutable playing card. A card has a suit, a rank and a stable
identifier that is unique within one deck.

This module is part of the `mendikot` package.
"""

from enum import Enum, unique


@unique
class Suit(Enum):
    """
    Enum for suits in a card deck.
    """

    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"

    @property
    def symbol(self) -> str:
        return _SUIT_SYMBOLS[self]

    def __str__(self) -> str:
        return self.symbol


_SUIT_SYMBOLS = {
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
    Suit.SPADES: "♠",
}


@unique
class Rank(Enum):
    """
    Enum for ranks in a card deck. The value is the rank's strength in a trick.
    """

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    @property
    def rank_value(self) -> int:
        """The strength of the rank, used for trick comparisons."""
        return self.value

    @property
    def rank_str(self) -> str:
        """A string representation of the rank."""
        if self in (Rank.JACK, Rank.QUEEN, Rank.KING, Rank.ACE):
            return self.name[0]
        return str(self.value)

    @classmethod
    def from_str(cls, text: str) -> "Rank":
        """Parse a rank from its short form ("A", "10", "7", ...)."""
        for rank in cls:
            if rank.rank_str == text:
                return rank
        raise ValueError(f"Invalid rank: {text!r}")

    def __lt__(self, other):
        if isinstance(other, Rank):
            return self.value < other.value
        return NotImplemented

    def __str__(self) -> str:
        return self.rank_str


class Card:
    """
    Class representing a playing card. Cards are immutable and hashable.

    >>> card = Card(Suit.HEARTS, Rank.TEN)
    >>> print(card)
    10 of ♥
    >>> card.id
    '10-hearts'
    """

    __slots__ = ("_suit", "_rank")

    def __init__(self, suit: Suit, rank: Rank):
        """
        Initialize a Card instance.

        :param suit: Suit of the card (one of the Suit enums)
        :param rank: Rank of the card (one of the Rank enums)
        """
        if not isinstance(suit, Suit):
            raise TypeError(f"Invalid suit: {suit}")
        if not isinstance(rank, Rank):
            raise TypeError(f"Invalid rank: {rank}")
        object.__setattr__(self, "_suit", suit)
        object.__setattr__(self, "_rank", rank)

    @property
    def suit(self) -> Suit:
        return self._suit

    @property
    def rank(self) -> Rank:
        return self._rank

    @property
    def id(self) -> str:
        """Stable identifier, unique within one deck (e.g. ``"10-hearts"``)."""
        return f"{self._rank.rank_str}-{self._suit.value}"

    @property
    def is_ten(self) -> bool:
        return self._rank is Rank.TEN

    @classmethod
    def from_id(cls, card_id: str) -> "Card":
        """
        Rebuild a card from its identifier.

        :raises ValueError: If the identifier is malformed.
        """
        if not isinstance(card_id, str) or "-" not in card_id:
            raise ValueError(f"Invalid card id: {card_id!r}")
        rank_str, _, suit_str = card_id.partition("-")
        try:
            suit = Suit(suit_str)
        except ValueError:
            raise ValueError(f"Invalid card id: {card_id!r}") from None
        return cls(suit, Rank.from_str(rank_str))

    def __setattr__(self, name, value):
        raise AttributeError("Card is immutable")

    def __eq__(self, other):
        """
        Checks if this card is equal to another card.

        :param other: The other card to compare to.
        :return: True if the cards have the same rank and suit, False otherwise.
        """
        if isinstance(other, Card):
            return self._rank == other._rank and self._suit == other._suit
        return NotImplemented

    def __hash__(self):
        return hash((self._suit, self._rank))

    def __reduce__(self):
        return (Card, (self._suit, self._rank))

    def __repr__(self) -> str:
        """
        Provide a machine-readable representation of the card.

        :return: A string representation of the card.
        """
        return f"Card(Suit.{self._suit.name}, Rank.{self._rank.name})"

    def __str__(self) -> str:
        """
        Provide a human-readable representation of the card.

        :return: A string representation of the card.
        """
        return f"{self._rank.rank_str} of {self._suit}"
