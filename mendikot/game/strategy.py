"""
Opponent strategies.

A strategy picks one card from the legal cards it is offered, looking only at
a :class:`~mendikot.game.view.PlayerView`. Its choice is a proposal like any
human play: the transition engine validates it again before applying it.
"""

import random
from abc import ABC, abstractmethod
from typing import Dict, Optional, Sequence, Type

from mendikot.common.card import Card
from mendikot.game.view import PlayerView


def _by_rank_desc(cards: Sequence[Card]):
    return sorted(cards, key=lambda card: card.rank.rank_value, reverse=True)


class Strategy(ABC):
    """Chooses a card to play."""

    name = "strategy"

    @abstractmethod
    def choose_card(self, view: PlayerView, legal_cards: Sequence[Card]) -> Card:
        """
        Choose the card to play.

        Args:
            view: What the seat can see of the round
            legal_cards: Non-empty list of cards the seat may play

        Returns:
            The chosen card
        """
        pass


class SimpleStrategy(Strategy):
    """
    Play a middling card when leading, otherwise play low.

    When following, the lowest card of the lead suit is played. A seat void
    in the lead suit plays its lowest trump if trump is known, else its
    lowest card.
    """

    name = "simple"

    def choose_card(self, view: PlayerView, legal_cards: Sequence[Card]) -> Card:
        ranked = _by_rank_desc(legal_cards)

        if view.lead_suit is None or view.is_leading:
            return ranked[len(ranked) // 2]

        following = [card for card in ranked if card.suit == view.lead_suit]
        if following:
            return following[-1]

        if view.trump_suit is not None:
            trumps = [card for card in ranked if card.suit == view.trump_suit]
            if trumps:
                return trumps[-1]

        return ranked[-1]


class EasyStrategy(Strategy):
    """
    Mostly random play with a lean towards low cards.

    70% of the time a card is drawn from the lower half of the legal cards,
    otherwise any legal card is drawn.
    """

    name = "easy"
    low_card_bias = 0.7

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def choose_card(self, view: PlayerView, legal_cards: Sequence[Card]) -> Card:
        if self.rng.random() < self.low_card_bias:
            ascending = sorted(legal_cards, key=lambda card: card.rank.rank_value)
            lower_half = ascending[: (len(ascending) + 1) // 2]
            return self.rng.choice(lower_half)
        return self.rng.choice(list(legal_cards))


class RandomStrategy(Strategy):
    """Uniformly random legal card."""

    name = "random"

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def choose_card(self, view: PlayerView, legal_cards: Sequence[Card]) -> Card:
        return self.rng.choice(list(legal_cards))


STRATEGIES: Dict[str, Type[Strategy]] = {
    SimpleStrategy.name: SimpleStrategy,
    EasyStrategy.name: EasyStrategy,
    RandomStrategy.name: RandomStrategy,
}


def get_strategy(name: str, rng: Optional[random.Random] = None) -> Strategy:
    """
    Build a strategy by name.

    Raises:
        ValueError: If no strategy has that name
    """
    try:
        strategy_cls = STRATEGIES[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown strategy {name!r}, expected one of {sorted(STRATEGIES)}"
        ) from None
    if strategy_cls is SimpleStrategy:
        return strategy_cls()
    return strategy_cls(rng=rng)
