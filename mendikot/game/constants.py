"""Mendikot-specific constants."""

from mendikot.common.deck import DECK_SIZE, HAND_SIZE, NUM_SEATS

TRICK_SIZE = NUM_SEATS
TRICKS_PER_ROUND = DECK_SIZE // TRICK_SIZE  # 13

TENS_PER_DECK = 4
TENS_TO_WIN = 3  # 3 or 4 tens wins the round outright
TRICKS_TO_WIN = TRICKS_PER_ROUND // 2 + 1  # decides a 2-2 split of tens

DEFAULT_PLAYER_NAMES = ("You", "West", "Partner", "East")
DEFAULT_HUMAN_SEATS = (0,)
DEFAULT_DEALER_INDEX = 0

__all__ = [
    "DECK_SIZE",
    "HAND_SIZE",
    "NUM_SEATS",
    "TRICK_SIZE",
    "TRICKS_PER_ROUND",
    "TENS_PER_DECK",
    "TENS_TO_WIN",
    "TRICKS_TO_WIN",
    "DEFAULT_PLAYER_NAMES",
    "DEFAULT_HUMAN_SEATS",
    "DEFAULT_DEALER_INDEX",
]
