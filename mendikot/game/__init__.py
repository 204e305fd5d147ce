"""
Mendikot rules engine.

This module provides the immutable round state, the pure rule functions and
the state transitions for a round of Mendikot.
"""

from mendikot.game.state import (
    GameState as GameState,
    PlayerState as PlayerState,
    TrickState as TrickState,
    CompletedTrick as CompletedTrick,
    PlayedCard as PlayedCard,
    GamePhase as GamePhase,
    Team as Team,
    MendikotRules as MendikotRules,
    PlayResult as PlayResult,
    RejectionReason as RejectionReason,
)
from mendikot.game.rules import (
    is_legal_play as is_legal_play,
    legal_cards as legal_cards,
    resolve_trick as resolve_trick,
    count_tens as count_tens,
    settle_tens_pot as settle_tens_pot,
    determine_round_winner as determine_round_winner,
)
from mendikot.game.transitions import StateTransitionEngine as StateTransitionEngine
from mendikot.game.view import PlayerView as PlayerView, build_view as build_view

__all__ = [
    "GameState",
    "PlayerState",
    "TrickState",
    "CompletedTrick",
    "PlayedCard",
    "GamePhase",
    "Team",
    "MendikotRules",
    "PlayResult",
    "RejectionReason",
    "is_legal_play",
    "legal_cards",
    "resolve_trick",
    "count_tens",
    "settle_tens_pot",
    "determine_round_winner",
    "StateTransitionEngine",
    "PlayerView",
    "build_view",
]
