"""
Tests for the headless round runner.
"""

import json
import random

import pytest

from mendikot.common.deck import build_deck
from mendikot.events import EngineEventType, EventBus
from mendikot.game.constants import TENS_TO_WIN, TRICKS_TO_WIN
from mendikot.game.state import Team
from mendikot.game.strategy import RandomStrategy, SimpleStrategy, Strategy
from mendikot.game.transitions import StateTransitionEngine
from mendikot.simulation import (
    RoundSummary,
    play_round,
    resolve_strategies,
    run_simulation,
)


class OffTheTable(Strategy):
    """Proposes a card from another hand whenever it can."""

    name = "off_the_table"

    def choose_card(self, view, legal_cards):
        hand = set(view.hand)
        return next(card for card in build_deck() if card not in hand)


def outcome(summary):
    data = summary.to_dict()
    del data["round_id"]
    return data


def test_resolve_single_strategy():
    strategies = resolve_strategies(["random"], random.Random(0))
    assert len(strategies) == 4
    assert all(isinstance(s, RandomStrategy) for s in strategies)
    assert all(isinstance(s, SimpleStrategy) for s in resolve_strategies())


def test_resolve_mixed_strategies():
    simple = SimpleStrategy()
    strategies = resolve_strategies([simple, "easy", "random", "simple"])
    assert strategies[0] is simple
    assert [s.name for s in strategies] == ["simple", "easy", "random", "simple"]


def test_resolve_wrong_count():
    with pytest.raises(ValueError, match="Expected 1 or 4"):
        resolve_strategies(["simple", "easy"])


def test_play_round_finishes():
    state = play_round(resolve_strategies(), rng=random.Random(4))
    assert state.round_over
    assert state.team_a_tricks_won + state.team_b_tricks_won == 13
    assert state.team_a_tens + state.team_b_tens == 4


def test_play_round_replaces_illegal_proposals():
    state = play_round([OffTheTable()] * 4, rng=random.Random(4))
    assert state.round_over


def test_summary_requires_finished_round():
    state = StateTransitionEngine.create_round(rng=random.Random(1))
    with pytest.raises(ValueError, match="not finished"):
        RoundSummary.from_state(state)


def test_simulation_is_reproducible():
    first = run_simulation(12, strategies=["easy"], seed=42)
    second = run_simulation(12, strategies=["easy"], seed=42)
    assert [outcome(s) for s in first.rounds] == [outcome(s) for s in second.rounds]


def test_simulation_outcomes_follow_the_rules():
    result = run_simulation(40, strategies=["random"], seed=7)

    assert result.n_rounds == 40
    assert result.wins(Team.A) + result.wins(Team.B) == 40
    for summary in result.rounds:
        assert summary.team_a_tens + summary.team_b_tens == 4
        assert summary.team_a_tricks + summary.team_b_tricks == 13
        if summary.winner is Team.A:
            tens, tricks = summary.team_a_tens, summary.team_a_tricks
        else:
            tens, tricks = summary.team_b_tens, summary.team_b_tricks
        assert tens >= TENS_TO_WIN or (tens == 2 and tricks >= TRICKS_TO_WIN)
        assert summary.is_mendikot == (tens == 4)
        assert summary.is_whitewash == (tricks == 13)


def test_dealer_rotation():
    rotating = run_simulation(6, seed=1)
    assert [s.dealer_index for s in rotating.rounds] == [0, 1, 2, 3, 0, 1]

    fixed = run_simulation(3, seed=1, rotate_dealer=False)
    assert [s.dealer_index for s in fixed.rounds] == [0, 0, 0]


def test_simulation_events():
    seen = []
    bus = EventBus.get_instance()
    bus.on(EngineEventType.SIMULATION_PROGRESS, seen.append)
    results = []
    bus.on(EngineEventType.SIMULATION_RESULT, results.append)

    run_simulation(10, seed=3, progress_every=5)

    assert [event["rounds_played"] for event in seen] == [5, 10]
    assert len(results) == 1
    assert results[0]["n_rounds"] == 10


def test_negative_round_count():
    with pytest.raises(ValueError):
        run_simulation(-1)


def test_result_serializes():
    result = run_simulation(3, strategies=["simple", "easy", "random", "simple"], seed=5)
    data = json.loads(json.dumps(result.to_dict()))
    assert data["strategies"] == ["simple", "easy", "random", "simple"]
    assert data["wins"]["A"] + data["wins"]["B"] == 3
    assert len(data["rounds"]) == 3
