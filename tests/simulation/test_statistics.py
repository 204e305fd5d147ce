"""
Tests for the statistics over simulated rounds.
"""

import pytest

from mendikot.game.state import Team
from mendikot.simulation import (
    RoundSummary,
    outcome_frequencies,
    run_simulation,
    seat_distribution,
    shuffle_uniformity,
    summarize,
    trump_setter_advantage,
    win_rate,
)


def summary(winner, tens=(3, 1), tricks=(7, 6), setter=None):
    return RoundSummary(
        round_id="r",
        dealer_index=0,
        winner=winner,
        is_mendikot=max(tens) == 4,
        is_whitewash=max(tricks) == 13,
        team_a_tens=tens[0],
        team_b_tens=tens[1],
        team_a_tricks=tricks[0],
        team_b_tricks=tricks[1],
        trump_suit="hearts" if setter else None,
        trump_setter_team=setter,
    )


def test_win_rate():
    rounds = [summary(Team.A)] * 3 + [summary(Team.B, tens=(1, 3))]

    result = win_rate(rounds)

    assert result["team"] == "A"
    assert result["win_rate"] == pytest.approx(0.75)
    assert result["sample_size"] == 4
    interval = result["confidence_interval"]
    assert 0.0 <= interval["lower"] < 0.75 < interval["upper"] <= 1.0
    assert win_rate(rounds, Team.B)["win_rate"] == pytest.approx(0.25)


def test_win_rate_small_samples():
    empty = win_rate([])
    assert empty["win_rate"] == 0.0
    assert empty["sample_size"] == 0

    single = win_rate([summary(Team.A)])
    assert single["confidence_interval"]["lower"] == 1.0
    assert single["confidence_interval"]["upper"] == 1.0


def test_interval_narrows_with_more_rounds():
    few = win_rate([summary(Team.A), summary(Team.B, tens=(1, 3))] * 5)
    many = win_rate([summary(Team.A), summary(Team.B, tens=(1, 3))] * 500)

    def width(result):
        interval = result["confidence_interval"]
        return interval["upper"] - interval["lower"]

    assert width(many) < width(few)


def test_outcome_frequencies():
    rounds = [
        summary(Team.A, tens=(4, 0)),
        summary(Team.B, tens=(1, 3)),
        summary(Team.A, tens=(2, 2), tricks=(8, 5)),
        summary(Team.B, tens=(2, 2), tricks=(0, 13)),
    ]

    freq = outcome_frequencies(rounds)

    assert freq == pytest.approx(
        {"mendikot": 0.25, "whitewash": 0.25, "split_tens": 0.5, "three_tens": 0.25}
    )
    assert outcome_frequencies([])["mendikot"] == 0.0


def test_trump_setter_advantage():
    rounds = [summary(Team.A, setter=Team.A)] * 10 + [summary(Team.B)] * 5

    result = trump_setter_advantage(rounds)

    assert result["sample_size"] == 10
    assert result["setter_win_rate"] == 1.0
    assert result["p_value"] < 0.01


def test_trump_setter_advantage_without_cuts():
    result = trump_setter_advantage([summary(Team.A)])
    assert result["sample_size"] == 0
    assert result["p_value"] == 1.0


def test_seat_distribution_totals():
    counts = seat_distribution(50, seed=3)

    assert counts.shape == (52, 4)
    assert (counts.sum(axis=1) == 50).all()
    assert (counts.sum(axis=0) == 13 * 50).all()


@pytest.mark.slow
def test_shuffle_is_uniform():
    result = shuffle_uniformity(n_deals=800, seed=2024)
    assert result["n_deals"] == 800
    assert result["uniform"]


def test_unshuffled_deck_is_detected():
    result = shuffle_uniformity(
        n_deals=200, seed=1, shuffle_fn=lambda deck, rng: list(deck)
    )
    assert not result["uniform"]
    assert result["p_value"] < 1e-6


def test_summarize_simulation():
    result = run_simulation(20, seed=8)

    report = summarize(result.rounds)

    assert set(report) == {"win_rate", "outcomes", "trump_setter"}
    rates = report["win_rate"]
    assert rates["A"]["win_rate"] + rates["B"]["win_rate"] == pytest.approx(1.0)
