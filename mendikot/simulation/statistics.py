"""
Statistical analysis of simulated rounds.

This module provides win rates with confidence intervals, outcome
frequencies, the value of cutting trump, and a chi-square check that the
shuffle deals every card to every seat uniformly.
"""

import random
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

import numpy as np
import scipy.stats as stats

from mendikot.common.card import Card
from mendikot.common.deck import DECK_SIZE, NUM_SEATS, build_deck, deal, shuffle
from mendikot.game.state import Team
from mendikot.simulation.runner import RoundSummary


@dataclass
class ConfidenceInterval:
    """
    Represents a confidence interval with lower and upper bounds.

    Attributes:
        lower: The lower bound of the confidence interval
        upper: The upper bound of the confidence interval
        confidence: The confidence level (e.g., 0.95 for 95% confidence)
    """

    lower: float
    upper: float
    confidence: float

    def contains(self, value: float) -> bool:
        """Check if the interval contains a value."""
        return self.lower <= value <= self.upper

    def to_dict(self) -> Dict[str, float]:
        """Convert to a dictionary."""
        return {"lower": self.lower, "upper": self.upper, "confidence": self.confidence}


def _confidence_interval(
    values: Sequence[float], confidence: float = 0.95
) -> ConfidenceInterval:
    """
    Calculate a t-based confidence interval for the mean of ``values``.
    """
    if len(values) == 0:
        return ConfidenceInterval(0.0, 0.0, confidence)

    mean = float(np.mean(values))
    if len(values) < 2:
        return ConfidenceInterval(mean, mean, confidence)

    std_err = stats.sem(values)
    margin = std_err * stats.t.ppf((1 + confidence) / 2, len(values) - 1)
    return ConfidenceInterval(
        max(0.0, float(mean - margin)), min(1.0, float(mean + margin)), confidence
    )


def win_rate(
    summaries: Sequence[RoundSummary], team: Team = Team.A, confidence: float = 0.95
) -> Dict[str, Any]:
    """
    Calculate the share of rounds won by ``team``.

    Args:
        summaries: Simulated rounds
        team: Team to measure
        confidence: Confidence level of the interval

    Returns:
        A dictionary with the win rate and confidence interval
    """
    outcomes = np.array(
        [1.0 if summary.winner is team else 0.0 for summary in summaries]
    )
    rate = float(outcomes.mean()) if len(outcomes) else 0.0
    return {
        "team": team.value,
        "win_rate": rate,
        "confidence_interval": _confidence_interval(outcomes, confidence).to_dict(),
        "sample_size": len(outcomes),
    }


def outcome_frequencies(summaries: Sequence[RoundSummary]) -> Dict[str, float]:
    """
    Frequency of each kind of round result.

    Returns:
        Shares of rounds won by Mendikot, by whitewash, decided on tricks
        after a 2-2 split of tens, and won with exactly three tens
    """
    n = len(summaries)
    if n == 0:
        return {"mendikot": 0.0, "whitewash": 0.0, "split_tens": 0.0, "three_tens": 0.0}

    tens = np.array([(s.team_a_tens, s.team_b_tens) for s in summaries])
    return {
        "mendikot": sum(s.is_mendikot for s in summaries) / n,
        "whitewash": sum(s.is_whitewash for s in summaries) / n,
        "split_tens": float(np.mean(np.all(tens == 2, axis=1))),
        "three_tens": float(np.mean(np.any(tens == 3, axis=1))),
    }


def trump_setter_advantage(
    summaries: Sequence[RoundSummary], confidence: float = 0.95
) -> Dict[str, Any]:
    """
    How often the team that cut trump goes on to win.

    Rounds where nobody cut are left out. The p-value is a two-sided binomial
    test against an even chance.
    """
    outcomes = np.array(
        [
            1.0 if s.winner is s.trump_setter_team else 0.0
            for s in summaries
            if s.trump_setter_team is not None
        ]
    )
    n = len(outcomes)
    if n == 0:
        return {
            "setter_win_rate": 0.0,
            "confidence_interval": ConfidenceInterval(0.0, 0.0, confidence).to_dict(),
            "p_value": 1.0,
            "sample_size": 0,
        }

    wins = int(outcomes.sum())
    return {
        "setter_win_rate": wins / n,
        "confidence_interval": _confidence_interval(outcomes, confidence).to_dict(),
        "p_value": float(stats.binomtest(wins, n, 0.5).pvalue),
        "sample_size": n,
    }


def seat_distribution(
    n_deals: int,
    seed: Optional[int] = None,
    shuffle_fn: Callable[[List[Card], random.Random], List[Card]] = shuffle,
) -> np.ndarray:
    """
    Count how often each card is dealt to each seat.

    Returns:
        A (52, 4) array of counts, rows in :func:`build_deck` order
    """
    rng = random.Random(seed)
    deck = build_deck()
    index = {card: i for i, card in enumerate(deck)}
    counts = np.zeros((DECK_SIZE, NUM_SEATS), dtype=int)

    for _ in range(n_deals):
        hands = deal(range(NUM_SEATS), shuffle_fn(deck, rng))
        for seat, hand in enumerate(hands):
            for card in hand:
                counts[index[card], seat] += 1
    return counts


def shuffle_uniformity(
    n_deals: int = 1000,
    seed: Optional[int] = None,
    alpha: float = 0.001,
    shuffle_fn: Callable[[List[Card], random.Random], List[Card]] = shuffle,
) -> Dict[str, Any]:
    """
    Chi-square test that every card lands in every seat equally often.

    Args:
        n_deals: Number of deals to sample
        seed: Seed for the shuffles
        alpha: Significance level
        shuffle_fn: Shuffle under test, ``shuffle_fn(deck, rng)``

    Returns:
        A dictionary with the statistic, p-value and verdict
    """
    counts = seat_distribution(n_deals, seed, shuffle_fn)
    # Row and column totals are fixed by the deal
    result = stats.chisquare(counts.ravel(), ddof=DECK_SIZE + NUM_SEATS - 2)
    p_value = float(result.pvalue)
    return {
        "chi_square": float(result.statistic),
        "p_value": p_value,
        "n_deals": n_deals,
        "uniform": p_value > alpha,
    }


def summarize(
    summaries: Sequence[RoundSummary], confidence: float = 0.95
) -> Dict[str, Any]:
    """
    Run all round analyses.
    """
    return {
        "win_rate": {
            team.value: win_rate(summaries, team, confidence) for team in Team
        },
        "outcomes": outcome_frequencies(summaries),
        "trump_setter": trump_setter_advantage(summaries, confidence),
    }
