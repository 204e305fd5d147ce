"""
Headless simulation of Mendikot rounds and statistics over the results.
"""

from mendikot.simulation.runner import (
    RoundSummary,
    SimulationResult,
    play_round,
    resolve_strategies,
    run_simulation,
)
from mendikot.simulation.statistics import (
    ConfidenceInterval,
    outcome_frequencies,
    seat_distribution,
    shuffle_uniformity,
    summarize,
    trump_setter_advantage,
    win_rate,
)

__all__ = [
    "RoundSummary",
    "SimulationResult",
    "play_round",
    "resolve_strategies",
    "run_simulation",
    "ConfidenceInterval",
    "outcome_frequencies",
    "seat_distribution",
    "shuffle_uniformity",
    "summarize",
    "trump_setter_advantage",
    "win_rate",
]
