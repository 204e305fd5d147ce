"""
Mendikot: a rules engine for the four-player partnership trick-taking game.

Subpackages:
    common      Cards, the deck and console IO
    game        Immutable round state, rules and transitions
    events      Event bus
    adapters    Platform adapters (console, tests)
    engine      Async engine around the transitions
    api         High-level async/sync API
    simulation  Headless rounds and statistics
"""

__version__ = "0.1.0"
