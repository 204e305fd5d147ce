"""
Engine package for Mendikot.

The engines wrap the pure round transitions with adapters, strategies and
event forwarding.
"""

from mendikot.engine.base import GameEngine
from mendikot.engine.mendikot import MendikotEngine

__all__ = ["GameEngine", "MendikotEngine"]
