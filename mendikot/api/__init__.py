"""
High-level API for Mendikot.

This package provides a platform-agnostic interface for running rounds in
async or sync mode.
"""

from mendikot.api.base import CardGame
from mendikot.api.mendikot import MendikotGame

__all__ = ["CardGame", "MendikotGame"]
