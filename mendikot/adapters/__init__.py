"""
Platform adapters for the Mendikot engine.

This package provides adapters that translate between the core game engine
and various platforms (CLI, tests and simulations).
"""

from mendikot.adapters.base import PlatformAdapter
from mendikot.adapters.cli import CLIAdapter
from mendikot.adapters.dummy import DummyAdapter

__all__ = ["PlatformAdapter", "CLIAdapter", "DummyAdapter"]
