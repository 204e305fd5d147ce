"""
Event system for the Mendikot engine.

This package provides the event bus that transitions, engines and adapters
use to announce and observe round progress.
"""

from mendikot.events.emitter import (
    EventEmitter,
    EventBus,
    EventPriority,
    EngineEventType,
)

__all__ = ["EventEmitter", "EventBus", "EventPriority", "EngineEventType"]
