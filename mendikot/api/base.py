"""
Base API module for Mendikot.

This module provides the abstract base class for platform-agnostic game APIs
that wrap the engine components.
"""

import asyncio
import threading
import time
import uuid
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Tuple, TypeVar, Union

from mendikot.adapters import CLIAdapter, PlatformAdapter
from mendikot.events import EngineEventType, EventBus, EventPriority

# Type variable for game-specific state types
T = TypeVar("T")


class CardGame(ABC):
    """
    Abstract base class for platform-agnostic card game APIs.

    This class defines the common interface for the game APIs, providing
    methods for game creation and game flow, plus event subscription.

    It also provides utilities for converting between synchronous and
    asynchronous operation modes, making the API flexible for different usage
    patterns.

    Attributes:
        adapter: The platform adapter used for UI interaction
        engine: The underlying game engine
        config: Game configuration options
        event_bus: The event bus for event-based communication
        event_handlers: Dictionary of registered event handlers
    """

    def __init__(
        self,
        adapter: Optional[PlatformAdapter] = None,
        config: Optional[Dict[str, Any]] = None,
        use_async: bool = True,
    ):
        """
        Initialize a new card game.

        Args:
            adapter: Platform adapter to use for rendering and input.
                    If None, a CLI adapter will be used.
            config: Configuration options for the game
            use_async: Whether to use async mode
        """
        self.adapter = adapter or CLIAdapter()
        self.config = config or {}
        self.event_bus = EventBus.get_instance()
        self.event_handlers = {}
        self._is_async_mode = use_async
        self._loop = None  # Event loop for sync wrappers
        self._async_lock = threading.Lock()
        self._game_id = str(uuid.uuid4())

        # Engine will be initialized by concrete subclasses
        self.engine = None

    @abstractmethod
    async def initialize(self) -> None:
        """
        Initialize the game and prepare for play.
        """
        pass

    @abstractmethod
    async def shutdown(self) -> None:
        """
        Shut down the game and clean up resources.
        """
        pass

    @abstractmethod
    async def start_game(self) -> Any:
        """
        Start a new round.
        """
        pass

    @abstractmethod
    async def get_state(self) -> T:
        """
        Get the current game state.
        """
        pass

    @staticmethod
    def _event_key(event_type: Union[str, EngineEventType]):
        # Convert string event types to enum if possible
        if isinstance(event_type, str):
            try:
                return EngineEventType[event_type.upper()]
            except KeyError:
                # Keep as string if not a known enum value
                return event_type
        return event_type

    def on(
        self,
        event_type: Union[str, EngineEventType],
        handler: Callable,
        priority: EventPriority = EventPriority.NORMAL,
    ) -> Callable:
        """
        Register an event handler.

        Args:
            event_type: Type of event to listen for
            handler: Event handler function
            priority: Priority level for the handler

        Returns:
            Function to call to unsubscribe the handler
        """
        event_type = self._event_key(event_type)
        unsubscribe_func = self.event_bus.on(event_type, handler, priority)
        self.event_handlers.setdefault(event_type, []).append(unsubscribe_func)
        return unsubscribe_func

    def once(
        self,
        event_type: Union[str, EngineEventType],
        handler: Callable,
        priority: EventPriority = EventPriority.NORMAL,
    ) -> Callable:
        """
        Register an event handler that will be called only once.

        Returns:
            Function to call to unsubscribe the handler
        """
        event_type = self._event_key(event_type)
        unsubscribe_func = self.event_bus.once(event_type, handler, priority)
        self.event_handlers.setdefault(event_type, []).append(unsubscribe_func)
        return unsubscribe_func

    def emit(
        self, event_type: Union[str, EngineEventType], data: Dict[str, Any]
    ) -> None:
        """
        Emit an event to the event bus.

        Args:
            event_type: Type of event to emit
            data: Event data
        """
        # Add game ID and timestamp if not present
        data.setdefault("game_id", self._game_id)
        data.setdefault("timestamp", time.time())
        self.event_bus.emit(self._event_key(event_type), data)

    def remove_handlers(self) -> None:
        """Unsubscribe every handler registered through this game."""
        for unsubscribers in self.event_handlers.values():
            for unsubscribe in unsubscribers:
                unsubscribe()
        self.event_handlers.clear()

    async def wait_for_event(
        self,
        event_type: Union[str, EngineEventType],
        condition: Optional[Callable[[Dict[str, Any]], bool]] = None,
        timeout: Optional[float] = None,
    ) -> Tuple[Union[str, EngineEventType], Dict[str, Any]]:
        """
        Wait for a specific event to occur.

        Args:
            event_type: Type of event to wait for
            condition: Optional condition to check event data
            timeout: Optional timeout in seconds

        Returns:
            Tuple of (event_type, event_data)

        Raises:
            asyncio.TimeoutError: If the timeout is reached
        """
        event_type = self._event_key(event_type)
        future = asyncio.get_running_loop().create_future()

        def event_handler(data):
            if future.done():
                return
            if condition and not condition(data):
                return
            future.set_result((event_type, data))

        unsubscribe = self.event_bus.on(event_type, event_handler)
        try:
            if timeout is not None:
                return await asyncio.wait_for(future, timeout)
            return await future
        finally:
            # Always unsubscribe
            unsubscribe()

    # Synchronous API wrappers

    def initialize_sync(self) -> None:
        """
        Synchronous wrapper for initialize method.
        """
        return self._run_async(self.initialize())

    def shutdown_sync(self) -> None:
        """
        Synchronous wrapper for shutdown method.
        """
        try:
            return self._run_async(self.shutdown())
        finally:
            with self._async_lock:
                if self._loop is not None and not self._loop.is_closed():
                    self._loop.close()
                self._loop = None

    def start_game_sync(self) -> Any:
        """
        Synchronous wrapper for start_game method.
        """
        return self._run_async(self.start_game())

    def get_state_sync(self) -> T:
        """
        Synchronous wrapper for get_state method.
        """
        return self._run_async(self.get_state())

    # Utility methods for async/sync conversion

    def _run_async(self, coro):
        """
        Run an async coroutine from a synchronous context.

        Args:
            coro: Coroutine to run

        Returns:
            Result of the coroutine
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            coro.close()
            raise RuntimeError(
                "Attempting to use synchronous method inside a running event loop. "
                "Use the async version of this method instead."
            )

        # One loop per game so the engine's lock stays bound to it
        with self._async_lock:
            if self._loop is None or self._loop.is_closed():
                self._loop = asyncio.new_event_loop()
            return self._loop.run_until_complete(coro)
