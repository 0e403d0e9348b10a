
"""
recorder.py
Implements event recording for Liar's Dice games. The engine publishes a stream of GameEvent objects here.
InMemoryRecorder keeps them for tests, renderers and in-memory analysis.
Related modules:
- events.py: Defines GameEvent type.
- engine.py: Owns one recorder per game.
"""

import logging
from typing import Callable, List, Optional

from .events import GameEvent

logger = logging.getLogger(__name__)

Listener = Callable[[GameEvent], None]


class InMemoryRecorder:
    """
    Records GameEvent objects in memory for later retrieval.
    Methods:
        record(event): Add a new event and notify listeners.
        events(event_type=None): Get recorded events, optionally of one type.
        drain(): Return and forget events recorded since the last drain.
        subscribe(listener): Call listener(event) on every new event.
    """
    def __init__(self):
        self._events: List[GameEvent] = []
        self._cursor = 0
        self._listeners: List[Listener] = []

    def record(self, event: GameEvent) -> None:
        """Add a new event to the recorder."""
        self._events.append(event)
        logger.debug("event %s round=%s player=%s %s",
                     event.event_type, event.round_index, event.player, event.payload)
        for listener in self._listeners:
            listener(event)

    def events(self, event_type: Optional[str] = None) -> List[GameEvent]:
        """Return recorded events as a list."""
        if event_type is None:
            return list(self._events)
        return [e for e in self._events if e.event_type == event_type]

    def drain(self) -> List[GameEvent]:
        pending = self._events[self._cursor:]
        self._cursor = len(self._events)
        return pending

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def __len__(self) -> int:
        return len(self._events)
