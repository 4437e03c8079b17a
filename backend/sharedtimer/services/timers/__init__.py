"""Timer domain services: registry, state machine, watcher and reaper.

This package holds the room timer logic that socket handlers and HTTP
routes build on. Nothing in here emits to clients directly; the
RoomManager in ``sharedtimer.rooms`` owns the transport side.
"""

from .clock import Clock
from .errors import InvalidId, InvalidState, NoDuration, NoSession, NotFound, TimerError
from .registry import TimerRegistry

__all__ = [
    'Clock',
    'InvalidId',
    'InvalidState',
    'NoDuration',
    'NoSession',
    'NotFound',
    'TimerError',
    'TimerRegistry',
]
