"""Error taxonomy for timer actions.

Every error carries a short ``code`` and a human-readable ``message``; the
socket layer forwards the message to the originating session only.
"""

from __future__ import annotations


class TimerError(Exception):
    """Base class for recoverable timer action failures."""

    code = 'TIMER_ERROR'

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidId(TimerError):
    code = 'INVALID_ID'

    def __init__(self, message: str = 'Invalid timer ID format') -> None:
        super().__init__(message)


class NotFound(TimerError):
    code = 'NOT_FOUND'

    def __init__(self, message: str = 'Timer not found. Please check the timer ID and try again.') -> None:
        super().__init__(message)


class InvalidState(TimerError):
    code = 'INVALID_STATE'


class NoDuration(InvalidState):
    code = 'NO_DURATION'

    def __init__(self, message: str = 'Set a duration before starting the timer') -> None:
        super().__init__(message)


class NoSession(TimerError):
    """Action received before the session joined a room. Never sent to clients."""

    code = 'NO_SESSION'

    def __init__(self, message: str = 'Session has not joined a timer') -> None:
        super().__init__(message)
