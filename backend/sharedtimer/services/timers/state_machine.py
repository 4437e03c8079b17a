"""Timer transitions.

Each transition mutates one TimerRecord in place and returns the payload
to broadcast to the room, or ``None`` when the call was a no-op (starting
a running timer, stopping a stopped one, completing twice). Illegal
transitions raise from the ``errors`` taxonomy and leave the record
untouched.

Remaining time is integer seconds. While running it is derived from
``end_time``; while stopped ``remaining_time`` is authoritative.
"""

from typing import Any, Dict, Optional

from sharedtimer.models import TimerRecord
from .errors import InvalidState, NoDuration

Payload = Dict[str, Any]


def current_remaining(record: TimerRecord, now: int) -> int:
    if record.running and record.end_time is not None:
        return max(0, (record.end_time - now) // 1000)
    return max(0, record.remaining_time)


def snapshot(record: TimerRecord, now: int) -> Payload:
    return {
        'duration': record.duration,
        'remainingTime': current_remaining(record, now),
        'endTime': record.end_time,
        'running': record.running,
    }


def _coerce_seconds(seconds: Any) -> int:
    if isinstance(seconds, bool):
        raise InvalidState('Duration must be a whole number of seconds')
    if isinstance(seconds, float) and seconds.is_integer():
        seconds = int(seconds)
    if not isinstance(seconds, int) or seconds < 0:
        raise InvalidState('Duration must be a whole number of seconds')
    return seconds


def set_duration(record: TimerRecord, seconds: Any, now: int) -> Payload:
    if record.running:
        raise InvalidState('Stop the timer before changing its duration')
    seconds = _coerce_seconds(seconds)
    record.duration = seconds
    record.remaining_time = seconds
    record.touch(now)
    return {'duration': record.duration, 'remainingTime': record.remaining_time}


def start(record: TimerRecord, now: int) -> Optional[Payload]:
    """Begin counting down from the paused remaining time.

    ``end_time`` is the absolute instant the countdown hits zero; clients
    compute their own display from it, so nothing is broadcast per second.
    """
    if record.running:
        return None
    if record.remaining_time <= 0:
        raise NoDuration()
    record.end_time = now + record.remaining_time * 1000
    record.running = True
    record.touch(now)
    return {'endTime': record.end_time, 'remainingTime': record.remaining_time}


def stop(record: TimerRecord, now: int) -> Optional[Payload]:
    if not record.running:
        return None
    record.remaining_time = current_remaining(record, now)
    record.running = False
    record.end_time = None
    record.touch(now)
    return {'remainingTime': record.remaining_time}


def reset(record: TimerRecord, now: int) -> Payload:
    record.remaining_time = record.duration
    record.end_time = None
    record.running = False
    record.touch(now)
    return {'duration': record.duration, 'remainingTime': record.remaining_time}


def complete(record: TimerRecord) -> Optional[Payload]:
    # System transition: does not count as client activity
    if not record.running:
        return None
    record.running = False
    record.remaining_time = 0
    record.end_time = None
    return {}
