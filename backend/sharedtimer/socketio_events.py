from flask import current_app, request
from flask_socketio import emit

from sharedtimer import get_services, socketio
from sharedtimer.services.timers.errors import NoSession, TimerError


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _dispatch(action, *args) -> None:
    """Run a RoomManager action for the calling session.

    Taxonomy errors go back to this session only as an ``error`` event;
    actions from sessions that never joined are dropped with a log line.
    """
    rooms = get_services().rooms
    sid = _get_sid()
    try:
        getattr(rooms, action)(sid, *args)
    except NoSession:
        current_app.logger.info(f"[no-session] sid={sid} action={action} ignored")
    except TimerError as exc:
        current_app.logger.info(f"[action-error] sid={sid} action={action} code={exc.code}")
        emit('error', {'message': exc.message})


def handle_connect(auth=None):
    emit('connected', {'message': 'Connected to timer server'})


def handle_disconnect(*args):
    get_services().rooms.leave(_get_sid())


def handle_join(data=None):
    # Older clients send the bare id, newer ones may wrap it
    room_id = data.get('roomId') if isinstance(data, dict) else data
    _dispatch('join', room_id)


def handle_set_duration(data=None):
    seconds = data.get('seconds') if isinstance(data, dict) else data
    _dispatch('set_duration', seconds)


def handle_start(*args):
    _dispatch('start')


def handle_stop(*args):
    _dispatch('stop')


def handle_reset(*args):
    _dispatch('reset')


HANDLERS = {
    'connect': handle_connect,
    'disconnect': handle_disconnect,
    'join': handle_join,
    'setDuration': handle_set_duration,
    'start': handle_start,
    'stop': handle_stop,
    'reset': handle_reset,
    # legacy event names
    'joinTimer': handle_join,
    'startTimer': handle_start,
    'stopTimer': handle_stop,
    'resetTimer': handle_reset,
}


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on ``namespace``.

    Registration happens once at app creation, never per join, so a session
    that joins several rooms in turn still has exactly one handler per event.
    """
    for event, handler in HANDLERS.items():
        socketio.on_event(event, handler, namespace=namespace)
