"""Python client for a shared timer room.

Mirrors what the browser client does: actions issued while the socket is
down are queued and flushed once connected, and after a reconnect the
client joins its last room again before anything else is sent.
"""

import logging
from collections import deque
from typing import Any, Callable, Dict, Optional

import socketio

logger = logging.getLogger(__name__)

STATE_EVENTS = ('stateSnapshot', 'durationSet', 'started', 'stopped', 'reset', 'completed')


class TimerClient:

    def __init__(self, url: str, namespace: str = '/', sio=None):
        self.url = url
        self.namespace = namespace
        self.sio = sio or socketio.Client(
            reconnection=True,
            reconnection_attempts=5,
            reconnection_delay=1,
            reconnection_delay_max=5,
        )
        self.room_id: Optional[str] = None
        self.state: Dict[str, Any] = {'duration': 0, 'remainingTime': 0, 'endTime': None, 'running': False}
        self.last_error: Optional[str] = None
        self._pending: deque = deque()
        self._listeners: Dict[str, list] = {}

        self.sio.on('connect', self._on_connect, namespace=namespace)
        self.sio.on('disconnect', self._on_disconnect, namespace=namespace)
        self.sio.on('error', self._on_error, namespace=namespace)
        for event in STATE_EVENTS:
            self.sio.on(event, self._state_handler(event), namespace=namespace)
        self.sio.on('joinAck', self._relay('joinAck'), namespace=namespace)

    # ---- connection ----

    def connect(self) -> None:
        self.sio.connect(self.url, namespaces=[self.namespace], transports=['websocket', 'polling'])

    def disconnect(self) -> None:
        """Leave for good: queued actions and the remembered room are dropped."""
        self._pending.clear()
        self.room_id = None
        self.sio.disconnect()

    @property
    def connected(self) -> bool:
        return bool(self.sio.connected)

    def _emit(self, event: str, data: Any = None) -> None:
        if self.connected:
            logger.debug(f"[client-emit] {event} {data!r}")
            self.sio.emit(event, data, namespace=self.namespace)
        else:
            logger.debug(f"[client-queue] {event} {data!r}")
            self._pending.append((event, data))

    def _on_connect(self, *args) -> None:
        pending = list(self._pending)
        self._pending.clear()
        if self.room_id is not None and not any(event == 'join' for event, _ in pending):
            logger.info(f"[client-rejoin] room={self.room_id}")
            self.sio.emit('join', self.room_id, namespace=self.namespace)
        for event, data in pending:
            self.sio.emit(event, data, namespace=self.namespace)

    def _on_disconnect(self, *args) -> None:
        logger.info(f"[client-disconnected] room={self.room_id}")

    # ---- actions ----

    def join(self, room_id: str) -> None:
        self.room_id = room_id
        if not self.connected:
            # only the latest room is joined once connected
            self._pending = deque(item for item in self._pending if item[0] != 'join')
        self._emit('join', room_id)

    def set_duration(self, seconds: int) -> None:
        self._emit('setDuration', seconds)

    def start(self) -> None:
        self._emit('start')

    def stop(self) -> None:
        self._emit('stop')

    def reset(self) -> None:
        self._emit('reset')

    # ---- server events ----

    def on(self, event: str, callback: Callable[[Dict[str, Any]], None]) -> None:
        self._listeners.setdefault(event, []).append(callback)

    def _notify(self, event: str, data: Dict[str, Any]) -> None:
        for callback in self._listeners.get(event, []):
            callback(data)

    def _relay(self, event: str):
        def handler(data=None):
            self._notify(event, data or {})
        return handler

    def _state_handler(self, event: str):
        def handler(data=None):
            data = data or {}
            if event == 'completed':
                self.state.update({'remainingTime': 0, 'endTime': None, 'running': False})
            elif event == 'started':
                self.state.update(data)
                self.state['running'] = True
            elif event in ('stopped', 'reset'):
                self.state.update(data)
                self.state.update({'endTime': None, 'running': False})
            else:
                self.state.update(data)
            self._notify(event, data)
        return handler

    def _on_error(self, data=None) -> None:
        self.last_error = (data or {}).get('message')
        logger.warning(f"[client-error] {self.last_error}")
        self._notify('error', data or {})

    def remaining(self, now_ms: int) -> int:
        """Seconds left, computed locally from the server's end timestamp."""
        end_time = self.state.get('endTime')
        if self.state.get('running') and end_time is not None:
            return max(0, (end_time - now_ms) // 1000)
        return max(0, int(self.state.get('remainingTime') or 0))
