"""Room/session bookkeeping and broadcast fan-out.

A RoomManager binds Socket.IO session ids to at most one timer room each,
resolves the session's current room for every control action, applies the
transition from ``state_machine`` and emits the result to every session in
the room (the originator included).

All mutations run under ``self.lock`` so a client action, a watcher check
and a reaper sweep never interleave, whatever async mode Socket.IO uses.
"""

import threading
from typing import Any, Dict, Optional, Set

from flask_socketio import join_room, leave_room

from sharedtimer.services.timers import state_machine
from sharedtimer.services.timers.errors import InvalidId, NoSession, NotFound


class RoomManager:

    def __init__(self, registry, socketio, clock, namespace: str = '/', logger=None):
        self.registry = registry
        self.socketio = socketio
        self.clock = clock
        self.namespace = namespace
        self.logger = logger
        self.watcher = None
        self.lock = threading.RLock()
        self._sessions: Dict[str, str] = {}
        # sids whose room was evicted under them
        self._orphaned: Set[str] = set()

    # ---- transport helpers ----

    def send(self, sid: str, event: str, payload: Dict[str, Any]) -> None:
        self.socketio.emit(event, payload, to=sid, namespace=self.namespace)

    def broadcast(self, room_id: str, event: str, payload: Dict[str, Any]) -> None:
        self.socketio.emit(event, payload, to=room_id, namespace=self.namespace)

    def _log(self, message: str) -> None:
        if self.logger is not None:
            self.logger.info(message)

    # ---- sessions ----

    def room_of(self, sid: str) -> Optional[str]:
        return self._sessions.get(sid)

    def session_count(self) -> int:
        return len(self._sessions)

    def join(self, sid: str, room_id: Any) -> None:
        if not isinstance(room_id, str) or not room_id:
            raise InvalidId()
        with self.lock:
            record = self.registry.get(room_id)
            if record is None:
                self._log(f"[join-missing] sid={sid} room={room_id}")
                raise NotFound()

            self._orphaned.discard(sid)
            previous = self._sessions.get(sid)
            if previous is not None:
                self._release(sid, previous, rejoining=previous == room_id)

            if previous != room_id:
                join_room(room_id, sid=sid, namespace=self.namespace)
            self._sessions[sid] = room_id
            now = self.clock.now()
            record.connected_users += 1
            record.touch(now)

            self.send(sid, 'stateSnapshot', state_machine.snapshot(record, now))
            self.send(sid, 'joinAck', {'message': 'Successfully joined timer!'})
            self._log(f"[join] sid={sid} room={room_id} users={record.connected_users}")

    def leave(self, sid: str) -> None:
        """Forget the session's room, e.g. on disconnect. Never deletes the record."""
        with self.lock:
            self._orphaned.discard(sid)
            room_id = self._sessions.pop(sid, None)
            if room_id is None:
                return
            self._release(sid, room_id)

    def _release(self, sid: str, room_id: str, rejoining: bool = False) -> None:
        if not rejoining:
            leave_room(room_id, sid=sid, namespace=self.namespace)
        record = self.registry.get(room_id)
        if record is None:
            return
        record.connected_users = max(0, record.connected_users - 1)
        if record.connected_users == 0:
            # idle time for the reaper counts from the last user leaving
            record.touch(self.clock.now())
        self._log(f"[leave] sid={sid} room={room_id} users={record.connected_users}")

    def _resolve(self, sid: str):
        if sid in self._orphaned:
            raise NotFound()
        room_id = self._sessions.get(sid)
        if room_id is None:
            raise NoSession()
        record = self.registry.get(room_id)
        if record is None:
            raise NotFound()
        return record

    # ---- client actions ----

    def set_duration(self, sid: str, seconds: Any) -> None:
        with self.lock:
            record = self._resolve(sid)
            payload = state_machine.set_duration(record, seconds, self.clock.now())
            self._log(f"[timer-duration] room={record.id} duration={record.duration}s")
            self.broadcast(record.id, 'durationSet', payload)

    def start(self, sid: str) -> None:
        with self.lock:
            record = self._resolve(sid)
            payload = state_machine.start(record, self.clock.now())
            if payload is None:
                return
            if self.watcher is not None:
                self.watcher.schedule(record.id)
            self._log(f"[timer-start] room={record.id} remaining={record.remaining_time}s end={record.end_time}")
            self.broadcast(record.id, 'started', payload)

    def stop(self, sid: str) -> None:
        with self.lock:
            record = self._resolve(sid)
            payload = state_machine.stop(record, self.clock.now())
            if payload is None:
                return
            self._cancel_watch(record.id)
            self._log(f"[timer-stop] room={record.id} remaining={record.remaining_time}s")
            self.broadcast(record.id, 'stopped', payload)

    def reset(self, sid: str) -> None:
        with self.lock:
            record = self._resolve(sid)
            payload = state_machine.reset(record, self.clock.now())
            self._cancel_watch(record.id)
            self._log(f"[timer-reset] room={record.id} duration={record.duration}s")
            self.broadcast(record.id, 'reset', payload)

    # ---- system transitions ----

    def complete(self, room_id: str) -> None:
        with self.lock:
            record = self.registry.get(room_id)
            if record is None:
                return
            payload = state_machine.complete(record)
            if payload is None:
                return
            self._cancel_watch(room_id)
            self._log(f"[timer-complete] room={room_id}")
            self.broadcast(room_id, 'completed', payload)

    def evict(self, room_id: str) -> None:
        """Drop a room and unbind its sessions.

        The unbound sessions get NotFound on their next action until they
        join again, and never resolve to a later room issued the same id.
        """
        with self.lock:
            self._cancel_watch(room_id)
            for sid in [s for s, r in self._sessions.items() if r == room_id]:
                del self._sessions[sid]
                self._orphaned.add(sid)
            self.registry.delete(room_id)
            self.socketio.server.close_room(room_id, namespace=self.namespace)

    def _cancel_watch(self, room_id: str) -> None:
        if self.watcher is not None:
            self.watcher.cancel(room_id)
