import threading
from typing import Callable, Dict, Optional

from .state_machine import current_remaining


class CompletionWatcher:
    """Detects countdown completion without any client involvement.

    - ``schedule`` hands the room a fresh watch token and, when background
      work is enabled, starts a loop that rechecks every ``interval`` seconds
    - ``cancel`` drops the token; a loop whose token is no longer current
      exits on its next tick, so at most one watch is live per room
    - ``check`` is one recheck; tests call it directly instead of sleeping
    """

    def __init__(self, registry, clock, on_complete: Callable[[str], None], interval: float = 1.0,
                 socketio=None, background: bool = True, lock=None, logger=None):
        self.registry = registry
        self.clock = clock
        self.on_complete = on_complete
        self.interval = interval
        self.socketio = socketio
        self.background = background and socketio is not None
        self.lock = lock or threading.RLock()
        self.logger = logger
        self._tokens: Dict[str, object] = {}

    def schedule(self, room_id: str) -> None:
        token = object()
        with self.lock:
            self._tokens[room_id] = token
        if self.background:
            self.socketio.start_background_task(self._run, room_id, token)

    def cancel(self, room_id: str) -> None:
        with self.lock:
            self._tokens.pop(room_id, None)

    def is_watching(self, room_id: str) -> bool:
        return room_id in self._tokens

    def check(self, room_id: str, token: Optional[object] = None) -> bool:
        """Recheck one room. Returns True while the watch should keep going."""
        with self.lock:
            if token is not None and self._tokens.get(room_id) is not token:
                return False
            record = self.registry.get(room_id)
            if record is None or not record.running:
                self._tokens.pop(room_id, None)
                return False
            if current_remaining(record, self.clock.now()) > 0:
                return True
            self._tokens.pop(room_id, None)
            self.on_complete(room_id)
            return False

    def _run(self, room_id: str, token: object) -> None:
        if self.logger is not None:
            self.logger.debug(f"[watch-start] room={room_id}")
        while self._tokens.get(room_id) is token:
            self.socketio.sleep(self.interval)
            if not self.check(room_id, token):
                break
        if self.logger is not None:
            self.logger.debug(f"[watch-end] room={room_id}")
