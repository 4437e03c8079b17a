import threading
from typing import Callable, List, Optional


class InactivityReaper:
    """Periodic sweep that evicts idle rooms to bound memory.

    A room goes when nobody is connected and it has been idle longer than
    ``timeout_sec``, or when it has been idle longer than
    ``timeout_sec * absolute_factor`` whoever is connected.
    """

    def __init__(self, registry, clock, evict: Callable[[str], None], timeout_sec: int = 1800,
                 interval_sec: float = 300, absolute_factor: int = 4,
                 socketio=None, background: bool = True, lock=None, logger=None):
        self.registry = registry
        self.clock = clock
        self.evict = evict
        self.timeout_ms = int(timeout_sec * 1000)
        self.interval = interval_sec
        self.absolute_factor = absolute_factor
        self.socketio = socketio
        self.background = background and socketio is not None
        self.lock = lock or threading.RLock()
        self.logger = logger
        self._started = False

    def is_expired(self, record, now: int) -> bool:
        inactive = now - record.last_activity
        if record.connected_users == 0 and inactive > self.timeout_ms:
            return True
        return inactive > self.timeout_ms * self.absolute_factor

    def sweep(self, now: Optional[int] = None) -> List[str]:
        evicted = []
        with self.lock:
            now = self.clock.now() if now is None else now
            for record in self.registry.records():
                if not self.is_expired(record, now):
                    continue
                inactive_mins = round((now - record.last_activity) / 60000)
                self.evict(record.id)
                evicted.append(record.id)
                if self.logger is not None:
                    self.logger.info(
                        f"[reaper-evict] room={record.id} users={record.connected_users} inactive={inactive_mins}m"
                    )
            if evicted and self.logger is not None:
                self.logger.info(f"[reaper-sweep] removed={len(evicted)} remaining={len(self.registry)}")
        return evicted

    def start(self) -> bool:
        """Start the background sweep loop once. Returns False if not started."""
        if self._started or not self.background:
            return False
        self._started = True
        self.socketio.start_background_task(self._run)
        return True

    def stop(self) -> None:
        self._started = False

    def _run(self) -> None:
        while self._started:
            self.socketio.sleep(self.interval)
            if not self._started:
                break
            self.sweep()
