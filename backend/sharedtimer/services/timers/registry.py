from typing import Callable, Container, Dict, List, Optional

from sharedtimer.models import ID_GENERATORS, TimerRecord
from .clock import Clock


class TimerRegistry:
    """Process-wide owner of every TimerRecord, keyed by room id.

    Other components never hold on to records between calls; they look
    them up here by id each time.
    """

    def __init__(self, clock: Optional[Clock] = None,
                 id_generator: Optional[Callable[[Container[str]], str]] = None):
        self.clock = clock or Clock()
        self.id_generator = id_generator or ID_GENERATORS['readable']
        self._timers: Dict[str, TimerRecord] = {}

    def create(self) -> str:
        timer_id = self.id_generator(self._timers)
        now = self.clock.now()
        self._timers[timer_id] = TimerRecord(id=timer_id, last_activity=now)
        return timer_id

    def get(self, timer_id: str) -> Optional[TimerRecord]:
        return self._timers.get(timer_id)

    def delete(self, timer_id: str) -> None:
        self._timers.pop(timer_id, None)

    def records(self) -> List[TimerRecord]:
        return list(self._timers.values())

    def __contains__(self, timer_id) -> bool:
        return timer_id in self._timers

    def __len__(self) -> int:
        return len(self._timers)
