import time


class Clock:
    """Wall-clock source in integer milliseconds."""

    def now(self) -> int:
        return int(time.time() * 1000)
