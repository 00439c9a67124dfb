from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable, List


@dataclass
class TimerHandle:
    due_ms: int
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = False
    fired: bool = False

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)


class TimerQueue:
    """
    Cancelable one-shot timers on an externally driven clock.

    Nothing runs on its own: the owner calls advance() with the current time
    and due callbacks run inline, oldest deadline first.
    """

    def __init__(self, now_ms: int = 0) -> None:
        self.now_ms = now_ms
        self._heap: List[tuple] = []
        self._seq = itertools.count()

    def schedule_after(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(due_ms=self.now_ms + delay_ms, seq=next(self._seq), callback=callback)
        heapq.heappush(self._heap, (handle.due_ms, handle.seq, handle))
        return handle

    def cancel(self, handle: TimerHandle | None) -> None:
        # no-op for fired, already cancelled or missing handles
        if handle is not None and handle.active:
            handle.cancelled = True

    def advance(self, now_ms: int) -> int:
        """Move the clock forward and run everything due. Returns the number fired."""
        if now_ms > self.now_ms:
            self.now_ms = now_ms

        fired = 0
        while self._heap and self._heap[0][0] <= self.now_ms:
            _, _, handle = heapq.heappop(self._heap)
            if not handle.active:
                continue
            handle.fired = True
            handle.callback()
            fired += 1
        return fired

    def pending(self) -> int:
        return sum(1 for _, _, h in self._heap if h.active)
