from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from gestureview.core.types import PointerPhase, PointerSample, Size


# (offset_ms, phase, x, y)
Step = Tuple[int, PointerPhase, int, int]


def demo_script(surface_size: Size) -> List[Step]:
    """
    Tap, long-press pan, arc rotate, then a double tap that resets the fit.
    Contacts are spaced well apart so the single tap gets to fire.
    """
    w, h = surface_size
    cx, cy = w // 2, h // 2
    D, M, U = PointerPhase.DOWN, PointerPhase.MOVE, PointerPhase.UP
    steps: List[Step] = []

    # tap: rotates 180 after the click delay
    steps += [(0, D, cx, cy + 40), (60, U, cx, cy + 40)]

    # hold, then drag right/down
    t = 600
    steps += [(t, D, cx - 50, cy)]
    steps += [(t + 560, M, cx - 50, cy)]
    for i in range(1, 11):
        steps.append((t + 560 + 16 * i, M, cx - 50 + 6 * i, cy + 3 * i))
    steps.append((t + 760, U, cx + 10, cy + 30))

    # sweep from below the center round to its left
    t = 1600
    r = min(w, h) // 4
    steps.append((t, D, cx, cy + r))
    arc = [(cx - r * k // 10, cy + r - r * k // 10) for k in range(1, 11)]
    for i, (x, y) in enumerate(arc, start=1):
        steps.append((t + 16 * i, M, x, y))
    steps.append((t + 200, U, arc[-1][0], arc[-1][1]))

    # double tap
    t = 2400
    steps += [(t, D, cx, cy), (t + 50, U, cx, cy), (t + 150, D, cx, cy), (t + 200, U, cx, cy)]
    return steps


@dataclass
class FakeSource:
    """
    Deterministic pointer source replaying a script against a clock.
    """
    start_ms: int
    steps: List[Step]
    _next: int = 0
    _down_ms: int = 0

    @property
    def done(self) -> bool:
        return self._next >= len(self.steps)

    @property
    def end_ms(self) -> int:
        return self.start_ms + (self.steps[-1][0] if self.steps else 0)

    def poll(self, t_ms: int) -> List[PointerSample]:
        out: List[PointerSample] = []
        while self._next < len(self.steps):
            offset, phase, x, y = self.steps[self._next]
            at = self.start_ms + offset
            if at > t_ms:
                break
            if phase == PointerPhase.DOWN:
                self._down_ms = at
            out.append(PointerSample(x=x, y=y, phase=phase, event_time=at, down_time=self._down_ms))
            self._next += 1
        return out
