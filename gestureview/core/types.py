"""
GestureView core contracts.

Pointer samples flow from the input source into the classifier; gesture
events flow from the classifier into the recognizer, which turns them into
transform updates for the host surface.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


# ============================================================
# Input source → Classifier (pointer events)
# ============================================================

Point = Tuple[int, int]
Size = Tuple[int, int]


class PointerPhase(str, Enum):
    DOWN = "DOWN"
    MOVE = "MOVE"
    UP = "UP"
    CANCEL = "CANCEL"


@dataclass(frozen=True)
class PointerSample:
    """
    A single pointer event in surface coordinates.

    down_time is the event time of the DOWN that started the current
    contact; for a DOWN sample both times are equal.
    """
    x: int
    y: int
    phase: PointerPhase
    event_time: int          # ms
    down_time: int           # ms

    @property
    def position(self) -> Point:
        return (self.x, self.y)


@dataclass(frozen=True)
class PointerWindow:
    """The current sample and the one delivered right before it."""
    previous: Optional[PointerSample]
    current: PointerSample

    def slide(self, sample: PointerSample) -> "PointerWindow":
        return PointerWindow(previous=self.current, current=sample)

    @property
    def delta(self) -> Tuple[int, int]:
        if self.previous is None:
            return (0, 0)
        return (self.current.x - self.previous.x, self.current.y - self.previous.y)


# ============================================================
# Classifier → Recognizer (gesture decisions)
# ============================================================

class GestureState(str, Enum):
    NONE = "NONE"
    PENDING_CLICK = "PENDING_CLICK"
    ROTATE = "ROTATE"
    PAN = "PAN"
    DOUBLE_CLICK = "DOUBLE_CLICK"


class EventType(str, Enum):
    STATE = "STATE"                    # classification changed
    ENTER_PAN = "ENTER_PAN"            # scale bump up, pivot = position
    PAN = "PAN"                        # translate by position - previous
    EXIT_PAN = "EXIT_PAN"              # scale bump down, pivot = position
    ROTATE = "ROTATE"                  # rotate/rescale step about surface center
    SCHEDULE_CLICK = "SCHEDULE_CLICK"  # arm the delayed single-tap rotation
    CANCEL_CLICK = "CANCEL_CLICK"      # disarm it
    DOUBLE_CLICK = "DOUBLE_CLICK"      # reset to initial fit


@dataclass(frozen=True)
class GestureEvent:
    """
    A single output event from the classifier.

    position/previous are only set for the geometric event types.
    """
    t_ms: int
    type: EventType
    state: GestureState
    position: Optional[Point] = None
    previous: Optional[Point] = None
