from __future__ import annotations

import logging

from gestureview.core.config import GestureTuning
from gestureview.core.types import (
    EventType, GestureEvent, GestureState,
    PointerPhase, PointerWindow,
)

logger = logging.getLogger(__name__)


class GestureClassifier:
    """
    Single-pointer gesture state machine.

    Consumes one PointerWindow per sample and returns the GestureEvents the
    transition asks for. It never touches a transform or a timer itself.
    Phase order per contact is DOWN, MOVE*, then UP or CANCEL; out-of-order
    input is not validated.
    """

    def __init__(self, tuning: GestureTuning) -> None:
        self.tuning = tuning
        self.state: GestureState = GestureState.NONE
        self.last_end_ms: int | None = None
        self.click_pending = False

    def process(self, window: PointerWindow) -> list[GestureEvent]:
        phase = window.current.phase
        if phase == PointerPhase.DOWN:
            return self._on_down(window)
        if phase == PointerPhase.MOVE:
            return self._on_move(window)
        if phase == PointerPhase.UP:
            return self._on_up(window)
        if phase == PointerPhase.CANCEL:
            return self._on_cancel(window)
        return []

    def _set_state(self, state: GestureState, t_ms: int) -> GestureEvent:
        logger.debug("gesture %s -> %s at %d", self.state.value, state.value, t_ms)
        self.state = state
        return GestureEvent(t_ms=t_ms, type=EventType.STATE, state=state)

    def _event(self, t_ms: int, type: EventType, window: PointerWindow | None = None) -> GestureEvent:
        if window is None:
            return GestureEvent(t_ms=t_ms, type=type, state=self.state)
        prev = window.previous.position if window.previous is not None else None
        return GestureEvent(
            t_ms=t_ms, type=type, state=self.state,
            position=window.current.position, previous=prev,
        )

    def click_fired(self) -> None:
        """The scheduled single tap went through; a later DOWN starts afresh."""
        self.click_pending = False

    def _is_double_click(self, down_ms: int) -> bool:
        if self.state != GestureState.PENDING_CLICK or self.last_end_ms is None:
            return False
        # a tap whose click already fired cannot start a double tap
        if not self.click_pending:
            return False
        return down_ms - self.last_end_ms < self.tuning.double_click_ms

    def _on_down(self, window: PointerWindow) -> list[GestureEvent]:
        s = window.current
        double = self._is_double_click(s.down_time)
        self.click_pending = False
        if double:
            return [
                self._event(s.event_time, EventType.CANCEL_CLICK),
                self._set_state(GestureState.DOUBLE_CLICK, s.event_time),
            ]
        return [self._set_state(GestureState.PENDING_CLICK, s.event_time)]

    def _is_swipe(self, dx: int, dy: int) -> bool:
        return abs(dx) >= self.tuning.touch_slop_px or abs(dy) >= self.tuning.touch_slop_px

    def _on_move(self, window: PointerWindow) -> list[GestureEvent]:
        s = window.current
        t_ms = s.event_time

        if self.state == GestureState.PENDING_CLICK:
            # slop is checked first, so rotate wins when both hold
            dx, dy = window.delta
            if self._is_swipe(dx, dy):
                return [self._set_state(GestureState.ROTATE, t_ms)]
            if t_ms - s.down_time > self.tuning.long_press_ms:
                return [
                    self._set_state(GestureState.PAN, t_ms),
                    self._event(t_ms, EventType.ENTER_PAN, window),
                ]
            return []

        if self.state == GestureState.ROTATE:
            return [self._event(t_ms, EventType.ROTATE, window)]
        if self.state == GestureState.PAN:
            return [self._event(t_ms, EventType.PAN, window)]
        return []

    def _on_up(self, window: PointerWindow) -> list[GestureEvent]:
        s = window.current
        t_ms = s.event_time
        self.last_end_ms = t_ms

        if self.state == GestureState.PENDING_CLICK:
            self.click_pending = True
            return [self._event(t_ms, EventType.SCHEDULE_CLICK)]
        if self.state == GestureState.PAN:
            return [self._event(t_ms, EventType.EXIT_PAN, window)]
        if self.state == GestureState.DOUBLE_CLICK:
            return [self._event(t_ms, EventType.DOUBLE_CLICK)]
        return []

    def _on_cancel(self, window: PointerWindow) -> list[GestureEvent]:
        t_ms = window.current.event_time
        self.click_pending = False
        return [
            self._event(t_ms, EventType.CANCEL_CLICK),
            self._set_state(GestureState.NONE, t_ms),
        ]
