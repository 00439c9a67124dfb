from __future__ import annotations

import logging
from typing import Optional, Protocol

from gestureview.core.config import DEFAULT_TUNING, GestureTuning
from gestureview.core.timers import TimerHandle, TimerQueue
from gestureview.core.types import (
    EventType, GestureEvent, GestureState,
    Point, PointerPhase, PointerSample, PointerWindow, Size,
)
from gestureview.interpreter.classifier import GestureClassifier
from gestureview.transform.accumulator import TransformAccumulator
from gestureview.transform.affine import AffineTransform

logger = logging.getLogger(__name__)


class ImageSurface(Protocol):
    """What the recognizer needs from the widget that draws the content."""

    def set_transform(self, transform: AffineTransform) -> None: ...

    def content_intrinsic_size(self) -> Size: ...


class SampleRecorder(Protocol):
    def record(self, sample: PointerSample, state: GestureState,
               events: list[GestureEvent], transform: AffineTransform) -> None: ...


class GestureRecognizer:
    """
    Host-facing facade.

    Each sample goes to the classifier first; the events it returns are then
    applied to the transform accumulator and the click timer. The surface
    gets the new transform after every change.
    """

    def __init__(
        self,
        tuning: GestureTuning = DEFAULT_TUNING,
        surface: Optional[ImageSurface] = None,
        timers: Optional[TimerQueue] = None,
        recorder: Optional[SampleRecorder] = None,
    ) -> None:
        self.tuning = tuning
        self.surface = surface
        self.timers = timers if timers is not None else TimerQueue()
        self.recorder = recorder

        self.classifier = GestureClassifier(tuning)
        self.accumulator = TransformAccumulator()

        self.surface_size: Size = (0, 0)
        self.content_size: Size = (0, 0)
        self._window: PointerWindow | None = None
        self._click: TimerHandle | None = None

    # ------------------------------------------------------------
    # host callbacks
    # ------------------------------------------------------------

    @property
    def state(self) -> GestureState:
        return self.classifier.state

    @property
    def surface_center(self) -> Point:
        w, h = self.surface_size
        return (w // 2, h // 2)

    def current_transform(self) -> AffineTransform:
        return self.accumulator.transform

    def on_size_changed(self, width: int, height: int) -> None:
        self.surface_size = (int(width), int(height))
        self._reset_to_initial_fit()

    def on_content_changed(self, width: int | None = None, height: int | None = None) -> None:
        if width is None or height is None:
            if self.surface is None:
                raise ValueError("content size required when no surface is attached")
            width, height = self.surface.content_intrinsic_size()
        self.content_size = (int(width), int(height))
        self._reset_to_initial_fit()

    def on_pointer_event(self, phase, x: float, y: float, event_time: int, down_time: int) -> bool:
        try:
            phase = PointerPhase(phase)
        except ValueError:
            return False
        self.process(PointerSample(
            x=int(x), y=int(y), phase=phase,
            event_time=int(event_time), down_time=int(down_time),
        ))
        return True

    def process(self, sample: PointerSample) -> list[GestureEvent]:
        # a click that came due before this sample fires first
        self.timers.advance(sample.event_time)

        if self._window is None:
            self._window = PointerWindow(previous=None, current=sample)
        else:
            self._window = self._window.slide(sample)

        events = self.classifier.process(self._window)
        for ev in events:
            self._apply(ev)

        if self.recorder is not None:
            self.recorder.record(sample, self.classifier.state, events, self.accumulator.transform)
        return events

    def tick(self, now_ms: int) -> int:
        """Let the click timer catch up with the host clock."""
        return self.timers.advance(now_ms)

    # ------------------------------------------------------------
    # event application
    # ------------------------------------------------------------

    def _apply(self, ev: GestureEvent) -> None:
        if ev.type == EventType.STATE:
            return

        if ev.type == EventType.SCHEDULE_CLICK:
            self.timers.cancel(self._click)
            self._click = self.timers.schedule_after(self.tuning.click_delay_ms, self._on_click)
            return

        if ev.type == EventType.CANCEL_CLICK:
            self.timers.cancel(self._click)
            self._click = None
            return

        if ev.type == EventType.DOUBLE_CLICK:
            self._reset_to_initial_fit()
            return

        if ev.position is None:
            return

        if ev.type == EventType.ENTER_PAN:
            self.accumulator.apply_scale_bump(self.tuning.pan_enter_scale, ev.position)
        elif ev.type == EventType.EXIT_PAN:
            self.accumulator.apply_scale_bump(self.tuning.pan_exit_scale, ev.position)
        elif ev.type == EventType.PAN and ev.previous is not None:
            self.accumulator.apply_pan(ev.position[0] - ev.previous[0], ev.position[1] - ev.previous[1])
        elif ev.type == EventType.ROTATE and ev.previous is not None:
            self.accumulator.apply_rotate_step(ev.position, ev.previous, self.surface_center)
        else:
            return
        self._publish()

    def _on_click(self) -> None:
        self._click = None
        self.classifier.click_fired()
        logger.debug("single tap: rotating %.1f deg", self.tuning.click_rotation_deg)
        self.accumulator.apply_click_rotation(self.tuning.click_rotation_deg, self.surface_center)
        self._publish()

    def _reset_to_initial_fit(self) -> None:
        w, h = self.surface_size
        cw, ch = self.content_size
        self.accumulator.reset_to_initial_fit(w, h, cw, ch)
        self._publish()

    def _publish(self) -> None:
        if self.surface is not None:
            self.surface.set_transform(self.accumulator.transform)
