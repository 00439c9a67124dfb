import pytest

from gestureview.core.config import DEFAULT_TUNING, GestureTuning
from gestureview.core.types import EventType, GestureState, PointerPhase, PointerSample, PointerWindow
from gestureview.interpreter.classifier import GestureClassifier


class Feeder:
    """Builds the sliding window the way the recognizer does."""

    def __init__(self, tuning=DEFAULT_TUNING):
        self.clf = GestureClassifier(tuning)
        self.window = None
        self.down_ms = 0

    def send(self, phase, x, y, t):
        if phase == PointerPhase.DOWN:
            self.down_ms = t
        s = PointerSample(x=x, y=y, phase=phase, event_time=t, down_time=self.down_ms)
        self.window = PointerWindow(None, s) if self.window is None else self.window.slide(s)
        return self.clf.process(self.window)


def types(events):
    return [e.type for e in events]


def test_starts_in_none():
    assert GestureClassifier(DEFAULT_TUNING).state == GestureState.NONE


def test_down_enters_pending_click():
    f = Feeder()
    out = f.send(PointerPhase.DOWN, 10, 10, 0)
    assert f.clf.state == GestureState.PENDING_CLICK
    assert types(out) == [EventType.STATE]


def test_tap_schedules_click_on_up():
    f = Feeder()
    f.send(PointerPhase.DOWN, 10, 10, 0)
    out = f.send(PointerPhase.UP, 10, 10, 80)
    assert types(out) == [EventType.SCHEDULE_CLICK]
    assert f.clf.state == GestureState.PENDING_CLICK
    assert f.clf.last_end_ms == 80


def test_second_down_inside_window_is_double_click():
    f = Feeder()
    f.send(PointerPhase.DOWN, 10, 10, 0)
    f.send(PointerPhase.UP, 10, 10, 50)
    out = f.send(PointerPhase.DOWN, 10, 10, 50 + DEFAULT_TUNING.double_click_ms - 1)
    assert types(out) == [EventType.CANCEL_CLICK, EventType.STATE]
    assert f.clf.state == GestureState.DOUBLE_CLICK

    out = f.send(PointerPhase.UP, 10, 10, 300)
    assert types(out) == [EventType.DOUBLE_CLICK]


def test_second_down_at_window_edge_is_a_new_tap():
    f = Feeder()
    f.send(PointerPhase.DOWN, 10, 10, 0)
    f.send(PointerPhase.UP, 10, 10, 50)
    out = f.send(PointerPhase.DOWN, 10, 10, 50 + DEFAULT_TUNING.double_click_ms)
    assert types(out) == [EventType.STATE]
    assert f.clf.state == GestureState.PENDING_CLICK


def test_down_after_click_fired_is_a_new_tap():
    f = Feeder(GestureTuning(click_delay_ms=100, double_click_ms=300))
    f.send(PointerPhase.DOWN, 10, 10, 0)
    f.send(PointerPhase.UP, 10, 10, 40)
    f.clf.click_fired()
    out = f.send(PointerPhase.DOWN, 10, 10, 200)
    assert types(out) == [EventType.STATE]
    assert f.clf.state == GestureState.PENDING_CLICK


def test_third_tap_after_double_click_is_single():
    f = Feeder()
    for t in (0, 100):
        f.send(PointerPhase.DOWN, 10, 10, t)
        f.send(PointerPhase.UP, 10, 10, t + 20)
    assert f.clf.state == GestureState.DOUBLE_CLICK
    f.send(PointerPhase.DOWN, 10, 10, 150)
    assert f.clf.state == GestureState.PENDING_CLICK


def test_swipe_move_enters_rotate_without_geometry():
    f = Feeder()
    f.send(PointerPhase.DOWN, 100, 100, 0)
    out = f.send(PointerPhase.MOVE, 100 + DEFAULT_TUNING.touch_slop_px, 100, 16)
    assert f.clf.state == GestureState.ROTATE
    assert types(out) == [EventType.STATE]


def test_rotate_is_sticky_for_small_moves():
    f = Feeder()
    f.send(PointerPhase.DOWN, 100, 100, 0)
    f.send(PointerPhase.MOVE, 110, 100, 16)
    # tiny moves and a long wait don't turn it into a pan
    out = f.send(PointerPhase.MOVE, 110, 101, 2000)
    assert f.clf.state == GestureState.ROTATE
    assert types(out) == [EventType.ROTATE]
    assert out[0].position == (110, 101)
    assert out[0].previous == (110, 100)

    out = f.send(PointerPhase.UP, 110, 101, 2100)
    assert out == []
    assert f.clf.state == GestureState.ROTATE


def test_jitter_below_slop_stays_pending():
    f = Feeder(GestureTuning(touch_slop_px=5))
    f.send(PointerPhase.DOWN, 100, 100, 0)
    assert f.send(PointerPhase.MOVE, 104, 96, 16) == []
    assert f.clf.state == GestureState.PENDING_CLICK


def test_long_press_enters_pan_with_bump():
    f = Feeder()
    f.send(PointerPhase.DOWN, 50, 60, 0)
    assert f.send(PointerPhase.MOVE, 50, 60, DEFAULT_TUNING.long_press_ms) == []
    out = f.send(PointerPhase.MOVE, 50, 60, DEFAULT_TUNING.long_press_ms + 1)
    assert f.clf.state == GestureState.PAN
    assert types(out) == [EventType.STATE, EventType.ENTER_PAN]
    assert out[1].position == (50, 60)


def test_pan_moves_and_exit():
    f = Feeder()
    f.send(PointerPhase.DOWN, 50, 60, 0)
    f.send(PointerPhase.MOVE, 50, 60, 600)
    out = f.send(PointerPhase.MOVE, 80, 90, 616)
    assert types(out) == [EventType.PAN]
    assert (out[0].previous, out[0].position) == ((50, 60), (80, 90))

    out = f.send(PointerPhase.UP, 82, 91, 640)
    assert types(out) == [EventType.EXIT_PAN]
    assert out[0].position == (82, 91)
    assert f.clf.state == GestureState.PAN


def test_rotate_wins_when_slop_and_long_press_coincide():
    f = Feeder()
    f.send(PointerPhase.DOWN, 0, 0, 0)
    f.send(PointerPhase.MOVE, 30, 0, 900)
    assert f.clf.state == GestureState.ROTATE


def test_cancel_returns_to_none_and_disarms_click():
    f = Feeder()
    f.send(PointerPhase.DOWN, 0, 0, 0)
    out = f.send(PointerPhase.CANCEL, 0, 0, 10)
    assert f.clf.state == GestureState.NONE
    assert types(out) == [EventType.CANCEL_CLICK, EventType.STATE]


def test_down_after_cancel_is_not_double_click():
    f = Feeder()
    f.send(PointerPhase.DOWN, 0, 0, 0)
    f.send(PointerPhase.UP, 0, 0, 20)
    f.send(PointerPhase.CANCEL, 0, 0, 30)
    f.send(PointerPhase.DOWN, 0, 0, 40)
    assert f.clf.state == GestureState.PENDING_CLICK


@pytest.mark.parametrize("phase", [PointerPhase.MOVE, PointerPhase.UP])
def test_malformed_first_event_does_not_raise(phase):
    f = Feeder()
    assert f.send(phase, 5, 5, 0) == []
    assert f.clf.state == GestureState.NONE
