from gestureview.core.config import DEFAULT_TUNING
from gestureview.core.types import GestureState, PointerPhase
from gestureview.interpreter.recognizer import GestureRecognizer
from gestureview.runtime.fake_source import FakeSource, demo_script


SIZE = (640, 480)


def test_poll_releases_steps_by_time():
    src = FakeSource(start_ms=1000, steps=demo_script(SIZE))
    assert src.poll(999) == []
    first = src.poll(1000)
    assert [s.phase for s in first] == [PointerPhase.DOWN]
    assert first[0].down_time == 1000
    up = src.poll(1060)
    assert [(s.phase, s.down_time) for s in up] == [(PointerPhase.UP, 1000)]


def test_demo_script_walks_every_gesture():
    rec = GestureRecognizer(DEFAULT_TUNING)
    rec.on_size_changed(*SIZE)
    rec.on_content_changed(800, 600)
    fitted = rec.current_transform()

    src = FakeSource(start_ms=0, steps=demo_script(SIZE))
    seen = set()
    t = 0
    while not src.done:
        for s in src.poll(t):
            rec.process(s)
            seen.add(rec.state)
        rec.tick(t)
        t += 8

    assert {GestureState.PENDING_CLICK, GestureState.PAN,
            GestureState.ROTATE, GestureState.DOUBLE_CLICK} <= seen
    # ends on a double tap, which puts the fit back
    assert rec.state == GestureState.DOUBLE_CLICK
    rec.tick(src.end_ms + 1000)
    assert rec.current_transform() == fitted
