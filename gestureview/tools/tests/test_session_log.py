import json

import pytest

from gestureview.core.config import DEFAULT_TUNING
from gestureview.core.errors import SessionFormatError
from gestureview.core.types import PointerPhase, PointerSample
from gestureview.interpreter.recognizer import GestureRecognizer
from gestureview.tools.replay_session import main as replay_main, replay
from gestureview.tools.session_log import SessionRecorder, default_log_path, read_session


def sample(phase, x, y, t, down):
    return PointerSample(x=x, y=y, phase=phase, event_time=t, down_time=down)


SWIPE = [
    sample(PointerPhase.DOWN, 700, 400, 0, 0),
    sample(PointerPhase.MOVE, 710, 400, 16, 0),
    sample(PointerPhase.MOVE, 640, 470, 32, 0),
    sample(PointerPhase.UP, 640, 470, 48, 0),
]


def record(path, samples, size=(1280, 800)):
    with SessionRecorder(path) as recorder:
        rec = GestureRecognizer(DEFAULT_TUNING, recorder=recorder)
        rec.on_size_changed(*size)
        rec.on_content_changed(400, 300)
        for s in samples:
            rec.process(s)
    return rec


def test_one_line_per_sample(tmp_path):
    p = tmp_path / "s.jsonl"
    record(p, SWIPE)
    lines = [json.loads(line) for line in p.read_text().splitlines()]
    assert [r["phase"] for r in lines] == ["DOWN", "MOVE", "MOVE", "UP"]
    assert lines[1]["state"] == "ROTATE"
    assert lines[2]["events"] == [
        {"type": "ROTATE", "state": "ROTATE", "position": [640, 470], "previous": [710, 400]}
    ]
    assert len(lines[2]["transform"]) == 6


def test_read_back_and_replay_matches(tmp_path):
    p = tmp_path / "s.jsonl"
    original = record(p, SWIPE)
    assert list(read_session(p)) == SWIPE

    replayed = replay(p, (1280, 800), DEFAULT_TUNING, content_size=(400, 300))
    assert replayed.current_transform().almost_equal(original.current_transform())


def test_replay_flushes_trailing_tap(tmp_path):
    p = tmp_path / "tap.jsonl"
    record(p, [sample(PointerPhase.DOWN, 5, 5, 0, 0), sample(PointerPhase.UP, 5, 5, 30, 0)])
    rec = replay(p, (100, 100), DEFAULT_TUNING, content_size=(100, 100))
    assert rec.current_transform().map_point(0, 0) == pytest.approx((100, 100))


@pytest.mark.parametrize("line, reason", [
    ("{oops", "bad JSON"),
    ('{"x": 1, "y": 2, "phase": "DOWN", "t_ms": 0}', "down_time"),
    ('{"x": 1, "y": 2, "phase": "WIGGLE", "t_ms": 0, "down_time": 0}', "WIGGLE"),
])
def test_malformed_lines(tmp_path, line, reason):
    p = tmp_path / "bad.jsonl"
    p.write_text('{"x": 1, "y": 2, "phase": "DOWN", "t_ms": 0, "down_time": 0}\n\n' + line + "\n")
    with pytest.raises(SessionFormatError) as exc:
        list(read_session(p))
    assert exc.value.line_no == 3
    assert reason in str(exc.value)


def test_log_path_env_override(tmp_path, monkeypatch):
    monkeypatch.setenv("GESTUREVIEW_LOG_PATH", str(tmp_path / "x.jsonl"))
    assert default_log_path() == tmp_path / "x.jsonl"


def test_replay_cli(tmp_path, capsys):
    p = tmp_path / "s.jsonl"
    record(p, SWIPE)
    out = tmp_path / "out.png"
    assert replay_main([str(p), "--preset", "Default", "--out", str(out)]) == 0
    assert out.exists()
    assert "final state ROTATE" in capsys.readouterr().out


def test_replay_cli_reports_bad_log(tmp_path, capsys):
    p = tmp_path / "bad.jsonl"
    p.write_text("nope\n")
    assert replay_main([str(p), "--preset", "Default"]) == 2
    assert "[Replay]" in capsys.readouterr().out
