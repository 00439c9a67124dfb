"""
GestureView session log.
Writes JSONL to ~/.cache/gestureview/sessions/session_<timestamp>.jsonl
(or GESTUREVIEW_LOG_PATH). One line = one pointer sample + what it caused.
"""

from __future__ import annotations

import json
import os
import time
from pathlib import Path
from typing import Iterator, Optional

from gestureview.core.errors import SessionFormatError
from gestureview.core.types import GestureEvent, GestureState, PointerPhase, PointerSample
from gestureview.transform.affine import AffineTransform


def default_log_path() -> Path:
    override = os.environ.get("GESTUREVIEW_LOG_PATH")
    if override:
        return Path(override).expanduser()
    outdir = Path.home() / ".cache" / "gestureview" / "sessions"
    ts = time.strftime("%Y%m%d_%H%M%S")
    return outdir / f"session_{ts}.jsonl"


def _event_record(ev: GestureEvent) -> dict:
    rec = {"type": ev.type.value, "state": ev.state.value}
    if ev.position is not None:
        rec["position"] = list(ev.position)
    if ev.previous is not None:
        rec["previous"] = list(ev.previous)
    return rec


class SessionRecorder:
    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else default_log_path()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._f = open(self.path, "a", buffering=1)

    def record(self, sample: PointerSample, state: GestureState,
               events: list[GestureEvent], transform: AffineTransform) -> None:
        rec = {
            "t_ms": sample.event_time,
            "phase": sample.phase.value,
            "x": sample.x,
            "y": sample.y,
            "down_time": sample.down_time,
            "state": state.value,
            "events": [_event_record(ev) for ev in events],
            "transform": list(transform.values()),
        }
        self._f.write(json.dumps(rec) + "\n")

    def close(self) -> None:
        self._f.close()

    def __enter__(self) -> "SessionRecorder":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def read_session(path) -> Iterator[PointerSample]:
    p = Path(path)
    with p.open() as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                rec = json.loads(line)
            except json.JSONDecodeError as e:
                raise SessionFormatError(p, line_no, f"bad JSON ({e.msg})") from e
            try:
                yield PointerSample(
                    x=int(rec["x"]),
                    y=int(rec["y"]),
                    phase=PointerPhase(rec["phase"]),
                    event_time=int(rec["t_ms"]),
                    down_time=int(rec["down_time"]),
                )
            except KeyError as e:
                raise SessionFormatError(p, line_no, f"missing field {e.args[0]!r}") from None
            except (TypeError, ValueError) as e:
                raise SessionFormatError(p, line_no, str(e)) from None
