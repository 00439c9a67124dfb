from __future__ import annotations

import os
import sys
import time
from pathlib import Path

from gestureview.core.errors import GestureViewError
from gestureview.core.profile import load_profile, tuning_from_profile
from gestureview.interpreter.recognizer import GestureRecognizer
from gestureview.render.pil_surface import PilImageSurface, make_test_card
from gestureview.runtime.fake_source import FakeSource, demo_script
from gestureview.tools.session_log import SessionRecorder

SURFACE_SIZE = (640, 480)


def run(out_path: str = "gestureview_run.png") -> int:
    try:
        tuning = tuning_from_profile(load_profile())
    except GestureViewError as e:
        print(f"[Profile] {e}")
        return 2

    surface = PilImageSurface(make_test_card((800, 600)), SURFACE_SIZE)

    recorder = None
    if os.environ.get("GESTUREVIEW_LOG_PATH"):
        recorder = SessionRecorder()
        print(f"[SessionLog] writing {recorder.path}")

    rec = GestureRecognizer(tuning, surface=surface, recorder=recorder)
    rec.on_size_changed(*SURFACE_SIZE)
    rec.on_content_changed()

    src = FakeSource(start_ms=int(time.time() * 1000), steps=demo_script(SURFACE_SIZE))
    # let the last tap's timer run out before stopping
    stop_ms = src.end_ms + tuning.click_delay_ms + 50

    print("[GestureView] Runtime loop (FAKE SOURCE). Ctrl+C to exit.")
    try:
        while True:
            t_ms = int(time.time() * 1000)
            for sample in src.poll(t_ms):
                before = rec.state
                rec.process(sample)
                if rec.state != before:
                    print(f"[GestureView] {sample.phase.value:6s} -> {rec.state.value}")
            rec.tick(t_ms)

            if src.done and t_ms >= stop_ms:
                break
            time.sleep(0.016)  # ~60Hz loop
    except KeyboardInterrupt:
        print("\n[GestureView] exiting")
    finally:
        if recorder is not None:
            recorder.close()

    surface.save(Path(out_path))
    print(f"[GestureView] transform {rec.current_transform().values()}")
    print(f"[GestureView] wrote {out_path}")
    return 0


if __name__ == "__main__":
    sys.exit(run(*sys.argv[1:2]))
