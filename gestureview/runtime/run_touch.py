from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from PIL import Image

from gestureview.core.errors import GestureViewError
from gestureview.core.profile import load_profile, tuning_from_profile
from gestureview.core.types import PointerPhase
from gestureview.interpreter.recognizer import GestureRecognizer
from gestureview.render.pil_surface import PilImageSurface, make_test_card
from gestureview.sensor.evdev_touch import EvdevTouchSource
from gestureview.tools.session_log import SessionRecorder


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Drive GestureView from a touchscreen.")
    ap.add_argument("--device", help="evdev node, e.g. /dev/input/event5 (default: first touchscreen)")
    ap.add_argument("--image", help="image to display (default: built-in test card)")
    ap.add_argument("--size", default="1280x800", help="surface size WxH")
    ap.add_argument("--snapshot", default="gestureview_touch.png", help="written after every contact")
    ap.add_argument("--log", action="store_true", help="record a session log")
    args = ap.parse_args(argv)

    try:
        w, h = (int(v) for v in args.size.lower().split("x"))
    except ValueError:
        ap.error(f"bad --size {args.size!r}")

    try:
        tuning = tuning_from_profile(load_profile())
    except GestureViewError as e:
        print(f"[GestureView] {e}")
        return 2

    if args.image:
        try:
            content = Image.open(args.image)
            content.load()
        except OSError as e:
            print(f"[GestureView] cannot open image {args.image}: {e}")
            return 2
    else:
        content = make_test_card()

    try:
        src = EvdevTouchSource((w, h), path=args.device)
    except GestureViewError as e:
        print(f"[GestureView] {e}")
        return 2

    surface = PilImageSurface(content, (w, h))

    recorder = SessionRecorder() if args.log else None
    if recorder is not None:
        print(f"[SessionLog] writing {recorder.path}")

    rec = GestureRecognizer(tuning, surface=surface, recorder=recorder)
    rec.on_size_changed(w, h)
    rec.on_content_changed()

    snapshot = Path(args.snapshot)
    dirty = False
    print(f"[GestureView] {src.name}: tap rotates, hold+drag pans, swipe rotates/scales, double tap resets.")
    print("[GestureView] Ctrl+C to exit.")
    try:
        while True:
            for sample in src.read(timeout_s=0.016):
                rec.process(sample)
                if sample.phase in (PointerPhase.UP, PointerPhase.CANCEL):
                    dirty = True
            if rec.tick(int(time.time() * 1000)):
                dirty = True
            if dirty:
                surface.save(snapshot)
                dirty = False
    except KeyboardInterrupt:
        print("\n[GestureView] exiting")
    finally:
        src.close()
        if recorder is not None:
            recorder.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
