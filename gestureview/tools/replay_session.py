"""
Replay a recorded session through a fresh recognizer.

  python -m gestureview.tools.replay_session session.jsonl --size 1280x800 --out replay.png
"""

from __future__ import annotations

import argparse
import sys

from gestureview.core.config import PRESETS, PresetName
from gestureview.core.errors import GestureViewError
from gestureview.core.profile import load_profile, tuning_from_profile
from gestureview.interpreter.recognizer import GestureRecognizer
from gestureview.render.pil_surface import PilImageSurface, make_test_card
from gestureview.tools.session_log import read_session


def replay(path, surface_size, tuning, content_size=None) -> GestureRecognizer:
    w, h = surface_size
    surface = PilImageSurface(make_test_card(content_size or (400, 300)), surface_size)
    rec = GestureRecognizer(tuning, surface=surface)
    rec.on_size_changed(w, h)
    rec.on_content_changed()

    last_ms = None
    for sample in read_session(path):
        rec.process(sample)
        last_ms = sample.event_time
    if last_ms is not None:
        # flush a trailing single tap
        rec.tick(last_ms + tuning.click_delay_ms)
    return rec


def _parse_size(text: str):
    w, h = text.lower().split("x")
    return (int(w), int(h))


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Replay a GestureView session log.")
    ap.add_argument("log", help="session .jsonl file")
    ap.add_argument("--size", default="1280x800", type=_parse_size, help="surface size WxH")
    ap.add_argument("--content", default="400x300", type=_parse_size, help="content size WxH")
    ap.add_argument("--preset", choices=[p.value for p in PresetName],
                    help="tuning preset (default: saved profile)")
    ap.add_argument("--out", help="write the final rendering here")
    args = ap.parse_args(argv)

    try:
        tuning = PRESETS[PresetName(args.preset)] if args.preset else tuning_from_profile(load_profile())
        rec = replay(args.log, args.size, tuning, content_size=args.content)
    except (GestureViewError, OSError) as e:
        print(f"[Replay] {e}")
        return 2

    print(f"[Replay] final state {rec.state.value}")
    print(f"[Replay] transform {tuple(round(v, 4) for v in rec.current_transform().values())}")
    if args.out:
        rec.surface.save(args.out)
        print(f"[Replay] wrote {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
