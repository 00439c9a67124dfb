from __future__ import annotations

import json
import os
import math
from dataclasses import asdict, fields, replace
from pathlib import Path
from typing import Optional

from gestureview.core.config import DEFAULT_TUNING, PRESETS, GestureTuning, PresetName
from gestureview.core.errors import ProfileError

# angles may be negative, everything else must be strictly positive
_POSITIVE_FIELDS = frozenset({
    "touch_slop_px", "long_press_ms", "click_delay_ms", "double_click_ms", "pan_enter_scale",
})


def _profile_path() -> Path:
    override = os.environ.get("GESTUREVIEW_PROFILE")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "gestureview" / "profile.json"


def save_profile(tuning: GestureTuning, path: Optional[Path] = None) -> Path:
    p = Path(path) if path is not None else _profile_path()
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(asdict(tuning), indent=2))
    return p


def load_profile(path: Optional[Path] = None) -> Optional[dict]:
    p = Path(path) if path is not None else _profile_path()
    if not p.exists():
        return None
    try:
        prof = json.loads(p.read_text())
    except json.JSONDecodeError as e:
        raise ProfileError(f"{p}: not valid JSON ({e.msg})") from e
    if not isinstance(prof, dict):
        raise ProfileError(f"{p}: expected a JSON object")
    return prof


def tuning_from_profile(prof: Optional[dict], base: GestureTuning = DEFAULT_TUNING) -> GestureTuning:
    """
    Build a tuning from a profile dict.

    An optional "preset" key picks the starting preset, every other known
    field overrides it. Unknown keys are ignored.
    """
    if not prof:
        return base

    tuning = base
    if "preset" in prof:
        try:
            tuning = PRESETS[PresetName(prof["preset"])]
        except ValueError:
            raise ProfileError(f"unknown preset {prof['preset']!r}") from None

    overrides = {}
    for f in fields(GestureTuning):
        if f.name not in prof:
            continue
        raw = prof[f.name]
        if isinstance(raw, bool):
            raise ProfileError(f"{f.name}: expected a number, got {raw!r}")
        try:
            value = float(raw)
        except (TypeError, ValueError):
            raise ProfileError(f"{f.name}: expected a number, got {raw!r}") from None
        if not math.isfinite(value):
            raise ProfileError(f"{f.name}: expected a finite number, got {raw!r}")
        if isinstance(getattr(tuning, f.name), int):
            if not value.is_integer():
                raise ProfileError(f"{f.name}: expected a whole number, got {raw!r}")
            value = int(value)
        if f.name in _POSITIVE_FIELDS and value <= 0:
            raise ProfileError(f"{f.name}: must be positive, got {value}")
        overrides[f.name] = value

    return replace(tuning, **overrides)
