"""
GestureView tuning defaults (presets).

Times are in milliseconds, distances in surface pixels.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


# Platform defaults the tuning is derived from (Android ViewConfiguration).
PLATFORM_TOUCH_SLOP_PX = 8
PLATFORM_LONG_PRESS_MS = 500


class PresetName(str, Enum):
    DEFAULT = "Default"
    HIGH_DENSITY = "HighDensity"
    RELAXED = "Relaxed"


def touch_slop_from_platform(base_slop_px: int, density: float = 1.0, divisor: int = 4) -> int:
    # compared against a single-sample delta, not a whole scroll
    return int(base_slop_px * density) // divisor


@dataclass(frozen=True)
class GestureTuning:
    touch_slop_px: int = touch_slop_from_platform(PLATFORM_TOUCH_SLOP_PX)
    long_press_ms: int = PLATFORM_LONG_PRESS_MS
    click_delay_ms: int = 200
    double_click_ms: int = 200
    pan_enter_scale: float = 1.05
    click_rotation_deg: float = 180.0

    @property
    def pan_exit_scale(self) -> float:
        return 1.0 / self.pan_enter_scale


DEFAULT_TUNING = GestureTuning()

HIGH_DENSITY_TUNING = GestureTuning(
    touch_slop_px=touch_slop_from_platform(PLATFORM_TOUCH_SLOP_PX, density=3.0),
)

# slower hands: more time to finish a double tap, longer hold before pan
RELAXED_TUNING = GestureTuning(
    long_press_ms=700,
    click_delay_ms=320,
    double_click_ms=320,
)

PRESETS = {
    PresetName.DEFAULT: DEFAULT_TUNING,
    PresetName.HIGH_DENSITY: HIGH_DENSITY_TUNING,
    PresetName.RELAXED: RELAXED_TUNING,
}
