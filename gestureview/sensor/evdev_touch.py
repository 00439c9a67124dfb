from __future__ import annotations

import logging
import select
from typing import Dict, List, Optional, Tuple

import evdev
from evdev import InputDevice, ecodes

from gestureview.core.errors import DeviceNotFoundError
from gestureview.core.types import PointerPhase, PointerSample, Size

logger = logging.getLogger(__name__)

_X_CODES = (ecodes.ABS_X, ecodes.ABS_MT_POSITION_X)
_Y_CODES = (ecodes.ABS_Y, ecodes.ABS_MT_POSITION_Y)


class TouchDecoder:
    """
    Turns a single-touch evdev stream into PointerSamples.

    Raw axis values are mapped from the device range onto the surface. The
    multitouch position axes may report over their own range, so each value
    is kept together with the range of the code that carried it.
    Samples are only emitted at SYN_REPORT, so a report carrying both
    BTN_TOUCH and the first coordinates yields one DOWN at the right place.
    """

    def __init__(
        self,
        x_range: Tuple[int, int],
        y_range: Tuple[int, int],
        surface_size: Size,
        mt_x_range: Optional[Tuple[int, int]] = None,
        mt_y_range: Optional[Tuple[int, int]] = None,
    ) -> None:
        self.x_range = x_range
        self.y_range = y_range
        self.surface_size = surface_size
        self._ranges = {
            ecodes.ABS_X: x_range,
            ecodes.ABS_Y: y_range,
            ecodes.ABS_MT_POSITION_X: mt_x_range or x_range,
            ecodes.ABS_MT_POSITION_Y: mt_y_range or y_range,
        }

        self._raw_x = (x_range[0], x_range)
        self._raw_y = (y_range[0], y_range)
        self._moved = False
        self._touch_change: Optional[bool] = None
        self._touching = False
        self._down_ms = 0

    @staticmethod
    def _scale(raw: int, rng: Tuple[int, int], extent: int) -> int:
        lo, hi = rng
        if hi <= lo:
            return int(raw)
        return int(round((raw - lo) * (extent - 1) / (hi - lo)))

    def position(self) -> Tuple[int, int]:
        w, h = self.surface_size
        return (self._scale(*self._raw_x, w), self._scale(*self._raw_y, h))

    def _sample(self, phase: PointerPhase, t_ms: int) -> PointerSample:
        x, y = self.position()
        return PointerSample(x=x, y=y, phase=phase, event_time=t_ms, down_time=self._down_ms)

    def feed(self, type: int, code: int, value: int, t_ms: int) -> List[PointerSample]:
        if type == ecodes.EV_KEY and code == ecodes.BTN_TOUCH:
            self._touch_change = bool(value)
        elif type == ecodes.EV_ABS and code in _X_CODES:
            self._raw_x = (value, self._ranges[code])
            self._moved = True
        elif type == ecodes.EV_ABS and code in _Y_CODES:
            self._raw_y = (value, self._ranges[code])
            self._moved = True
        elif type == ecodes.EV_SYN and code == ecodes.SYN_DROPPED:
            return self._drop(t_ms)
        elif type == ecodes.EV_SYN and code == ecodes.SYN_REPORT:
            return self._report(t_ms)
        return []

    def _report(self, t_ms: int) -> List[PointerSample]:
        out: List[PointerSample] = []
        if self._touch_change is True and not self._touching:
            self._touching = True
            self._down_ms = t_ms
            out.append(self._sample(PointerPhase.DOWN, t_ms))
        elif self._touch_change is False and self._touching:
            self._touching = False
            out.append(self._sample(PointerPhase.UP, t_ms))
        elif self._touching and self._moved:
            out.append(self._sample(PointerPhase.MOVE, t_ms))
        self._touch_change = None
        self._moved = False
        return out

    def _drop(self, t_ms: int) -> List[PointerSample]:
        # kernel buffer overrun: the contact can't be trusted any more
        self._touch_change = None
        self._moved = False
        if not self._touching:
            return []
        self._touching = False
        return [self._sample(PointerPhase.CANCEL, t_ms)]


def _abs_ranges(device: InputDevice) -> Dict[int, Tuple[int, int]]:
    caps = device.capabilities(absinfo=True)
    return {code: (info.min, info.max) for code, info in caps.get(ecodes.EV_ABS, [])}


def _is_touchscreen(device: InputDevice) -> bool:
    caps = device.capabilities()
    abs_codes = [code for code, _ in caps.get(ecodes.EV_ABS, [])]
    return (
        ecodes.ABS_X in abs_codes
        and ecodes.ABS_Y in abs_codes
        and ecodes.BTN_TOUCH in caps.get(ecodes.EV_KEY, [])
    )


def find_touch_device(path: Optional[str] = None) -> InputDevice:
    if path is not None:
        return InputDevice(path)

    for dev_path in evdev.list_devices():
        device = InputDevice(dev_path)
        if _is_touchscreen(device):
            logger.info("Found touchscreen: %s (%s)", device.name, dev_path)
            return device
        device.close()
    raise DeviceNotFoundError("no touchscreen with ABS_X/ABS_Y and BTN_TOUCH found")


class EvdevTouchSource:
    """Live PointerSample source on top of a kernel touch device."""

    def __init__(self, surface_size: Size, path: Optional[str] = None) -> None:
        self.device = find_touch_device(path)
        ranges = _abs_ranges(self.device)
        if ecodes.ABS_X not in ranges or ecodes.ABS_Y not in ranges:
            self.device.close()
            raise DeviceNotFoundError(f"{self.device.path}: no ABS_X/ABS_Y axes")
        self.decoder = TouchDecoder(
            x_range=ranges[ecodes.ABS_X],
            y_range=ranges[ecodes.ABS_Y],
            surface_size=surface_size,
            mt_x_range=ranges.get(ecodes.ABS_MT_POSITION_X),
            mt_y_range=ranges.get(ecodes.ABS_MT_POSITION_Y),
        )

    @property
    def name(self) -> str:
        return self.device.name

    def read(self, timeout_s: float = 0.016) -> List[PointerSample]:
        """Wait up to timeout_s for input and decode whatever arrived."""
        ready, _, _ = select.select([self.device.fd], [], [], timeout_s)
        if not ready:
            return []

        samples: List[PointerSample] = []
        try:
            for ev in self.device.read():
                t_ms = int(ev.timestamp() * 1000)
                samples.extend(self.decoder.feed(ev.type, ev.code, ev.value, t_ms))
        except BlockingIOError:
            # spurious wakeup, nothing queued
            pass
        return samples

    def close(self) -> None:
        self.device.close()
