from __future__ import annotations

import logging
import math

from gestureview.core.types import Point
from gestureview.transform.affine import AffineTransform

logger = logging.getLogger(__name__)


def angle_from_center(point: Point, center: Point) -> float:
    """
    Angle of the vector center -> point in degrees.

    Straight down is 0, directly left is 90, directly right is -90 and
    anything above the center is shifted by 180 (so straight up is 180).
    """
    dx = float(point[0] - center[0])
    dy = float(point[1] - center[1])

    if dy == 0:
        return -90.0 if dx > 0 else 90.0

    result = math.atan(-dx / dy) * 180.0 / math.pi
    if dy < 0:
        result += 180.0
    return result


def distance_from_center(point: Point, center: Point) -> float:
    return math.hypot(point[0] - center[0], point[1] - center[1])


class TransformAccumulator:
    """Owns the transform applied to the displayed content."""

    def __init__(self) -> None:
        self.transform = AffineTransform.identity()

    def reset_to_initial_fit(self, surface_w: int, surface_h: int, content_w: int, content_h: int) -> AffineTransform:
        # fit-to-surface, downscale only
        if surface_w <= 0 or surface_h <= 0 or content_w <= 0 or content_h <= 0:
            self.transform = AffineTransform.identity()
            return self.transform

        scale = min(surface_w / content_w, surface_h / content_h)
        cx, cy = surface_w // 2, surface_h // 2

        m = AffineTransform.identity()
        if scale < 1.0:
            m = m.post_scale(scale, scale, cx, cy)
        m = m.post_translate(int((surface_w - content_w) / 2), int((surface_h - content_h) / 2))

        logger.debug("initial fit surface=%dx%d content=%dx%d scale=%.4f",
                     surface_w, surface_h, content_w, content_h, scale)
        self.transform = m
        return m

    def apply_pan(self, dx: int, dy: int) -> AffineTransform:
        self.transform = self.transform.post_translate(dx, dy)
        return self.transform

    def apply_rotate_step(self, current: Point, previous: Point, center: Point) -> AffineTransform:
        delta_deg = angle_from_center(current, center) - angle_from_center(previous, center)

        prev_dist = distance_from_center(previous, center)
        if prev_dist == 0:
            scale = 1.0
        else:
            scale = distance_from_center(current, center) / prev_dist

        logger.debug("rotate step delta=%.3f deg scale=%.4f", delta_deg, scale)
        self.transform = (
            self.transform
            .post_rotate(delta_deg, center[0], center[1])
            .post_scale(scale, scale, center[0], center[1])
        )
        return self.transform

    def apply_scale_bump(self, factor: float, pivot: Point) -> AffineTransform:
        self.transform = self.transform.post_scale(factor, factor, pivot[0], pivot[1])
        return self.transform

    def apply_click_rotation(self, degrees: float, center: Point) -> AffineTransform:
        self.transform = self.transform.post_rotate(degrees, center[0], center[1])
        return self.transform
