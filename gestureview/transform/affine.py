from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple


_SNAP = 1e-12


def _sin_cos(degrees: float) -> Tuple[float, float]:
    rad = math.radians(degrees)
    s, c = math.sin(rad), math.cos(rad)
    # snap so quarter/half turns compose back to exact identity
    if abs(s) < _SNAP:
        s = 0.0
    if abs(c) < _SNAP:
        c = 0.0
    return s, c


@dataclass(frozen=True)
class AffineTransform:
    """
    2D affine transform stored as the top two rows of a 3x3 matrix:

        x' = a*x + b*y + c
        y' = d*x + e*y + f

    post_* methods return op * self, i.e. the new operation is applied
    after everything already accumulated.
    """
    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 0.0
    e: float = 1.0
    f: float = 0.0

    @classmethod
    def identity(cls) -> "AffineTransform":
        return cls()

    @classmethod
    def translation(cls, dx: float, dy: float) -> "AffineTransform":
        return cls(c=float(dx), f=float(dy))

    @classmethod
    def scaling(cls, sx: float, sy: float, px: float = 0.0, py: float = 0.0) -> "AffineTransform":
        return cls(a=sx, c=px - sx * px, e=sy, f=py - sy * py)

    @classmethod
    def rotation(cls, degrees: float, px: float = 0.0, py: float = 0.0) -> "AffineTransform":
        s, c = _sin_cos(degrees)
        return cls(
            a=c, b=-s, c=px - c * px + s * py,
            d=s, e=c, f=py - s * px - c * py,
        )

    def post_concat(self, other: "AffineTransform") -> "AffineTransform":
        o = other
        return AffineTransform(
            a=o.a * self.a + o.b * self.d,
            b=o.a * self.b + o.b * self.e,
            c=o.a * self.c + o.b * self.f + o.c,
            d=o.d * self.a + o.e * self.d,
            e=o.d * self.b + o.e * self.e,
            f=o.d * self.c + o.e * self.f + o.f,
        )

    def post_translate(self, dx: float, dy: float) -> "AffineTransform":
        return self.post_concat(AffineTransform.translation(dx, dy))

    def post_scale(self, sx: float, sy: float, px: float = 0.0, py: float = 0.0) -> "AffineTransform":
        return self.post_concat(AffineTransform.scaling(sx, sy, px, py))

    def post_rotate(self, degrees: float, px: float = 0.0, py: float = 0.0) -> "AffineTransform":
        return self.post_concat(AffineTransform.rotation(degrees, px, py))

    def map_point(self, x: float, y: float) -> Tuple[float, float]:
        return (self.a * x + self.b * y + self.c, self.d * x + self.e * y + self.f)

    def determinant(self) -> float:
        return self.a * self.e - self.b * self.d

    def inverted(self) -> Optional["AffineTransform"]:
        det = self.determinant()
        if det == 0.0:
            return None
        a = self.e / det
        b = -self.b / det
        d = -self.d / det
        e = self.a / det
        return AffineTransform(
            a=a, b=b, c=-(a * self.c + b * self.f),
            d=d, e=e, f=-(d * self.c + e * self.f),
        )

    def values(self) -> Tuple[float, float, float, float, float, float]:
        return (self.a, self.b, self.c, self.d, self.e, self.f)

    def almost_equal(self, other: "AffineTransform", tol: float = 1e-6) -> bool:
        return all(abs(x - y) <= tol for x, y in zip(self.values(), other.values()))
