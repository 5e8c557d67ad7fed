"""Mapping between curve-space and presentation-space (widget pixels)."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from throttlemap.config import CurveRange, DEFAULT_RANGE
from throttlemap.model.points import Point
from throttlemap.utils import clip, round_half_up


@dataclass
class CoordinateTransform:
    """
    Curve-space is `[0, input_max] x [0, output_max]` with output growing
    upwards. Presentation-space is `[0, width] x [0, height]` with y growing
    downwards, so the y axis is inverted.
    """
    width: float
    height: float
    curve_range: CurveRange = DEFAULT_RANGE

    def __post_init__(self) -> None:
        self.resize(self.width, self.height)

    def resize(self, width: float, height: float) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Presentation size must be positive, got {width}x{height}")
        self.width = float(width)
        self.height = float(height)

    def to_presentation(self, point: Point) -> Tuple[float, float]:
        r = self.curve_range
        return (
            self.width * point.x / r.input_max,
            self.height * (1.0 - point.y / r.output_max),
        )

    def to_curve(self, qx: float, qy: float) -> Point:
        """Inverse mapping, clamped so any pointer position gives a valid Point."""
        r = self.curve_range
        x = clip(r.input_max * qx / self.width, 0, r.input_max)
        y = clip(r.output_max * (1.0 - qy / self.height), 0, r.output_max)
        return Point(round_half_up(x), round_half_up(y))

    def presentation_distance(self, point: Point, qx: float, qy: float) -> float:
        px, py = self.to_presentation(point)
        return math.hypot(px - qx, py - qy)

    def hit_test(self, point: Point, qx: float, qy: float, radius: float) -> bool:
        return self.presentation_distance(point, qx, qy) < radius
