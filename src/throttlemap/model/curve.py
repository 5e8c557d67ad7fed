"""
Throttle Curve
==============
The editable throttle response: control points, the selected interpolation
method with its cache, the deadzone and the preview scale factor.

Why is this file needed?
------------------------
1. Single owner: every edit goes through ThrottleCurve, which applies the
   deadzone clamp, mutates the PointSet and invalidates the interpolator
   cache in one step. Nothing can edit points and forget the cache.
2. Document boundary: `to_dict`/`from_dict` hand the curve to and from
   whatever stores the configuration tree.
3. Sanity checks: `validate()` lists the problems a firmware table built
   from the curve would have.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np

from throttlemap.config import CurveRange, DEFAULT_INTERPOLATION, DEFAULT_RANGE, DEFAULT_SPEED_RATIO
from throttlemap.model.deadzone import DeadzoneConstraint
from throttlemap.model.interpolation import (
    InterpolatorNotSelectedError,
    Interpolator,
    make_interpolator,
)
from throttlemap.model.points import Point, PointSet
from throttlemap.utils import clip, round_half_up

logger = logging.getLogger(__name__)


class ThrottleCurve:
    def __init__(
        self,
        curve_range: CurveRange = DEFAULT_RANGE,
        interpolation: str = DEFAULT_INTERPOLATION,
    ) -> None:
        self.range = curve_range
        self.points = PointSet.default(curve_range)
        self.interpolator: Optional[Interpolator] = make_interpolator(interpolation)
        self.deadzone = DeadzoneConstraint(curve_range=curve_range)
        self.scale_factor: float = 1.0
        self._sync_deadzone()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Restore the two default points, keeping the interpolation method."""
        self.points = PointSet.default(self.range)
        self._sync_deadzone()
        self._invalidate()
        logger.info("Curve reset to default")

    def load(self, points: Iterable[Tuple[int, int] | Point], identifier: str) -> None:
        """
        Replace every point and select the interpolation method.

        An unknown identifier leaves the curve with no interpolator.
        """
        pts = [p if isinstance(p, Point) else Point(int(p[0]), int(p[1])) for p in points]
        self.points.replace(pts)
        self.interpolator = make_interpolator(identifier)
        self._sync_deadzone()
        logger.info(f"Loaded {len(self.points)} points, interpolation {identifier!r}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "interpolation_method": self.method_identifier,
            "points": [{"input": p.x, "output": p.y} for p in self.points],
        }

    @staticmethod
    def from_dict(data: Dict[str, Any], curve_range: CurveRange = DEFAULT_RANGE) -> ThrottleCurve:
        curve = ThrottleCurve(curve_range=curve_range)
        points = [(d["input"], d["output"]) for d in data.get("points", [])]
        curve.load(points, data.get("interpolation_method", ""))
        return curve

    # ------------------------------------------------------------------
    # Interpolation
    # ------------------------------------------------------------------

    @property
    def method_identifier(self) -> Optional[str]:
        return self.interpolator.identifier if self.interpolator else None

    def set_interpolation_method(self, identifier: str) -> bool:
        """
        Swap in a new interpolator. Unknown identifiers keep the current one.

        Returns:
            True if the method changed.
        """
        interpolator = make_interpolator(identifier)
        if interpolator is None:
            logger.error(f"Keeping interpolation {self.method_identifier!r}")
            return False
        changed = interpolator.identifier != self.method_identifier
        self.interpolator = interpolator
        return changed

    def _require_interpolator(self) -> Interpolator:
        if self.interpolator is None:
            raise InterpolatorNotSelectedError("No interpolation method selected for this curve")
        return self.interpolator

    def interpolated_points(self, speed_ratio: int = DEFAULT_SPEED_RATIO) -> Tuple[Point, ...]:
        return self._require_interpolator().process(self.points.points, speed_ratio)

    def scaled_points(self, speed_ratio: int = DEFAULT_SPEED_RATIO) -> List[Point]:
        """Resampled curve with outputs multiplied by `scale_factor`."""
        return [
            Point(p.x, int(clip(round_half_up(p.y * self.scale_factor), 0, self.range.output_max)))
            for p in self.interpolated_points(speed_ratio)
        ]

    def sample(self, inputs: Sequence[float] | np.ndarray, speed_ratio: int = DEFAULT_SPEED_RATIO) -> np.ndarray:
        return self._require_interpolator().sample(self.points.points, inputs, speed_ratio)

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def add_point(self, point: Point) -> Optional[int]:
        lo, hi = self._edit_bounds(None)
        if lo > hi:
            logger.warning(f"No room between the endpoints for point {point}, ignored.")
            return None
        candidate = self.deadzone.clamp(point.clamped(self.range))
        index = self.points.add(candidate.with_x(int(clip(candidate.x, lo, hi))))
        if index is not None:
            self._invalidate()
        return index

    def move_point(self, index: int, point: Point) -> int:
        lo, hi = self._edit_bounds(index)
        candidate = self.deadzone.clamp(point.clamped(self.range))
        if lo > hi:
            candidate = candidate.with_x(self.points[index].x)
        else:
            candidate = candidate.with_x(int(clip(candidate.x, lo, hi)))
        new_index = self.points.move(index, candidate)
        self._invalidate()
        return new_index

    def remove_point(self, index: int) -> Point:
        removed = self.points.remove_at(index)
        self._invalidate()
        return removed

    def remove_near(self, point: Point, radius: float) -> List[Point]:
        removed = self.points.remove_near(point, radius)
        if removed:
            self._invalidate()
        return removed

    def move_deadzone(self, x: float) -> int:
        """Drag the deadzone, bounded by the second control point."""
        upper = self.points[1].x if len(self.points) >= 2 else self.range.input_max
        return self.deadzone.move_to(x, upper)

    def is_endpoint(self, index: int) -> bool:
        return index == 0 or index == len(self.points) - 1

    def _edit_bounds(self, index: Optional[int]) -> Tuple[int, int]:
        """
        Allowed x range for the point at `index` (None for a new point).

        Interior points stay strictly between the first and last point, so
        an edit can never turn an interior point into an endpoint.
        """
        n = len(self.points)
        if n < 2:
            return 0, self.range.input_max
        if index == 0:
            return 0, self.points[1].x - 1
        if index == n - 1:
            return self.points[n - 2].x + 1, self.range.input_max
        return self.points[0].x + 1, self.points[n - 1].x - 1

    def _invalidate(self) -> None:
        if self.interpolator is not None:
            self.interpolator.invalidate()

    def _sync_deadzone(self) -> None:
        first = self.points.first
        self.deadzone = DeadzoneConstraint(first.x if first else 0, self.range)

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def validate(self, speed_ratio: int = DEFAULT_SPEED_RATIO) -> List[str]:
        """Human readable warnings about the curve, empty if it looks sane."""
        warnings: List[str] = []
        if len(self.points) < 2:
            warnings.append("Curve needs at least two control points.")
            return warnings

        if self.points.first.y != 0:
            warnings.append(f"Output does not start at zero (first point output is {self.points.first.y}).")
        if self.points.last.y != self.range.output_max:
            warnings.append(
                f"Curve does not reach full output ({self.points.last.y} of {self.range.output_max})."
            )

        if self.interpolator is None:
            warnings.append("No interpolation method selected.")
            return warnings

        ys = np.array([p.y for p in self.interpolated_points(speed_ratio)])
        if np.any(np.diff(ys) < 0):
            warnings.append("Interpolated curve decreases somewhere; throttle response is not monotonic.")
        if ys.min() < 0 or ys.max() > self.range.output_max:
            warnings.append("Interpolated curve leaves the output range and will be clipped on export.")
        return warnings

    def plot(self, speed_ratio: int = DEFAULT_SPEED_RATIO) -> None:
        """Plot the control points and the resampled curve."""
        curve = np.array([(p.x, p.y) for p in self.interpolated_points(speed_ratio)])
        controls = self.points.to_array()

        plt.rcParams["figure.constrained_layout.use"] = True
        plt.figure(figsize=(7, 5))

        plt.plot(curve[:, 0], curve[:, 1], 'r', lw=2, label=self.method_identifier)
        plt.plot(controls[:, 0], controls[:, 1], 'ko', label="Control points")
        if self.deadzone.position > 0:
            plt.axvspan(0, self.deadzone.position, color='gray', alpha=0.2, label="Deadzone")

        plt.grid(visible=True, which='major', axis='both', linestyle='-', color='gray', lw=0.5)
        plt.minorticks_on()
        plt.grid(visible=True, which='minor', axis='both', linestyle=':', color='gray', lw=0.5)

        plt.title("Throttle Curve")
        plt.xlabel("Input")
        plt.ylabel("Output")
        plt.xlim(0, self.range.input_max)
        plt.ylim(0, self.range.output_max)
        plt.legend(loc='best')
        plt.show()
