"""
Control Points
==============
Defines the control point of a throttle curve and the ordered collection
that owns them.

Why is this file needed?
------------------------
1. Invariants: The interpolators and the firmware exporter rely on the
   points being strictly increasing in x. Every mutation path goes through
   PointSet so the ordering can never be broken from outside.
2. Value semantics: Points are immutable, so nothing outside the set can
   alias and silently modify a stored point.

Classes:
    Point: An (input, output) integer pair.
    PointSet: Ordered, x-unique collection of Points.
"""
from __future__ import annotations

import bisect
import logging
import math
from dataclasses import dataclass, replace
from typing import Iterable, Iterator, List, Optional, Tuple, TYPE_CHECKING

import numpy as np

from throttlemap.config import CurveRange, DEFAULT_RANGE
from throttlemap.utils import clip

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Point:
    """A control point in curve-space: x is the input, y the output."""
    x: int
    y: int

    def distance_to(self, other: Point) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def clamped(self, curve_range: CurveRange) -> Point:
        """Return a copy clamped to [0, input_max] x [0, output_max]."""
        return Point(
            int(clip(self.x, 0, curve_range.input_max)),
            int(clip(self.y, 0, curve_range.output_max)),
        )

    def with_x(self, x: int) -> Point:
        return replace(self, x=x)


class PointSet:
    """
    Ordered sequence of Points, strictly increasing by x.

    Duplicate x values are resolved by shifting: the incoming point is
    shifted to the next free x (+1 steps). Every such shift is logged as a
    data-quality warning and recorded in `adjustments`.
    """

    def __init__(
        self,
        points: Optional[Iterable[Point]] = None,
        curve_range: CurveRange = DEFAULT_RANGE,
    ) -> None:
        self.range: CurveRange = curve_range
        self._points: List[Point] = []
        self.adjustments: List[Tuple[Point, Point]] = []

        for point in points or []:
            self.add(point)

    @classmethod
    def default(cls, curve_range: CurveRange = DEFAULT_RANGE) -> PointSet:
        """A straight line from (0, 0) to (input_max, output_max)."""
        return cls(
            [Point(0, 0), Point(curve_range.input_max, curve_range.output_max)],
            curve_range=curve_range,
        )

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[Point]:
        return iter(tuple(self._points))

    def __getitem__(self, index: int) -> Point:
        return self._points[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PointSet):
            return NotImplemented
        return self.range == other.range and self._points == other._points

    def __repr__(self) -> str:
        pts = ", ".join(f"({p.x}, {p.y})" for p in self._points)
        return f"PointSet([{pts}])"

    @property
    def points(self) -> Tuple[Point, ...]:
        """Snapshot of the stored points."""
        return tuple(self._points)

    @property
    def first(self) -> Optional[Point]:
        return self._points[0] if self._points else None

    @property
    def last(self) -> Optional[Point]:
        return self._points[-1] if self._points else None

    def xs(self) -> List[int]:
        return [p.x for p in self._points]

    def to_array(self) -> npt.NDArray[np.int64]:
        """Return the points as an (N, 2) integer array."""
        if not self._points:
            return np.empty((0, 2), dtype=np.int64)
        return np.array([(p.x, p.y) for p in self._points], dtype=np.int64)

    def index_of(self, point: Point) -> Optional[int]:
        i = bisect.bisect_left(self.xs(), point.x)
        if i < len(self._points) and self._points[i] == point:
            return i
        return None

    def nearest_index(self, point: Point, radius: float) -> Optional[int]:
        """
        Hit test in curve-space.

        Returns:
            The lowest index whose point lies strictly within `radius` of
            `point`, or None.
        """
        if radius < 0:
            raise ValueError(f"Radius must be non-negative, got {radius}")
        for i, candidate in enumerate(self._points):
            if candidate.distance_to(point) < radius:
                return i
        return None

    def copy(self) -> PointSet:
        """Independent snapshot, safe to hand to another thread."""
        clone = PointSet(curve_range=self.range)
        clone._points = list(self._points)
        clone.adjustments = list(self.adjustments)
        return clone

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add(self, point: Point) -> Optional[int]:
        """
        Insert a point keeping the set sorted by x.

        Out-of-range coordinates are clamped. If the x value is taken the
        point is shifted to the next free x.

        Returns:
            The index of the inserted point, or None if the input domain
            has no free x left.
        """
        clamped = point.clamped(self.range)
        if clamped != point:
            logger.debug(f"Clamped point {point} to {clamped}")

        stored = self._resolve_duplicate(clamped, self.xs())
        if stored is None:
            logger.warning(f"No free input value left for point {point}, ignored.")
            return None

        index = bisect.bisect_left(self.xs(), stored.x)
        self._points.insert(index, stored)
        self._check_order()
        return index

    def move(self, index: int, new_position: Point) -> int:
        """
        Move the point at `index` to `new_position` (clamped).

        If the new x crosses a neighbour, the point is re-seated so the set
        stays sorted. The returned index always refers to the moved point,
        so a caller tracking "the point under the cursor" can follow it.
        """
        self._check_index(index)
        clamped = new_position.clamped(self.range)

        others = self._points[:index] + self._points[index + 1:]
        stored = self._resolve_duplicate(clamped, [p.x for p in others])
        if stored is None:
            # Only possible when every other x is taken; keep the point's x
            stored = clamped.with_x(self._points[index].x)

        others_xs = [p.x for p in others]
        new_index = bisect.bisect_left(others_xs, stored.x)
        others.insert(new_index, stored)
        self._points = others
        self._check_order()

        if new_index != index:
            logger.debug(f"Point moved across neighbour: index {index} -> {new_index}")
        return new_index

    def remove_at(self, index: int) -> Point:
        self._check_index(index)
        return self._points.pop(index)

    def remove_near(self, point: Point, radius: float) -> List[Point]:
        """Remove every point strictly within `radius` of `point`."""
        if radius < 0:
            raise ValueError(f"Radius must be non-negative, got {radius}")
        removed = [p for p in self._points if p.distance_to(point) < radius]
        self._points = [p for p in self._points if p.distance_to(point) >= radius]
        return removed

    def replace(self, points: Iterable[Point]) -> None:
        """Bulk load: drop every point and add the given ones in x order."""
        self._points = []
        self.adjustments = []
        for point in sorted(points, key=lambda p: p.x):
            self.add(point)

    def clear(self) -> None:
        self._points = []

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _resolve_duplicate(self, point: Point, taken_xs: List[int]) -> Optional[Point]:
        """
        Shift `point` to the nearest free x, searching upwards first and
        downwards from the requested x once the top of the domain is hit.
        """
        taken = set(taken_xs)
        if point.x not in taken:
            return point

        candidate = point.x
        while candidate in taken and candidate < self.range.input_max:
            candidate += 1
        if candidate in taken:
            candidate = point.x
            while candidate in taken and candidate > 0:
                candidate -= 1
        if candidate in taken:
            return None

        stored = point.with_x(candidate)
        self.adjustments.append((point, stored))
        logger.warning(
            f"Duplicate input value {point.x}: point stored at x={candidate} instead."
        )
        return stored

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._points):
            raise IndexError(f"Point index {index} out of range (size {len(self._points)})")

    def _check_order(self) -> None:
        for left, right in zip(self._points, self._points[1:]):
            if left.x >= right.x:
                logger.error(f"Point order broken between {left} and {right}")
                raise RuntimeError("PointSet is no longer strictly increasing in x")
