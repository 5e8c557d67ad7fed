"""
Deadzone
========
The low-input region modelling the pedal's dead travel.

Why is this file needed?
------------------------
Point edits must never land inside the dead travel, and the boundary itself
is dragged by the user independently of the control points. Keeping it in
its own object lets the edit session, the exporter and the overlay renderer
share one position.
"""
from __future__ import annotations

import logging

from throttlemap.config import CurveRange, DEADZONE_EDGE_OFFSET, DEFAULT_RANGE
from throttlemap.model.points import Point
from throttlemap.utils import clip, format_percentage, round_half_up

logger = logging.getLogger(__name__)


class DeadzoneConstraint:
    def __init__(self, position: int = 0, curve_range: CurveRange = DEFAULT_RANGE) -> None:
        self.range = curve_range
        self._position = int(clip(position, 0, curve_range.input_max))

    @property
    def position(self) -> int:
        return self._position

    def move_to(self, x: float, upper: int | None = None) -> int:
        """
        Drag the boundary to `x`, clamped to `[0, upper]`.

        Args:
            x: Requested curve-space input.
            upper: Highest allowed position, typically the second control
                point's x. Defaults to input_max.

        Returns:
            The new position.
        """
        if upper is None:
            upper = self.range.input_max
        upper = int(clip(upper, 0, self.range.input_max))
        new_position = int(clip(round_half_up(x), 0, upper))
        if new_position != self._position:
            logger.debug(f"Deadzone moved {self._position} -> {new_position}")
        self._position = new_position
        return new_position

    def clamp(self, point: Point) -> Point:
        """Push a point lying below the boundary onto it."""
        if point.x < self._position:
            return point.with_x(self._position)
        return point

    def is_protected(self, x: float) -> bool:
        return x < self._position

    def is_on_edge(self, x: float, offset: int = DEADZONE_EDGE_OFFSET) -> bool:
        """True when a press at `x` should grab the boundary instead of a point."""
        return x < self._position + offset

    def label(self) -> str:
        """Tooltip text, e.g. '9.8%'."""
        return format_percentage(self._position, self.range.input_max)

    def __repr__(self) -> str:
        return f"DeadzoneConstraint(position={self._position})"
