"""
Edit Session
============
Interactive state machine that turns pointer and key events into curve
edits.

Why is this file needed?
------------------------
1. Decoupling: The widget only reports positions in its own pixel space. The
   session converts them with a CoordinateTransform and decides whether a
   press creates, moves, deletes a point or grabs the deadzone.
2. Drag tracking: The point being dragged is tracked by index. PointSet.move
   returns the point's new index, so a drag that crosses a neighbour keeps
   following the same point.
3. Testability: No Qt here. Tests drive it with plain coordinates.
"""
from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Callable, Optional

from throttlemap.config import HIT_RADIUS
from throttlemap.model.curve import ThrottleCurve
from throttlemap.model.transform import CoordinateTransform

logger = logging.getLogger(__name__)


class EditState(Enum):
    NONE = auto()
    OVER_POINT = auto()
    CREATE = auto()
    MOVE = auto()
    DELETE = auto()


class CursorHint(Enum):
    """What the view should show under the pointer."""
    CROSSHAIR = auto()
    DRAG = auto()
    RESIZE = auto()
    DELETE = auto()


class EditKey(Enum):
    TOGGLE_DELETE = auto()
    RESET = auto()


class EditSession:
    def __init__(
        self,
        curve: ThrottleCurve,
        transform: CoordinateTransform,
        hit_radius: float = HIT_RADIUS,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self.curve = curve
        self.transform = transform
        self.hit_radius = hit_radius
        self.on_change = on_change

        self.state = EditState.NONE
        self.moving_index: Optional[int] = None
        self.dragging_deadzone = False
        self._pointer_over_deadzone = False

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def delete_mode(self) -> bool:
        return self.state == EditState.DELETE

    @property
    def cursor(self) -> CursorHint:
        if self.state == EditState.DELETE:
            return CursorHint.DELETE
        if self.dragging_deadzone or self._pointer_over_deadzone:
            return CursorHint.RESIZE
        if self.state in (EditState.OVER_POINT, EditState.MOVE):
            return CursorHint.DRAG
        return CursorHint.CROSSHAIR

    def hit_index(self, qx: float, qy: float) -> Optional[int]:
        """Lowest index of a point within the hit radius of (qx, qy)."""
        for i, point in enumerate(self.curve.points):
            if self.transform.hit_test(point, qx, qy, self.hit_radius):
                return i
        return None

    def _editable_hit(self, qx: float, qy: float) -> Optional[int]:
        index = self.hit_index(qx, qy)
        if index is not None and self.curve.is_endpoint(index):
            return None
        return index

    def _on_deadzone_edge(self, qx: float, qy: float) -> bool:
        return self.curve.deadzone.is_on_edge(self.transform.to_curve(qx, qy).x)

    # ------------------------------------------------------------------
    # Pointer events (presentation-space coordinates)
    # ------------------------------------------------------------------

    def hover(self, qx: float, qy: float) -> None:
        """Pointer moved with no button pressed."""
        self._pointer_over_deadzone = self._on_deadzone_edge(qx, qy)
        if self.state not in (EditState.NONE, EditState.OVER_POINT):
            return
        over = self._editable_hit(qx, qy) is not None
        self.state = EditState.OVER_POINT if over else EditState.NONE

    def press(self, qx: float, qy: float) -> None:
        if self.state == EditState.DELETE:
            index = self._editable_hit(qx, qy)
            if index is not None:
                removed = self.curve.remove_point(index)
                logger.debug(f"Deleted point {removed}")
                self._notify()
            return

        index = self.hit_index(qx, qy)
        if index is not None and self.curve.is_endpoint(index):
            # First and last points are fixed
            return

        if self._on_deadzone_edge(qx, qy):
            self.dragging_deadzone = True
            return

        if index is None:
            self.state = EditState.CREATE
            index = self.curve.add_point(self.transform.to_curve(qx, qy))
            if index is None:
                self.state = EditState.NONE
                return
            self._notify()

        self.moving_index = index
        self.state = EditState.MOVE

    def drag(self, qx: float, qy: float) -> None:
        if self.dragging_deadzone:
            before = self.curve.deadzone.position
            self.curve.move_deadzone(self.transform.to_curve(qx, qy).x)
            if self.curve.deadzone.position != before:
                self._notify()
            return

        if self.state != EditState.MOVE or self.moving_index is None:
            return
        self.moving_index = self.curve.move_point(self.moving_index, self.transform.to_curve(qx, qy))
        self._notify()

    def release(self) -> None:
        self.dragging_deadzone = False
        self.moving_index = None
        if self.state != EditState.DELETE:
            self.state = EditState.NONE

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def toggle_delete_mode(self) -> None:
        self.state = EditState.NONE if self.state == EditState.DELETE else EditState.DELETE
        self.moving_index = None
        logger.debug(f"Delete mode {'on' if self.delete_mode else 'off'}")

    def reset(self) -> None:
        self.curve.reset()
        self.state = EditState.NONE
        self.moving_index = None
        self.dragging_deadzone = False
        self._notify()

    def key_press(self, key: EditKey) -> None:
        if key == EditKey.TOGGLE_DELETE:
            self.toggle_delete_mode()
        elif key == EditKey.RESET:
            self.reset()

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change()
