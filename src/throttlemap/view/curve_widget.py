"""
Curve Plot Widget
=================
Interactive pyqtgraph plot of the throttle curve.

Why is this file needed?
------------------------
It is the only place that knows about pixels. Mouse and key events are
converted to view-box coordinates and forwarded to the EditSession; the
plot items are redrawn whenever the store reports a change.
"""
from __future__ import annotations

import logging
from typing import Sequence, Tuple

import numpy as np
import pyqtgraph as pg
from PySide6.QtCore import Qt
from PySide6.QtGui import QKeyEvent, QMouseEvent

from throttlemap.app.state import CurveStore
from throttlemap.controller.edit_session import CursorHint, EditKey
from throttlemap.model.curve import ThrottleCurve
from throttlemap.model.points import Point

logger = logging.getLogger(__name__)

_CURSORS = {
    CursorHint.CROSSHAIR: Qt.CursorShape.CrossCursor,
    CursorHint.DRAG: Qt.CursorShape.OpenHandCursor,
    CursorHint.RESIZE: Qt.CursorShape.SizeHorCursor,
    CursorHint.DELETE: Qt.CursorShape.ForbiddenCursor,
}

_KEYS = {
    Qt.Key.Key_Backspace: EditKey.TOGGLE_DELETE,
    Qt.Key.Key_Delete: EditKey.TOGGLE_DELETE,
    Qt.Key.Key_Escape: EditKey.RESET,
}


def _xy(points: Sequence[Point]) -> Tuple[np.ndarray, np.ndarray]:
    """Split points into x and y arrays; an empty curve gives two empty arrays."""
    if len(points) == 0:
        return np.empty(0), np.empty(0)
    xy = np.array([(p.x, p.y) for p in points], dtype=np.float64)
    return xy[:, 0], xy[:, 1]


class CurvePlotWidget(pg.PlotWidget):
    def __init__(self, store: CurveStore, parent=None) -> None:
        super().__init__(parent)
        self.store = store
        r = store.curve.range

        self.setBackground('w')
        self.showGrid(x=True, y=True)
        self.setLabel('bottom', 'Input', color='black')
        self.setLabel('left', 'Output', color='black')
        self.getAxis('bottom').setPen('k')
        self.getAxis('left').setPen('k')
        self.setMouseEnabled(x=False, y=False)
        self.hideButtons()
        self.setMenuEnabled(False)
        self.setRange(xRange=(0, r.input_max), yRange=(0, r.output_max), padding=0)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

        self.deadzone_region = pg.LinearRegionItem(
            values=(0, 0), movable=False, brush=pg.mkBrush(128, 128, 128, 60)
        )
        self.addItem(self.deadzone_region)
        self.deadzone_label = pg.TextItem(color='k', anchor=(0, 1))
        self.addItem(self.deadzone_label)

        self.scaled_item = self.plot(pen=pg.mkPen((200, 0, 0), width=1, style=Qt.PenStyle.DashLine))
        self.curve_item = self.plot(pen=pg.mkPen('b', width=2))
        self.points_item = pg.ScatterPlotItem(size=10, pen=pg.mkPen('k'), brush=pg.mkBrush('w'))
        self.addItem(self.points_item)

        self.getViewBox().sigResized.connect(self._on_resized)
        store.curve_changed.connect(self.redraw)
        store.delete_mode_changed.connect(lambda *_: self._update_cursor())

        self.redraw(store.curve)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def redraw(self, curve: ThrottleCurve) -> None:
        controls = curve.points.to_array()
        self.points_item.setData(pos=controls)

        if curve.interpolator is None:
            self.curve_item.setData([], [])
            self.scaled_item.setData([], [])
        else:
            self.curve_item.setData(*_xy(curve.interpolated_points()))
            if curve.scale_factor != 1.0:
                self.scaled_item.setData(*_xy(curve.scaled_points()))
            else:
                self.scaled_item.setData([], [])

        dz = curve.deadzone.position
        self.deadzone_region.setRegion((0, dz))
        self.deadzone_label.setText(curve.deadzone.label())
        self.deadzone_label.setPos(dz, 0)

    def _update_cursor(self) -> None:
        self.setCursor(_CURSORS[self.store.session.cursor])

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def _on_resized(self, *_) -> None:
        rect = self.getViewBox().sceneBoundingRect()
        self.store.resize_view(rect.width(), rect.height())

    def _to_presentation(self, event: QMouseEvent) -> tuple[float, float]:
        scene_pos = self.mapToScene(event.position().toPoint())
        rect = self.getViewBox().sceneBoundingRect()
        return scene_pos.x() - rect.left(), scene_pos.y() - rect.top()

    def mousePressEvent(self, event: QMouseEvent) -> None:
        if event.button() != Qt.MouseButton.LeftButton:
            return
        self.store.session.press(*self._to_presentation(event))
        self._update_cursor()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        qx, qy = self._to_presentation(event)
        if event.buttons() & Qt.MouseButton.LeftButton:
            self.store.session.drag(qx, qy)
        else:
            self.store.session.hover(qx, qy)
        self._update_cursor()

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        if event.button() != Qt.MouseButton.LeftButton:
            return
        self.store.session.release()
        self._update_cursor()

    def keyPressEvent(self, event: QKeyEvent) -> None:
        key = _KEYS.get(event.key())
        if key is None:
            super().keyPressEvent(event)
            return
        self.store.key_press(key)
        self._update_cursor()
