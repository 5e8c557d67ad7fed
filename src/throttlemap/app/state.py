from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QObject, Signal

from throttlemap.config import CurveRange, DEFAULT_RANGE
from throttlemap.controller.edit_session import EditKey, EditSession
from throttlemap.model.curve import ThrottleCurve
from throttlemap.model.export import ExportResult, TableExporter
from throttlemap.model.interpolation import InterpolatorNotSelectedError
from throttlemap.model.transform import CoordinateTransform

logger = logging.getLogger(__name__)


class CurveStore(QObject):
    """Central state store with signals for plot/panel sync."""
    curve_changed = Signal(object)
    interpolation_changed = Signal(str)
    deadzone_changed = Signal(int)
    delete_mode_changed = Signal(bool)
    export_failed = Signal(str)

    def __init__(self, curve_range: CurveRange = DEFAULT_RANGE, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.curve = ThrottleCurve(curve_range)
        self.exporter = TableExporter()
        # Real size is set by the plot widget once it is laid out
        self.session = EditSession(
            self.curve,
            CoordinateTransform(curve_range.input_max, curve_range.output_max, curve_range),
            on_change=self._on_session_change,
        )
        self._last_deadzone = self.curve.deadzone.position

    def resize_view(self, width: float, height: float) -> None:
        if width > 0 and height > 0:
            self.session.transform.resize(width, height)

    def set_interpolation_method(self, identifier: str) -> None:
        if self.curve.set_interpolation_method(identifier):
            self.interpolation_changed.emit(identifier)
            self.curve_changed.emit(self.curve)

    def set_scale_factor(self, factor: float) -> None:
        self.curve.scale_factor = factor
        self.curve_changed.emit(self.curve)

    def load(self, points, identifier: str) -> None:
        self.curve.load(points, identifier)
        self._emit_all()

    def reset(self) -> None:
        self.session.reset()

    def key_press(self, key: EditKey) -> None:
        was_deleting = self.session.delete_mode
        self.session.key_press(key)
        if self.session.delete_mode != was_deleting:
            self.delete_mode_changed.emit(self.session.delete_mode)

    def export(self) -> Optional[ExportResult]:
        """Export the current curve, or emit `export_failed` and return None."""
        try:
            return self.exporter.export(self.curve)
        except InterpolatorNotSelectedError as e:
            logger.error(f"Export failed: {e}")
            self.export_failed.emit(str(e))
            return None

    def _on_session_change(self) -> None:
        self.curve_changed.emit(self.curve)
        if self.curve.deadzone.position != self._last_deadzone:
            self._last_deadzone = self.curve.deadzone.position
            self.deadzone_changed.emit(self._last_deadzone)

    def _emit_all(self) -> None:
        self._last_deadzone = self.curve.deadzone.position
        self.curve_changed.emit(self.curve)
        self.interpolation_changed.emit(self.curve.method_identifier or "")
        self.deadzone_changed.emit(self._last_deadzone)
