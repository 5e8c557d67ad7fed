"""Tests for the plot widget's data helpers (no window is created)."""

from __future__ import annotations

import pytest

pytest.importorskip("PySide6")
pytest.importorskip("pyqtgraph")

from throttlemap.model.curve import ThrottleCurve  # noqa: E402
from throttlemap.model.points import Point  # noqa: E402
from throttlemap.view.curve_widget import _xy  # noqa: E402


class TestPlotData:

    def test_empty_curve_gives_empty_arrays(self):
        x, y = _xy(())
        assert x.shape == (0,)
        assert y.shape == (0,)

    def test_curve_without_points_can_be_drawn(self):
        curve = ThrottleCurve(interpolation="Linear")
        curve.load([], "Linear")
        x, y = _xy(curve.interpolated_points())
        assert len(x) == len(y) == 0

    def test_points_are_split_into_columns(self):
        x, y = _xy([Point(0, 5), Point(10, 20)])
        assert x.tolist() == [0.0, 10.0]
        assert y.tolist() == [5.0, 20.0]
