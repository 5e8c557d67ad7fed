"""Tests for the firmware lookup table exporter."""

from __future__ import annotations

import numpy as np
import pytest

from throttlemap.model.curve import ThrottleCurve
from throttlemap.model.export import TableExporter
from throttlemap.model.interpolation import InterpolatorNotSelectedError


@pytest.fixture
def exporter() -> TableExporter:
    return TableExporter()


class TestSampling:
    """The table covers every input value exactly once."""

    def test_straight_line_table(self, exporter):
        result = exporter.export(ThrottleCurve(interpolation="Linear"))
        table = np.array(result.table)

        assert len(table) == 1024
        assert table[0] == 0
        assert table[-1] == 32767
        assert np.all(np.diff(table) >= 0)

    def test_export_computes_on_demand(self, exporter):
        curve = ThrottleCurve(interpolation="Linear")
        assert not curve.interpolator.valid
        exporter.export(curve)
        assert curve.interpolator.valid

    def test_zero_fill_before_first_point(self, exporter, linear_curve):
        linear_curve.load([(100, 500), (1000, 1000)], "Linear")
        table = exporter.sample_table(linear_curve)

        assert len(table) == 1001
        assert np.all(table[:100] == 0)
        assert table[100] == 500

    def test_zero_fill_inside_deadzone(self, exporter, linear_curve):
        linear_curve.load([(0, 0), (500, 500), (1000, 1000)], "Linear")
        linear_curve.move_deadzone(50)
        table = exporter.sample_table(linear_curve)

        assert np.all(table[:50] == 0)
        assert table[60] == 60

    def test_last_value_is_held(self, exporter, linear_curve):
        linear_curve.load([(0, 0), (500, 800)], "Linear")
        table = exporter.sample_table(linear_curve)
        assert table[600] == 800
        assert table[-1] == 800

    def test_no_interpolator_raises(self, exporter):
        curve = ThrottleCurve()
        curve.load([(0, 0), (1023, 32767)], "Nope")
        with pytest.raises(InterpolatorNotSelectedError):
            exporter.export(curve)

    def test_warnings_are_reported(self, exporter):
        curve = ThrottleCurve()
        curve.load([(0, 0), (1023, 1000)], "Linear")
        result = exporter.export(curve)
        assert any("full output" in w for w in result.warnings)


class TestControlPointsAreExact:
    """Short steep segments are sampled off the unrounded curve."""

    POINTS = [(0, 0), (500, 0), (510, 30000), (1023, 32767)]

    @pytest.mark.parametrize("method", ["Linear", "Cosine", "Spline"])
    def test_table_hits_every_control_point(self, exporter, method):
        curve = ThrottleCurve()
        curve.load(self.POINTS, method)
        table = exporter.sample_table(curve)

        for x, y in self.POINTS:
            assert table[x] == y

    def test_midpoint_of_steep_segment(self, exporter):
        curve = ThrottleCurve()
        curve.load(self.POINTS, "Linear")
        table = exporter.sample_table(curve)

        assert table[505] == 15000
        assert np.all(np.diff(table[500:511]) == 3000)


class TestFormatting:

    def test_rows_of_eight(self, exporter):
        code = exporter.format_code(list(range(10)))
        assert code == (
            "static const uint16_t driver_profile[10] = {\n"
            "    0x0000, 0x0001, 0x0002, 0x0003, 0x0004, 0x0005, 0x0006, 0x0007,\n"
            "    0x0008, 0x0009\n"
            "};\n"
        )

    def test_full_table_layout(self, exporter):
        code = exporter.export(ThrottleCurve()).code
        lines = code.splitlines()

        assert lines[0] == "static const uint16_t driver_profile[1024] = {"
        assert lines[-1] == "};"
        assert sum(1 for line in lines if line.startswith("    0x")) == 128
        assert lines[-2].endswith("0x7fff")

    def test_custom_array_name(self):
        code = TableExporter(array_name="pedal_map").format_code([1])
        assert code.startswith("static const uint16_t pedal_map[1] = {")

    def test_wide_values_are_not_truncated(self, exporter):
        assert "0x10000" in exporter.format_code([0x10000])

    def test_rejects_empty_rows(self):
        with pytest.raises(ValueError):
            TableExporter(row_length=0)
