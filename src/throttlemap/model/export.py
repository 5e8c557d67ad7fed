"""
Firmware Table Export
=====================
Samples the interpolated curve at every integer input and renders it as a C
array literal for the motor controller firmware.

Why is this file needed?
------------------------
The firmware looks up the torque request by raw pedal reading, so it needs
one output per input value (0..input_max), not the sparse control points.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

import numpy as np

from throttlemap.config import (
    DEFAULT_SPEED_RATIO,
    EXPORT_ARRAY_NAME,
    EXPORT_ARRAY_TYPE,
    EXPORT_HEX_DIGITS,
    EXPORT_ROW_LENGTH,
)
from throttlemap.model.curve import ThrottleCurve

logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    table: List[int]
    code: str
    warnings: List[str] = field(default_factory=list)


class TableExporter:
    def __init__(
        self,
        array_name: str = EXPORT_ARRAY_NAME,
        array_type: str = EXPORT_ARRAY_TYPE,
        row_length: int = EXPORT_ROW_LENGTH,
        hex_digits: int = EXPORT_HEX_DIGITS,
        speed_ratio: int = DEFAULT_SPEED_RATIO,
    ) -> None:
        if row_length <= 0:
            raise ValueError(f"Row length must be positive, got {row_length}")
        self.array_name = array_name
        self.array_type = array_type
        self.row_length = row_length
        self.hex_digits = hex_digits
        self.speed_ratio = speed_ratio

    def sample_table(self, curve: ThrottleCurve) -> np.ndarray:
        """
        One output per input in 0..input_max.

        Inputs below the first control point or inside the deadzone are
        zero. Inputs past the last control point hold its output. Every
        value is clipped to [0, output_max].
        """
        return np.clip(self._rounded_table(curve), 0, curve.range.output_max)

    def _rounded_table(self, curve: ThrottleCurve) -> np.ndarray:
        inputs = np.arange(curve.range.table_length)
        values = curve.sample(inputs, self.speed_ratio)

        first = curve.points.first
        dead_below = max(first.x if first else 0, curve.deadzone.position)
        values[inputs < dead_below] = 0

        return np.floor(values + 0.5).astype(np.int64)

    def format_code(self, table: List[int]) -> str:
        width = max(self.hex_digits, len(f"{max(table, default=0):x}"))
        rows = []
        for start in range(0, len(table), self.row_length):
            row = table[start:start + self.row_length]
            rows.append("    " + ", ".join(f"0x{v:0{width}x}" for v in row))
        body = ",\n".join(rows)
        return (
            f"static const {self.array_type} {self.array_name}[{len(table)}] = {{\n"
            f"{body}\n"
            f"}};\n"
        )

    def export(self, curve: ThrottleCurve) -> ExportResult:
        raw = self._rounded_table(curve)
        table = np.clip(raw, 0, curve.range.output_max)

        warnings = curve.validate(self.speed_ratio)
        clipped = int(np.count_nonzero((raw < 0) | (raw > curve.range.output_max)))
        if clipped:
            warnings.append(f"{clipped} table entries were clipped to [0, {curve.range.output_max}].")

        values = [int(v) for v in table]
        code = self.format_code(values)
        logger.info(
            f"Exported {len(values)} entries as {self.array_name} "
            f"({curve.method_identifier}, {len(warnings)} warnings)"
        )
        return ExportResult(table=values, code=code, warnings=warnings)
