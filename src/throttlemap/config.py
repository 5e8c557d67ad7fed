"""
Configuration & Constants
=========================
This module serves as the central registry for the fixed ranges and tuning
constants of the throttle map editor.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (1023, 32767, hit radii...) from
   being scattered throughout the model, controller and view layers.
2. Firmware contract: The input/output resolutions must match what the VCU
   firmware expects, so they are defined exactly once.

Exports:
    CurveRange: Value object holding the axis bounds of a curve.
    DEFAULT_RANGE: The canonical 10-bit input / 15-bit output range.
"""
from __future__ import annotations

from dataclasses import dataclass

# Pedal ADC resolution and torque request resolution
INPUT_RESOLUTION: int = 10
OUTPUT_RESOLUTION: int = 15

INPUT_MAX: int = (1 << INPUT_RESOLUTION) - 1
OUTPUT_MAX: int = (1 << OUTPUT_RESOLUTION) - 1

# Interpolation
DEFAULT_INTERPOLATION: str = "Spline"
DEFAULT_SPEED_RATIO: int = 100

# Interaction (presentation units unless stated otherwise)
HIT_RADIUS: int = 10
DEADZONE_EDGE_OFFSET: int = 2  # curve units

# Firmware export
EXPORT_ARRAY_NAME: str = "driver_profile"
EXPORT_ARRAY_TYPE: str = "uint16_t"
EXPORT_ROW_LENGTH: int = 8
EXPORT_HEX_DIGITS: int = 4


@dataclass(frozen=True)
class CurveRange:
    """Axis bounds of a curve: x in [0, input_max], y in [0, output_max]."""
    input_max: int = INPUT_MAX
    output_max: int = OUTPUT_MAX

    def __post_init__(self) -> None:
        if self.input_max <= 0 or self.output_max <= 0:
            raise ValueError(
                f"Curve range must be positive, got {self.input_max}x{self.output_max}"
            )

    @property
    def table_length(self) -> int:
        """Number of entries in an exported lookup table."""
        return self.input_max + 1


DEFAULT_RANGE = CurveRange()
