"""Shared pytest fixtures for throttlemap tests."""

from __future__ import annotations

from typing import List

import pytest

from throttlemap.config import CurveRange
from throttlemap.controller.edit_session import EditSession
from throttlemap.model.curve import ThrottleCurve
from throttlemap.model.transform import CoordinateTransform

# ============================================================================
# Model Fixtures
# ============================================================================


@pytest.fixture
def unit_range() -> CurveRange:
    """1000 x 1000 range, so curve units read like per-mille."""
    return CurveRange(input_max=1000, output_max=1000)


@pytest.fixture
def linear_curve(unit_range: CurveRange) -> ThrottleCurve:
    """Straight line (0, 0) - (1000, 1000) with linear interpolation."""
    return ThrottleCurve(curve_range=unit_range, interpolation="Linear")


# ============================================================================
# Controller Fixtures
# ============================================================================


@pytest.fixture
def changes() -> List[int]:
    """Collects on_change notifications."""
    return []


@pytest.fixture
def session(linear_curve: ThrottleCurve, unit_range: CurveRange, changes: List[int]) -> EditSession:
    """
    Edit session on a 1000 x 1000 pixel view.

    Presentation x equals curve x and presentation y equals 1000 - curve y.
    """
    return EditSession(
        linear_curve,
        CoordinateTransform(1000, 1000, unit_range),
        hit_radius=10,
        on_change=lambda: changes.append(1),
    )
