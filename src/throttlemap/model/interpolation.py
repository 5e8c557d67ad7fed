"""
Interpolation
=============
Turns a sparse set of control points into a densely resampled curve.

Why is this file needed?
------------------------
1. Algorithms: Linear, cosine-eased and natural cubic spline resampling over
   a shared sample grid (`speed_ratio` samples per segment plus the final
   anchor).
2. Caching: `Interpolator` keeps the last output and a validity flag, so a
   redraw without an edit never re-runs the algorithm.
3. Fail-closed selection: `make_interpolator` returns None for unknown
   identifiers instead of silently picking a default.
"""
from __future__ import annotations

import logging
from enum import StrEnum
from typing import Callable, Dict, List, Optional, Sequence, Tuple, TYPE_CHECKING

import numpy as np
from scipy.interpolate import CubicSpline

from throttlemap.config import DEFAULT_SPEED_RATIO
from throttlemap.model.points import Point

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


class InterpolatorNotSelectedError(RuntimeError):
    """Raised when interpolated output is requested but no method is selected."""


class InterpolationMethod(StrEnum):
    LINEAR = "Linear"
    COSINE = "Cosine"
    SPLINE = "Spline"

    @classmethod
    def from_identifier(cls, identifier: str) -> Optional[InterpolationMethod]:
        try:
            return cls(identifier)
        except ValueError:
            return None


def _round(values: npt.NDArray[np.float64]) -> npt.NDArray[np.int64]:
    # Half-up, so a cosine midpoint of exactly .5 does not flip with float noise
    return np.floor(values + 0.5 + 1e-9).astype(np.int64)


def _sample_grid(xs: npt.NDArray[np.float64], speed_ratio: int) -> Tuple[npt.NDArray, npt.NDArray]:
    """
    Returns:
        mu: (speed_ratio,) array of j / speed_ratio.
        x: flattened x positions, `speed_ratio` per segment, linear in mu.
    """
    mu = np.arange(speed_ratio, dtype=np.float64) / speed_ratio
    x1 = xs[:-1, np.newaxis]
    dx = np.diff(xs)[:, np.newaxis]
    return mu, (x1 + mu * dx).ravel()


def _linear(xs: npt.NDArray, ys: npt.NDArray, speed_ratio: int) -> Tuple[npt.NDArray, npt.NDArray]:
    mu, x = _sample_grid(xs, speed_ratio)
    y = (ys[:-1, np.newaxis] + mu * np.diff(ys)[:, np.newaxis]).ravel()
    return x, y


def _cosine(xs: npt.NDArray, ys: npt.NDArray, speed_ratio: int) -> Tuple[npt.NDArray, npt.NDArray]:
    mu, x = _sample_grid(xs, speed_ratio)
    eased = (1.0 - np.cos(mu * np.pi)) / 2.0
    y = (ys[:-1, np.newaxis] * (1.0 - eased) + ys[1:, np.newaxis] * eased).ravel()
    return x, y


def _spline(xs: npt.NDArray, ys: npt.NDArray, speed_ratio: int) -> Tuple[npt.NDArray, npt.NDArray]:
    if len(xs) <= 2:
        # A C2 fit through two points is underdetermined
        return _linear(xs, ys, speed_ratio)

    knots = xs.copy()
    for i in range(1, len(knots)):
        if knots[i] <= knots[i - 1]:
            logger.warning(
                f"Spline knot x={knots[i]:g} not above x={knots[i - 1]:g}, "
                f"shifted to {knots[i - 1] + 1:g}."
            )
            knots[i] = knots[i - 1] + 1

    spline = CubicSpline(knots, ys, bc_type='natural')
    _, x = _sample_grid(xs, speed_ratio)
    return x, spline(x)


_KERNELS: Dict[InterpolationMethod, Callable[..., Tuple[npt.NDArray, npt.NDArray]]] = {
    InterpolationMethod.LINEAR: _linear,
    InterpolationMethod.COSINE: _cosine,
    InterpolationMethod.SPLINE: _spline,
}


def resample(
    method: InterpolationMethod,
    points: Sequence[Point],
    speed_ratio: int = DEFAULT_SPEED_RATIO,
) -> Tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Unrounded sample grid of the interpolated curve.

    Returns:
        x, y: `speed_ratio` samples per segment followed by the last control
        point, i.e. `(len(points) - 1) * speed_ratio + 1` values each. Fewer
        than two control points are returned as they are. x is strictly
        increasing whenever the control points are.
    """
    if speed_ratio <= 0:
        logger.warning(f"Speed ratio {speed_ratio} is not positive, using 1.")
        speed_ratio = 1

    xs = np.array([p.x for p in points], dtype=np.float64)
    ys = np.array([p.y for p in points], dtype=np.float64)
    if len(xs) < 2:
        return xs, ys

    x, y = _KERNELS[method](xs, ys, speed_ratio)
    return np.append(x, xs[-1]), np.append(y, ys[-1])


def _to_points(x: npt.NDArray[np.float64], y: npt.NDArray[np.float64]) -> List[Point]:
    return [Point(int(a), int(b)) for a, b in zip(_round(x), _round(y))]


def interpolate(
    method: InterpolationMethod,
    points: Sequence[Point],
    speed_ratio: int = DEFAULT_SPEED_RATIO,
) -> List[Point]:
    """Resample `points` and round the samples to integer Points for display."""
    return _to_points(*resample(method, points, speed_ratio))


class Interpolator:
    """
    One selected interpolation method plus its cached output.

    Any mutation of the point set must call `invalidate()`; `process()` then
    recomputes on its next call. While valid, `process()` returns the very
    same tuple it returned before.
    """

    def __init__(self, method: InterpolationMethod) -> None:
        self.method = InterpolationMethod(method)
        self._output: Tuple[Point, ...] = ()
        self._samples: Tuple[npt.NDArray, npt.NDArray] = (np.empty(0), np.empty(0))
        self._speed_ratio: Optional[int] = None
        self._valid = False
        self.recompute_count = 0

    @property
    def identifier(self) -> str:
        return str(self.method)

    @property
    def valid(self) -> bool:
        return self._valid

    @property
    def output(self) -> Tuple[Point, ...]:
        """Last computed curve (empty before the first `process`)."""
        return self._output

    def invalidate(self) -> None:
        self._valid = False

    def process(
        self, points: Sequence[Point], speed_ratio: int = DEFAULT_SPEED_RATIO
    ) -> Tuple[Point, ...]:
        if self._valid and speed_ratio == self._speed_ratio:
            return self._output

        self._samples = resample(self.method, points, speed_ratio)
        self._output = tuple(_to_points(*self._samples))
        self._speed_ratio = speed_ratio
        self._valid = True
        self.recompute_count += 1
        logger.debug(
            f"{self.method} recomputed: {len(points)} points -> {len(self._output)} samples"
        )
        return self._output

    def sample(
        self,
        points: Sequence[Point],
        inputs: npt.ArrayLike,
        speed_ratio: int = DEFAULT_SPEED_RATIO,
    ) -> npt.NDArray[np.float64]:
        """
        Evaluate the interpolated curve at arbitrary inputs.

        Reads the unrounded sample grid, not the integer Points returned by
        `process()`, so control points are hit exactly even on segments
        shorter than `speed_ratio` input units. Inputs outside the curve
        hold the first/last sample value.
        """
        self.process(points, speed_ratio)
        xs, ys = self._samples
        if len(xs) == 0:
            return np.zeros(np.shape(inputs), dtype=np.float64)
        return np.interp(np.asarray(inputs, dtype=np.float64), xs, ys)

    def __repr__(self) -> str:
        return f"Interpolator({self.identifier!r}, valid={self._valid})"


def make_interpolator(identifier: str) -> Optional[Interpolator]:
    """Create an interpolator, or None if `identifier` is unknown."""
    method = InterpolationMethod.from_identifier(identifier)
    if method is None:
        logger.error(f"Unknown interpolation method: {identifier!r}")
        return None
    return Interpolator(method)


def all_identifiers() -> List[str]:
    return [str(m) for m in InterpolationMethod]
