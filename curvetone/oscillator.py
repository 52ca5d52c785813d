"""Periodic waveform generators.

Two closed variants share one contract:

- ``sample(index)`` returns the signed amplitude at a sample index.
- ``pcm_sample(index)`` clamps that value to [-1.0, 1.0], scales it by
  ``PCM_BIT_RANGE`` and truncates toward zero.
- ``pcm_samples(count)`` does the same for indices ``0..count`` at once.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeAlias

import numpy as np
from numpy.typing import NDArray

from .errors import ParameterRangeError, ShapeCoefficientError

FloatArray: TypeAlias = NDArray[np.float64]
PcmArray: TypeAlias = NDArray[np.int16]

PCM_BIT_RANGE = 2 ** (16 - 1) - 1
CONTROL_POINT_COUNT = 4


def check_oscillator_params(frequency: float, amplitude: float, sample_rate: int) -> None:
    if frequency <= 0.0:
        raise ParameterRangeError(f"Frequency must be greater than 0, got {frequency}")
    if not math.isfinite(frequency):
        raise ParameterRangeError(f"Frequency must be finite, got {frequency}")
    if not 0.0 <= amplitude <= 1.0:
        raise ParameterRangeError(f"Amplitude must be between 0.0 and 1.0, got {amplitude}")
    if sample_rate <= 0:
        raise ParameterRangeError(f"Sample rate must be greater than 0, got {sample_rate}")


def check_control_points(control_points: Sequence[float]) -> tuple[float, float, float, float]:
    """Validate curve control points and return them as a 4-tuple."""

    if len(control_points) != CONTROL_POINT_COUNT:
        raise ShapeCoefficientError(
            f"Curve oscillator requires exactly {CONTROL_POINT_COUNT} control points, "
            f"got {len(control_points)}"
        )
    for index, point in enumerate(control_points):
        if point < -1.0 or point > 1.0:
            raise ShapeCoefficientError(
                f"Control point {index} ({point}) must be between -1.0 and 1.0"
            )
    p0, p1, p2, p3 = (float(point) for point in control_points)
    return p0, p1, p2, p3


def _indices(count: int) -> FloatArray:
    return np.arange(count, dtype=np.float64)


def _quantize(values: FloatArray) -> PcmArray:
    # astype truncates toward zero; values are clamped first so int16 never overflows.
    scaled = np.clip(values, -1.0, 1.0) * float(PCM_BIT_RANGE)
    return scaled.astype(np.int16)


@dataclass(frozen=True, slots=True)
class SineOscillator:
    frequency: float
    amplitude: float
    sample_rate: int

    def __post_init__(self) -> None:
        check_oscillator_params(self.frequency, self.amplitude, self.sample_rate)

    def _values(self, indices: FloatArray) -> FloatArray:
        x = (2.0 * math.pi * self.frequency * indices) / float(self.sample_rate)
        return self.amplitude * np.sin(x)

    def sample(self, index: int) -> float:
        return float(self._values(np.array([index], dtype=np.float64))[0])

    def pcm_sample(self, index: int) -> int:
        return int(_quantize(self._values(np.array([index], dtype=np.float64)))[0])

    def pcm_samples(self, count: int) -> PcmArray:
        return _quantize(self._values(_indices(count)))


@dataclass(frozen=True, slots=True)
class CurveOscillator:
    """Wave whose single cycle follows a cubic Bezier blend of four ordinates.

    The cycle phase is used directly as the Bezier parameter ``t``; the curve
    is never solved for x, so the control points only shape the amplitude.
    """

    frequency: float
    amplitude: float
    sample_rate: int
    control_points: Sequence[float]

    def __post_init__(self) -> None:
        points = check_control_points(self.control_points)
        check_oscillator_params(self.frequency, self.amplitude, self.sample_rate)
        object.__setattr__(self, "control_points", points)

    def phase(self, indices: FloatArray) -> FloatArray:
        fractional, _ = np.modf((indices * self.frequency) / float(self.sample_rate))
        return fractional

    def _values(self, indices: FloatArray) -> FloatArray:
        p0, p1, p2, p3 = self.control_points
        t = self.phase(indices)
        one_minus_t = 1.0 - t
        blend = (
            one_minus_t**3 * p0
            + 3.0 * one_minus_t**2 * t * p1
            + 3.0 * one_minus_t * t**2 * p2
            + t**3 * p3
        )
        return blend * self.amplitude

    def sample(self, index: int) -> float:
        return float(self._values(np.array([index], dtype=np.float64))[0])

    def pcm_sample(self, index: int) -> int:
        return int(_quantize(self._values(np.array([index], dtype=np.float64)))[0])

    def pcm_samples(self, count: int) -> PcmArray:
        return _quantize(self._values(_indices(count)))


Oscillator: TypeAlias = SineOscillator | CurveOscillator
