"""
Curve shaping and range remapping.

Every curve maps [0, 1] onto [0, 1] with f(0) = 0 and f(1) = 1.
"""

from typing import Callable, Dict, Tuple

import numpy as np

from handmap.core.mapping import GestureInput, MappingCurve, ParameterOutput
from handmap.utils.math_utils import clamp, lerp, smooth_step


def _ease_in_out(t: float) -> float:
    if t < 0.5:
        return 4 * t * t * t
    return 1 - (-2 * t + 2) ** 3 / 2


CURVES: Dict[MappingCurve, Callable[[float], float]] = {
    MappingCurve.LINEAR: lambda t: t,
    MappingCurve.EXPONENTIAL: lambda t: t * t,
    MappingCurve.LOGARITHMIC: lambda t: float(np.log1p(t * (np.e - 1)) / np.log(np.e)),
    MappingCurve.EASE_IN: lambda t: t * t * t,
    MappingCurve.EASE_OUT: lambda t: 1 - (1 - t) ** 3,
    MappingCurve.EASE_IN_OUT: _ease_in_out,
    MappingCurve.SMOOTH_STEP: lambda t: smooth_step(0.0, 1.0, t),
}

_missing = [c.value for c in MappingCurve if c not in CURVES]
if _missing:
    raise RuntimeError(f"No curve function registered for: {_missing}")


def normalize(value: float, input_range: Tuple[float, float]) -> float:
    """
    Normalize a value into [0, 1] without extrapolation.

    A zero-width input range acts as a step at its single point.
    """
    in_min, in_max = input_range
    span = in_max - in_min
    if span == 0:
        return 1.0 if value > in_min else 0.0
    return clamp((value - in_min) / span, 0.0, 1.0)


def apply_curve(t: float, curve: MappingCurve) -> float:
    """Apply a mapping curve to a normalized value."""
    return CURVES[MappingCurve(curve)](t)


def apply_mapping(
    value: float, gesture_input: GestureInput, output: ParameterOutput
) -> float:
    """
    Map a smoothed gesture value to the output range.

    Args:
        value: Smoothed gesture value
        gesture_input: Input range and curve
        output: Output range and invert flag

    Returns:
        Value within the output range
    """
    curved = apply_curve(normalize(value, gesture_input.input_range), gesture_input.curve)

    out_min, out_max = output.output_range
    output_value = lerp(out_min, out_max, curved)

    if output.invert:
        output_value = out_max - (output_value - out_min)

    return float(output_value)
