from __future__ import annotations

import math
from dataclasses import dataclass

from .ieee754 import Classification, IEEEDecoded, decode_float

AXIS_MIN = 0.0
AXIS_MAX = 100.0
MIDPOINT = 50.0

# Left to right along the axis: -Inf, negative normal, negative subnormal,
# then the mirror image on the positive side.
ZONES: tuple[tuple[str, float, float], ...] = (
    ("-Inf", 0.0, 100.0 / 6),
    ("Normal", 100.0 / 6, 200.0 / 6),
    ("Subnormal", 200.0 / 6, 50.0),
    ("Subnormal", 50.0, 400.0 / 6),
    ("Normal", 400.0 / 6, 500.0 / 6),
    ("Inf", 500.0 / 6, 100.0),
)


@dataclass(frozen=True)
class PlotPosition:
    position: float
    classification: Classification


def _min_normal(decoded: IEEEDecoded) -> float:
    return math.ldexp(1.0, decoded.spec.min_exponent)


def axis_position(decoded: IEEEDecoded) -> float:
    """Unclamped axis coordinate for a decoded value.

    NaN and zero share the midpoint.
    """
    classification = decoded.classification
    if classification in {Classification.NAN, Classification.ZERO}:
        return MIDPOINT
    if classification is Classification.INF:
        return AXIS_MAX if decoded.sign == 0 else AXIS_MIN

    is_negative = math.copysign(1.0, decoded.value) < 0
    abs_value = abs(decoded.value)

    if classification is Classification.DENORMALIZED:
        ratio = abs_value / _min_normal(decoded)
        if is_negative:
            return 30.0 * ratio
        return 70.0 + 30.0 * ratio

    min_exp = decoded.spec.min_exponent
    max_exp = decoded.spec.max_exponent
    log_val = min(max(math.log2(abs_value), min_exp), max_exp)
    normalized = (log_val - min_exp) / (max_exp - min_exp) * 60.0 + 20.0
    if is_negative:
        return 40.0 - normalized
    return 60.0 + normalized


def map_position(decoded: IEEEDecoded) -> PlotPosition:
    position = min(max(axis_position(decoded), AXIS_MIN), AXIS_MAX)
    return PlotPosition(position=position, classification=decoded.classification)


def plot_position(raw: int, width: int) -> float:
    return map_position(decode_float(raw, width)).position
