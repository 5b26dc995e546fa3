from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

import numpy as np

from .bits import mask_for, validate_width


class FloatFormat(Enum):
    HALF = "Half"
    SINGLE = "Single"
    DOUBLE = "Double"


class Classification(Enum):
    ZERO = "Zero"
    DENORMALIZED = "Denormalized"
    NORMALIZED = "Normalized"
    INF = "Inf"
    NAN = "NaN"


@dataclass(frozen=True)
class FloatTypeSpec:
    format: FloatFormat
    bits: int
    exponent_bits: int
    mantissa_bits: int
    numpy_dtype: Any
    uint_dtype: Any

    @property
    def bias(self) -> int:
        return (1 << (self.exponent_bits - 1)) - 1

    @property
    def min_exponent(self) -> int:
        return 1 - self.bias

    @property
    def max_exponent(self) -> int:
        return self.bias


FLOAT_TYPE_SPECS: dict[FloatFormat, FloatTypeSpec] = {
    FloatFormat.HALF: FloatTypeSpec(
        format=FloatFormat.HALF,
        bits=16,
        exponent_bits=5,
        mantissa_bits=10,
        numpy_dtype=np.float16,
        uint_dtype=np.uint16,
    ),
    FloatFormat.SINGLE: FloatTypeSpec(
        format=FloatFormat.SINGLE,
        bits=32,
        exponent_bits=8,
        mantissa_bits=23,
        numpy_dtype=np.float32,
        uint_dtype=np.uint32,
    ),
    FloatFormat.DOUBLE: FloatTypeSpec(
        format=FloatFormat.DOUBLE,
        bits=64,
        exponent_bits=11,
        mantissa_bits=52,
        numpy_dtype=np.float64,
        uint_dtype=np.uint64,
    ),
}


def float_spec_for_width(width: int) -> FloatTypeSpec:
    # 8-bit patterns have no IEEE format of their own; they are read as double.
    validate_width(width)
    if width == 16:
        return FLOAT_TYPE_SPECS[FloatFormat.HALF]
    if width == 32:
        return FLOAT_TYPE_SPECS[FloatFormat.SINGLE]
    return FLOAT_TYPE_SPECS[FloatFormat.DOUBLE]


@dataclass(frozen=True)
class IEEEDecoded:
    sign: int
    exponent_bits: int
    exponent: int
    mantissa: int
    value: float
    classification: Classification
    format: FloatFormat

    @property
    def spec(self) -> FloatTypeSpec:
        return FLOAT_TYPE_SPECS[self.format]

    @property
    def exponent_bits_count(self) -> int:
        return self.spec.exponent_bits

    @property
    def mantissa_bits(self) -> int:
        return self.spec.mantissa_bits

    @property
    def label(self) -> str:
        if self.classification is Classification.INF:
            return "-Inf" if self.sign else "+Inf"
        return self.classification.value


def _native_value(bits: int, spec: FloatTypeSpec) -> float:
    np_raw = np.array([bits], dtype=spec.uint_dtype)
    return float(np_raw.view(spec.numpy_dtype)[0])


def _half_normal_value(sign: int, exponent_bits: int, mantissa: int) -> float:
    sign_mult = -1.0 if sign else 1.0
    return sign_mult * (1.0 + mantissa / 1024.0) * 2.0 ** (exponent_bits - 15)


def _denormal_value(sign: int, mantissa: int, spec: FloatTypeSpec) -> float:
    magnitude = math.ldexp(float(mantissa), 1 - spec.bias - spec.mantissa_bits)
    return -magnitude if sign else magnitude


def decode_float(raw: int, width: int) -> IEEEDecoded:
    """Decode the low ``width`` bits of ``raw`` as an IEEE 754 value.

    Every bit pattern has exactly one classification, so this never fails for
    a supported width.
    """
    spec = float_spec_for_width(width)
    bits = raw & mask_for(width)

    sign = (bits >> (spec.bits - 1)) & 1
    exponent_all_ones = (1 << spec.exponent_bits) - 1
    exponent_bits = (bits >> spec.mantissa_bits) & exponent_all_ones
    mantissa = bits & ((1 << spec.mantissa_bits) - 1)

    if exponent_bits == exponent_all_ones and mantissa == 0:
        classification = Classification.INF
        value = -math.inf if sign else math.inf
    elif exponent_bits == exponent_all_ones:
        classification = Classification.NAN
        value = math.nan
    elif exponent_bits == 0 and mantissa == 0:
        classification = Classification.ZERO
        value = 0.0
    elif exponent_bits == 0:
        classification = Classification.DENORMALIZED
        value = _denormal_value(sign, mantissa, spec)
    elif spec.format is FloatFormat.HALF:
        classification = Classification.NORMALIZED
        value = _half_normal_value(sign, exponent_bits, mantissa)
    else:
        classification = Classification.NORMALIZED
        value = _native_value(bits, spec)

    return IEEEDecoded(
        sign=sign,
        exponent_bits=exponent_bits,
        exponent=exponent_bits - spec.bias,
        mantissa=mantissa,
        value=value,
        classification=classification,
        format=spec.format,
    )


def format_value(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+inf" if value > 0 else "-inf"
    return format(value, "e")


def format_reconstruction(decoded: IEEEDecoded) -> str:
    spec = decoded.spec
    sign = decoded.sign
    classification = decoded.classification

    if classification is Classification.NAN:
        return "Exponent all 1s with non-zero mantissa -> NaN"
    if classification is Classification.INF:
        return "Exponent all 1s with zero mantissa -> infinity"
    if classification is Classification.ZERO:
        return f"(-1)^{sign} * 0 -> zero"
    if classification is Classification.DENORMALIZED:
        return (
            f"(-1)^{sign} * ({decoded.mantissa} / 2^{spec.mantissa_bits}) "
            f"* 2^(1-{spec.bias})"
        )
    return (
        f"(-1)^{sign} * (1 + {decoded.mantissa}/2^{spec.mantissa_bits}) "
        f"* 2^({decoded.exponent_bits}-{spec.bias})"
    )


def describe_float(decoded: IEEEDecoded) -> dict[str, str]:
    exponent_width = decoded.exponent_bits_count
    mantissa_digits = (decoded.mantissa_bits + 3) // 4
    exponent_text = format(decoded.exponent_bits, f"0{exponent_width}b")
    mantissa_text = format(decoded.mantissa, f"0{decoded.mantissa_bits}b")

    return {
        "format": decoded.format.value,
        "sign": str(decoded.sign),
        "exponent": f"0b{exponent_text} ({decoded.exponent})",
        "mantissa": f"0x{decoded.mantissa:0{mantissa_digits}x}",
        "type": decoded.label,
        "value": format_value(decoded.value),
        "fields": f"{decoded.sign} | {exponent_text} | {mantissa_text}",
        "formula": format_reconstruction(decoded),
    }
