import math

import numpy as np
import pytest

from bitview.bits import InvalidWidth
from bitview.ieee754 import (
    FLOAT_TYPE_SPECS,
    Classification,
    FloatFormat,
    decode_float,
    describe_float,
    float_spec_for_width,
    format_reconstruction,
)


def _numpy_classification(value: float, tiny: float) -> Classification:
    if math.isnan(value):
        return Classification.NAN
    if math.isinf(value):
        return Classification.INF
    if value == 0.0:
        return Classification.ZERO
    if abs(value) < tiny:
        return Classification.DENORMALIZED
    return Classification.NORMALIZED


def test_double_positive_infinity_example() -> None:
    decoded = decode_float(0x7FF0000000000000, 64)
    assert decoded.classification is Classification.INF
    assert decoded.sign == 0
    assert decoded.value == math.inf
    assert decoded.label == "+Inf"


def test_double_negative_infinity() -> None:
    decoded = decode_float(0xFFF0000000000000, 64)
    assert decoded.classification is Classification.INF
    assert decoded.sign == 1
    assert decoded.value == -math.inf
    assert decoded.label == "-Inf"


def test_half_one_example() -> None:
    decoded = decode_float(0x3C00, 16)
    assert decoded.value == 1.0
    assert decoded.classification is Classification.NORMALIZED
    assert decoded.format is FloatFormat.HALF
    assert decoded.exponent_bits == 15
    assert decoded.exponent == 0
    assert decoded.mantissa == 0


def test_half_fields_and_values() -> None:
    assert decode_float(0xC000, 16).value == -2.0
    assert decode_float(0x7BFF, 16).value == 65504.0
    assert decode_float(0x3555, 16).value == pytest.approx(0.333, rel=1e-3)


def test_half_denormal_and_zero() -> None:
    denormal = decode_float(0x0001, 16)
    assert denormal.classification is Classification.DENORMALIZED
    assert denormal.value == math.ldexp(1.0, -24)
    assert decode_float(0x8001, 16).value == -math.ldexp(1.0, -24)

    negative_zero = decode_float(0x8000, 16)
    assert negative_zero.classification is Classification.ZERO
    assert negative_zero.sign == 1
    assert negative_zero.value == 0.0


def test_nan_keeps_fields() -> None:
    decoded = decode_float(0xFE01, 16)
    assert decoded.classification is Classification.NAN
    assert math.isnan(decoded.value)
    assert decoded.sign == 1
    assert decoded.exponent_bits == 0x1F
    assert decoded.mantissa == 0x201


def test_single_and_double_normals_use_native_mapping() -> None:
    assert decode_float(0x3F800000, 32).value == 1.0
    assert decode_float(0xC0490FDB, 32).value == float(np.float32(-3.1415927))
    assert decode_float(0x400921FB54442D18, 64).value == math.pi


def test_single_and_double_denormals() -> None:
    # The sign is applied and the mantissa is scaled by 2^(1 - bias - mantissa_bits),
    # matching numpy. An unsigned mantissa * 2^-126 (single) or * 2^-1022 (double)
    # would give 2^-126 and 2^-1022 for mantissa 1 and a positive value for 0x80000001.
    assert decode_float(0x00000001, 32).value == math.ldexp(1.0, -149)
    assert decode_float(0x80000001, 32).value == -math.ldexp(1.0, -149)
    assert decode_float(0x007FFFFF, 32).classification is Classification.DENORMALIZED
    assert decode_float(0x0000000000000001, 64).value == 5e-324
    assert decode_float(0x000FFFFFFFFFFFFF, 64).value < 2.2250738585072014e-308


def test_every_half_pattern_matches_numpy() -> None:
    patterns = np.arange(1 << 16, dtype=np.uint16)
    expected = patterns.view(np.float16).astype(np.float64)
    tiny = float(np.finfo(np.float16).tiny)

    for raw, reference in zip(patterns.tolist(), expected.tolist()):
        decoded = decode_float(raw, 16)
        assert decoded.classification is _numpy_classification(reference, tiny)
        if not math.isnan(reference):
            assert decoded.value == reference


@pytest.mark.parametrize(
    ("width", "uint_dtype", "float_dtype"),
    [(32, np.uint32, np.float32), (64, np.uint64, np.float64)],
)
def test_sampled_patterns_match_numpy(width: int, uint_dtype, float_dtype) -> None:
    rng = np.random.default_rng(754)
    info = np.iinfo(uint_dtype)
    patterns = rng.integers(0, info.max, size=4000, dtype=uint_dtype, endpoint=True)
    spec = float_spec_for_width(width)
    edges = [
        0,
        1,
        (1 << spec.mantissa_bits) - 1,
        1 << spec.mantissa_bits,
        ((1 << spec.exponent_bits) - 1) << spec.mantissa_bits,
        (((1 << spec.exponent_bits) - 1) << spec.mantissa_bits) | 1,
        info.max,
    ]
    patterns = np.concatenate([patterns, np.array(edges, dtype=uint_dtype)])
    references = patterns.view(float_dtype).astype(np.float64)
    tiny = float(np.finfo(float_dtype).tiny)

    for raw, reference in zip(patterns.tolist(), references.tolist()):
        decoded = decode_float(raw, width)
        assert decoded.classification is _numpy_classification(reference, tiny)
        if not math.isnan(reference):
            assert decoded.value == reference


def test_width_selects_format() -> None:
    assert decode_float(0, 16).format is FloatFormat.HALF
    assert decode_float(0, 32).format is FloatFormat.SINGLE
    assert decode_float(0, 64).format is FloatFormat.DOUBLE
    byte = decode_float(0xFF, 8)
    assert byte.format is FloatFormat.DOUBLE
    assert byte.classification is Classification.DENORMALIZED


def test_decode_masks_to_width() -> None:
    assert decode_float(0xFFFF_3C00, 16).value == 1.0


def test_decode_rejects_invalid_width() -> None:
    with pytest.raises(InvalidWidth):
        decode_float(0, 24)


def test_field_widths_by_format() -> None:
    assert [(d.exponent_bits_count, d.mantissa_bits) for d in (
        decode_float(0, 16),
        decode_float(0, 32),
        decode_float(0, 64),
    )] == [(5, 10), (8, 23), (11, 52)]
    assert [spec.bias for spec in FLOAT_TYPE_SPECS.values()] == [15, 127, 1023]


def test_describe_float_single_one() -> None:
    text = describe_float(decode_float(0x3F800000, 32))
    assert text["format"] == "Single"
    assert text["sign"] == "0"
    assert text["exponent"] == "0b01111111 (0)"
    assert text["mantissa"] == "0x000000"
    assert text["type"] == "Normalized"
    assert text["value"] == "1.000000e+00"
    assert text["fields"] == "0 | 01111111 | " + "0" * 23


def test_describe_float_special_values() -> None:
    assert describe_float(decode_float(0x7E00, 16))["value"] == "NaN"
    assert describe_float(decode_float(0xFC00, 16))["value"] == "-inf"
    assert describe_float(decode_float(0x0001, 16))["mantissa"] == "0x001"


def test_format_reconstruction_paths() -> None:
    assert format_reconstruction(decode_float(0x3C00, 16)) == "(-1)^0 * (1 + 0/2^10) * 2^(15-15)"
    assert format_reconstruction(decode_float(0x8001, 16)) == "(-1)^1 * (1 / 2^10) * 2^(1-15)"
    assert "infinity" in format_reconstruction(decode_float(0x7C00, 16))
    assert "NaN" in format_reconstruction(decode_float(0x7C01, 16))
    assert "zero" in format_reconstruction(decode_float(0x0000, 16))
