from __future__ import annotations

from typing import Callable

from .bits import mask_for, validate_width


def _by_width(half: int, single: int, double: int) -> Callable[[int], int]:
    table = {16: half, 32: single, 64: double}

    def _pattern(width: int) -> int:
        return table.get(width, 0)

    return _pattern


SPECIAL_VALUES: dict[str, Callable[[int], int]] = {
    "NaN (Quiet)": _by_width(0x7E00, 0x7FC00000, 0x7FF8000000000000),
    "NaN (Signaling)": _by_width(0x7C01, 0x7F800001, 0x7FF0000000000001),
    "+Inf": _by_width(0x7C00, 0x7F800000, 0x7FF0000000000000),
    "-Inf": _by_width(0xFC00, 0xFF800000, 0xFFF0000000000000),
    "+0": _by_width(0, 0, 0),
    "-0": _by_width(0x8000, 0x80000000, 0x8000000000000000),
    "Min Pos": _by_width(0x0001, 0x00000001, 0x0000000000000001),
    "Max Pos": _by_width(0x7BFF, 0x7F7FFFFF, 0x7FEFFFFFFFFFFFFF),
}


def special_value(label: str, width: int) -> int:
    return SPECIAL_VALUES[label](validate_width(width)) & mask_for(width)
