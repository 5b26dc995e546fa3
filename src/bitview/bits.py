from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

WIDTHS: tuple[int, ...] = (8, 16, 32, 64)
CAPACITY = 64
FULL_MASK = (1 << CAPACITY) - 1

POSITIONAL_OPS = frozenset({"set_bit", "clear_bit", "toggle_bit"})

BIT_OP_BUTTONS: tuple[tuple[str, str], ...] = (
    ("Lsh", "shift_left"),
    ("Rsh", "shift_right"),
    ("Lshr", "rotate_left"),
    ("Rshr", "rotate_right"),
    ("Not", "not"),
    ("Clr", "clear"),
    ("Set", "set_all"),
)


class InvalidWidth(ValueError):
    def __init__(self, width: object) -> None:
        super().__init__(f"Unsupported width: {width!r}; expected one of {WIDTHS}")
        self.width = width


def validate_width(width: int) -> int:
    if width not in WIDTHS:
        raise InvalidWidth(width)
    return width


def mask_for(width: int) -> int:
    if width == 8:
        return 0xFF
    if width == 16:
        return 0xFFFF
    if width == 32:
        return 0xFFFFFFFF
    return FULL_MASK


def _check_position(pos: int) -> int:
    if not 0 <= pos < CAPACITY:
        raise ValueError(f"Bit position must be in 0..{CAPACITY - 1}; got {pos}")
    return pos


def _shift_left(value: int, width: int) -> int:
    return value << 1


def _shift_right(value: int, width: int) -> int:
    return value >> 1


def _rotate_left(value: int, width: int) -> int:
    return (value << 1) | (value >> (width - 1))


def _rotate_right(value: int, width: int) -> int:
    return (value >> 1) | (value << (width - 1))


def _invert(value: int, width: int) -> int:
    return ~value


def _clear(value: int, width: int) -> int:
    return 0


def _set_all(value: int, width: int) -> int:
    return FULL_MASK


_WHOLE_VALUE_OPS: dict[str, Callable[[int, int], int]] = {
    "shift_left": _shift_left,
    "shift_right": _shift_right,
    "rotate_left": _rotate_left,
    "rotate_right": _rotate_right,
    "not": _invert,
    "clear": _clear,
    "set_all": _set_all,
}

BIT_OPS: tuple[str, ...] = (*sorted(POSITIONAL_OPS), *_WHOLE_VALUE_OPS)


def apply_bit_op(raw: int, width: int, op: str, position: int | None = None) -> int:
    """Apply one bit operation to ``raw`` and return the result masked to ``width``.

    Positional ops (``set_bit``, ``clear_bit``, ``toggle_bit``) take a bit
    position in 0..63. Positions at or above ``width`` are accepted; the
    result is still masked, so they read back as 0.
    """
    mask = mask_for(validate_width(width))
    value = raw & mask

    if op in POSITIONAL_OPS:
        if position is None:
            raise ValueError(f"Operation {op!r} needs a bit position")
        bit = 1 << _check_position(position)
        if op == "set_bit":
            return (value | bit) & mask
        if op == "clear_bit":
            return (value & ~bit) & mask
        return (value ^ bit) & mask

    transform = _WHOLE_VALUE_OPS.get(op)
    if transform is None:
        raise ValueError(f"Unknown bit operation: {op!r}")
    return transform(value, width) & mask


@dataclass
class BitContainer:
    """A 64-bit bit-addressable value.

    Direct bit operations accept any position in 0..63 regardless of the
    width the caller is displaying; width-aware access goes through
    ``masked`` and ``apply``.
    """

    raw: int = field(default=0)

    def __post_init__(self) -> None:
        self.raw &= FULL_MASK

    def __str__(self) -> str:
        digits = format(self.raw, f"0{CAPACITY}b")
        return " ".join(digits[idx : idx + 8] for idx in range(0, CAPACITY, 8))

    def set_bit(self, pos: int) -> None:
        self.raw |= 1 << _check_position(pos)

    def clear_bit(self, pos: int) -> None:
        self.raw &= ~(1 << _check_position(pos)) & FULL_MASK

    def toggle_bit(self, pos: int) -> None:
        self.raw ^= 1 << _check_position(pos)

    def get_bit(self, pos: int) -> bool:
        return (self.raw >> _check_position(pos)) & 1 == 1

    def get_all_bits(self) -> list[bool]:
        return [(self.raw >> idx) & 1 == 1 for idx in range(CAPACITY)]

    def masked(self, width: int) -> int:
        return self.raw & mask_for(validate_width(width))

    def apply(self, op: str, width: int, position: int | None = None) -> None:
        self.raw = apply_bit_op(self.raw, width, op, position)

    def reversed(self) -> BitContainer:
        reversed_digits = format(self.raw, f"0{CAPACITY}b")[::-1]
        return BitContainer(int(reversed_digits, 2))
