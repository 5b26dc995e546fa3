from __future__ import annotations

import logging
import re
import string
from dataclasses import dataclass

from .bits import FULL_MASK, mask_for, validate_width

logger = logging.getLogger(__name__)

BASES: tuple[str, ...] = ("dec", "bin", "hex", "hex_be", "hex_le", "oct", "ascii", "utf8")

TITLES = {
    "dec": "DEC",
    "bin": "BIN",
    "hex": "HEX",
    "hex_be": "HEX BE",
    "hex_le": "HEX LE",
    "oct": "OCT",
    "ascii": "ASCII",
    "utf8": "UTF-8",
}

READ_ONLY_BASES = frozenset({"utf8"})

_RADIX = {
    "dec": 10,
    "bin": 2,
    "hex": 16,
    "hex_be": 16,
    "hex_le": 16,
    "oct": 8,
}

_PREFIXES = {
    "dec": "",
    "bin": "0b",
    "hex": "0x",
    "hex_be": "0x",
    "hex_le": "0x",
    "oct": "0o",
}

_MAX_DIGITS = {
    "dec": len(str(FULL_MASK)),
    "bin": 64,
    "hex": 16,
    "oct": 22,
}

_ALPHABETS = {
    "dec": frozenset(string.digits),
    "bin": frozenset("01"),
    "hex": frozenset(string.hexdigits),
    "hex_be": frozenset(string.hexdigits),
    "hex_le": frozenset(string.hexdigits),
    "oct": frozenset(string.octdigits),
}

PRINTABLE_LOW = 32
PRINTABLE_HIGH = 126
PLACEHOLDER = " "
REPLACEMENT = "\ufffd"
_REPLACEMENT_RUN = re.compile(REPLACEMENT + "+")


@dataclass(frozen=True)
class FormatState:
    dec: str
    bin: str
    hex: str
    hex_be: str
    hex_le: str
    oct: str
    ascii: str
    utf8: str

    def text(self, base: str) -> str:
        _check_base(base)
        return getattr(self, base)


def _check_base(base: str) -> str:
    if base not in BASES:
        raise ValueError(f"Unsupported base: {base!r}")
    return base


def clean_input(text: str) -> str:
    return "".join(text.split()).replace("_", "")


def group_digits(digits: str, group_size: int, separator: str = "_") -> str:
    if not digits:
        return "0"
    parts: list[str] = []
    remaining = digits
    while remaining:
        parts.append(remaining[-group_size:])
        remaining = remaining[:-group_size]
    return separator.join(reversed(parts))


def _byte_count(width: int) -> int:
    return width // 8


def _ascii_text(value: int, width: int) -> str:
    data = value.to_bytes(_byte_count(width), "little")
    return "".join(
        chr(byte) if PRINTABLE_LOW <= byte <= PRINTABLE_HIGH else PLACEHOLDER
        for byte in data
    )


def _utf8_text(value: int, width: int) -> str:
    data = value.to_bytes(_byte_count(width), "big")
    text = data.decode("utf-8", errors="replace")
    text = _REPLACEMENT_RUN.sub(REPLACEMENT, text.replace("\x00", ""))
    return text or PLACEHOLDER


def encode(raw: int, width: int, base: str) -> str:
    mask = mask_for(validate_width(width))
    value = raw & mask
    _check_base(base)

    if base == "dec":
        return str(value)
    if base == "bin":
        return "0b" + format(value, f"0{width}b")
    if base == "hex":
        return "0x" + format(value, "X")
    if base == "hex_be":
        return "0x" + value.to_bytes(_byte_count(width), "big").hex().upper()
    if base == "hex_le":
        return "0x" + value.to_bytes(_byte_count(width), "little").hex().upper()
    if base == "oct":
        return "0o" + format(value, "o")
    if base == "ascii":
        return _ascii_text(value, width)
    return _utf8_text(value, width)


def _filter_digits(text: str, base: str) -> str:
    cleaned = clean_input(text)
    prefix = _PREFIXES[base]
    if prefix and cleaned[: len(prefix)].lower() == prefix:
        cleaned = cleaned[len(prefix) :]
    alphabet = _ALPHABETS[base]
    return "".join(ch for ch in cleaned if ch in alphabet)


def _decode_ascii(text: str, width: int) -> int | None:
    chars = [ch for ch in text if PRINTABLE_LOW <= ord(ch) <= PRINTABLE_HIGH]
    if len(chars) != _byte_count(width):
        return None
    return int.from_bytes(bytes(ord(ch) for ch in chars), "little")


def _decode_digits(text: str, width: int, base: str) -> int | None:
    digits = _filter_digits(text, base)
    if not digits:
        return None

    if base in {"hex_be", "hex_le"}:
        if len(digits) != width // 4:
            return None
        order = "big" if base == "hex_be" else "little"
        return int.from_bytes(bytes.fromhex(digits), order)

    significant = digits.lstrip("0") or "0"
    if len(significant) > _MAX_DIGITS[base]:
        return None
    value = int(significant, _RADIX[base])
    if value > FULL_MASK:
        return None
    return value


def decode(text: str, width: int, base: str) -> int | None:
    """Parse ``text`` written in ``base`` back to a raw value.

    Characters outside the base's alphabet are dropped rather than rejected.
    Returns None when nothing usable remains, when the value does not fit in
    64 bits, when a byte-order hex field is not exactly ``width // 4`` digits
    long, or for the read-only UTF-8 view. Callers keep their previous value
    on None.
    """
    mask = mask_for(validate_width(width))
    _check_base(base)

    if base in READ_ONLY_BASES:
        return None
    if base == "ascii":
        value = _decode_ascii(text, width)
    else:
        value = _decode_digits(text, width, base)

    if value is None:
        logger.debug("No update for %s input %r at width %d", base, text, width)
        return None
    return value & mask


def format_state(raw: int, width: int) -> FormatState:
    return FormatState(**{base: encode(raw, width, base) for base in BASES})
