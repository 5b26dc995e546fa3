import pytest

pytest.importorskip("tkinter")

from bitview.app import (  # noqa: E402
    BIT_INACTIVE_BG,
    BIT_OFF_BG,
    BIT_ON_BG,
    DEFAULT_WIDTH,
    bit_cell_style,
    marker_x,
    parse_args,
    status_text,
)


def test_bit_cell_style_active_bits() -> None:
    assert bit_cell_style(3, 8, 0b1000) == ("1", BIT_ON_BG, "#ffffff")
    assert bit_cell_style(2, 8, 0b1000) == ("0", BIT_OFF_BG, "#1f2d3d")


def test_bit_cell_style_inactive_bits_read_as_zero() -> None:
    text, background, _ = bit_cell_style(10, 8, 0xFFFF)
    assert text == "0"
    assert background == BIT_INACTIVE_BG


def test_marker_x_clamps_to_strip() -> None:
    assert marker_x(0.0, 224) == 12
    assert marker_x(50.0, 224) == 112
    assert marker_x(100.0, 224) == 212
    assert marker_x(150.0, 224) == 212
    assert marker_x(-5.0, 224) == 12


def test_status_text_groups_bytes() -> None:
    assert status_text(0x0102, 16) == "16-bit: 00000001 00000010"
    assert status_text(0x1FF, 8) == "8-bit: 11111111"


def test_parse_args_defaults_and_prefixed_value() -> None:
    args = parse_args([])
    assert args.width == DEFAULT_WIDTH
    assert args.value == 0
    assert args.log_level == "WARNING"

    args = parse_args(["--width", "32", "--value", "0x3F800000", "--log-level", "DEBUG"])
    assert args.width == 32
    assert args.value == 0x3F800000
    assert args.log_level == "DEBUG"


def test_parse_args_rejects_unsupported_width() -> None:
    with pytest.raises(SystemExit):
        parse_args(["--width", "12"])
