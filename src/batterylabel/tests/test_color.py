"""Tests for the ARGB color helpers."""

import pytest

from batterylabel.color import (
    BLACK,
    WHITE,
    blend_color,
    format_color,
    join_argb,
    normalize_color,
    parse_color,
    split_argb,
    to_rgba,
)


class TestNormalize:
    def test_signed_values_fold_into_unsigned(self):
        assert normalize_color(-1) == WHITE
        assert normalize_color(-16777216) == BLACK

    def test_unsigned_values_unchanged(self):
        assert normalize_color(0x80FF0000) == 0x80FF0000


class TestChannels:
    def test_split(self):
        assert split_argb(0x80112233) == (0x80, 0x11, 0x22, 0x33)

    def test_join_clamps(self):
        assert join_argb(300, -4, 0x22, 0x33) == 0xFF002233

    def test_to_rgba(self):
        assert to_rgba(0x80112233) == (0x11, 0x22, 0x33, 0x80)


class TestBlend:
    """Per-channel linear interpolation."""

    def test_endpoints(self):
        assert blend_color(WHITE, BLACK, 0.0) == WHITE
        assert blend_color(WHITE, BLACK, 1.0) == BLACK

    def test_midpoint(self):
        assert blend_color(0xFF000000, 0xFF0000FF, 0.5) == 0xFF000080

    def test_alpha_is_blended(self):
        assert blend_color(0x00FFFFFF, 0xFFFFFFFF, 0.5) == 0x80FFFFFF

    def test_ratio_is_clamped(self):
        assert blend_color(WHITE, BLACK, -1.0) == WHITE
        assert blend_color(WHITE, BLACK, 2.0) == BLACK


class TestParse:
    @pytest.mark.parametrize("text,expected", [
        ("0xff00ff00", 0xFF00FF00),
        ("#00ff00", 0xFF00FF00),
        ("#8000ff00", 0x8000FF00),
        ("-1", WHITE),
        ("  4278190080 ", BLACK),
    ])
    def test_valid(self, text, expected):
        assert parse_color(text) == expected

    @pytest.mark.parametrize("text", ["", "#12345", "red", "0xzz"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_color(text)

    def test_format(self):
        assert format_color(-1) == "0xffffffff"
        assert parse_color(format_color(0x12345678)) == 0x12345678
