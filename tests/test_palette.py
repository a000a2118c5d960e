"""Tests for color_buddy.core.palette — Color value type and hex conversion."""

import pytest
from color_buddy.core.palette import Color, hex_to_rgb, palette_from_array, rgb_to_hex


class TestRgbToHex:
    def test_example(self):
        assert rgb_to_hex(255, 128, 64) == '#ff8040'

    def test_black(self):
        assert rgb_to_hex(0, 0, 0) == '#000000'

    def test_white(self):
        assert rgb_to_hex(255, 255, 255) == '#ffffff'

    def test_single_digit_values_are_padded(self):
        assert rgb_to_hex(1, 2, 3) == '#010203'

    def test_always_seven_lowercase_chars(self):
        for v in (0, 9, 10, 171, 255):
            h = rgb_to_hex(v, v, v)
            assert len(h) == 7
            assert h == h.lower()


class TestHexToRgb:
    def test_white(self):
        assert hex_to_rgb('#ffffff') == (255, 255, 255)

    def test_blue600(self):
        assert hex_to_rgb('#2563eb') == (37, 99, 235)

    def test_uppercase(self):
        assert hex_to_rgb('#FF8040') == (255, 128, 64)

    def test_short_hex(self):
        assert hex_to_rgb('#fff') == (255, 255, 255)

    def test_no_hash(self):
        assert hex_to_rgb('ff0000') == (255, 0, 0)

    def test_invalid_hex_returns_black(self):
        assert hex_to_rgb('invalid') == (0, 0, 0)
        assert hex_to_rgb('#ff') == (0, 0, 0)
        assert hex_to_rgb('#ffffffff') == (0, 0, 0)

    def test_round_trip(self):
        for v in range(256):
            rgb = (v, 255 - v, (v * 7) % 256)
            assert hex_to_rgb(rgb_to_hex(*rgb)) == rgb


class TestColor:
    def test_default_alpha_is_opaque(self):
        assert Color(1, 2, 3).a == 255

    def test_hex(self):
        assert Color(128, 128, 128).hex == '#808080'

    def test_equality_is_byte_exact(self):
        assert Color(1, 2, 3, 255) == Color(1, 2, 3)
        assert Color(1, 2, 3, 254) != Color(1, 2, 3)
        assert len({Color(1, 2, 3), Color(1, 2, 3), Color(3, 2, 1)}) == 2

    def test_immutable(self):
        c = Color(1, 2, 3)
        with pytest.raises(AttributeError):
            c.r = 4  # type: ignore[misc]

    def test_rejects_out_of_range_channel(self):
        with pytest.raises(ValueError):
            Color(256, 0, 0)
        with pytest.raises(ValueError):
            Color(0, -1, 0)

    def test_from_hex(self):
        assert Color.from_hex('#ff8040') == Color(255, 128, 64)


class TestPaletteFromArray:
    def test_rows_become_colours(self):
        palette = palette_from_array([[1, 2, 3], [4, 5, 6]])
        assert palette == [Color(1, 2, 3), Color(4, 5, 6)]

    def test_alpha(self):
        assert palette_from_array([[0, 0, 0]], alpha=10)[0].a == 10
