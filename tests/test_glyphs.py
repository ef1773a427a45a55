"""
Glyph Table Tests
=================

Tests for the character to 14-segment bitmask table:
- Lookup of supported characters
- Blank fallback for everything else
- Decimal point augmentation
- Text rendering with folded decimal points
"""

import warnings
from pathlib import Path

import pytest

from ht16k33_backpack import glyphs
from ht16k33_backpack.glyphs import (
    BLANK,
    DECIMAL_POINT,
    GLYPHS,
    SUPPORTED_CHARACTERS,
    encode_string,
    glyph_bytes,
    glyph_for,
    render_text,
    with_decimal_point,
)


# =============================================================================
# Lookup Tests
# =============================================================================

class TestGlyphFor:
    """Tests for glyph_for()."""

    def test_every_glyph_is_two_bytes(self):
        """Every table entry is a 2-byte value."""
        for char, glyph in GLYPHS.items():
            assert isinstance(glyph, bytes), char
            assert len(glyph) == 2, char

    def test_character_set(self):
        """Digits, both letter cases, percent and space are supported."""
        expected = set("0123456789%ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz ")
        assert SUPPORTED_CHARACTERS == expected

    def test_digits(self):
        """Digit encodings match the backpack firmware table."""
        assert glyph_for("0") == bytes([0x3F, 0x00])
        assert glyph_for("1") == bytes([0x06, 0x00])
        assert glyph_for("2") == bytes([0xDB, 0x00])
        assert glyph_for("3") == bytes([0xCF, 0x00])
        assert glyph_for("4") == bytes([0xE6, 0x00])
        assert glyph_for("5") == bytes([0xED, 0x00])
        assert glyph_for("6") == bytes([0xFD, 0x00])
        assert glyph_for("7") == bytes([0x01, 0x0C])
        assert glyph_for("8") == bytes([0xFF, 0x00])
        assert glyph_for("9") == bytes([0xE7, 0x00])

    def test_symbols_and_letters(self):
        """Spot-check percent and letters."""
        assert glyph_for("%") == bytes([0xE4, 0x1E])
        assert glyph_for("C") == bytes([0x39, 0x00])
        assert glyph_for("E") == bytes([0xF9, 0x00])
        assert glyph_for("H") == bytes([0xF6, 0x00])
        assert glyph_for("T") == bytes([0x01, 0x12])
        assert glyph_for("A") == bytes([0xF7, 0x00])
        assert glyph_for("W") == bytes([0x36, 0x28])

    def test_lowercase_differs_from_uppercase(self):
        """Lower-case letters have their own shapes."""
        assert glyph_for("a") != glyph_for("A")
        assert glyph_for("n") != glyph_for("N")

    def test_space_is_blank(self):
        """Space extinguishes every segment."""
        assert glyph_for(" ") == BLANK == bytes([0x00, 0x00])

    @pytest.mark.parametrize("value", ["~", ".", "", "AB", "é", None, 5, b"A"])
    def test_unsupported_renders_blank(self, value):
        """Unsupported input never fails, it renders blank."""
        assert glyph_for(value) == BLANK


# =============================================================================
# Decimal Point Tests
# =============================================================================

class TestDecimalPoint:
    """Tests for with_decimal_point()."""

    def test_space_with_decimal_point(self):
        """A space with a decimal point lights only the point."""
        assert with_decimal_point(glyph_for(" ")) == bytes([0x00, 0x40])

    def test_sets_high_byte_bit(self):
        """Only bit 0x40 of the high byte changes."""
        for char, glyph in GLYPHS.items():
            result = with_decimal_point(glyph)
            assert result[0] == glyph[0], char
            assert result[1] == glyph[1] | DECIMAL_POINT, char

    def test_idempotent(self):
        """Applying twice equals applying once."""
        for high in range(256):
            glyph = bytes([0xA5, high])
            once = with_decimal_point(glyph)
            assert with_decimal_point(once) == once

    def test_accepts_int_pair(self):
        """A pair of ints is accepted as a glyph."""
        assert with_decimal_point((0x06, 0x00)) == bytes([0x06, 0x40])

    @pytest.mark.parametrize("glyph", [b"", b"\x01", b"\x01\x02\x03", 2])
    def test_wrong_size_raises(self, glyph):
        """Anything but two bytes is rejected."""
        with pytest.raises(ValueError):
            with_decimal_point(glyph)


class TestGlyphBytes:
    """Tests for glyph_bytes()."""

    @pytest.mark.parametrize("glyph", [b"\xF7\x00", bytearray(b"\xF7\x00"), (0xF7, 0x00)])
    def test_normalizes_to_bytes(self, glyph):
        """Any two-byte sequence comes back as bytes."""
        assert glyph_bytes(glyph) == b"\xF7\x00"

    @pytest.mark.parametrize("glyph", [2, 0, b"\x01", b"\x01\x02\x03"])
    def test_rejects_ints_and_wrong_sizes(self, glyph):
        """An int is never read as a length, and only two bytes pass."""
        with pytest.raises(ValueError):
            glyph_bytes(glyph)


class TestModuleSource:
    """Tests for the module source itself."""

    def test_compiles_without_warnings(self):
        """The segment diagram in the docstring has no invalid escapes."""
        source = Path(glyphs.__file__).read_text(encoding="utf-8")
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            compile(source, glyphs.__file__, "exec")


# =============================================================================
# Text Rendering Tests
# =============================================================================

class TestRendering:
    """Tests for encode_string() and render_text()."""

    def test_encode_string_concatenates(self):
        """Glyphs are concatenated left to right."""
        assert encode_string("HOT") == glyph_for("H") + glyph_for("O") + glyph_for("T")

    def test_encode_empty_string(self):
        """Empty text encodes to no bytes."""
        assert encode_string("") == b""

    def test_render_one_glyph_per_char(self):
        """Without dots every character takes a cell."""
        assert render_text("12%") == [glyph_for("1"), glyph_for("2"), glyph_for("%")]

    def test_render_folds_dot(self):
        """A dot lights the point of the preceding glyph."""
        assert render_text("1.5") == [
            with_decimal_point(glyph_for("1")),
            glyph_for("5"),
        ]

    def test_render_leading_dot(self):
        """A leading dot takes its own blank cell."""
        assert render_text(".5") == [bytes([0x00, 0x40]), glyph_for("5")]

    def test_render_double_dot(self):
        """A second consecutive dot takes its own cell."""
        assert render_text("1..") == [
            with_decimal_point(glyph_for("1")),
            bytes([0x00, 0x40]),
        ]
